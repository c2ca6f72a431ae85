"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test modules.
"""

import logging

import numpy as np
import pytest


def make_block_affinity(sizes, within=1.0, between=0.0):
    """Block-diagonal affinity with fully connected blocks and no self-loops."""
    n = sum(sizes)
    A = np.full((n, n), between, dtype=np.float64)
    start = 0
    for size in sizes:
        A[start:start + size, start:start + size] = within
        start += size
    np.fill_diagonal(A, 0.0)
    return A


def block_labels(sizes):
    """Ground-truth labels for ``make_block_affinity``."""
    return np.repeat(np.arange(len(sizes)), sizes)


@pytest.fixture
def two_block_affinity():
    """Two disjoint complete graphs on 4 and 5 points."""
    return make_block_affinity([4, 5])


@pytest.fixture
def random_affinity():
    """Dense, connected, symmetric random affinity on 20 points."""
    rng = np.random.default_rng(42)
    B = rng.uniform(0.05, 1.0, size=(20, 20))
    A = (B + B.T) / 2.0
    np.fill_diagonal(A, 0.0)
    return A


@pytest.fixture
def noisy_three_block_affinity():
    """Three dense blocks (5, 6, 7 points) joined by weak random links."""
    rng = np.random.default_rng(7)
    sizes = [5, 6, 7]
    A = make_block_affinity(sizes, within=1.0, between=0.0)
    noise = rng.uniform(0.0, 0.02, size=A.shape)
    A = A + (noise + noise.T) / 2.0
    np.fill_diagonal(A, 0.0)
    return A, block_labels(sizes)


@pytest.fixture
def make_blocks():
    """Factory fixture for block-diagonal affinities."""
    return make_block_affinity


@pytest.fixture(autouse=True)
def reset_package_logging():
    """Undo ``setup_logging`` calls made by a test."""
    logger = logging.getLogger("spectral_partition")
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if getattr(handler, "_spectral_partition", False):
            logger.removeHandler(handler)
    logger.setLevel(level)
