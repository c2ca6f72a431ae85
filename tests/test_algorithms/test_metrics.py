"""
Tests for partition checks and agreement metrics.
"""

import numpy as np
import pytest

from spectral_partition.algorithms.metrics import adjusted_rand_index, partition_is_valid


def test_ari_identical_up_to_relabeling():
    a = np.array([0, 0, 1, 1, 2, 2])
    b = np.array([2, 2, 0, 0, 1, 1])
    assert adjusted_rand_index(a, b) == pytest.approx(1.0)


def test_ari_disagreement_is_below_one():
    a = np.array([0, 0, 0, 1, 1, 1])
    b = np.array([0, 1, 0, 1, 0, 1])
    assert adjusted_rand_index(a, b) < 0.5


def test_ari_shape_mismatch():
    with pytest.raises(ValueError):
        adjusted_rand_index([0, 1], [0, 1, 1])


def test_partition_is_valid():
    assert partition_is_valid([(0, 2), (1,), ()], 3)


@pytest.mark.parametrize(
    "clusters",
    [
        [(0,), (1,)],  # missing 2
        [(0, 1), (1, 2)],  # repeated 1
        [(0, 1, 2, 3)],  # out of range
        [(-1, 0, 1, 2)],
    ],
)
def test_partition_is_invalid(clusters):
    assert not partition_is_valid(clusters, 3)
