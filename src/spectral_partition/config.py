"""
Configuration management for Spectral Partition.

Loads defaults from environment variables (typically from a .env file).
Uses python-dotenv to load .env automatically.

Usage:
    from spectral_partition.config import config

    # Default clustering parameters
    max_iter = config.clustering.kmeans_max_iter

Environment variables:
    SPECTRAL_LAPLACIAN           unnormalized | normalized_symmetric | normalized_random_walk
    SPECTRAL_KMEANS_MAX_ITER     maximum k-means iterations (default 100)
    SPECTRAL_KMEANS_TOL          k-means convergence tolerance (default: float64 eps)
    SPECTRAL_KMEANS_USE_KD_TREE  use a KD-tree for nearest-centroid lookup (default false)
    SPECTRAL_EIGEN_SOLVER        dense | sparse | auto (default dense)
    SPECTRAL_SPARSE_MIN_SIZE     graph size at which "auto" switches to sparse (default 2000)
    SPECTRAL_LOG_LEVEL           logging level for entry points (default WARNING)
"""

import os
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from dotenv import load_dotenv

# Look for .env in project root (parent of src/)
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


EIGEN_SOLVERS = ("dense", "sparse", "auto")
LAPLACIAN_NAMES = ("unnormalized", "normalized_symmetric", "normalized_random_walk")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class ClusteringDefaults:
    """Default tuning parameters for a spectral clustering run."""
    laplacian: str = "normalized_random_walk"
    kmeans_max_iter: int = 100
    kmeans_conv_tol: float = float(np.finfo(np.float64).eps)
    kmeans_use_kd_tree: bool = False
    eigen_solver: str = "dense"
    sparse_min_size: int = 2000

    def __post_init__(self):
        """Validate values loaded from the environment."""
        self.laplacian = self.laplacian.strip().lower()
        self.eigen_solver = self.eigen_solver.strip().lower()
        if self.laplacian not in LAPLACIAN_NAMES:
            raise ValueError(
                f"Unknown Laplacian type: {self.laplacian!r} "
                f"(expected one of {', '.join(LAPLACIAN_NAMES)})"
            )
        if self.eigen_solver not in EIGEN_SOLVERS:
            raise ValueError(
                f"Unknown eigen solver: {self.eigen_solver!r} "
                f"(expected one of {', '.join(EIGEN_SOLVERS)})"
            )
        if self.kmeans_max_iter < 1:
            raise ValueError(f"kmeans_max_iter must be >= 1, got {self.kmeans_max_iter}")
        if self.kmeans_conv_tol < 0:
            raise ValueError(f"kmeans_conv_tol must be >= 0, got {self.kmeans_conv_tol}")
        if self.sparse_min_size < 1:
            raise ValueError(f"sparse_min_size must be >= 1, got {self.sparse_min_size}")


class Config:
    """
    Package configuration loaded from environment variables.

    Environment variables can be set:
    1. In a .env file in the project root
    2. In the system environment
    """

    def __init__(self):
        """Load configuration from environment."""
        self.clustering = ClusteringDefaults(
            laplacian=os.getenv("SPECTRAL_LAPLACIAN", "normalized_random_walk"),
            kmeans_max_iter=_env_int("SPECTRAL_KMEANS_MAX_ITER", 100),
            kmeans_conv_tol=_env_float(
                "SPECTRAL_KMEANS_TOL", float(np.finfo(np.float64).eps)
            ),
            kmeans_use_kd_tree=_env_bool("SPECTRAL_KMEANS_USE_KD_TREE", False),
            eigen_solver=os.getenv("SPECTRAL_EIGEN_SOLVER", "dense"),
            sparse_min_size=_env_int("SPECTRAL_SPARSE_MIN_SIZE", 2000),
        )
        self.log_level = os.getenv("SPECTRAL_LOG_LEVEL", "WARNING").upper()


# Global config instance
config = Config()
