"""
Tests for environment-driven configuration.
"""

import numpy as np
import pytest

import spectral_partition.config as config_module
from spectral_partition.algorithms.laplacian import LaplacianType
from spectral_partition.algorithms.spectral import SpectralConfig
from spectral_partition.config import ClusteringDefaults, Config

ENV_VARS = [
    "SPECTRAL_LAPLACIAN",
    "SPECTRAL_KMEANS_MAX_ITER",
    "SPECTRAL_KMEANS_TOL",
    "SPECTRAL_KMEANS_USE_KD_TREE",
    "SPECTRAL_EIGEN_SOLVER",
    "SPECTRAL_SPARSE_MIN_SIZE",
    "SPECTRAL_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_config_defaults(clean_env):
    cfg = Config()
    assert cfg.clustering.laplacian == "normalized_random_walk"
    assert cfg.clustering.kmeans_max_iter == 100
    assert cfg.clustering.kmeans_conv_tol == np.finfo(np.float64).eps
    assert cfg.clustering.kmeans_use_kd_tree is False
    assert cfg.clustering.eigen_solver == "dense"
    assert cfg.clustering.sparse_min_size == 2000
    assert cfg.log_level == "WARNING"


def test_config_from_environment(clean_env):
    clean_env.setenv("SPECTRAL_LAPLACIAN", "Unnormalized")
    clean_env.setenv("SPECTRAL_KMEANS_MAX_ITER", "25")
    clean_env.setenv("SPECTRAL_KMEANS_TOL", "1e-6")
    clean_env.setenv("SPECTRAL_KMEANS_USE_KD_TREE", "yes")
    clean_env.setenv("SPECTRAL_EIGEN_SOLVER", "auto")
    clean_env.setenv("SPECTRAL_SPARSE_MIN_SIZE", "500")
    clean_env.setenv("SPECTRAL_LOG_LEVEL", "debug")

    cfg = Config()
    assert cfg.clustering.laplacian == "unnormalized"
    assert cfg.clustering.kmeans_max_iter == 25
    assert cfg.clustering.kmeans_conv_tol == pytest.approx(1e-6)
    assert cfg.clustering.kmeans_use_kd_tree is True
    assert cfg.clustering.eigen_solver == "auto"
    assert cfg.clustering.sparse_min_size == 500
    assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize(
    "name,value",
    [
        ("SPECTRAL_LAPLACIAN", "combinatorial"),
        ("SPECTRAL_KMEANS_MAX_ITER", "many"),
        ("SPECTRAL_KMEANS_MAX_ITER", "0"),
        ("SPECTRAL_KMEANS_TOL", "tiny"),
        ("SPECTRAL_KMEANS_USE_KD_TREE", "maybe"),
        ("SPECTRAL_EIGEN_SOLVER", "lanczos"),
    ],
)
def test_config_rejects_invalid_values(clean_env, name, value):
    clean_env.setenv(name, value)
    with pytest.raises(ValueError):
        Config()


def test_clustering_defaults_validation():
    with pytest.raises(ValueError, match="kmeans_conv_tol"):
        ClusteringDefaults(kmeans_conv_tol=-1.0)
    with pytest.raises(ValueError, match="sparse_min_size"):
        ClusteringDefaults(sparse_min_size=0)


def test_spectral_config_from_env(clean_env):
    clean_env.setenv("SPECTRAL_LAPLACIAN", "normalized_symmetric")
    clean_env.setenv("SPECTRAL_KMEANS_MAX_ITER", "12")
    clean_env.setattr(config_module, "config", Config())

    cfg = SpectralConfig.from_env(n_clusters=3, seed=4)
    assert cfg.n_clusters == 3
    assert cfg.seed == 4
    assert LaplacianType.parse(cfg.laplacian_type) is LaplacianType.NORMALIZED_SYMMETRIC
    assert cfg.kmeans_max_iter == 12
