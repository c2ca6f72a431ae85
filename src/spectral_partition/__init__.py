"""
Spectral Partition - Core Package

Spectral embedding and clustering of weighted similarity graphs.

This package provides:
- Graph Laplacian construction (unnormalized, normalized symmetric,
  normalized random walk)
- Dense and sparse smallest-eigenpair solvers
- Eigengap estimation of the number of clusters
- Spectral embedding and k-means partitioning
"""

__version__ = "0.1.0"

from .algorithms import (
    LaplacianType,
    SpectralClusteringResult,
    SpectralConfig,
    spectral_clustering,
)

# Explicitly import subpackages to ensure they're discoverable
from . import algorithms
from . import utils

__all__ = [
    "LaplacianType",
    "SpectralClusteringResult",
    "SpectralConfig",
    "spectral_clustering",
    "algorithms",
    "utils",
]
