"""
Algorithm Core Library - Laplacians, eigendecomposition, eigengap estimation,
spectral embedding and clustering.

This module provides the spectral clustering stages as independent functions,
plus the ``spectral_clustering`` pipeline that chains them.
"""

from .laplacian import (
    Laplacian,
    LaplacianType,
    build_laplacian,
    degree_vector,
    validate_affinity,
)
from .eigen import EigenSpectrum, decompose, select_solver
from .cluster_count import estimate_number_of_clusters
from .embedding import build_embedding
from .kmeans import Clusterer, KMeans
from .metrics import adjusted_rand_index, partition_is_valid
from .spectral import (
    SpectralClusteringResult,
    SpectralConfig,
    run_spectral_clustering,
    spectral_clustering,
)

__all__ = [
    # Laplacians
    "Laplacian",
    "LaplacianType",
    "build_laplacian",
    "degree_vector",
    "validate_affinity",
    # Eigendecomposition
    "EigenSpectrum",
    "decompose",
    "select_solver",
    # Cluster count / embedding
    "estimate_number_of_clusters",
    "build_embedding",
    # Clustering
    "Clusterer",
    "KMeans",
    "adjusted_rand_index",
    "partition_is_valid",
    # Pipeline
    "SpectralClusteringResult",
    "SpectralConfig",
    "run_spectral_clustering",
    "spectral_clustering",
]
