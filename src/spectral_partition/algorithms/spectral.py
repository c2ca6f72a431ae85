"""
Spectral clustering pipeline.

affinity -> Laplacian -> smallest eigenpairs -> (optional) eigengap estimate
-> embedding -> clusterer. ``spectral_clustering`` runs every stage once and
returns an immutable ``SpectralClusteringResult``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union

import numpy as np

from ..utils.logging_config import get_logger
from .cluster_count import estimate_number_of_clusters
from .eigen import DEFAULT_SPARSE_MIN_SIZE, decompose
from .embedding import build_embedding
from .kmeans import ClusterIndices, Clusterer, KMeans
from .laplacian import LaplacianType, build_laplacian

logger = get_logger(__name__)

Array2D = np.ndarray
ClustererFactory = Callable[[Array2D], Clusterer]


@dataclass
class SpectralConfig:
    """Configuration for a spectral clustering run."""

    n_clusters: Optional[int] = None  # fixed cluster count
    max_num_clusters: Optional[int] = None  # upper bound (0 = up to n)
    estimate_num_clusters: bool = False
    laplacian_type: Union[LaplacianType, str] = LaplacianType.NORMALIZED_RANDOM_WALK
    kmeans_max_iter: int = 100
    kmeans_conv_tol: float = float(np.finfo(np.float64).eps)
    kmeans_use_kd_tree: bool = False
    eigen_solver: str = "dense"  # "dense", "sparse" or "auto"
    sparse_min_size: int = DEFAULT_SPARSE_MIN_SIZE
    seed: int = 0

    @classmethod
    def from_env(cls, **overrides: Any) -> "SpectralConfig":
        """Build a config from the environment defaults, then apply overrides."""
        from ..config import config

        defaults = config.clustering
        values: Dict[str, Any] = {
            "laplacian_type": defaults.laplacian,
            "kmeans_max_iter": defaults.kmeans_max_iter,
            "kmeans_conv_tol": defaults.kmeans_conv_tol,
            "kmeans_use_kd_tree": defaults.kmeans_use_kd_tree,
            "eigen_solver": defaults.eigen_solver,
            "sparse_min_size": defaults.sparse_min_size,
        }
        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True)
class SpectralClusteringResult:
    """
    Immutable outcome of a spectral clustering run.

    Attributes:
        embedding: (num_clusters, n) embedded points, one per column
        eigenvalues: Ascending eigenvalues computed for the run (includes the
            extra eigenvalue used for the last gap when estimating)
        laplacian_type: Laplacian variant used
        clusterer: Clusterer that produced the partition
        solver: Eigensolver strategy used ("dense" or "sparse")
        estimated: Whether the cluster count came from the eigengap estimate
    """

    embedding: Array2D
    eigenvalues: np.ndarray
    laplacian_type: LaplacianType
    clusterer: Clusterer = field(repr=False)
    solver: str = "dense"
    estimated: bool = False

    @property
    def num_clusters(self) -> int:
        return int(self.embedding.shape[0])

    @property
    def num_points(self) -> int:
        return int(self.embedding.shape[1])

    @property
    def cluster_point_indices(self) -> ClusterIndices:
        return self.clusterer.cluster_point_indices

    @property
    def cluster_index_map(self) -> np.ndarray:
        return self.clusterer.cluster_index_map

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe summary of the run."""
        return {
            "laplacian_type": self.laplacian_type.value,
            "solver": self.solver,
            "num_points": self.num_points,
            "num_clusters": self.num_clusters,
            "estimated": self.estimated,
            "eigenvalues": [float(e) for e in self.eigenvalues],
            "cluster_index_map": [int(i) for i in self.cluster_index_map],
            "cluster_sizes": [len(idx) for idx in self.cluster_point_indices],
        }


def _resolve_cluster_counts(
    n: int,
    n_clusters: Optional[int],
    max_num_clusters: Optional[int],
    estimate_num_clusters: bool,
) -> tuple[int, int, bool]:
    """Return (cluster bound, eigenpairs to compute, estimate flag)."""
    if (n_clusters is None) == (max_num_clusters is None):
        raise ValueError("Pass exactly one of n_clusters or max_num_clusters")

    if n_clusters is not None:
        if n_clusters < 1 or n_clusters > n:
            raise ValueError(f"n_clusters must be in [1, {n}], got {n_clusters}")
        return n_clusters, n_clusters, False

    bound = max_num_clusters
    if bound <= 0 or bound > n:
        logger.debug("Cluster bound %d outside [1, %d]; using %d", bound, n, n)
        bound = n
    num_eigenpairs = min(bound + 1, n) if estimate_num_clusters else bound
    return bound, num_eigenpairs, estimate_num_clusters


def spectral_clustering(
    affinity,
    n_clusters: Optional[int] = None,
    *,
    max_num_clusters: Optional[int] = None,
    estimate_num_clusters: bool = False,
    laplacian_type: Union[LaplacianType, str] = LaplacianType.NORMALIZED_RANDOM_WALK,
    kmeans_max_iter: int = 100,
    kmeans_conv_tol: float = float(np.finfo(np.float64).eps),
    kmeans_use_kd_tree: bool = False,
    eigen_solver: str = "dense",
    sparse_min_size: int = DEFAULT_SPARSE_MIN_SIZE,
    seed: int = 0,
    clusterer_factory: Optional[ClustererFactory] = None,
) -> SpectralClusteringResult:
    """
    Embed a similarity graph spectrally and partition the embedded points.

    Two modes:
    - Fixed count: pass ``n_clusters``; exactly that many eigenpairs are
      computed and used.
    - Bounded count: pass ``max_num_clusters`` (values <= 0 or > n mean n).
      With ``estimate_num_clusters`` one extra eigenpair is computed and the
      eigengap heuristic picks the count; otherwise the bound is used as is.

    The normalized-symmetric embedding has its columns scaled to unit norm.

    Args:
        affinity: (n, n) symmetric nonnegative affinity matrix (not modified)
        n_clusters: Fixed number of clusters
        max_num_clusters: Upper bound on the number of clusters
        estimate_num_clusters: Estimate the count from the eigengap
        laplacian_type: Laplacian variant
        kmeans_max_iter: Maximum clusterer iterations
        kmeans_conv_tol: Clusterer convergence tolerance
        kmeans_use_kd_tree: Use a KD-tree for nearest-centroid lookup
        eigen_solver: "dense", "sparse" or "auto"
        sparse_min_size: Smallest n for which "auto" picks the sparse solver
        seed: Seed for the default k-means initialisation
        clusterer_factory: Builds a clusterer from the (n, k) embedded points.
            Defaults to ``KMeans(points, seed=seed)``.

    Returns:
        SpectralClusteringResult

    Raises:
        ValueError: On malformed affinity matrices or invalid cluster counts
    """
    laplacian_type = LaplacianType.parse(laplacian_type)
    laplacian = build_laplacian(affinity, laplacian_type)
    n = laplacian.n

    bound, num_eigenpairs, estimate = _resolve_cluster_counts(
        n, n_clusters, max_num_clusters, estimate_num_clusters
    )

    spectrum = decompose(
        laplacian,
        num_eigenpairs,
        solver=eigen_solver,
        sparse_min_size=sparse_min_size,
    )

    num_clusters = bound
    if estimate:
        num_clusters = estimate_number_of_clusters(spectrum.eigenvalues, bound)
        logger.info(
            "Estimated %d clusters (bound %d) from %d eigenvalues",
            num_clusters,
            bound,
            len(spectrum),
        )

    embedding = build_embedding(
        spectrum.eigenvectors,
        num_clusters,
        normalize_columns=laplacian_type is LaplacianType.NORMALIZED_SYMMETRIC,
    )

    if clusterer_factory is None:
        clusterer: Clusterer = KMeans(embedding.T, seed=seed)
    else:
        clusterer = clusterer_factory(embedding.T)
    clusterer.cluster(num_clusters, kmeans_max_iter, kmeans_conv_tol, kmeans_use_kd_tree)

    eigenvalues = spectrum.eigenvalues
    embedding.setflags(write=False)
    eigenvalues.setflags(write=False)

    return SpectralClusteringResult(
        embedding=embedding,
        eigenvalues=eigenvalues,
        laplacian_type=laplacian_type,
        clusterer=clusterer,
        solver=spectrum.solver,
        estimated=estimate,
    )


def run_spectral_clustering(affinity, cfg: SpectralConfig, **kwargs: Any) -> SpectralClusteringResult:
    """Run ``spectral_clustering`` with parameters taken from a SpectralConfig."""
    return spectral_clustering(
        affinity,
        cfg.n_clusters,
        max_num_clusters=cfg.max_num_clusters,
        estimate_num_clusters=cfg.estimate_num_clusters,
        laplacian_type=cfg.laplacian_type,
        kmeans_max_iter=cfg.kmeans_max_iter,
        kmeans_conv_tol=cfg.kmeans_conv_tol,
        kmeans_use_kd_tree=cfg.kmeans_use_kd_tree,
        eigen_solver=cfg.eigen_solver,
        sparse_min_size=cfg.sparse_min_size,
        seed=cfg.seed,
        **kwargs,
    )
