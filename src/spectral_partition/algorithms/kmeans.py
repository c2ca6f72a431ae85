"""
K-means clustering of embedded points.

``KMeans`` is the default clusterer applied to spectral embeddings. Any object
satisfying the ``Clusterer`` protocol can be used instead.
"""

from __future__ import annotations

from typing import Optional, Protocol, Tuple

import numpy as np
from scipy.spatial import cKDTree

from ..utils.logging_config import get_logger

logger = get_logger(__name__)

Array2D = np.ndarray
ClusterIndices = Tuple[Tuple[int, ...], ...]


class Clusterer(Protocol):
    """Partition-based clusterer over a fixed set of points (one per row)."""

    def cluster(
        self,
        k: int,
        max_iterations: int,
        tolerance: float,
        use_kd_tree: bool,
    ) -> "Clusterer":
        ...

    @property
    def cluster_point_indices(self) -> ClusterIndices:
        ...

    @property
    def cluster_index_map(self) -> np.ndarray:
        ...


# ------------------------------------------------------------------
# K-means++ initialisation & assignment helpers
# ------------------------------------------------------------------

def _kmeanspp_init(
    Z: np.ndarray, K: int, rng: np.random.Generator
) -> np.ndarray:
    """Return (K, d) initial centroids chosen by the k-means++ rule."""
    n, d = Z.shape
    centroids = np.empty((K, d), dtype=Z.dtype)
    idx = int(rng.integers(0, n))
    centroids[0] = Z[idx]

    for k in range(1, K):
        diffs = Z[:, None, :] - centroids[None, :k, :]  # (n, k, d)
        sq = np.sum(diffs ** 2, axis=2)  # (n, k)
        min_sq = sq.min(axis=1)  # (n,)
        total = min_sq.sum()
        if total == 0.0:
            centroids[k] = Z[int(rng.integers(0, n))]
        else:
            probs = min_sq / total
            centroids[k] = Z[int(rng.choice(n, p=probs))]
    return centroids


def _assign(Z: np.ndarray, centroids: np.ndarray, *, use_kd_tree: bool = False) -> np.ndarray:
    """Assign each row of *Z* to its nearest centroid.

    Args:
        Z: (n, d) data points
        centroids: (K, d) cluster centroids
        use_kd_tree: Look up nearest centroids in a KD-tree instead of
            computing all n*K distances

    Returns:
        (n,) array of cluster assignments
    """
    if use_kd_tree:
        _, labels = cKDTree(centroids).query(Z, k=1)
        return np.asarray(labels, dtype=int)
    # ||z - c||² = ||z||² + ||c||² - 2·z·c
    Z_sq = np.sum(Z ** 2, axis=1, keepdims=True)       # (n, 1)
    C_sq = np.sum(centroids ** 2, axis=1, keepdims=True).T  # (1, K)
    cross = Z @ centroids.T                              # (n, K)
    dists = Z_sq + C_sq - 2.0 * cross                   # (n, K)
    return np.argmin(dists, axis=1)


class KMeans:
    """
    Lloyd's k-means with k-means++ seeding.

    Construct over a set of points, call ``cluster`` once, then read the
    partition from ``cluster_point_indices`` / ``cluster_index_map``.

    Args:
        points: (n, d) points, one per row
        seed: Random seed for k-means++ initialisation
    """

    def __init__(self, points: Array2D, *, seed: int = 0):
        Z = np.array(points, dtype=np.float64)
        if Z.ndim != 2 or Z.shape[0] == 0:
            raise ValueError(f"points must be a non-empty (n, d) array; got shape {Z.shape}")
        Z.setflags(write=False)
        self.points = Z
        self.seed = seed
        self.centroids: Optional[np.ndarray] = None
        self.n_iter = 0
        self.inertia: Optional[float] = None
        self.converged = False
        self._labels: Optional[np.ndarray] = None
        self._cluster_point_indices: Optional[ClusterIndices] = None

    @property
    def num_points(self) -> int:
        return self.points.shape[0]

    @property
    def is_clustered(self) -> bool:
        return self._labels is not None

    def cluster(
        self,
        k: int,
        max_iterations: int = 100,
        tolerance: float = float(np.finfo(np.float64).eps),
        use_kd_tree: bool = False,
    ) -> "KMeans":
        """
        Partition the points into k clusters.

        Iterates until assignments stop changing, the largest squared
        centroid shift drops to ``tolerance`` or below, or ``max_iterations``
        is reached. Empty clusters keep their previous centroid.

        Returns:
            self

        Raises:
            ValueError: If k is not in [1, n] or max_iterations < 1
            RuntimeError: If called a second time
        """
        if self.is_clustered:
            raise RuntimeError("KMeans.cluster() can only be called once per instance")
        n = self.num_points
        if k < 1 or k > n:
            raise ValueError(f"k must be in [1, {n}], got {k}")
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")

        rng = np.random.default_rng(self.seed)
        Z = self.points
        centroids = _kmeanspp_init(Z, k, rng)
        labels = _assign(Z, centroids, use_kd_tree=use_kd_tree)

        n_iter = 0
        converged = False
        for t in range(1, max_iterations + 1):
            n_iter = t
            new_centroids = centroids.copy()
            for j in range(k):
                cluster_idx = np.where(labels == j)[0]
                if len(cluster_idx) == 0:
                    continue
                new_centroids[j] = Z[cluster_idx].mean(axis=0)

            shift = float(np.max(np.sum((new_centroids - centroids) ** 2, axis=1)))
            centroids = new_centroids
            new_labels = _assign(Z, centroids, use_kd_tree=use_kd_tree)

            if np.array_equal(new_labels, labels) or shift <= tolerance:
                labels = new_labels
                converged = True
                break
            labels = new_labels

        diffs = Z - centroids[labels]
        self.inertia = float(np.sum(diffs ** 2))
        self.centroids = centroids
        self.n_iter = n_iter
        self.converged = converged

        labels = labels.astype(int)
        labels.setflags(write=False)
        self._labels = labels
        self._cluster_point_indices = tuple(
            tuple(int(i) for i in np.where(labels == j)[0]) for j in range(k)
        )
        logger.debug(
            "k-means: k=%d n=%d iterations=%d converged=%s inertia=%.6g",
            k,
            n,
            n_iter,
            converged,
            self.inertia,
        )
        return self

    def _require_clustered(self) -> None:
        if not self.is_clustered:
            raise RuntimeError("KMeans.cluster() has not been called")

    @property
    def cluster_point_indices(self) -> ClusterIndices:
        """Point indices of each cluster, in cluster order."""
        self._require_clustered()
        return self._cluster_point_indices

    @property
    def cluster_index_map(self) -> np.ndarray:
        """(n,) cluster index of every point (read-only)."""
        self._require_clustered()
        return self._labels
