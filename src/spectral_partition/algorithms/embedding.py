"""
Spectral embedding from Laplacian eigenvectors.
"""

from __future__ import annotations

import numpy as np

Array2D = np.ndarray


def build_embedding(
    eigenvectors: Array2D, num_clusters: int, *, normalize_columns: bool = False
) -> Array2D:
    """
    Assemble the (num_clusters, n) embedding from the leading eigenvectors.

    Row r holds the r-th eigenvector; column c is the embedded point c.

    Args:
        eigenvectors: (n, m) eigenvectors, ascending by eigenvalue
        num_clusters: Number of leading eigenvectors to keep, 1 <= k <= m
        normalize_columns: Scale every column to unit Euclidean norm. Columns
            whose reciprocal norm is not finite are left unchanged.

    Returns:
        Embedding of shape (num_clusters, n)

    Raises:
        ValueError: If num_clusters is out of range
    """
    m = eigenvectors.shape[1]
    if num_clusters < 1 or num_clusters > m:
        raise ValueError(f"num_clusters must be in [1, {m}], got {num_clusters}")

    embedding = np.array(eigenvectors[:, :num_clusters].T, dtype=np.float64)

    if normalize_columns:
        norms = np.linalg.norm(embedding, axis=0)
        with np.errstate(divide="ignore"):
            scale = 1.0 / norms
        finite = np.isfinite(scale)
        embedding[:, finite] *= scale[finite]

    return embedding
