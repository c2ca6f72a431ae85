"""
Partition checks and agreement metrics for cluster assignments.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np


def partition_is_valid(cluster_point_indices: Iterable[Sequence[int]], n: int) -> bool:
    """
    Check that per-cluster index lists form a partition of [0, n).

    Every index must appear exactly once across all clusters; empty clusters
    are allowed.
    """
    seen = np.zeros(n, dtype=np.int64)
    for indices in cluster_point_indices:
        idx = np.asarray(indices, dtype=np.int64)
        if idx.size == 0:
            continue
        if idx.min() < 0 or idx.max() >= n:
            return False
        np.add.at(seen, idx, 1)
    return bool(np.all(seen == 1))


def adjusted_rand_index(labels_a: np.ndarray, labels_b: np.ndarray) -> float:
    """
    Compute Adjusted Rand Index between two clusterings.

    ARI measures agreement between two clusterings, adjusted for chance.
    Returns 1.0 for clusterings identical up to relabeling, ~0.0 for random
    agreement.

    Args:
        labels_a: First clustering labels
        labels_b: Second clustering labels

    Returns:
        ARI score in [-1, 1], typically in [0, 1]

    Raises:
        ValueError: If the label arrays differ in length
    """
    labels_a = np.asarray(labels_a)
    labels_b = np.asarray(labels_b)
    if labels_a.shape != labels_b.shape:
        raise ValueError(
            f"Label arrays must have the same shape; got {labels_a.shape} and {labels_b.shape}"
        )
    n = len(labels_a)
    if n == 0:
        return 1.0
    _, a = np.unique(labels_a, return_inverse=True)
    _, b = np.unique(labels_b, return_inverse=True)

    contingency = np.zeros((a.max() + 1, b.max() + 1), dtype=np.int64)
    np.add.at(contingency, (a, b), 1)

    sum_comb = (contingency * (contingency - 1) / 2.0).sum()
    sum_comb_c = (contingency.sum(axis=1) * (contingency.sum(axis=1) - 1) / 2.0).sum()
    sum_comb_k = (contingency.sum(axis=0) * (contingency.sum(axis=0) - 1) / 2.0).sum()
    comb_n = n * (n - 1) / 2.0

    if comb_n == 0:
        return 1.0

    expected_index = (sum_comb_c * sum_comb_k) / comb_n
    max_index = 0.5 * (sum_comb_c + sum_comb_k)
    denom = max_index - expected_index
    if denom == 0:
        return 1.0
    return float((sum_comb - expected_index) / denom)
