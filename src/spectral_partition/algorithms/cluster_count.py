"""
Eigengap estimate of the number of clusters.
"""

from __future__ import annotations

import numpy as np

from ..utils.logging_config import get_logger

logger = get_logger(__name__)


def estimate_number_of_clusters(eigenvalues, max_num_clusters: int) -> int:
    """
    Estimate the cluster count from the largest gap in an ascending spectrum.

    The gap e[i+1] - e[i] that is strictly larger than every earlier gap and
    than e[0] itself wins, so ties go to the first occurrence and a spectrum
    whose gaps never exceed e[0] yields a single cluster. The returned count
    is the gap index + 1.

    A numerically flat spectrum (max - min below machine epsilon) carries no
    gap signal; ``max_num_clusters`` is returned unchanged in that case.

    Args:
        eigenvalues: Ascending eigenvalues e[0..m-1], usually m = bound + 1
        max_num_clusters: Caller-supplied upper bound on the cluster count

    Returns:
        Estimated number of clusters

    Raises:
        ValueError: If no eigenvalues are given
    """
    e = np.asarray(eigenvalues)
    if e.ndim != 1 or e.size == 0:
        raise ValueError("eigenvalues must be a non-empty 1-D sequence")
    if not np.issubdtype(e.dtype, np.floating):
        e = e.astype(np.float64)

    if float(e.max() - e.min()) < np.finfo(e.dtype).eps:
        logger.debug(
            "Flat spectrum of %d eigenvalues; keeping %d clusters",
            e.size,
            max_num_clusters,
        )
        return int(max_num_clusters)

    max_diff = e[0]
    max_ind = 0
    for i, diff in enumerate(np.diff(e)):
        if diff > max_diff:
            max_diff = diff
            max_ind = i

    logger.debug("Largest eigengap %.6g after index %d", float(max_diff), max_ind)
    return max_ind + 1
