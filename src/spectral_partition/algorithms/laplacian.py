"""
Graph Laplacian construction.

Builds one of three Laplacian variants from a dense affinity matrix:

- unnormalized:           L = D - A
- normalized symmetric:   L = I - D^{-1/2} A D^{-1/2}
- normalized random walk: the pencil (L, D) with L = D - A, to be solved as the
  generalized problem L x = lambda D x

Isolated points (zero degree) are treated as singleton connected components
under every variant: their row and column of L are zero, so each contributes a
zero eigenvalue with an indicator eigenvector.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

import numpy as np

from ..utils.logging_config import get_logger

logger = get_logger(__name__)

Array2D = np.ndarray

SYMMETRY_RTOL = 1e-8
SYMMETRY_ATOL = 1e-10


class LaplacianType(enum.Enum):
    """Graph Laplacian variants."""

    UNNORMALIZED = "unnormalized"
    NORMALIZED_SYMMETRIC = "normalized_symmetric"
    NORMALIZED_RANDOM_WALK = "normalized_random_walk"

    @classmethod
    def parse(cls, value: Union["LaplacianType", str]) -> "LaplacianType":
        """Accept an enum member, its value, or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        raise ValueError(
            f"Unknown Laplacian type: {value!r} "
            f"(expected one of {', '.join(m.value for m in cls)})"
        )


@dataclass(frozen=True)
class Laplacian:
    """
    A graph Laplacian, or a Laplacian pencil for the random-walk variant.

    Attributes:
        matrix: (n, n) symmetric Laplacian L
        laplacian_type: Variant that produced ``matrix``
        degrees: (n,) row sums of the affinity matrix
        isolated: (n,) boolean mask of zero-degree points
        mass: (n, n) diagonal degree matrix D of the pencil (L, D), or None
            for the standard eigenproblem
    """

    matrix: Array2D
    laplacian_type: LaplacianType
    degrees: np.ndarray
    isolated: np.ndarray
    mass: Optional[Array2D] = None

    @property
    def n(self) -> int:
        return self.matrix.shape[0]

    @property
    def is_generalized(self) -> bool:
        return self.mass is not None


def validate_affinity(affinity) -> Array2D:
    """
    Check an affinity matrix and return it as a float64 array.

    The input is never modified; a copy is made only when a dtype conversion
    is needed.

    Raises:
        ValueError: If the matrix is empty, not square, not finite, has
            negative entries, or is not symmetric
    """
    A = np.asarray(affinity, dtype=np.float64)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Affinity matrix must be square 2-D; got shape {A.shape}")
    if A.shape[0] == 0:
        raise ValueError("Affinity matrix must have at least one point")
    if not np.all(np.isfinite(A)):
        raise ValueError("Affinity matrix contains non-finite entries")
    if np.any(A < 0):
        raise ValueError("Affinity matrix must be nonnegative")
    if not np.allclose(A, A.T, rtol=SYMMETRY_RTOL, atol=SYMMETRY_ATOL):
        raise ValueError("Affinity matrix must be symmetric")
    return A


def degree_vector(affinity: Array2D) -> np.ndarray:
    """Row sums of the affinity matrix."""
    return affinity.sum(axis=1)


def _warn_isolated(isolated: np.ndarray, laplacian_type: LaplacianType) -> None:
    count = int(isolated.sum())
    if count:
        logger.warning(
            "%d of %d points have zero degree; treating them as singleton "
            "components in the %s Laplacian",
            count,
            isolated.size,
            laplacian_type.value,
        )


def unnormalized_laplacian(affinity: Array2D) -> Laplacian:
    """L = D - A."""
    d = degree_vector(affinity)
    isolated = d <= 0.0
    L = np.diag(d) - affinity
    return Laplacian(
        matrix=L,
        laplacian_type=LaplacianType.UNNORMALIZED,
        degrees=d,
        isolated=isolated,
    )


def normalized_symmetric_laplacian(affinity: Array2D) -> Laplacian:
    """L = I - D^{-1/2} A D^{-1/2}, with zero scaling for isolated points."""
    d = degree_vector(affinity)
    isolated = d <= 0.0
    _warn_isolated(isolated, LaplacianType.NORMALIZED_SYMMETRIC)

    inv_sqrt = np.zeros_like(d)
    inv_sqrt[~isolated] = 1.0 / np.sqrt(d[~isolated])

    n = affinity.shape[0]
    L = -(inv_sqrt[:, None] * affinity * inv_sqrt[None, :])
    # Isolated rows are already zero; their diagonal stays 0 instead of 1
    L[np.diag_indices(n)] += np.where(isolated, 0.0, 1.0)
    return Laplacian(
        matrix=L,
        laplacian_type=LaplacianType.NORMALIZED_SYMMETRIC,
        degrees=d,
        isolated=isolated,
    )


def normalized_random_walk_laplacian(affinity: Array2D) -> Laplacian:
    """Pencil (D - A, D); isolated points get unit mass so D stays positive definite."""
    d = degree_vector(affinity)
    isolated = d <= 0.0
    _warn_isolated(isolated, LaplacianType.NORMALIZED_RANDOM_WALK)

    L = np.diag(d) - affinity
    mass = np.diag(np.where(isolated, 1.0, d))
    return Laplacian(
        matrix=L,
        laplacian_type=LaplacianType.NORMALIZED_RANDOM_WALK,
        degrees=d,
        isolated=isolated,
        mass=mass,
    )


_BUILDERS: Dict[LaplacianType, Callable[[Array2D], Laplacian]] = {
    LaplacianType.UNNORMALIZED: unnormalized_laplacian,
    LaplacianType.NORMALIZED_SYMMETRIC: normalized_symmetric_laplacian,
    LaplacianType.NORMALIZED_RANDOM_WALK: normalized_random_walk_laplacian,
}


def build_laplacian(
    affinity,
    laplacian_type: Union[LaplacianType, str] = LaplacianType.NORMALIZED_RANDOM_WALK,
) -> Laplacian:
    """
    Build the requested Laplacian variant from an affinity matrix.

    Args:
        affinity: (n, n) symmetric nonnegative affinity matrix
        laplacian_type: Variant to build (enum member or its string value)

    Returns:
        Laplacian holding L (and D for the random-walk pencil)

    Raises:
        ValueError: If the affinity matrix is malformed or the type is unknown
    """
    laplacian_type = LaplacianType.parse(laplacian_type)
    A = validate_affinity(affinity)
    laplacian = _BUILDERS[laplacian_type](A)
    logger.debug(
        "Built %s Laplacian for %d points (%d isolated)",
        laplacian_type.value,
        laplacian.n,
        int(laplacian.isolated.sum()),
    )
    return laplacian
