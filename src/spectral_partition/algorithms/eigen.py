"""
Smallest-eigenpair decomposition of graph Laplacians.

Two strategies share one post-processing contract (ascending eigenvalues,
negative noise clamped to zero, eigenvectors paired column-wise):

- dense:  scipy.linalg.eigh on L or on the pencil (L, D); O(n^3)
- sparse: scipy.sparse.linalg.eigsh in shift-invert mode around a negative
  shift, so the eigenvalues nearest the shift are the smallest ones
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import scipy.linalg
import scipy.sparse
import scipy.sparse.linalg

from ..utils.logging_config import get_logger
from .laplacian import Laplacian

logger = get_logger(__name__)

EIGEN_SOLVERS = ("dense", "sparse", "auto")

# The Laplacian is positive semi-definite, so any negative shift ranks
# eigenvalues by distance in ascending order
SHIFT_INVERT_SIGMA = -1.0
DEFAULT_SPARSE_MIN_SIZE = 2000


@dataclass(frozen=True)
class EigenSpectrum:
    """
    Ascending eigenvalues with their eigenvectors.

    Attributes:
        eigenvalues: (m,) ascending, non-negative
        eigenvectors: (n, m); column j pairs with eigenvalues[j]
        solver: Strategy that produced the spectrum ("dense" or "sparse")
    """

    eigenvalues: np.ndarray
    eigenvectors: np.ndarray
    solver: str = "dense"

    def __len__(self) -> int:
        return int(self.eigenvalues.shape[0])


def _postprocess(w: np.ndarray, v: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Sort ascending and clamp negative floating-point noise to zero."""
    order = np.argsort(w, kind="stable")
    w = np.asarray(w[order], dtype=np.float64)
    v = np.asarray(v[:, order], dtype=np.float64)
    w[w < 0.0] = 0.0
    return w, v


def dense_eigenpairs(laplacian: Laplacian, k: int) -> Tuple[np.ndarray, np.ndarray]:
    """The k smallest eigenpairs via a dense (generalized) symmetric solver."""
    return scipy.linalg.eigh(
        laplacian.matrix,
        b=laplacian.mass,
        subset_by_index=[0, k - 1],
    )


def sparse_eigenpairs(
    laplacian: Laplacian,
    k: int,
    *,
    tol: float = 0.0,
    maxiter: int | None = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """The k smallest eigenpairs via ARPACK shift-invert."""
    L = scipy.sparse.csr_matrix(laplacian.matrix)
    M = None
    if laplacian.mass is not None:
        M = scipy.sparse.diags(np.diag(laplacian.mass), format="csr")
    return scipy.sparse.linalg.eigsh(
        L,
        k=k,
        M=M,
        sigma=SHIFT_INVERT_SIGMA,
        which="LM",
        tol=tol,
        maxiter=maxiter,
    )


def select_solver(
    n: int, solver: str = "dense", sparse_min_size: int = DEFAULT_SPARSE_MIN_SIZE
) -> str:
    """Resolve "auto" to a concrete strategy by problem size."""
    solver = solver.strip().lower()
    if solver not in EIGEN_SOLVERS:
        raise ValueError(
            f"Unknown eigen solver: {solver!r} (expected one of {', '.join(EIGEN_SOLVERS)})"
        )
    if solver == "auto":
        return "sparse" if n >= sparse_min_size else "dense"
    return solver


def decompose(
    laplacian: Laplacian,
    num_eigenpairs: int,
    *,
    solver: str = "dense",
    sparse_min_size: int = DEFAULT_SPARSE_MIN_SIZE,
) -> EigenSpectrum:
    """
    Compute the smallest eigenpairs of a Laplacian (or Laplacian pencil).

    Args:
        laplacian: Output of ``build_laplacian``
        num_eigenpairs: Number of eigenpairs m, 1 <= m <= n
        solver: "dense", "sparse" or "auto"
        sparse_min_size: Smallest n for which "auto" picks the sparse solver

    Returns:
        EigenSpectrum with m ascending, non-negative eigenvalues

    Raises:
        ValueError: If num_eigenpairs is out of range or the solver is unknown
    """
    n = laplacian.n
    if num_eigenpairs < 1 or num_eigenpairs > n:
        raise ValueError(
            f"num_eigenpairs must be in [1, {n}], got {num_eigenpairs}"
        )

    strategy = select_solver(n, solver, sparse_min_size)
    if strategy == "sparse" and num_eigenpairs >= n:
        logger.warning(
            "Sparse eigensolver needs fewer than n=%d eigenpairs (requested %d); "
            "using the dense solver",
            n,
            num_eigenpairs,
        )
        strategy = "dense"

    if strategy == "sparse":
        w, v = sparse_eigenpairs(laplacian, num_eigenpairs)
    else:
        w, v = dense_eigenpairs(laplacian, num_eigenpairs)

    w, v = _postprocess(w, v)
    logger.debug(
        "%s solver: %d smallest eigenvalues of %s Laplacian: %s",
        strategy,
        num_eigenpairs,
        laplacian.laplacian_type.value,
        np.array2string(w, precision=4),
    )
    return EigenSpectrum(eigenvalues=w, eigenvectors=v, solver=strategy)
