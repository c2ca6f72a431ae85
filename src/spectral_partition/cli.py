"""
Command-line entry point: cluster a precomputed affinity matrix.

Usage:
    spectral-partition affinity.npy --max-clusters 10 --estimate
    spectral-partition affinity.txt --clusters 3 --laplacian unnormalized -o result.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from .algorithms.eigen import EIGEN_SOLVERS
from .algorithms.laplacian import LaplacianType
from .algorithms.spectral import SpectralConfig, run_spectral_clustering
from .config import config
from .utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def load_affinity(path: Path) -> np.ndarray:
    """Load an affinity matrix from a .npy file or a whitespace-delimited text file."""
    if path.suffix == ".npy":
        return np.load(path, allow_pickle=False)
    return np.loadtxt(path, dtype=np.float64, ndmin=2)


def build_parser() -> argparse.ArgumentParser:
    defaults = config.clustering
    parser = argparse.ArgumentParser(
        prog="spectral-partition",
        description="Spectral clustering of a precomputed affinity matrix.",
    )
    parser.add_argument("affinity", type=Path, help="Affinity matrix (.npy or text)")

    count = parser.add_mutually_exclusive_group(required=True)
    count.add_argument("--clusters", type=int, help="Fixed number of clusters")
    count.add_argument(
        "--max-clusters",
        type=int,
        help="Upper bound on the number of clusters (0 = number of points)",
    )
    parser.add_argument(
        "--estimate",
        action="store_true",
        help="Estimate the cluster count from the eigengap (with --max-clusters)",
    )
    parser.add_argument(
        "--laplacian",
        choices=[t.value for t in LaplacianType],
        default=defaults.laplacian,
        help=f"Laplacian variant (default: {defaults.laplacian})",
    )
    parser.add_argument(
        "--max-iter",
        type=int,
        default=defaults.kmeans_max_iter,
        help=f"Maximum k-means iterations (default: {defaults.kmeans_max_iter})",
    )
    parser.add_argument(
        "--tol",
        type=float,
        default=defaults.kmeans_conv_tol,
        help="k-means convergence tolerance",
    )
    parser.add_argument(
        "--kd-tree",
        action="store_true",
        default=defaults.kmeans_use_kd_tree,
        help="Use a KD-tree for nearest-centroid lookup",
    )
    parser.add_argument(
        "--solver",
        choices=EIGEN_SOLVERS,
        default=defaults.eigen_solver,
        help=f"Eigensolver strategy (default: {defaults.eigen_solver})",
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed for k-means")
    parser.add_argument("--log-level", default=None, help="Logging level (default: SPECTRAL_LOG_LEVEL)")
    parser.add_argument("-o", "--output", type=Path, help="Write the JSON summary to this file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.estimate and args.max_clusters is None:
        parser.error("--estimate requires --max-clusters")

    try:
        affinity = load_affinity(args.affinity)
    except OSError as e:
        parser.error(f"cannot read {args.affinity}: {e}")

    cfg = SpectralConfig.from_env(
        n_clusters=args.clusters,
        max_num_clusters=args.max_clusters,
        estimate_num_clusters=args.estimate,
        laplacian_type=args.laplacian,
        kmeans_max_iter=args.max_iter,
        kmeans_conv_tol=args.tol,
        kmeans_use_kd_tree=args.kd_tree,
        eigen_solver=args.solver,
        seed=args.seed,
    )

    try:
        result = run_spectral_clustering(affinity, cfg)
    except ValueError as e:
        logger.error("Spectral clustering failed: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 2

    summary = json.dumps(result.to_dict(), indent=2)
    if args.output:
        args.output.write_text(summary + "\n", encoding="utf-8")
        logger.info("Wrote %s", args.output)
    else:
        print(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
