"""
Tests for the command-line entry point.
"""

import json

import numpy as np
import pytest

from spectral_partition.cli import load_affinity, main


@pytest.fixture
def affinity_file(tmp_path, two_block_affinity):
    path = tmp_path / "affinity.npy"
    np.save(path, two_block_affinity)
    return path


def test_cli_estimates_clusters(affinity_file, capsys):
    code = main([str(affinity_file), "--max-clusters", "3", "--estimate", "--log-level", "ERROR"])

    assert code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["num_clusters"] == 2
    assert summary["estimated"] is True
    assert sorted(summary["cluster_sizes"]) == [4, 5]


def test_cli_fixed_clusters_to_file(affinity_file, tmp_path):
    out = tmp_path / "result.json"
    code = main(
        [
            str(affinity_file),
            "--clusters",
            "2",
            "--laplacian",
            "unnormalized",
            "--kd-tree",
            "--log-level",
            "ERROR",
            "-o",
            str(out),
        ]
    )

    assert code == 0
    summary = json.loads(out.read_text(encoding="utf-8"))
    assert summary["laplacian_type"] == "unnormalized"
    assert len(summary["eigenvalues"]) == 2


def test_cli_text_input(tmp_path, two_block_affinity, capsys):
    path = tmp_path / "affinity.txt"
    np.savetxt(path, two_block_affinity)

    np.testing.assert_array_equal(load_affinity(path), two_block_affinity)
    assert main([str(path), "--clusters", "2", "--log-level", "ERROR"]) == 0
    assert json.loads(capsys.readouterr().out)["num_points"] == 9


def test_cli_requires_cluster_count(affinity_file):
    with pytest.raises(SystemExit):
        main([str(affinity_file)])


def test_cli_estimate_requires_bound(affinity_file):
    with pytest.raises(SystemExit):
        main([str(affinity_file), "--clusters", "2", "--estimate"])


def test_cli_missing_file(tmp_path):
    with pytest.raises(SystemExit):
        main([str(tmp_path / "missing.npy"), "--clusters", "2"])


def test_cli_invalid_affinity(tmp_path, capsys):
    path = tmp_path / "bad.npy"
    np.save(path, np.array([[0.0, 1.0], [0.0, 0.0]]))

    assert main([str(path), "--clusters", "1", "--log-level", "CRITICAL"]) == 2
    assert "symmetric" in capsys.readouterr().err
