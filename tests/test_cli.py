"""Tests for CLI."""

import subprocess
import sys
from pathlib import Path

from routing_storage.io.fingerprint import Fingerprint
from tests.artifacts import ArtifactWriter, sample_graph


def run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "routing_storage.cli", *args],
        capture_output=True,
        text=True,
    )


def test_cli_inspect_basic(dataset_base: str) -> None:
    """Test CLI inspect command."""
    result = run_cli("inspect", "--base", dataset_base)

    assert result.returncode == 0
    assert "Inspection successful" in result.stdout
    assert "'nodes': 3" in result.stdout


def test_cli_inspect_missing_dataset(tmp_path: Path) -> None:
    """Test CLI inspect on a missing dataset."""
    result = run_cli("inspect", "--base", f"{tmp_path}/missing.osrm")

    assert result.returncode == 1
    assert "Required file missing" in result.stdout


def test_cli_inspect_strict(writer: ArtifactWriter, foreign_fingerprint: Fingerprint) -> None:
    """Test --strict fails on a fingerprint mismatch."""
    base = writer.dataset()
    nodes, edges = sample_graph()
    writer.hsgr("map.osrm.hsgr", nodes, edges, fingerprint=foreign_fingerprint)

    lenient = run_cli("inspect", "--base", base)
    strict = run_cli("inspect", "--base", base, "--strict")

    assert lenient.returncode == 0
    assert "graph_util" in lenient.stdout
    assert strict.returncode == 1
    assert "fingerprint does not match" in strict.stdout


def test_cli_version() -> None:
    """Test CLI version flag."""
    result = run_cli("--version")

    assert result.returncode == 0
    assert "0.1.0" in result.stdout


def test_cli_help() -> None:
    """Test CLI help."""
    result = run_cli("--help")

    assert result.returncode == 0
    assert "inspect" in result.stdout


def test_cli_no_command() -> None:
    """Test CLI without a command prints help and fails."""
    result = run_cli()

    assert result.returncode == 1
    assert "usage" in result.stdout
