"""Verify the moth console script entry point resolves."""
import subprocess
import sys

from moth.cli import cli


def test_cli_callable():
    assert callable(cli)


def test_entrypoint_metadata():
    """Verify the 'moth' entry point is declared in package metadata."""
    from importlib.metadata import entry_points
    names = [ep.name for ep in entry_points(group="console_scripts")]
    assert "moth" in names, f"'moth' entry point not found in: {names}"


def test_module_runs():
    result = subprocess.run(
        [sys.executable, "-m", "moth", "--help"], capture_output=True, text=True
    )
    assert result.returncode == 0
    assert "file-based issue tracker" in result.stdout
