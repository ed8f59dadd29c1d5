"""Thin wrapper around the git executable."""

from __future__ import annotations

import subprocess
from pathlib import Path

from moth.errors import IOFailureError, NotFoundError


def run_git(args: list[str], cwd: str | Path) -> str:
    """Run `git <args>` in cwd and return stdout. Non-zero exit raises."""
    try:
        proc = subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise NotFoundError("git executable not found on PATH") from exc
    if proc.returncode != 0:
        raise IOFailureError(f"run git {args[0]} in", cwd, proc.stderr.strip())
    return proc.stdout


def find_git_dir(start: str | Path) -> Path:
    """Walk up from start to the nearest .git directory."""
    current = Path(start).resolve()
    for candidate in (current, *current.parents):
        git_dir = candidate / ".git"
        if git_dir.is_dir():
            return git_dir
    raise NotFoundError("No .git directory found. Are you in a git repository?")
