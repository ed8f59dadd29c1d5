"""Filesystem helpers: the only place moth touches files directly.

Every OSError leaves this module as IOFailureError (or NotFoundError for a
missing source) with the operation and path attached.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from moth.errors import IOFailureError, NotFoundError


def list_markdown(directory: Path) -> list[Path]:
    """Return the .md files in directory, sorted by name."""
    try:
        entries = sorted(os.scandir(directory), key=lambda e: e.name)
    except FileNotFoundError as exc:
        raise NotFoundError(f"Status directory does not exist: {directory}") from exc
    except OSError as exc:
        raise IOFailureError("read directory", directory, exc.strerror or str(exc)) from exc
    return [Path(e.path) for e in entries if e.name.endswith(".md") and e.is_file()]


def create_empty(path: Path) -> Path:
    """Create an empty file, failing if something already sits at path."""
    try:
        with open(path, "x"):
            pass
    except FileExistsError as exc:
        raise IOFailureError("create", path, "file already exists") from exc
    except OSError as exc:
        raise IOFailureError("create", path, exc.strerror or str(exc)) from exc
    return path


def rename(src: Path, dst: Path) -> Path:
    """Rename src to dst. A no-op when both are the same path."""
    if src == dst:
        return dst
    if not src.exists():
        raise NotFoundError(f"Issue file no longer exists: {src}")
    if dst.exists():
        raise IOFailureError("move", src, f"target already exists: {dst}")
    try:
        os.rename(src, dst)
    except OSError as exc:
        raise IOFailureError("move", src, f"{exc.strerror or exc} (to {dst})") from exc
    return dst


def remove(path: Path) -> None:
    try:
        os.remove(path)
    except FileNotFoundError as exc:
        raise NotFoundError(f"Issue file no longer exists: {path}") from exc
    except OSError as exc:
        raise IOFailureError("delete", path, exc.strerror or str(exc)) from exc


# ---------------------------------------------------------------------------
# Atomic file write
# ---------------------------------------------------------------------------

def atomic_write_file(path: str | Path, content: str) -> Path:
    """Write content to path atomically (write-to-temp, then rename).

    Returns the final path.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    except OSError as exc:
        raise IOFailureError("write", path, exc.strerror or str(exc)) from exc
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.replace(tmp, path)
    except BaseException as exc:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        if isinstance(exc, OSError):
            raise IOFailureError("write", path, exc.strerror or str(exc)) from exc
        raise
    return path


def read_content_file(path: str | Path | None) -> str:
    """Read a content file, returning empty string if missing or None."""
    if not path or not os.path.exists(path):
        return ""
    try:
        with open(path) as f:
            return f.read()
    except OSError as exc:
        raise IOFailureError("read", path, exc.strerror or str(exc)) from exc
