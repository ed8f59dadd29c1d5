"""Shared constants: control directory names, env var names, root lookup.

Single source of truth for where moth keeps its state on disk.
"""

from __future__ import annotations

import os
from pathlib import Path

from moth.errors import NotFoundError

# ---------------------------------------------------------------------------
# Env var names
# ---------------------------------------------------------------------------

ENV_MOTH_DIR = "MOTH_DIR"
ENV_EDITOR = "EDITOR"

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

MOTH_DIR_NAME = ".moth"
CONFIG_FILE_NAME = "config.yml"
CURRENT_FILE_NAME = ".current"
HOOKS_DIR_NAME = "hooks"
ISSUE_SUFFIX = ".md"

DEFAULT_EDITOR = "vi"
DEFAULT_ID_LENGTH = 5
MIN_ID_LENGTH = 3
MAX_ID_LENGTH = 10

# Attempts at drawing a fresh id before create gives up
MAX_ID_ATTEMPTS = 100


# ---------------------------------------------------------------------------
# Resolvers
# ---------------------------------------------------------------------------


def default_editor() -> str:
    """Resolve editor: $EDITOR > vi."""
    return os.getenv(ENV_EDITOR) or DEFAULT_EDITOR


def find_moth_dir(start: str | Path) -> Path:
    """Walk up from start looking for a .moth directory.

    MOTH_DIR in the environment short-circuits the search. Raises
    NotFoundError when neither yields a directory.
    """
    explicit = os.getenv(ENV_MOTH_DIR)
    if explicit:
        path = Path(explicit).expanduser()
        if path.is_dir():
            return path.resolve()
        raise NotFoundError(f"{ENV_MOTH_DIR} points to a missing directory: {path}")

    current = Path(start).expanduser().resolve()
    for candidate in (current, *current.parents):
        moth_dir = candidate / MOTH_DIR_NAME
        if moth_dir.is_dir():
            return moth_dir
    raise NotFoundError(
        f"No {MOTH_DIR_NAME} directory found from {current}. Try running 'moth init' first."
    )
