"""Issue-id tags on commit messages: "[x7k2m] Fix the login form"."""

from __future__ import annotations

import re

_TAG = re.compile(r"^\s*\[([a-z][a-z0-9]*)\]")


def extract_issue_id(message: str) -> str | None:
    """Return the id a commit message is tagged with, or None."""
    m = _TAG.match(message)
    return m.group(1) if m else None
