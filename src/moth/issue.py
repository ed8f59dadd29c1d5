"""Issue model and the filename codec.

An issue's metadata lives entirely in its filename:

    [<order:03d>-]<id>-<severity>-<slug>.md

e.g. ``003-x7k2m-high-fix_login_bug.md``. The markdown body is free text and
never parsed. Slug words are joined with ``_``; older files used ``-`` and
still decode (to the underscore form).
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any

from moth.defaults import ISSUE_SUFFIX
from moth.errors import FilenameParseError, InvalidInputError

SLUG_SEPARATOR = "_"

_ID_PATTERN = re.compile(r"^[a-z][a-z0-9]*$")
_SLUG_PART_PATTERN = re.compile(r"^[a-z0-9_]+$")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


class Severity(str, Enum):
    CRIT = "crit"
    HIGH = "high"
    MED = "med"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank: crit sorts first."""
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, text: str) -> "Severity":
        try:
            return cls(text.strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise InvalidInputError(f"Invalid severity: {text}. Must be one of: {valid}") from None

    def __str__(self) -> str:
        return self.value


_SEVERITY_RANK = {sev: idx for idx, sev in enumerate(Severity)}
SEVERITY_VALUES = tuple(s.value for s in Severity)


# ---------------------------------------------------------------------------
# Slug helpers
# ---------------------------------------------------------------------------


def title_to_slug(title: str) -> str:
    """Normalize a title: lowercase, non-alphanumeric runs become one '_'.

    Returns an empty string when nothing alphanumeric is left.
    """
    return _NON_ALNUM.sub(SLUG_SEPARATOR, title.strip().lower()).strip(SLUG_SEPARATOR)


def slug_to_title(slug: str) -> str:
    """Human-readable title: "fix_login_bug" -> "Fix Login Bug".

    Accepts either separator so legacy slugs render the same way.
    """
    words = re.split(r"[_\-]+", slug)
    return " ".join(w[:1].upper() + w[1:] for w in words if w)


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IssueName:
    """The fields carried by an issue filename."""

    order: int | None
    id: str
    severity: Severity
    slug: str


def encode(order: int | None, issue_id: str, severity: Severity, slug: str) -> str:
    """Build the filename for the given fields."""
    stem = f"{issue_id}-{severity.value}-{slug}"
    if order is not None:
        stem = f"{order:03d}-{stem}"
    return stem + ISSUE_SUFFIX


def decode(filename: str) -> IssueName:
    """Parse a filename back into its fields. Raises FilenameParseError."""
    stem = filename[: -len(ISSUE_SUFFIX)] if filename.endswith(ISSUE_SUFFIX) else filename
    parts = stem.split("-")

    order: int | None = None
    if parts and parts[0].isascii() and parts[0].isdigit():
        order = int(parts[0])
        parts = parts[1:]

    if len(parts) < 3:
        raise FilenameParseError(
            filename, "expected [NNN-]{id}-{severity}-{slug}.md"
        )

    issue_id, severity_text, slug_parts = parts[0], parts[1], parts[2:]
    if not _ID_PATTERN.match(issue_id):
        raise FilenameParseError(filename, f"invalid id '{issue_id}'")
    try:
        severity = Severity(severity_text)
    except ValueError:
        raise FilenameParseError(
            filename, f"unknown severity '{severity_text}'"
        ) from None
    for part in slug_parts:
        if not _SLUG_PART_PATTERN.match(part):
            raise FilenameParseError(filename, f"invalid slug segment '{part}'")

    return IssueName(order, issue_id, severity, SLUG_SEPARATOR.join(slug_parts))


# ---------------------------------------------------------------------------
# Issue
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Issue:
    id: str
    severity: Severity
    slug: str
    status: str
    order: int | None
    path: Path

    @classmethod
    def from_path(cls, path: str | Path, status: str) -> "Issue":
        path = Path(path)
        name = decode(path.name)
        return cls(
            id=name.id,
            severity=name.severity,
            slug=name.slug,
            status=status,
            order=name.order,
            path=path,
        )

    @property
    def filename(self) -> str:
        return encode(self.order, self.id, self.severity, self.slug)

    @property
    def title(self) -> str:
        return slug_to_title(self.slug)

    def evolve(self, **changes: Any) -> "Issue":
        return replace(self, **changes)

    def sort_key(self) -> tuple:
        """Ordered issues first by order, then the rest by severity and slug."""
        if self.order is not None:
            return (0, self.order, self.severity.rank, self.slug)
        return (1, 0, self.severity.rank, self.slug)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["severity"] = self.severity.value
        data["path"] = str(self.path)
        data["title"] = self.title
        return data
