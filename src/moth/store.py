"""IssueStore: the directory tree under .moth/ seen as a collection of issues.

Each status is a directory; each issue is one file whose name carries its
metadata (see moth.issue). Every mutation is a single rename, create or
remove. Compaction is a sequence of renames and is not atomic as a whole:
the pass stops at the first failed rename, leaving earlier renames applied,
and is reported through CompactionError.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from moth import fs
from moth.config import MothConfig, StatusDefinition
from moth.defaults import CURRENT_FILE_NAME, MAX_ID_ATTEMPTS
from moth.errors import (
    AmbiguousIdError,
    CompactionError,
    ConflictError,
    FilenameParseError,
    IOFailureError,
    InvalidInputError,
    NotFoundError,
    ResourceExhaustedError,
)
from moth.ids import generate_id
from moth.issue import Issue, Severity, encode, title_to_slug

log = logging.getLogger(__name__)

# Serializes id allocation + file creation within this process
_CREATE_LOCK = threading.Lock()


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Position:
    """Where reorder should put an issue.

    kind is one of top, bottom, above, below, number. above/below carry the
    partial id of the reference issue in `other`; number carries `number`.
    """

    kind: str
    other: str | None = None
    number: int | None = None

    @classmethod
    def parse(cls, text: str, other: str | None = None) -> "Position":
        """Parse "top", "bottom", "above:<id>", "below:<id>" or "<n>".

        `other` supplies the reference id when it was given separately
        (`moth priority abc above xyz`).
        """
        raw = text.strip().lower()
        kind, _, inline_other = raw.partition(":")
        if kind in ("top", "bottom"):
            if inline_other:
                raise InvalidInputError(f"Invalid position: {text}")
            return cls(kind)
        if kind in ("above", "below"):
            ref = inline_other or (other or "").strip()
            if not ref:
                raise InvalidInputError(f"Missing target issue ID for '{kind}'")
            return cls(kind, other=ref)
        if raw.isascii() and raw.isdigit() and int(raw) >= 1:
            return cls("number", number=int(raw))
        raise InvalidInputError(
            f"Invalid position: {text}. Use top, bottom, above:<id>, below:<id> or a positive number"
        )

    def __str__(self) -> str:
        if self.kind == "number":
            return str(self.number)
        if self.other:
            return f"{self.kind}:{self.other}"
        return self.kind


@dataclass
class CompactResult:
    status: str
    total: int = 0
    renamed: list[tuple[str, int | None, int]] = field(default_factory=list)
    failures: list[tuple[str, str]] = field(default_factory=list)
    # ids left untouched after the pass stopped
    pending: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "status": self.status,
            "total": self.total,
            "renamed": [
                {"id": issue_id, "from": old, "to": new} for issue_id, old, new in self.renamed
            ],
            "failures": [{"id": issue_id, "error": err} for issue_id, err in self.failures],
            "pending": list(self.pending),
        }


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class IssueStore:
    def __init__(self, config: MothConfig) -> None:
        for status in config.statuses:
            directory = config.status_dir(status)
            if not directory.is_dir():
                raise NotFoundError(
                    f"Status directory does not exist: {directory}. Try running 'moth init' first."
                )
        self.config = config
        # Files skipped by the most recent listing, with the reason
        self.skipped: list[tuple[Path, str]] = []

    # -- lookup -------------------------------------------------------------

    def _status(self, name: str) -> StatusDefinition:
        status = self.config.get_status(name)
        if status is None:
            raise NotFoundError(f"Unknown status: {name}")
        return status

    def _target_path(self, issue: Issue) -> Path:
        return self.config.status_dir(self._status(issue.status)) / issue.filename

    def issues(self, status: str) -> list[Issue]:
        """All decodable issues in a status, ordered for display.

        Files whose names do not decode are skipped with a warning.
        """
        definition = self._status(status)
        directory = self.config.status_dir(definition)
        self.skipped = [entry for entry in self.skipped if entry[0].parent != directory]

        found: list[Issue] = []
        for path in fs.list_markdown(directory):
            try:
                found.append(Issue.from_path(path, definition.name))
            except FilenameParseError as exc:
                log.warning("Skipping %s: %s", path, exc.reason)
                self.skipped.append((path, exc.reason))
        found.sort(key=Issue.sort_key)
        return found

    def all_issues(self) -> list[Issue]:
        self.skipped = []
        result: list[Issue] = []
        for status in self.config.statuses:
            result.extend(self.issues(status.name))
        return result

    def find(self, partial_id: str) -> Issue:
        """Resolve a (partial) id to exactly one issue across all statuses."""
        partial_id = partial_id.strip()
        if not partial_id:
            raise InvalidInputError("Issue ID cannot be empty")
        matches = [i for i in self.all_issues() if i.id.startswith(partial_id)]
        if not matches:
            raise NotFoundError(f"No issue found with ID: {partial_id}")
        if len(matches) > 1:
            raise AmbiguousIdError(partial_id, [i.id for i in matches])
        return matches[0]

    # -- mutations ----------------------------------------------------------

    def _allocate_id(self) -> str:
        existing = {issue.id for issue in self.all_issues()}
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = generate_id(self.config.id_length)
            if candidate not in existing:
                return candidate
        raise ResourceExhaustedError(
            f"Failed to generate unique ID after {MAX_ID_ATTEMPTS} attempts"
        )

    def create(self, title: str, severity: Severity) -> Issue:
        """Create an empty issue file in the first status."""
        slug = title_to_slug(title)
        if not slug:
            raise InvalidInputError("Issue title cannot be empty")

        first = self.config.first_status
        with _CREATE_LOCK:
            issue_id = self._allocate_id()
            path = self.config.status_dir(first) / encode(None, issue_id, severity, slug)
            fs.create_empty(path)
        log.debug("Created %s at %s", issue_id, path)
        return Issue.from_path(path, first.name)

    def _relocate(self, issue: Issue, updated: Issue) -> Issue:
        target = self._target_path(updated)
        fs.rename(issue.path, target)
        return updated.evolve(path=target)

    def move(self, issue: Issue, target_status: str) -> Issue:
        """Move an issue to another status, dropping order if it can't hold one."""
        target = self.config.get_status(target_status)
        if target is None:
            raise ConflictError(f"Unknown status: {target_status}")
        order = issue.order if target.orderable else None
        moved = self._relocate(issue, issue.evolve(status=target.name, order=order))
        log.debug("Moved %s from %s to %s", issue.id, issue.status, target.name)
        return moved

    def finish(self, issue: Issue) -> Issue:
        return self.move(issue, self.config.last_status.name)

    def delete(self, issue: Issue) -> None:
        fs.remove(issue.path)
        log.debug("Deleted %s", issue.id)

    def set_severity(self, issue: Issue, severity: Severity) -> Issue:
        return self._relocate(issue, issue.evolve(severity=severity))

    # -- ordering -----------------------------------------------------------

    def _require_orderable(self, status: str) -> StatusDefinition:
        definition = self._status(status)
        if not definition.orderable:
            raise ConflictError(f"Status '{status}' is not configured for prioritization")
        return definition

    def _resolve_order(self, issue: Issue, position: Position) -> int | None:
        if position.kind == "number":
            return position.number
        if position.kind == "bottom":
            return None
        if position.kind == "top":
            orders = [i.order for i in self.issues(issue.status) if i.order is not None]
            lowest = min(orders, default=1)
            return max(lowest - 1, 1)

        other = self.find(position.other or "")
        if other.status != issue.status:
            raise ConflictError(
                f"Target issue is in different status: {other.status} vs {issue.status}"
            )
        if other.order is None:
            return None
        if position.kind == "above":
            return max(other.order - 1, 1)
        return other.order + 1

    def reorder(
        self,
        issue: Issue,
        position: Position | str,
        auto_compact: bool | None = None,
    ) -> Issue:
        """Give an issue a new manual rank within its (orderable) status.

        auto_compact=None follows priority.auto_compact from config. When
        compaction runs, the returned issue reflects its renumbered path.
        """
        if isinstance(position, str):
            position = Position.parse(position)
        self._require_orderable(issue.status)

        new_order = self._resolve_order(issue, position)
        updated = self._relocate(issue, issue.evolve(order=new_order))
        log.debug("Reordered %s to %s (%s)", issue.id, new_order, position)

        should_compact = self.config.priority.auto_compact if auto_compact is None else auto_compact
        if should_compact:
            self.compact(issue.status)
            updated = next(i for i in self.issues(issue.status) if i.id == issue.id)
        return updated

    def compact(self, status: str) -> CompactResult:
        """Renumber ordered issues in a status to 1..N, keeping their order.

        Issues already at the right number are not touched. The pass stops at
        the first failed rename so the status still reads in its old order;
        earlier renames stay in place and the rest are listed as pending.
        """
        self._require_orderable(status)
        # issues() sorts ordered entries by order with a stable tie-break
        ordered = [i for i in self.issues(status) if i.order is not None]
        result = CompactResult(status=status, total=len(ordered))

        for idx, issue in enumerate(ordered, start=1):
            if issue.order == idx:
                continue
            try:
                self._relocate(issue, issue.evolve(order=idx))
            except (IOFailureError, NotFoundError) as exc:
                log.warning("Compaction of %s: could not renumber %s: %s", status, issue.id, exc)
                result.failures.append((issue.id, str(exc)))
                result.pending = [
                    i.id for pos, i in enumerate(ordered[idx:], start=idx + 1) if i.order != pos
                ]
                break
            result.renamed.append((issue.id, issue.order, idx))

        if result.failures:
            raise CompactionError(status, result)
        return result

    def compact_all(self) -> list[CompactResult]:
        return [self.compact(s.name) for s in self.config.statuses if s.orderable]

    # -- current issue ------------------------------------------------------

    @property
    def current_path(self) -> Path:
        return self.config.moth_dir / CURRENT_FILE_NAME

    def current(self) -> Issue | None:
        """The issue recorded by the last `start`, or None."""
        issue_id = fs.read_content_file(self.current_path).strip()
        if not issue_id:
            return None
        for issue in self.all_issues():
            if issue.id == issue_id:
                return issue
        log.debug("Stale %s entry: %s", CURRENT_FILE_NAME, issue_id)
        return None

    def set_current(self, issue: Issue) -> None:
        fs.atomic_write_file(self.current_path, issue.id + "\n")

    def clear_current(self) -> None:
        if self.current_path.exists():
            fs.remove(self.current_path)
