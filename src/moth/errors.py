"""Error taxonomy for moth.

Every error the store raises derives from MothError so the command layer can
turn it into an {"error": ...} result with a single except clause.
"""

from __future__ import annotations

from typing import Any


class MothError(Exception):
    """Base class for all moth failures."""


class NotFoundError(MothError, LookupError):
    """No issue, status, config file or control directory matches."""


class AmbiguousIdError(MothError, LookupError):
    """A partial id matched more than one issue."""

    def __init__(self, partial_id: str, matches: list[str]) -> None:
        self.partial_id = partial_id
        self.matches = sorted(matches)
        super().__init__(
            f"Ambiguous ID '{partial_id}'. Matches: {', '.join(self.matches)}"
        )


class InvalidInputError(MothError, ValueError):
    """Bad title, severity, position or configuration value."""


class FilenameParseError(InvalidInputError):
    """A filename does not follow the issue filename grammar."""

    def __init__(self, filename: str, reason: str) -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"Cannot parse '{filename}': {reason}")


class ConflictError(MothError):
    """The requested transition does not fit the configured statuses."""


class ResourceExhaustedError(MothError):
    """A bounded search (id allocation) ran out of attempts."""


class IOFailureError(MothError):
    """A filesystem operation failed. Chained to the original OSError."""

    def __init__(self, operation: str, path: Any, detail: str = "") -> None:
        self.operation = operation
        self.path = path
        msg = f"Failed to {operation} {path}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class CompactionError(IOFailureError):
    """Some renames in a compaction failed; the rest were applied."""

    def __init__(self, status: str, result: Any) -> None:
        self.status = status
        self.result = result
        failed = ", ".join(f"{issue_id} ({err})" for issue_id, err in result.failures)
        super().__init__("compact", status, f"{len(result.failures)} rename(s) failed: {failed}")


class HookError(MothError):
    """A lifecycle or git hook script failed."""
