"""Manual priority ordering: reorder one issue, compact a status."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from moth.commands._helpers import open_store
from moth.errors import CompactionError, MothError
from moth.hooks import around
from moth.store import Position


def prioritize(
    issue_id: str,
    position: str,
    other_id: str | None = None,
    compact: bool | None = None,
    project_dir: str | Path | None = None,
) -> dict[str, Any]:
    """Reposition an issue within its status.

    position accepts top, bottom, above, below or a number; above/below take
    the reference issue either as other_id or inline ("above:<id>").
    compact=None defers to priority.auto_compact in config.
    """
    try:
        pos = Position.parse(position, other_id)
        store = open_store(project_dir)
        issue = store.find(issue_id)
        with around(store.config.moth_dir, "priority"):
            updated = store.reorder(issue, pos, auto_compact=compact)
    except MothError as exc:
        return {"error": str(exc)}

    if updated.order is None:
        message = f"Removed priority from {updated.id}"
    else:
        message = f"Set priority of {updated.id} to {updated.order}"
    return {
        "status": "reordered",
        "issue": updated.to_dict(),
        "position": str(pos),
        "message": message,
    }


def compact(status: str | None = None, project_dir: str | Path | None = None) -> dict[str, Any]:
    """Renumber one status (or every prioritized status) to 1..N."""
    try:
        store = open_store(project_dir)
        with around(store.config.moth_dir, "compact"):
            results = [store.compact(status)] if status else store.compact_all()
    except CompactionError as exc:
        return {"error": str(exc), "partial": exc.result.to_dict()}
    except MothError as exc:
        return {"error": str(exc)}

    return {
        "status": "compacted",
        "results": [r.to_dict() for r in results],
        "message": "\n".join(
            f"Compacted {r.total} prioritized issues in {r.status}" for r in results
        ),
    }
