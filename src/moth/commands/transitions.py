"""Status transitions: start, done, mv."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from moth.commands._helpers import open_store
from moth.errors import MothError, NotFoundError
from moth.hooks import around


def start(issue_id: str, project_dir: str | Path | None = None) -> dict[str, Any]:
    """Move an issue to the second status and make it the current issue."""
    try:
        store = open_store(project_dir)
        target = store.config.second_status
        issue = store.find(issue_id)
        with around(store.config.moth_dir, "start"):
            moved = store.move(issue, target.name)
            store.set_current(moved)
    except MothError as exc:
        return {"error": str(exc)}

    return {
        "status": "moved",
        "issue": moved.to_dict(),
        "from": issue.status,
        "message": f"Moved {moved.id} to {moved.status}",
    }


def done(issue_id: str | None = None, project_dir: str | Path | None = None) -> dict[str, Any]:
    """Move an issue (default: the current one) to the last status.

    Clears the current-issue marker when it pointed at this issue.
    """
    try:
        store = open_store(project_dir)
        current = store.current()
        if issue_id:
            issue = store.find(issue_id)
        elif current is not None:
            issue = current
        else:
            raise NotFoundError("No current issue")

        with around(store.config.moth_dir, "done"):
            moved = store.finish(issue)
            if current is not None and current.id == moved.id:
                store.clear_current()
    except MothError as exc:
        return {"error": str(exc)}

    return {
        "status": "moved",
        "issue": moved.to_dict(),
        "from": issue.status,
        "message": f"Moved {moved.id} to {moved.status}",
    }


def move(issue_id: str, target_status: str, project_dir: str | Path | None = None) -> dict[str, Any]:
    """Move an issue to any configured status."""
    try:
        store = open_store(project_dir)
        issue = store.find(issue_id)
        with around(store.config.moth_dir, "mv"):
            moved = store.move(issue, target_status)
    except MothError as exc:
        return {"error": str(exc)}

    return {
        "status": "moved",
        "issue": moved.to_dict(),
        "from": issue.status,
        "message": f"Moved {moved.id} to {moved.status}",
    }
