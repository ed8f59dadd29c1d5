"""Delete an issue file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from moth.commands._helpers import describe, open_store
from moth.errors import MothError
from moth.hooks import around


def remove(issue_id: str, project_dir: str | Path | None = None) -> dict[str, Any]:
    try:
        store = open_store(project_dir)
        issue = store.find(issue_id)
        current = store.current()
        with around(store.config.moth_dir, "rm"):
            store.delete(issue)
            if current is not None and current.id == issue.id:
                store.clear_current()
    except MothError as exc:
        return {"error": str(exc)}

    return {"status": "deleted", "issue": issue.to_dict(), "message": f"Deleted {describe(issue)}"}
