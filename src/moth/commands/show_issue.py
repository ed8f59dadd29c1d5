"""Show an issue's metadata and body."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from moth import fs
from moth.commands._helpers import open_store
from moth.errors import MothError, NotFoundError


def show(issue_id: str | None = None, project_dir: str | Path | None = None) -> dict[str, Any]:
    """Fetch one issue by partial id, or the current issue when id is omitted."""
    try:
        store = open_store(project_dir)
        if issue_id:
            issue = store.find(issue_id)
        else:
            issue = store.current()
            if issue is None:
                raise NotFoundError("No current issue")
        content = fs.read_content_file(issue.path)
    except MothError as exc:
        return {"error": str(exc)}

    return {"issue": issue.to_dict(), "content": content}
