"""Change an issue's severity."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from moth.commands._helpers import open_store
from moth.errors import MothError
from moth.hooks import around
from moth.issue import Severity


def set_severity(issue_id: str, level: str, project_dir: str | Path | None = None) -> dict[str, Any]:
    try:
        severity = Severity.parse(level)
        store = open_store(project_dir)
        issue = store.find(issue_id)
        with around(store.config.moth_dir, "severity"):
            updated = store.set_severity(issue, severity)
    except MothError as exc:
        return {"error": str(exc)}

    return {
        "status": "updated",
        "issue": updated.to_dict(),
        "from": issue.severity.value,
        "message": f"Changed severity of {issue.id} from {issue.severity} to {updated.severity}",
    }
