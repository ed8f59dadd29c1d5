"""List issues grouped by status."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from moth.commands._helpers import open_store
from moth.errors import MothError
from moth.issue import Severity


def list_issues(
    status: str | None = None,
    show_all: bool = False,
    severity: str | None = None,
    project_dir: str | Path | None = None,
) -> dict[str, Any]:
    """Return issues per status, in display order.

    With no status filter every status except the last (done) is listed;
    show_all includes it. Empty statuses are kept in the result so callers
    can tell "nothing there" from "not listed".
    """
    try:
        store = open_store(project_dir)
        level = Severity.parse(severity) if severity else None

        if status:
            names = [status]
        elif show_all:
            names = [s.name for s in store.config.statuses]
        else:
            names = [s.name for s in store.config.statuses[:-1]]

        groups: list[dict[str, Any]] = []
        for name in names:
            issues = store.issues(name)
            if level is not None:
                issues = [i for i in issues if i.severity == level]
            groups.append({"status": name, "issues": [i.to_dict() for i in issues]})
    except MothError as exc:
        return {"error": str(exc)}

    result: dict[str, Any] = {"statuses": groups}
    if store.skipped:
        result["skipped"] = [{"path": str(p), "reason": r} for p, r in store.skipped]
    return result
