"""Create a new issue."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from moth.commands._helpers import describe, open_store
from moth.errors import MothError
from moth.hooks import around
from moth.issue import Severity


def new(
    title: str,
    severity: str | None = None,
    no_edit: bool = False,
    start: bool = False,
    project_dir: str | Path | None = None,
) -> dict[str, Any]:
    """Create an issue in the first status and optionally open it in the editor.

    severity defaults to default_severity from config. With start=True the
    issue goes straight to the second status and becomes the current issue.
    When the editor is not skipped but config sets no_edit_on_new, the issue
    is still created and the call reports an error.
    """
    try:
        store = open_store(project_dir)
        level = Severity.parse(severity) if severity else store.config.default_severity

        with around(store.config.moth_dir, "new"):
            issue = store.create(title, level)
            if start:
                second = store.config.second_status
                issue = store.move(issue, second.name)
                store.set_current(issue)

        result: dict[str, Any] = {
            "status": "created",
            "issue": issue.to_dict(),
            "message": f"Created {describe(issue)}",
        }
        if start:
            result["message"] += f"\nMoved {issue.id} to {issue.status}"

        if not no_edit:
            if store.config.no_edit_on_new:
                result["error"] = "Editing is disabled by configuration (no_edit_on_new: true)."
                return result
            click.edit(filename=str(issue.path), editor=store.config.editor)
        return result
    except MothError as exc:
        return {"error": str(exc)}
    except click.ClickException as exc:
        return {"error": exc.format_message()}
