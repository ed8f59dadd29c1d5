"""Open an issue in the configured editor."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from moth.commands._helpers import open_store
from moth.errors import MothError
from moth.hooks import around


def edit(issue_id: str, project_dir: str | Path | None = None) -> dict[str, Any]:
    try:
        store = open_store(project_dir)
        issue = store.find(issue_id)
        with around(store.config.moth_dir, "edit"):
            click.edit(filename=str(issue.path), editor=store.config.editor)
    except MothError as exc:
        return {"error": str(exc)}
    except click.ClickException as exc:
        return {"error": f"Failed to open editor {store.config.editor}: {exc.format_message()}"}

    return {"status": "edited", "issue": issue.to_dict()}
