"""Install/uninstall the prepare-commit-msg hook that tags commits.

The hook prepends "[<current issue id>] " to commit messages while an issue
is started, unless the message already carries a tag. moth's part of the
hook sits between two marker lines so it can share the file with other hooks.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Any

from moth.commands._helpers import _start_dir, load_project_config
from moth.errors import MothError
from moth.git._runner import find_git_dir

HOOK_NAME = "prepare-commit-msg"
HOOK_MARKER = "# MOTH_HOOK_MARKER"
HOOK_END_MARKER = "# MOTH_HOOK_MARKER_END"

HOOK_BLOCK = f"""{HOOK_MARKER} - Do not edit this section manually
moth_prepare_commit_msg() {{
    COMMIT_MSG_FILE=$1
    COMMIT_SOURCE=$2

    # Skip merges and squashes
    if [ "$COMMIT_SOURCE" = "merge" ] || [ "$COMMIT_SOURCE" = "squash" ]; then
        return 0
    fi

    dir="$PWD"
    MOTH_DIR=""
    while [ "$dir" != "/" ]; do
        if [ -d "$dir/.moth" ]; then
            MOTH_DIR="$dir/.moth"
            break
        fi
        dir="$(dirname "$dir")"
    done
    [ -n "$MOTH_DIR" ] || return 0

    CURRENT_FILE="$MOTH_DIR/.current"
    [ -f "$CURRENT_FILE" ] || return 0
    STORY_ID=$(tr -d '[:space:]' < "$CURRENT_FILE")
    [ -n "$STORY_ID" ] || return 0

    MSG=$(cat "$COMMIT_MSG_FILE")
    if moth prefix "$MSG" >/dev/null 2>&1; then
        return 0
    fi
    printf '[%s] %s\\n' "$STORY_ID" "$MSG" > "$COMMIT_MSG_FILE"
}}
moth_prepare_commit_msg "$@"
{HOOK_END_MARKER}
"""

HOOK_SCRIPT = "#!/bin/sh\n" + HOOK_BLOCK


def _hook_path(project_dir: str | Path | None) -> Path:
    # The hook only makes sense inside a moth project
    load_project_config(project_dir)
    return find_git_dir(_start_dir(project_dir)) / "hooks" / HOOK_NAME


def _make_executable(path: Path) -> None:
    if os.name == "nt":
        return
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def _strip_block(content: str) -> str:
    kept: list[str] = []
    inside = False
    for line in content.splitlines():
        if line.startswith(HOOK_END_MARKER):
            inside = False
            continue
        if line.startswith(HOOK_MARKER):
            inside = True
            continue
        if not inside:
            kept.append(line)
    return "\n".join(kept).rstrip() + "\n"


def install(force: bool = False, append: bool = False, project_dir: str | Path | None = None) -> dict[str, Any]:
    """Write the hook, or merge it into an existing prepare-commit-msg.

    An existing foreign hook needs force (replace) or append (keep both).
    Re-installing over moth's own hook is a no-op unless force is set.
    """
    try:
        hook_path = _hook_path(project_dir)
    except MothError as exc:
        return {"error": str(exc)}

    hook_path.parent.mkdir(parents=True, exist_ok=True)
    if not hook_path.exists():
        hook_path.write_text(HOOK_SCRIPT)
        action = "installed"
    else:
        existing = hook_path.read_text()
        ours = HOOK_MARKER in existing
        if ours and not force:
            return {"status": "already_installed", "path": str(hook_path), "message": "Moth hook is already installed"}
        if not ours and not force and not append:
            return {
                "error": f"Hook file already exists at {hook_path}. Use --force to overwrite or --append to append."
            }
        if append:
            base = _strip_block(existing) if ours else existing.rstrip() + "\n"
            hook_path.write_text(base + "\n" + HOOK_BLOCK)
            action = "appended"
        else:
            hook_path.write_text(HOOK_SCRIPT)
            action = "replaced"

    _make_executable(hook_path)
    return {"status": action, "path": str(hook_path), "message": f"Hook {action} at: {hook_path}"}


def uninstall(project_dir: str | Path | None = None) -> dict[str, Any]:
    """Remove moth's hook, keeping any other content in the file."""
    try:
        hook_path = _hook_path(project_dir)
    except MothError as exc:
        return {"error": str(exc)}

    if not hook_path.exists():
        return {"status": "absent", "message": f"No {HOOK_NAME} hook found"}

    content = hook_path.read_text()
    if HOOK_MARKER not in content:
        return {
            "error": f"The {HOOK_NAME} hook doesn't appear to be a moth hook. Remove it manually if needed."
        }

    if content.strip() == HOOK_SCRIPT.strip():
        hook_path.unlink()
        return {"status": "removed", "path": str(hook_path), "message": "Removed moth hook"}

    hook_path.write_text(_strip_block(content))
    return {
        "status": "section_removed",
        "path": str(hook_path),
        "message": f"Removed moth hook section from {HOOK_NAME}",
    }
