"""Lifecycle hooks: user scripts run before/after moth commands.

Scripts live in .moth/hooks/<command>/<before|after>/ and run with `sh` from
the project root, in filename order. A failing `before` hook aborts the
command; a failing `after` hook is reported once the command has run.
Hooks are skipped on Windows.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from moth.defaults import HOOKS_DIR_NAME
from moth.errors import HookError

log = logging.getLogger(__name__)

HOOK_STAGES = ("before", "after")


def hook_scripts(moth_dir: Path, command: str, stage: str) -> list[Path]:
    directory = moth_dir / HOOKS_DIR_NAME / command / stage
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file())


def run_hooks(moth_dir: Path, command: str, stage: str) -> list[str]:
    """Run every hook for command/stage. Returns the script names that ran."""
    if stage not in HOOK_STAGES:
        raise ValueError(f"Unknown hook stage '{stage}'. Valid: {', '.join(HOOK_STAGES)}")
    if sys.platform == "win32":
        return []

    env = {**os.environ, "MOTH_COMMAND": command, "MOTH_HOOK": stage, "MOTH_DIR": str(moth_dir)}
    ran: list[str] = []
    for script in hook_scripts(moth_dir, command, stage):
        log.debug("Running %s hook %s", stage, script)
        try:
            proc = subprocess.run(["sh", str(script)], cwd=moth_dir.parent, env=env)
        except OSError as exc:
            raise HookError(f"Failed to execute hook {script}: {exc}") from exc
        if proc.returncode != 0:
            raise HookError(f"Hook script {script} failed with status {proc.returncode}")
        ran.append(script.name)
    return ran


@contextmanager
def around(moth_dir: Path, command: str) -> Iterator[None]:
    """Run `before` hooks, the wrapped block, then `after` hooks."""
    run_hooks(moth_dir, command, "before")
    yield
    run_hooks(moth_dir, command, "after")
