"""Initialize a .moth/ directory with the default config."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from moth.commands._helpers import _start_dir
from moth.config import default_config, dump_config
from moth.defaults import CONFIG_FILE_NAME, MOTH_DIR_NAME
from moth.errors import IOFailureError


def init(project_dir: str | Path | None = None) -> dict[str, Any]:
    """Create .moth/, write config.yml and one directory per status.

    Refuses to touch an existing .moth/ directory.
    """
    moth_dir = _start_dir(project_dir) / MOTH_DIR_NAME
    if moth_dir.exists():
        return {"error": f"Moth already initialized in {moth_dir}"}

    config = default_config(moth_dir)
    try:
        moth_dir.mkdir(parents=True)
        (moth_dir / CONFIG_FILE_NAME).write_text(dump_config(config))
        for status in config.statuses:
            config.status_dir(status).mkdir()
    except OSError as exc:
        return {"error": str(IOFailureError("initialize", moth_dir, exc.strerror or str(exc)))}

    return {
        "status": "initialized",
        "moth_dir": str(moth_dir),
        "statuses": [s.name for s in config.statuses],
        "message": f"Initialized moth in {moth_dir}",
    }
