"""Load, validate and write .moth/config.yml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from moth.defaults import (
    CONFIG_FILE_NAME,
    DEFAULT_ID_LENGTH,
    MAX_ID_LENGTH,
    MIN_ID_LENGTH,
    default_editor,
)
from moth.errors import InvalidInputError, NotFoundError
from moth.issue import SEVERITY_VALUES, Severity


@dataclass(frozen=True)
class StatusDefinition:
    name: str
    dir: str
    prioritized: bool = False

    @property
    def orderable(self) -> bool:
        return self.prioritized


@dataclass(frozen=True)
class PriorityConfig:
    auto_compact: bool = False


@dataclass(frozen=True)
class MothConfig:
    statuses: tuple[StatusDefinition, ...]
    default_severity: Severity = Severity.MED
    editor: str = field(default_factory=default_editor)
    id_length: int = DEFAULT_ID_LENGTH
    no_edit_on_new: bool = False
    priority: PriorityConfig = PriorityConfig()
    moth_dir: Path = Path()

    @property
    def project_dir(self) -> Path:
        return self.moth_dir.parent

    @property
    def first_status(self) -> StatusDefinition:
        return self.statuses[0]

    @property
    def second_status(self) -> StatusDefinition | None:
        return self.statuses[1] if len(self.statuses) > 1 else None

    @property
    def last_status(self) -> StatusDefinition:
        return self.statuses[-1]

    def get_status(self, name: str) -> StatusDefinition | None:
        for status in self.statuses:
            if status.name == name:
                return status
        return None

    def status_dir(self, status: StatusDefinition) -> Path:
        return self.moth_dir / status.dir

    def validate(self) -> None:
        if len(self.statuses) < 2:
            raise InvalidInputError(
                f"Config must have at least 2 statuses, found {len(self.statuses)}"
            )
        names = [s.name for s in self.statuses]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise InvalidInputError(f"Duplicate status names in config: {', '.join(dupes)}")
        if not MIN_ID_LENGTH <= self.id_length <= MAX_ID_LENGTH:
            raise InvalidInputError(
                f"id_length must be between {MIN_ID_LENGTH} and {MAX_ID_LENGTH}, found {self.id_length}"
            )


def default_config(moth_dir: str | Path = "") -> MothConfig:
    """The configuration `moth init` writes: ready -> doing -> done."""
    return MothConfig(
        statuses=(
            StatusDefinition("ready", "ready", prioritized=True),
            StatusDefinition("doing", "doing"),
            StatusDefinition("done", "done"),
        ),
        moth_dir=Path(moth_dir),
    )


def _parse_status(item: Any, idx: int) -> StatusDefinition:
    if not isinstance(item, dict):
        raise InvalidInputError(f"Status #{idx + 1} must be a mapping")
    name = str(item.get("name", "")).strip()
    if not name:
        raise InvalidInputError(f"Status #{idx + 1} is missing 'name'")
    directory = str(item.get("dir") or item.get("directory") or name).strip()
    return StatusDefinition(name=name, dir=directory, prioritized=bool(item.get("prioritized", False)))


def config_from_dict(raw: dict[str, Any], moth_dir: str | Path) -> MothConfig:
    """Build and validate a MothConfig from parsed YAML."""
    statuses_raw = raw.get("statuses")
    if not isinstance(statuses_raw, list):
        raise InvalidInputError("Config must define a 'statuses' list")
    statuses = tuple(_parse_status(item, idx) for idx, item in enumerate(statuses_raw))

    # default_priority is the older key name
    severity_raw = raw.get("default_severity", raw.get("default_priority", Severity.MED.value))
    if str(severity_raw) not in SEVERITY_VALUES:
        raise InvalidInputError(
            f"Invalid default_severity: {severity_raw}. Must be one of: {', '.join(SEVERITY_VALUES)}"
        )

    try:
        id_length = int(raw.get("id_length", DEFAULT_ID_LENGTH))
    except (TypeError, ValueError):
        raise InvalidInputError(f"id_length must be an integer, found {raw.get('id_length')!r}") from None

    priority_raw = raw.get("priority") or {}
    if not isinstance(priority_raw, dict):
        raise InvalidInputError("'priority' must be a mapping")

    config = MothConfig(
        statuses=statuses,
        default_severity=Severity(str(severity_raw)),
        editor=str(raw.get("editor") or default_editor()),
        id_length=id_length,
        no_edit_on_new=bool(raw.get("no_edit_on_new", False)),
        priority=PriorityConfig(auto_compact=bool(priority_raw.get("auto_compact", False))),
        moth_dir=Path(moth_dir),
    )
    config.validate()
    return config


def load_config(moth_dir: str | Path) -> MothConfig:
    moth_dir = Path(moth_dir)
    cfg_path = moth_dir / CONFIG_FILE_NAME
    if not cfg_path.exists():
        raise NotFoundError(
            f"Config file not found at {cfg_path}. Try running 'moth init' first."
        )

    try:
        raw = yaml.safe_load(cfg_path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise InvalidInputError(f"Failed to parse config file {cfg_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise InvalidInputError("Top-level config must be a YAML mapping")

    return config_from_dict(raw, moth_dir)


def config_to_dict(config: MothConfig) -> dict[str, Any]:
    return {
        "statuses": [
            {"name": s.name, "dir": s.dir, "prioritized": s.prioritized}
            for s in config.statuses
        ],
        "default_severity": config.default_severity.value,
        "editor": config.editor,
        "id_length": config.id_length,
        "no_edit_on_new": config.no_edit_on_new,
        "priority": {"auto_compact": config.priority.auto_compact},
    }


def dump_config(config: MothConfig) -> str:
    return yaml.safe_dump(config_to_dict(config), default_flow_style=False, sort_keys=False)
