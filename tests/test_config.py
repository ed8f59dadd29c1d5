"""Tests for config loading, validation and .moth/ discovery."""

from __future__ import annotations

import pytest

from moth.config import (
    StatusDefinition,
    config_from_dict,
    default_config,
    dump_config,
    load_config,
)
from moth.defaults import find_moth_dir
from moth.errors import InvalidInputError, NotFoundError
from moth.issue import Severity


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("MOTH_DIR", raising=False)


def _raw(**overrides):
    raw = {
        "statuses": [
            {"name": "ready", "dir": "ready", "prioritized": True},
            {"name": "done", "dir": "done"},
        ],
        "default_severity": "med",
    }
    raw.update(overrides)
    return raw


class TestDefaultConfig:
    def test_three_statuses(self):
        config = default_config("/tmp/.moth")
        assert [s.name for s in config.statuses] == ["ready", "doing", "done"]
        assert config.first_status.name == "ready"
        assert config.second_status.name == "doing"
        assert config.last_status.name == "done"

    def test_only_ready_is_prioritized(self):
        config = default_config()
        assert [s.orderable for s in config.statuses] == [True, False, False]

    def test_defaults(self):
        config = default_config()
        assert config.default_severity is Severity.MED
        assert config.id_length == 5
        assert config.no_edit_on_new is False
        assert config.priority.auto_compact is False
        config.validate()

    def test_editor_from_env(self, monkeypatch):
        monkeypatch.setenv("EDITOR", "nano")
        assert default_config().editor == "nano"

    def test_get_status(self):
        config = default_config()
        assert config.get_status("doing") == StatusDefinition("doing", "doing")
        assert config.get_status("nope") is None


class TestConfigFromDict:
    def test_minimal(self, tmp_path):
        config = config_from_dict(_raw(), tmp_path)
        assert len(config.statuses) == 2
        assert config.statuses[0].prioritized is True
        assert config.moth_dir == tmp_path

    def test_default_priority_alias(self, tmp_path):
        raw = _raw()
        del raw["default_severity"]
        raw["default_priority"] = "high"
        assert config_from_dict(raw, tmp_path).default_severity is Severity.HIGH

    def test_dir_defaults_to_name(self, tmp_path):
        raw = _raw(statuses=[{"name": "todo"}, {"name": "shipped"}])
        assert config_from_dict(raw, tmp_path).statuses[1].dir == "shipped"

    def test_auto_compact(self, tmp_path):
        config = config_from_dict(_raw(priority={"auto_compact": True}), tmp_path)
        assert config.priority.auto_compact is True

    def test_requires_two_statuses(self, tmp_path):
        with pytest.raises(InvalidInputError, match="at least 2 statuses"):
            config_from_dict(_raw(statuses=[{"name": "only"}]), tmp_path)

    def test_missing_statuses(self, tmp_path):
        with pytest.raises(InvalidInputError):
            config_from_dict({"default_severity": "med"}, tmp_path)

    def test_duplicate_status_names(self, tmp_path):
        with pytest.raises(InvalidInputError, match="Duplicate"):
            config_from_dict(_raw(statuses=[{"name": "a"}, {"name": "a"}]), tmp_path)

    def test_bad_severity(self, tmp_path):
        with pytest.raises(InvalidInputError, match="default_severity"):
            config_from_dict(_raw(default_severity="invalid"), tmp_path)

    @pytest.mark.parametrize("length", [2, 11])
    def test_id_length_bounds(self, tmp_path, length):
        with pytest.raises(InvalidInputError, match="id_length"):
            config_from_dict(_raw(id_length=length), tmp_path)

    def test_non_integer_id_length(self, tmp_path):
        with pytest.raises(InvalidInputError):
            config_from_dict(_raw(id_length="five"), tmp_path)


class TestLoadConfig:
    def test_round_trip_through_yaml(self, tmp_path):
        original = default_config(tmp_path)
        (tmp_path / "config.yml").write_text(dump_config(original))
        loaded = load_config(tmp_path)
        assert loaded.statuses == original.statuses
        assert loaded.default_severity == original.default_severity
        assert loaded.id_length == original.id_length

    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError, match="moth init"):
            load_config(tmp_path)

    def test_malformed_yaml(self, tmp_path):
        (tmp_path / "config.yml").write_text("statuses: [unclosed\n")
        with pytest.raises(InvalidInputError):
            load_config(tmp_path)

    def test_top_level_must_be_mapping(self, tmp_path):
        (tmp_path / "config.yml").write_text("- a\n- b\n")
        with pytest.raises(InvalidInputError, match="mapping"):
            load_config(tmp_path)


class TestFindMothDir:
    def test_finds_in_start_dir(self, tmp_path):
        (tmp_path / ".moth").mkdir()
        assert find_moth_dir(tmp_path) == (tmp_path / ".moth").resolve()

    def test_walks_up(self, tmp_path):
        (tmp_path / ".moth").mkdir()
        deep = tmp_path / "a" / "b" / "c"
        deep.mkdir(parents=True)
        assert find_moth_dir(deep) == (tmp_path / ".moth").resolve()

    def test_not_found(self, tmp_path):
        # tmp_path lives under a system temp dir with no .moth above it
        with pytest.raises(NotFoundError, match="moth init"):
            find_moth_dir(tmp_path)

    def test_env_override(self, tmp_path, monkeypatch):
        target = tmp_path / "elsewhere"
        target.mkdir()
        monkeypatch.setenv("MOTH_DIR", str(target))
        assert find_moth_dir(tmp_path / "anything") == target.resolve()

    def test_env_override_missing(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MOTH_DIR", str(tmp_path / "missing"))
        with pytest.raises(NotFoundError):
            find_moth_dir(tmp_path)
