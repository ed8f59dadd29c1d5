"""Tests for git integration: commit prefix, prepare-commit-msg hook, report."""

from __future__ import annotations

import io
import os
import shutil
import subprocess

import pytest

from moth import commands
from moth.git import hook
from moth.git.prefix import extract_issue_id
from moth.git.report import (
    CSV_HEADER,
    Commit,
    StoryState,
    detect_changes,
    parse_tree_listing,
    report_rows,
    write_report,
)

needs_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.delenv("MOTH_DIR", raising=False)
    commands.init(tmp_path)
    (tmp_path / ".git").mkdir()
    return tmp_path


def _hook_file(project):
    return project / ".git" / "hooks" / "prepare-commit-msg"


# ---------------------------------------------------------------------------
# prefix
# ---------------------------------------------------------------------------


class TestExtractIssueId:
    @pytest.mark.parametrize(
        "message,expected",
        [
            ("[x7k2m] Fix the login form", "x7k2m"),
            ("  [abc] leading space", "abc"),
            ("[abc]no space", "abc"),
            ("Fix the login form", None),
            ("Fix [abc] in the middle", None),
            ("[ABC] uppercase", None),
            ("[1ab] digit first", None),
            ("[] empty", None),
            ("", None),
        ],
    )
    def test_cases(self, message, expected):
        assert extract_issue_id(message) == expected


# ---------------------------------------------------------------------------
# hook install / uninstall
# ---------------------------------------------------------------------------


class TestHookInstall:
    def test_fresh_install(self, project):
        result = hook.install(project_dir=project)
        assert result["status"] == "installed"
        content = _hook_file(project).read_text()
        assert content.startswith("#!/bin/sh\n")
        assert hook.HOOK_MARKER in content
        if os.name != "nt":
            assert os.access(_hook_file(project), os.X_OK)

    def test_reinstall_is_noop(self, project):
        hook.install(project_dir=project)
        assert hook.install(project_dir=project)["status"] == "already_installed"

    def test_foreign_hook_needs_flag(self, project):
        _hook_file(project).parent.mkdir(parents=True)
        _hook_file(project).write_text("#!/bin/sh\necho custom\n")
        result = hook.install(project_dir=project)
        assert "--force" in result["error"]
        assert _hook_file(project).read_text() == "#!/bin/sh\necho custom\n"

    def test_append_keeps_foreign_content(self, project):
        _hook_file(project).parent.mkdir(parents=True)
        _hook_file(project).write_text("#!/bin/sh\necho custom\n")
        assert hook.install(append=True, project_dir=project)["status"] == "appended"
        content = _hook_file(project).read_text()
        assert "echo custom" in content
        assert hook.HOOK_END_MARKER in content

    def test_force_replaces(self, project):
        _hook_file(project).parent.mkdir(parents=True)
        _hook_file(project).write_text("#!/bin/sh\necho custom\n")
        assert hook.install(force=True, project_dir=project)["status"] == "replaced"
        assert _hook_file(project).read_text() == hook.HOOK_SCRIPT

    def test_requires_moth_project(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MOTH_DIR", raising=False)
        (tmp_path / ".git").mkdir()
        assert "moth init" in hook.install(project_dir=tmp_path)["error"]


class TestHookUninstall:
    def test_absent(self, project):
        assert hook.uninstall(project_dir=project)["status"] == "absent"

    def test_removes_own_file(self, project):
        hook.install(project_dir=project)
        assert hook.uninstall(project_dir=project)["status"] == "removed"
        assert not _hook_file(project).exists()

    def test_keeps_foreign_section(self, project):
        _hook_file(project).parent.mkdir(parents=True)
        _hook_file(project).write_text("#!/bin/sh\necho custom\n")
        hook.install(append=True, project_dir=project)
        assert hook.uninstall(project_dir=project)["status"] == "section_removed"
        content = _hook_file(project).read_text()
        assert content == "#!/bin/sh\necho custom\n"

    def test_refuses_foreign_hook(self, project):
        _hook_file(project).parent.mkdir(parents=True)
        _hook_file(project).write_text("#!/bin/sh\necho custom\n")
        assert "doesn't appear to be a moth hook" in hook.uninstall(project_dir=project)["error"]
        assert _hook_file(project).exists()


# ---------------------------------------------------------------------------
# report: pure parts
# ---------------------------------------------------------------------------


LISTING = (
    "100644 blob 1111111111111111111111111111111111111111\t.moth/config.yml\n"
    "100644 blob 2222222222222222222222222222222222222222\t.moth/ready/001-aaa-high-fix_login.md\n"
    "100644 blob 3333333333333333333333333333333333333333\t.moth/doing/bbb-med-dark-mode.md\n"
    "100644 blob 4444444444444444444444444444444444444444\t.moth/ready/notes.md\n"
    "100644 blob 5555555555555555555555555555555555555555\t.moth/.current\n"
)


def _state(story_id, column="ready", severity="med", slug="x", blob="b1"):
    return StoryState(story_id, severity, slug, column, blob)


class TestParseTreeListing:
    def test_extracts_issue_files(self):
        stories = parse_tree_listing(LISTING)
        assert sorted(stories) == ["aaa", "bbb"]
        assert stories["aaa"] == StoryState("aaa", "high", "fix_login", "ready", "2" * 40)
        assert stories["bbb"].slug == "dark_mode"
        assert stories["bbb"].column == "doing"

    def test_empty(self):
        assert parse_tree_listing("") == {}


class TestDetectChanges:
    def test_created_and_deleted(self):
        changes = detect_changes({"old": _state("old")}, {"new": _state("new")})
        assert [(c[0], c[1]) for c in changes] == [("new", "created"), ("old", "deleted")]

    def test_moved(self):
        changes = detect_changes({"a": _state("a")}, {"a": _state("a", column="done")})
        assert [(c[0], c[1], c[2].column) for c in changes] == [("a", "moved", "done")]

    def test_edited_body_or_severity(self):
        prev = {"a": _state("a"), "b": _state("b")}
        current = {"a": _state("a", blob="b2"), "b": _state("b", severity="crit")}
        assert [c[1] for c in detect_changes(prev, current)] == ["edited", "edited"]

    def test_unchanged_ignored(self):
        assert detect_changes({"a": _state("a")}, {"a": _state("a")}) == []

    def test_sorted_by_id(self):
        current = {sid: _state(sid) for sid in ("ccc", "aaa", "bbb")}
        assert [c[0] for c in detect_changes({}, current)] == ["aaa", "bbb", "ccc"]


class TestWriteReport:
    def test_header_and_quoting(self):
        rows = [("abc123", "2024-01-02T03:04:05Z", "Doe, Jane", "j@x.io", "aaa", "high", "ready", "created")]
        stream = io.StringIO()
        assert write_report(iter(rows), stream) == 1
        lines = stream.getvalue().splitlines()
        assert lines[0] == ",".join(CSV_HEADER)
        assert lines[1] == 'abc123,2024-01-02T03:04:05Z,"Doe, Jane",j@x.io,aaa,high,ready,created'

    def test_commit_date_is_utc(self):
        assert Commit("sha", 0, "n", "e").date == "1970-01-01T00:00:00Z"


# ---------------------------------------------------------------------------
# report: against a real repository
# ---------------------------------------------------------------------------


def _git(repo, *args):
    subprocess.run(
        ["git", "-c", "commit.gpgsign=false", "-c", "core.hooksPath=/dev/null", *args],
        cwd=repo,
        check=True,
        capture_output=True,
    )


@needs_git
class TestReportRows:
    @pytest.fixture
    def repo(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MOTH_DIR", raising=False)
        monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
        monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
        for role in ("AUTHOR", "COMMITTER"):
            monkeypatch.setenv(f"GIT_{role}_NAME", "Test User")
            monkeypatch.setenv(f"GIT_{role}_EMAIL", "test@example.com")
        _git(tmp_path, "init", "-q")
        commands.init(tmp_path)
        return tmp_path

    def _commit(self, repo, message):
        _git(repo, "add", "-A")
        _git(repo, "commit", "-q", "-m", message)

    def test_created_moved_edited_deleted(self, repo):
        issue = commands.new("Fix login", severity="high", no_edit=True, project_dir=repo)["issue"]
        self._commit(repo, "create")
        commands.start(issue["id"], project_dir=repo)
        self._commit(repo, "start")
        commands.set_severity(issue["id"], "low", project_dir=repo)
        self._commit(repo, "lower")
        commands.remove(issue["id"], project_dir=repo)
        self._commit(repo, "remove")

        rows = list(report_rows(project_dir=repo))
        assert [(r[4], r[5], r[6], r[7]) for r in rows] == [
            (issue["id"], "high", "ready", "created"),
            (issue["id"], "high", "doing", "moved"),
            (issue["id"], "low", "doing", "edited"),
            (issue["id"], "low", "doing", "deleted"),
        ]
        assert {r[2] for r in rows} == {"Test User"}

    def test_order_change_not_reported(self, repo):
        issue = commands.new("Reorder me", no_edit=True, project_dir=repo)["issue"]
        self._commit(repo, "create")
        commands.prioritize(issue["id"], "3", project_dir=repo)
        self._commit(repo, "prioritize")

        rows = list(report_rows(project_dir=repo))
        assert [r[7] for r in rows] == ["created"]

    def test_since_limits_range(self, repo):
        issue = commands.new("First", no_edit=True, project_dir=repo)["issue"]
        self._commit(repo, "create")
        first_sha = subprocess.run(
            ["git", "rev-parse", "HEAD"], cwd=repo, check=True, capture_output=True, text=True
        ).stdout.strip()
        commands.start(issue["id"], project_dir=repo)
        self._commit(repo, "start")

        rows = list(report_rows(since=first_sha, project_dir=repo))
        # the walk starts from an empty snapshot after `since`
        assert [r[7] for r in rows] == ["created"]
        assert rows[0][6] == "doing"
