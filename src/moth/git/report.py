"""Issue change history from git commits, as CSV.

Walks commits oldest first, snapshots .moth/<status>/*.md at each one and
emits an event per issue whose snapshot changed: created, moved (status
changed), edited (severity, slug or body changed) or deleted. Order-prefix
changes alone are not reported.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Iterator

from moth.commands._helpers import load_project_config
from moth.defaults import ISSUE_SUFFIX, MOTH_DIR_NAME
from moth.errors import FilenameParseError
from moth.git._runner import run_git
from moth.issue import decode

CSV_HEADER = (
    "commit_sha",
    "commit_date",
    "committer_name",
    "committer_email",
    "story_id",
    "severity",
    "column",
    "event",
)

_FIELD_SEP = "\x1f"


@dataclass(frozen=True)
class Commit:
    sha: str
    timestamp: int
    committer_name: str
    committer_email: str

    @property
    def date(self) -> str:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class StoryState:
    id: str
    severity: str
    slug: str
    column: str
    blob: str


def list_commits(repo_dir: Path, since: str | None = None, until: str | None = None) -> list[Commit]:
    """Commits reachable from until (default HEAD) and not from since, oldest first."""
    end = until or "HEAD"
    rev_range = f"{since}..{end}" if since else end
    out = run_git(
        ["log", "--reverse", f"--format=%H{_FIELD_SEP}%ct{_FIELD_SEP}%cn{_FIELD_SEP}%ce", rev_range],
        repo_dir,
    )
    commits: list[Commit] = []
    for line in out.splitlines():
        if not line:
            continue
        sha, ts, name, email = line.split(_FIELD_SEP)
        commits.append(Commit(sha, int(ts), name, email))
    return commits


def parse_tree_listing(listing: str) -> dict[str, StoryState]:
    """Turn `git ls-tree -r` output for .moth/ into issue states keyed by id."""
    stories: dict[str, StoryState] = {}
    for line in listing.splitlines():
        meta, sep, path = line.partition("\t")
        if not sep:
            continue
        parts = path.split("/")
        if len(parts) != 3 or parts[0] != MOTH_DIR_NAME:
            continue
        column, filename = parts[1], parts[2]
        if column.startswith(".") or not filename.endswith(ISSUE_SUFFIX):
            continue
        fields = meta.split()
        if len(fields) != 3 or fields[1] != "blob":
            continue
        try:
            name = decode(filename)
        except FilenameParseError:
            continue
        stories[name.id] = StoryState(name.id, name.severity.value, name.slug, column, fields[2])
    return stories


def snapshot(repo_dir: Path, sha: str) -> dict[str, StoryState]:
    return parse_tree_listing(run_git(["ls-tree", "-r", sha, "--", MOTH_DIR_NAME], repo_dir))


def detect_changes(
    prev: dict[str, StoryState],
    current: dict[str, StoryState],
) -> list[tuple[str, str, StoryState]]:
    """Compare two snapshots. Returns (id, event, state) sorted by id."""
    changes: list[tuple[str, str, StoryState]] = []
    for story_id, story in current.items():
        before = prev.get(story_id)
        if before is None:
            changes.append((story_id, "created", story))
        elif before.column != story.column:
            changes.append((story_id, "moved", story))
        elif (before.severity, before.slug, before.blob) != (story.severity, story.slug, story.blob):
            changes.append((story_id, "edited", story))
    for story_id, story in prev.items():
        if story_id not in current:
            changes.append((story_id, "deleted", story))
    changes.sort(key=lambda c: c[0])
    return changes


def report_rows(
    since: str | None = None,
    until: str | None = None,
    project_dir: str | Path | None = None,
) -> Iterator[tuple[str, ...]]:
    repo_dir = load_project_config(project_dir).project_dir
    prev: dict[str, StoryState] = {}
    for commit in list_commits(repo_dir, since, until):
        current = snapshot(repo_dir, commit.sha)
        for story_id, event, story in detect_changes(prev, current):
            yield (
                commit.sha,
                commit.date,
                commit.committer_name,
                commit.committer_email,
                story_id,
                story.severity,
                story.column,
                event,
            )
        prev = current


def write_report(rows: Iterator[tuple[str, ...]], stream: IO[str]) -> int:
    """Write header + rows as CSV. Returns the number of data rows."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    count = 0
    for row in rows:
        writer.writerow(row)
        count += 1
    return count
