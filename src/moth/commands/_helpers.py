"""Shared helpers for moth commands."""

from __future__ import annotations

import os
from pathlib import Path

from moth.config import MothConfig, load_config
from moth.defaults import find_moth_dir
from moth.issue import Issue
from moth.store import IssueStore


def _start_dir(project_dir: str | Path | None) -> Path:
    return Path(project_dir) if project_dir else Path(os.getcwd())


def load_project_config(project_dir: str | Path | None = None) -> MothConfig:
    """Locate .moth/ from project_dir (default cwd) and load its config."""
    return load_config(find_moth_dir(_start_dir(project_dir)))


def open_store(project_dir: str | Path | None = None) -> IssueStore:
    return IssueStore(load_project_config(project_dir))


def describe(issue: Issue) -> str:
    """One-line summary: "x7k2m: Fix Login Bug [high]"."""
    return f"{issue.id}: {issue.title} [{issue.severity}]"
