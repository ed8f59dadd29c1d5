"""CLI output formatting: JSON (default) and human-readable modes."""
from __future__ import annotations

import json
import sys

import click

_SEVERITY_STYLES: dict[str, dict[str, object]] = {
    "crit": {"fg": "red", "bold": True},
    "high": {"fg": "yellow"},
    "med": {},
    "low": {"fg": "blue"},
}


def output(data: dict[str, object], human: bool = False) -> None:
    """Print result as JSON (default) or human-readable text.

    Results carrying an "error" key go to stderr and exit with status 1.
    """
    if "error" in data:
        if human:
            click.echo(f"Error: {data['error']}", err=True)
        else:
            click.echo(json.dumps(data, indent=2, default=str), err=True)
        sys.exit(1)
    if human:
        click.echo(format_human(data))
    else:
        click.echo(json.dumps(data, indent=2, default=str))


def _severity(level: str) -> str:
    return click.style(level, **_SEVERITY_STYLES.get(level, {}))


def _issue_line(issue: dict[str, object]) -> str:
    order = issue.get("order")
    rank = f"{order:>3}. " if isinstance(order, int) else "     "
    return f"  {rank}{issue['id']} [{_severity(str(issue['severity']))}] {issue['title']}"


def format_human(data: dict[str, object]) -> str:
    """Render a command result for a terminal."""
    lines: list[str] = []

    # Listing grouped by status
    groups = data.get("statuses")
    if isinstance(groups, list) and groups and isinstance(groups[0], dict):
        for group in groups:
            issues = group.get("issues") or []
            if not issues:
                continue
            lines.append(str(group["status"]))
            lines.extend(_issue_line(i) for i in issues)

    # Single issue with body (show)
    issue = data.get("issue")
    if "content" in data and isinstance(issue, dict):
        lines.append(
            f"ID: {issue['id']} | Severity: {_severity(str(issue['severity']))} | Status: {issue['status']}"
        )
        lines.append(f"Title: {issue['title']}")
        lines.append("---")
        lines.append(str(data["content"]).rstrip("\n"))

    message = data.get("message")
    if isinstance(message, str) and message:
        lines.append(message)

    if not lines and not isinstance(groups, list):
        for k, v in data.items():
            if isinstance(v, (list, dict)):
                lines.append(f"{k}: {json.dumps(v, indent=2, default=str)}")
            else:
                lines.append(f"{k}: {v}")

    return "\n".join(lines)
