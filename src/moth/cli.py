"""Click CLI entrypoint: `moth <subcommand>`.

Every call is stateless: the .moth/ directory is located from --project-dir
(default: cwd) on each invocation. JSON output by default, --human for text.
"""

from __future__ import annotations

import logging
import sys

import click
from click.shell_completion import CompletionItem

from moth.output import output

SHELLS = ("bash", "zsh", "fish")


def _project_dir(ctx: click.Context) -> str | None:
    return ctx.find_root().params.get("project_dir")


def _complete_issue_ids(ctx: click.Context, param: click.Parameter, incomplete: str) -> list[CompletionItem]:
    from moth.commands._helpers import open_store
    from moth.errors import MothError
    try:
        issues = open_store(_project_dir(ctx)).all_issues()
    except MothError:
        return []
    return [CompletionItem(i.id, help=i.title) for i in issues if i.id.startswith(incomplete)]


def _complete_statuses(ctx: click.Context, param: click.Parameter, incomplete: str) -> list[CompletionItem]:
    from moth.commands._helpers import load_project_config
    from moth.errors import MothError
    try:
        config = load_project_config(_project_dir(ctx))
    except MothError:
        return []
    return [CompletionItem(s.name) for s in config.statuses if s.name.startswith(incomplete)]


@click.group()
@click.version_option(package_name="moth")
@click.option("-C", "--project-dir", default=None, type=click.Path(file_okay=False),
              help="Start looking for .moth/ here instead of the current directory")
@click.option("--human", is_flag=True, help="Human-readable output instead of JSON")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr")
@click.pass_context
def cli(ctx: click.Context, project_dir: str | None, human: bool, verbose: bool) -> None:
    """moth: a simple file-based issue tracker."""
    ctx.ensure_object(dict)
    ctx.obj["project_dir"] = project_dir
    ctx.obj["human"] = human
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# =========================================================================
# Setup
# =========================================================================

@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Initialize .moth/ directory."""
    from moth.commands import init as _init
    output(_init(ctx.obj["project_dir"]), ctx.obj["human"])


# =========================================================================
# Issues
# =========================================================================

@cli.command()
@click.argument("title")
@click.option("-s", "--severity", default=None, help="Severity (crit, high, med, low)")
@click.option("--no-edit", is_flag=True, help="Skip opening editor")
@click.option("--start", is_flag=True, help="Start the issue immediately (move to the second status)")
@click.pass_context
def new(ctx: click.Context, title: str, severity: str | None, no_edit: bool, start: bool) -> None:
    """Create a new issue."""
    from moth.commands import new as _new
    output(_new(title, severity, no_edit, start, ctx.obj["project_dir"]), ctx.obj["human"])


@cli.command("ls")
@click.option("-t", "--status", default=None, shell_complete=_complete_statuses, help="Filter by status")
@click.option("-a", "--all", "show_all", is_flag=True, help="Show all including done")
@click.option("-s", "--severity", default=None, help="Filter by severity (crit, high, med, low)")
@click.pass_context
def ls(ctx: click.Context, status: str | None, show_all: bool, severity: str | None) -> None:
    """List issues."""
    from moth.commands import list_issues as _list_issues
    output(_list_issues(status, show_all, severity, ctx.obj["project_dir"]), ctx.obj["human"])


@cli.command()
@click.argument("issue_id", required=False, shell_complete=_complete_issue_ids)
@click.pass_context
def show(ctx: click.Context, issue_id: str | None) -> None:
    """Show issue details (default: the current issue)."""
    from moth.commands import show as _show
    output(_show(issue_id, ctx.obj["project_dir"]), ctx.obj["human"])


@cli.command()
@click.argument("issue_id", shell_complete=_complete_issue_ids)
@click.pass_context
def start(ctx: click.Context, issue_id: str) -> None:
    """Move issue to the second status and make it current."""
    from moth.commands import start as _start
    output(_start(issue_id, ctx.obj["project_dir"]), ctx.obj["human"])


@cli.command()
@click.argument("issue_id", required=False, shell_complete=_complete_issue_ids)
@click.pass_context
def done(ctx: click.Context, issue_id: str | None) -> None:
    """Move issue (default: the current one) to the last status."""
    from moth.commands import done as _done
    output(_done(issue_id, ctx.obj["project_dir"]), ctx.obj["human"])


@cli.command()
@click.argument("issue_id", shell_complete=_complete_issue_ids)
@click.argument("status", shell_complete=_complete_statuses)
@click.pass_context
def mv(ctx: click.Context, issue_id: str, status: str) -> None:
    """Move issue to a specific status."""
    from moth.commands import move as _move
    output(_move(issue_id, status, ctx.obj["project_dir"]), ctx.obj["human"])


@cli.command()
@click.argument("issue_id", shell_complete=_complete_issue_ids)
@click.pass_context
def edit(ctx: click.Context, issue_id: str) -> None:
    """Edit issue in the configured editor."""
    from moth.commands import edit as _edit
    output(_edit(issue_id, ctx.obj["project_dir"]), ctx.obj["human"])


@cli.command()
@click.argument("issue_id", shell_complete=_complete_issue_ids)
@click.pass_context
def rm(ctx: click.Context, issue_id: str) -> None:
    """Delete an issue."""
    from moth.commands import remove as _remove
    output(_remove(issue_id, ctx.obj["project_dir"]), ctx.obj["human"])


@cli.command()
@click.argument("issue_id", shell_complete=_complete_issue_ids)
@click.argument("level", type=click.Choice(["crit", "high", "med", "low"]))
@click.pass_context
def severity(ctx: click.Context, issue_id: str, level: str) -> None:
    """Change issue severity."""
    from moth.commands import set_severity as _set_severity
    output(_set_severity(issue_id, level, ctx.obj["project_dir"]), ctx.obj["human"])


# =========================================================================
# Priority
# =========================================================================

@cli.command()
@click.argument("issue_id", shell_complete=_complete_issue_ids)
@click.argument("position")
@click.argument("other_id", required=False, shell_complete=_complete_issue_ids)
@click.option("--compact/--no-compact", default=None, help="Compact after repositioning (default: config)")
@click.pass_context
def priority(ctx: click.Context, issue_id: str, position: str, other_id: str | None, compact: bool | None) -> None:
    """Set priority order: top, bottom, above OTHER, below OTHER, or a number."""
    from moth.commands import prioritize as _prioritize
    output(_prioritize(issue_id, position, other_id, compact, ctx.obj["project_dir"]), ctx.obj["human"])


@cli.command()
@click.argument("status", required=False, shell_complete=_complete_statuses)
@click.pass_context
def compact(ctx: click.Context, status: str | None) -> None:
    """Compact priority numbering (default: every prioritized status)."""
    from moth.commands import compact as _compact
    output(_compact(status, ctx.obj["project_dir"]), ctx.obj["human"])


# =========================================================================
# Git
# =========================================================================

@cli.group()
def hook() -> None:
    """Manage the git prepare-commit-msg hook."""


@hook.command("install")
@click.option("--force", is_flag=True, help="Overwrite existing hook")
@click.option("--append", is_flag=True, help="Append to existing hook")
@click.pass_context
def hook_install(ctx: click.Context, force: bool, append: bool) -> None:
    """Install prepare-commit-msg hook."""
    from moth.git.hook import install as _install
    output(_install(force, append, ctx.obj["project_dir"]), ctx.obj["human"])


@hook.command("uninstall")
@click.pass_context
def hook_uninstall(ctx: click.Context) -> None:
    """Uninstall prepare-commit-msg hook."""
    from moth.git.hook import uninstall as _uninstall
    output(_uninstall(ctx.obj["project_dir"]), ctx.obj["human"])


@cli.command()
@click.argument("message")
def prefix(message: str) -> None:
    """Print the issue id a commit message is tagged with; exit 1 if none."""
    from moth.git.prefix import extract_issue_id
    issue_id = extract_issue_id(message)
    if issue_id is None:
        sys.exit(1)
    click.echo(issue_id)


@cli.command()
@click.option("--since", default=None, help="Start after this commit")
@click.option("--until", default=None, help="End at this commit (default: HEAD)")
@click.pass_context
def report(ctx: click.Context, since: str | None, until: str | None) -> None:
    """Extract issue change history from git commits as CSV."""
    import io

    from moth.errors import MothError
    from moth.git.report import report_rows, write_report
    try:
        rows = list(report_rows(since, until, ctx.obj["project_dir"]))
    except MothError as exc:
        output({"error": str(exc)}, ctx.obj["human"])
        return
    buf = io.StringIO()
    write_report(iter(rows), buf)
    click.echo(buf.getvalue(), nl=False)


@cli.command()
@click.argument("shell", type=click.Choice(SHELLS))
def completions(shell: str) -> None:
    """Print a shell completion script (bash, zsh or fish)."""
    from click.shell_completion import get_completion_class
    comp_cls = get_completion_class(shell)
    comp = comp_cls(cli, {}, "moth", "_MOTH_COMPLETE")
    click.echo(comp.source())
