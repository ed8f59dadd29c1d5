"""Commands: one function per CLI verb, each returning a result dict.

Failures come back as {"error": "..."} instead of raising, so the CLI and
any other caller share one output path.
"""

from .edit_issue import edit
from .init_project import init
from .list_issues import list_issues
from .new_issue import new
from .priority import compact, prioritize
from .remove_issue import remove
from .severity import set_severity
from .show_issue import show
from .transitions import done, move, start

__all__: list[str] = [
    "compact",
    "done",
    "edit",
    "init",
    "list_issues",
    "move",
    "new",
    "prioritize",
    "remove",
    "set_severity",
    "show",
    "start",
]
