"""moth: a file-based issue tracker.

Issues are markdown files under .moth/<status>/; their filenames carry the
id, severity, manual order and title slug.
"""

from moth.errors import MothError
from moth.issue import Issue, Severity
from moth.store import IssueStore, Position

__all__ = ["Issue", "IssueStore", "MothError", "Position", "Severity"]
