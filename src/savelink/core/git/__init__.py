"""
Version-control adapter for the shared store.

Example:
    >>> from savelink.core.git import GitAdapter
    >>> git = GitAdapter(Path("saves"))
    >>> conflicted = [e.path for e in git.status() if e.is_unmerged]
"""

from savelink.core.git.adapter import GitAdapter
from savelink.core.git.models import (
    UNMERGED_CODES,
    GitResult,
    StatusEntry,
    parse_porcelain_status,
    unmerged_paths,
)

__all__ = [
    "GitAdapter",
    "GitResult",
    "StatusEntry",
    "UNMERGED_CODES",
    "parse_porcelain_status",
    "unmerged_paths",
]
