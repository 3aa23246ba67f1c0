"""
Filesystem links between game folders and the shared store.
"""

from savelink.core.links.manager import (
    ensure_link,
    is_link,
    link_targets,
    merge_directory,
    repair_file_links,
)
from savelink.core.links.models import LinkResult, LinkStatus

__all__ = [
    "LinkResult",
    "LinkStatus",
    "ensure_link",
    "is_link",
    "link_targets",
    "merge_directory",
    "repair_file_links",
]
