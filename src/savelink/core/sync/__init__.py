"""
Pre-launch and post-launch synchronization of the shared store.

Example:
    >>> from savelink.core.sync import SyncOrchestrator
    >>> sync = SyncOrchestrator(git, ctx, config.sync)
    >>> pre = sync.pre_sync()
    >>> post = sync.post_sync()
    >>> print(pre.summary(), post.summary())
"""

from savelink.core.sync.backup import create_snapshot
from savelink.core.sync.models import (
    ConflictChoice,
    PostSyncOutcome,
    PostSyncReport,
    PreSyncOutcome,
    PreSyncReport,
)
from savelink.core.sync.service import ConflictResolver, SyncOrchestrator

__all__ = [
    "ConflictChoice",
    "ConflictResolver",
    "PostSyncOutcome",
    "PostSyncReport",
    "PreSyncOutcome",
    "PreSyncReport",
    "SyncOrchestrator",
    "create_snapshot",
]
