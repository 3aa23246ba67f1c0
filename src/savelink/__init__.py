"""
savelink - save-data sync launcher for desktop games.

Links each game's saves, replays and config files into a shared git
repository, pulls before play, launches the game and pushes after it exits.
"""

__version__ = "0.4.0"

from savelink.core.config.models import LauncherConfig
from savelink.core.context import RunContext
from savelink.core.sync.models import ConflictChoice, PostSyncOutcome, PreSyncOutcome

__all__ = [
    "ConflictChoice",
    "LauncherConfig",
    "PostSyncOutcome",
    "PreSyncOutcome",
    "RunContext",
    "__version__",
]
