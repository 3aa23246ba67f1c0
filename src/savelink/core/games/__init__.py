"""
Game folders and their sync targets.

Modules:
    models: GameFolder, SyncTarget, TargetKind
    discovery: Scan the launcher root for game executables
    targets: Load, fetch and cache per-game target documents
"""

from savelink.core.games.discovery import discover_games, find_game_executable, inspect_folder
from savelink.core.games.models import GameFolder, SyncTarget, TargetKind
from savelink.core.games.targets import load_targets, parse_targets

__all__ = [
    "GameFolder",
    "SyncTarget",
    "TargetKind",
    "discover_games",
    "find_game_executable",
    "inspect_folder",
    "load_targets",
    "parse_targets",
]
