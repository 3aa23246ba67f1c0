"""Game folder discovery under the launcher root."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from savelink.core.games.models import GameFolder

logger = logging.getLogger(__name__)


def find_game_executable(folder: Path, pattern: str) -> Path | None:
    """Return the first file in ``folder`` whose name matches ``pattern``."""
    regex = re.compile(pattern, re.IGNORECASE)
    try:
        candidates = sorted(p for p in folder.iterdir() if p.is_file() and regex.match(p.name))
    except OSError as e:
        logger.warning("Cannot scan %s: %s", folder, e)
        return None
    return candidates[0] if candidates else None


def inspect_folder(folder: Path, pattern: str) -> GameFolder | None:
    """Build a GameFolder for ``folder``, or None if it holds no game executable."""
    executable = find_game_executable(folder, pattern)
    if executable is None:
        return None
    return GameFolder(
        path=folder,
        display_name=folder.name,
        executable=executable,
        game_id=executable.stem.lower(),
    )


def discover_games(root: Path, pattern: str, skip: set[str] | None = None) -> list[GameFolder]:
    """
    Scan the immediate subfolders of ``root`` for game installations.

    Args:
        root: Launcher root directory
        pattern: Case-insensitive regex for the game executable name
        skip: Folder names to ignore (the store and state directories)

    Returns:
        Game folders sorted by folder name
    """
    skip = skip or set()
    games: list[GameFolder] = []

    for folder in sorted(root.iterdir()):
        if not folder.is_dir() or folder.name in skip or folder.name.startswith("."):
            continue
        game = inspect_folder(folder, pattern)
        if game is None:
            continue
        logger.debug("Found %s in %s", game.executable.name, folder)
        games.append(game)

    return games
