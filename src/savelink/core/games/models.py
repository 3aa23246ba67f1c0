"""
Data models for game folders and their sync targets.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath


class TargetKind(str, Enum):
    """Whether a sync target is a single file or a whole directory."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class GameFolder:
    """
    A game installation found under the launcher root.

    Derived from the filesystem layout on every run; never persisted.

    Attributes:
        path: The game folder
        display_name: Name shown on shortcuts (the folder name)
        executable: The detected game executable
        game_id: Lower-cased executable stem, e.g. "th07"
    """

    path: Path
    display_name: str
    executable: Path
    game_id: str


@dataclass(frozen=True)
class SyncTarget:
    """
    A path inside a game folder that is tracked in the shared store.

    Attributes:
        relative_path: POSIX-style path relative to the game folder
        kind: File or directory
    """

    relative_path: str
    kind: TargetKind

    @classmethod
    def parse(cls, entry: str) -> SyncTarget:
        """
        Parse one entry of a target document.

        A leading "/" marks a directory, a bare name a file.

        Raises:
            ValueError: If the entry is empty, absolute or escapes the folder

        Example:
            >>> SyncTarget.parse("/replay")
            SyncTarget(relative_path='replay', kind=<TargetKind.DIRECTORY: 'directory'>)
        """
        raw = entry.strip().replace("\\", "/")
        kind = TargetKind.DIRECTORY if raw.startswith("/") else TargetKind.FILE
        rel = PurePosixPath(raw.strip("/"))

        if not rel.parts or str(rel) == ".":
            raise ValueError(f"Empty sync target: {entry!r}")
        if ".." in rel.parts or ":" in rel.parts[0]:
            raise ValueError(f"Sync target escapes the game folder: {entry!r}")

        return cls(relative_path=rel.as_posix(), kind=kind)

    def source_in(self, folder: Path) -> Path:
        """Live location of this target inside a game folder."""
        return folder.joinpath(*PurePosixPath(self.relative_path).parts)

    def tracked_in(self, store_dir: Path, game_id: str) -> Path:
        """Tracked location of this target inside the shared store."""
        return store_dir.joinpath(game_id, *PurePosixPath(self.relative_path).parts)
