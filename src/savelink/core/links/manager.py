"""
Link manager for game data.

Makes the shared store's copy of each sync target appear at the path the
game expects:

  directory targets  -- NTFS junction on Windows, symlink elsewhere
  file targets       -- hard link (same volume required)

Every operation is idempotent: an existing link is left alone, and running
twice on the same filesystem state yields the same end state without
duplicating or losing data.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import stat
import subprocess
from collections.abc import Collection
from pathlib import Path

from savelink.core.errors import LinkCreationError
from savelink.core.games.models import GameFolder, SyncTarget, TargetKind
from savelink.core.links.models import LinkResult, LinkStatus

logger = logging.getLogger(__name__)


def is_link(path: Path) -> bool:
    """Whether ``path`` is a symlink or a directory junction (reparse point)."""
    if path.is_symlink():
        return True
    isjunction = getattr(os.path, "isjunction", None)
    if isjunction is not None:
        return bool(isjunction(path))
    try:
        attrs = getattr(os.lstat(path), "st_file_attributes", 0)
    except OSError:
        return False
    return bool(attrs & stat.FILE_ATTRIBUTE_REPARSE_POINT)


def is_same_file(a: Path, b: Path) -> bool:
    """Whether two existing paths are hard links to the same file."""
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


def create_directory_link(link_path: Path, target_path: Path) -> None:
    """
    Create a directory-level link at ``link_path`` pointing at ``target_path``.

    Raises:
        LinkCreationError: If the OS refuses to create the link
    """
    if platform.system() == "Windows":
        result = subprocess.run(
            ["cmd", "/c", "mklink", "/J", str(link_path), str(target_path)],
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            raise LinkCreationError(
                f"mklink /J failed for {link_path}: {(result.stderr or result.stdout).strip()}",
                link=str(link_path),
            )
        return

    try:
        os.symlink(target_path, link_path, target_is_directory=True)
    except OSError as e:
        raise LinkCreationError(f"Cannot link {link_path}: {e}", link=str(link_path)) from e


def _move_file(src: Path, dst: Path) -> None:
    dst.parent.mkdir(parents=True, exist_ok=True)
    if dst.is_dir() and not is_link(dst):
        raise LinkCreationError(f"Cannot replace directory {dst} with a file", path=str(dst))
    if dst.exists() or dst.is_symlink():
        dst.unlink()
    shutil.move(str(src), str(dst))


def merge_directory(source: Path, destination: Path) -> int:
    """
    Move the contents of ``source`` into ``destination`` file by file.

    Same-named files in the destination are replaced. The emptied source
    tree is removed afterwards.

    Returns:
        Number of files moved
    """
    moved = 0
    for path in sorted(source.rglob("*")):
        if path.is_dir() and not path.is_symlink():
            (destination / path.relative_to(source)).mkdir(parents=True, exist_ok=True)
            continue
        _move_file(path, destination / path.relative_to(source))
        moved += 1

    for directory in sorted(source.rglob("*"), reverse=True):
        if directory.is_dir():
            directory.rmdir()
    source.rmdir()
    return moved


def _ensure_directory_link(link_path: Path, target_path: Path) -> LinkResult:
    def result(status: LinkStatus, reason: str = "") -> LinkResult:
        return LinkResult(link_path, target_path, TargetKind.DIRECTORY, status, reason)

    if link_path.exists() and not link_path.is_dir():
        return result(LinkStatus.FAILED, f"{link_path} is a file, expected a directory")
    if target_path.exists() and not target_path.is_dir():
        return result(LinkStatus.FAILED, f"{target_path} is a file, expected a directory")

    target_path.mkdir(parents=True, exist_ok=True)
    link_path.parent.mkdir(parents=True, exist_ok=True)

    if not link_path.is_dir():
        create_directory_link(link_path, target_path)
        return result(LinkStatus.LINKED)

    # Local data moves into the store only once the link exists
    staging = link_path.with_name(f"{link_path.name}.savelink-moving")
    link_path.rename(staging)
    try:
        create_directory_link(link_path, target_path)
    except (LinkCreationError, OSError):
        staging.rename(link_path)
        raise
    moved = merge_directory(staging, target_path)
    logger.info("Moved %d files from %s into %s", moved, link_path, target_path)
    return result(LinkStatus.LINKED)


def _ensure_file_link(link_path: Path, target_path: Path) -> LinkResult:
    def result(status: LinkStatus, reason: str = "") -> LinkResult:
        return LinkResult(link_path, target_path, TargetKind.FILE, status, reason)

    if link_path.is_dir() or target_path.is_dir():
        return result(LinkStatus.FAILED, "expected a file but found a directory")

    if link_path.exists() and target_path.exists() and is_same_file(link_path, target_path):
        return result(LinkStatus.SKIPPED, "already hard-linked")

    if not link_path.exists() and not target_path.exists():
        return result(LinkStatus.SKIPPED, "nothing to link yet")

    moved = False
    if link_path.exists():
        _move_file(link_path, target_path)
        moved = True
    else:
        target_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        link_path.parent.mkdir(parents=True, exist_ok=True)
        os.link(target_path, link_path)
    except OSError as e:
        if moved:
            # Put the game's file back where it was so nothing goes missing
            shutil.copy2(target_path, link_path)
        raise LinkCreationError(f"Cannot hard-link {link_path}: {e}", link=str(link_path)) from e

    return result(LinkStatus.LINKED)


def ensure_link(link_path: Path, target_path: Path, kind: TargetKind) -> LinkResult:
    """
    Link a game's live data location to its tracked store location.

    Args:
        link_path: Where the game reads and writes the data
        target_path: Where the shared store keeps it
        kind: File (hard link) or directory (junction / symlink)

    Returns:
        LinkResult; failures are reported, logged and never raised
    """
    link_path = Path(link_path)
    target_path = Path(target_path)

    if is_link(link_path):
        return LinkResult(link_path, target_path, kind, LinkStatus.SKIPPED, "already linked")

    try:
        if kind == TargetKind.DIRECTORY:
            outcome = _ensure_directory_link(link_path, target_path)
        else:
            outcome = _ensure_file_link(link_path, target_path)
    except (LinkCreationError, OSError) as e:
        outcome = LinkResult(link_path, target_path, kind, LinkStatus.FAILED, str(e))

    if outcome.failed:
        logger.error("Link failed for %s: %s", link_path, outcome.reason)
    elif outcome.status == LinkStatus.LINKED:
        logger.info("Linked %s -> %s", link_path, target_path)
    else:
        logger.debug("Skipped %s: %s", link_path, outcome.reason)
    return outcome


def link_targets(game: GameFolder, targets: list[SyncTarget], store_dir: Path) -> list[LinkResult]:
    """Ensure links for every sync target of a game; failures don't stop the rest."""
    return [
        ensure_link(target.source_in(game.path), target.tracked_in(store_dir, game.game_id),
                    target.kind)
        for target in targets
    ]


def repair_file_links(
    game: GameFolder,
    targets: list[SyncTarget],
    store_dir: Path,
    rewritten: Collection[str] = (),
) -> list[LinkResult]:
    """
    Re-join file targets whose hard link was detached.

    A link detaches when either side is replaced instead of written in place:
    git does that on checkout, pull and reset, and many games save by writing
    a temp file and renaming it over the old one. The side that was replaced
    holds the newer data:

      store path in ``rewritten``  -- git replaced it, the store copy wins
      otherwise                    -- the game replaced it, the game copy
                                      moves into the store

    Targets that are still linked are left alone.

    Args:
        rewritten: Store-relative paths (``<game_id>/<path>``) that the last
            sync replaced

    Returns:
        Results for the targets that needed repair
    """
    rewritten = set(rewritten)
    repaired: list[LinkResult] = []
    for target in targets:
        if target.kind != TargetKind.FILE:
            continue
        link_path = target.source_in(game.path)
        target_path = target.tracked_in(store_dir, game.game_id)
        if not (link_path.is_file() and target_path.is_file()):
            continue
        if is_same_file(link_path, target_path):
            continue

        store_wins = target_path.relative_to(store_dir).as_posix() in rewritten
        try:
            if store_wins:
                link_path.unlink()
            else:
                _move_file(link_path, target_path)
            os.link(target_path, link_path)
        except (LinkCreationError, OSError) as e:
            if not link_path.exists() and target_path.exists():
                shutil.copy2(target_path, link_path)
            outcome = LinkResult(link_path, target_path, TargetKind.FILE, LinkStatus.FAILED,
                                 str(e))
            logger.error("Could not repair link %s: %s", link_path, e)
        else:
            reason = "relinked to store copy" if store_wins else "game copy moved to store"
            outcome = LinkResult(link_path, target_path, TargetKind.FILE, LinkStatus.LINKED,
                                 reason)
            logger.info("Repaired hard link %s -> %s (%s)", link_path, target_path, reason)
        repaired.append(outcome)
    return repaired
