"""Backup snapshots taken before a destructive remote-wins overwrite."""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


def snapshot_name(now: datetime | None = None) -> str:
    return (now or datetime.now()).strftime("%Y%m%d-%H%M%S")


def create_snapshot(store_dir: Path, backups_dir: Path, now: datetime | None = None) -> Path:
    """
    Copy the store working tree (without .git) to a timestamped directory.

    Snapshots are write-once: a name collision within the same second gets
    a numeric suffix instead of overwriting. Nothing is ever pruned here.

    Returns:
        Path of the new snapshot
    """
    base = backups_dir / snapshot_name(now)
    destination = base
    counter = 1
    while destination.exists():
        destination = base.with_name(f"{base.name}-{counter}")
        counter += 1

    backups_dir.mkdir(parents=True, exist_ok=True)
    shutil.copytree(store_dir, destination, ignore=shutil.ignore_patterns(".git"))
    logger.info("Backed up %s to %s", store_dir, destination)
    return destination
