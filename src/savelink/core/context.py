"""
Run context shared by every component.

A RunContext replaces process-wide state: it carries the launcher root,
the shared store location, the state directory and the log sink. Components
receive it explicitly and pass paths (never a changed working directory) to
the processes they start.
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

STATE_DIR_NAME = ".savelink"
MARKER_NAME = "setup-complete"
LOG_NAME = "savelink.log"


@dataclass
class RunContext:
    """
    Paths and handles for one launcher run.

    Attributes:
        root: Directory holding the game folders (and the launcher)
        store_name: Name of the shared store directory under root
        logger: Logger used as the operation log sink
    """

    root: Path
    store_name: str = "saves"
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("savelink"))

    def __post_init__(self) -> None:
        self.root = Path(self.root).resolve()

    @property
    def store_dir(self) -> Path:
        """The git-tracked shared store."""
        return self.root / self.store_name

    @property
    def state_dir(self) -> Path:
        """Directory for launcher state (marker, log, caches, backups)."""
        return self.root / STATE_DIR_NAME

    @property
    def marker_path(self) -> Path:
        return self.state_dir / MARKER_NAME

    @property
    def log_file(self) -> Path:
        return self.state_dir / LOG_NAME

    @property
    def targets_dir(self) -> Path:
        """Cached per-game sync target documents."""
        return self.state_dir / "targets"

    @property
    def backups_dir(self) -> Path:
        return self.state_dir / "backups"

    @property
    def machine_name(self) -> str:
        return socket.gethostname() or "unknown-host"

    def is_setup_complete(self) -> bool:
        """Whether the setup marker exists for this root."""
        return self.marker_path.is_file()

    def write_marker(self) -> Path:
        """Persist the setup marker."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().isoformat(timespec="seconds")
        self.marker_path.write_text(f"{stamp} {self.machine_name}\n", encoding="utf-8")
        return self.marker_path

