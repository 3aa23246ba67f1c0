"""
Data models for the launch controller.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class LaunchReport:
    """
    Result of one play session.

    Attributes:
        executable: The executable that was started
        command: Full command line, including any runner prefix
        exit_code: Exit code of the game process
        settle_delay: Seconds waited after exit
        patched: Whether a patch launcher was used instead of the game executable
    """

    executable: Path
    command: tuple[str, ...]
    exit_code: int
    settle_delay: float
    patched: bool = False
