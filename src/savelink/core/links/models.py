"""
Result models for link operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from savelink.core.games.models import TargetKind


class LinkStatus(str, Enum):
    """Outcome of ensuring one link."""

    LINKED = "linked"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class LinkResult:
    """
    Result of ensure_link.

    Attributes:
        link_path: Live location inside the game folder
        target_path: Tracked location inside the shared store
        kind: File or directory
        status: linked, skipped or failed
        reason: Why it was skipped, or the error text when it failed
    """

    link_path: Path
    target_path: Path
    kind: TargetKind
    status: LinkStatus
    reason: str = ""

    @property
    def failed(self) -> bool:
        return self.status == LinkStatus.FAILED
