"""
Data models for the sync orchestrator.

Defines Pydantic models for pre-launch and post-launch sync reports.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ConflictChoice(str, Enum):
    """Which side wins a merge conflict."""

    REMOTE = "remote"
    LOCAL = "local"


class PreSyncOutcome(str, Enum):
    """Terminal state of the pre-launch phase."""

    OFFLINE = "offline"
    CLEAN = "clean"
    CONFLICT_REMOTE = "conflict_remote"
    CONFLICT_LOCAL = "conflict_local"
    OTHER_ERROR = "other_error"


class PostSyncOutcome(str, Enum):
    """Terminal state of the post-launch phase."""

    NO_CHANGES = "no_changes"
    DEFERRED = "deferred"
    STAGING_FAILED = "staging_failed"
    NOTHING_STAGED = "nothing_staged"
    COMMIT_FAILED = "commit_failed"
    PUSH_FAILED = "push_failed"
    PUSHED = "pushed"


class PreSyncReport(BaseModel):
    """
    Result of the pre-launch pull.

    Pre-sync never blocks a launch: every outcome counts as success, the
    report only says what happened.
    """

    outcome: PreSyncOutcome = Field(description="Terminal state of the phase")

    message: str = Field(
        default="",
        description="Human-readable result message",
    )

    conflicts: list[str] = Field(
        default_factory=list,
        description="Paths that were unmerged after the pull",
    )

    backup_path: str | None = Field(
        default=None,
        description="Backup snapshot taken before a remote-wins overwrite",
    )

    rewritten_paths: list[str] = Field(
        default_factory=list,
        description="Store paths whose content this phase replaced",
    )

    output: str = Field(
        default="",
        description="Raw git output of the failing step, if any",
    )

    started_at: datetime | None = Field(default=None)
    completed_at: datetime | None = Field(default=None)

    @property
    def changed_tree(self) -> bool:
        """Whether the store working tree may have been rewritten."""
        return self.outcome in (
            PreSyncOutcome.CLEAN,
            PreSyncOutcome.CONFLICT_REMOTE,
            PreSyncOutcome.CONFLICT_LOCAL,
        )

    def summary(self) -> str:
        parts = [f"pre-sync {self.outcome.value}"]
        if self.conflicts:
            parts.append(f"{len(self.conflicts)} conflicts")
        if self.backup_path:
            parts.append(f"backup at {self.backup_path}")
        if self.message:
            parts.append(self.message)
        return ", ".join(parts)


class PostSyncReport(BaseModel):
    """
    Result of the post-launch add/commit/push.

    Failures are non-fatal: uncommitted or unpushed changes are picked up
    by the next run.
    """

    outcome: PostSyncOutcome = Field(description="Terminal state of the phase")

    message: str = Field(
        default="",
        description="Human-readable result message",
    )

    changed_paths: list[str] = Field(
        default_factory=list,
        description="Paths reported by status before staging",
    )

    attempts: int = Field(
        default=0,
        description="Staging attempts made",
    )

    commit_message: str | None = Field(
        default=None,
        description="Message of the commit created, if any",
    )

    output: str = Field(
        default="",
        description="Raw git output of the failing step, if any",
    )

    started_at: datetime | None = Field(default=None)
    completed_at: datetime | None = Field(default=None)

    @property
    def committed(self) -> bool:
        return self.outcome in (PostSyncOutcome.PUSH_FAILED, PostSyncOutcome.PUSHED)

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def summary(self) -> str:
        parts = [f"post-sync {self.outcome.value}"]
        if self.changed_paths:
            parts.append(f"{len(self.changed_paths)} changed paths")
        if self.attempts > 1:
            parts.append(f"{self.attempts} staging attempts")
        if self.message:
            parts.append(self.message)
        return ", ".join(parts)
