"""
Sync orchestrator for the shared store.

Sequences the two sync phases around a play session:

Pre-sync (before launch):
    offline            -> nothing is attempted
    pull ok            -> clean
    pull failed        -> status(); unmerged paths mean a conflict,
                          anything else is logged and ignored
    conflict           -> remote wins (backup snapshot, fetch, reset --hard)
                          unless the operator explicitly chooses local
                          (checkout --ours, stage, resolution commit)

    Reports list the store files git replaced (HEAD before the pull against
    HEAD after) so file links can be re-pointed at the new copies.

Post-sync (after the game exits):
    status() empty     -> no changes
    offline            -> deferred to the next run
    add -A             -> up to N attempts, fixed backoff between them
    diff --cached      -> empty means nothing to commit
    commit, push       -> push failures are logged, never retried

Neither phase raises for a sync failure: sync is best-effort and must never
keep the player from playing.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime

from savelink.core.config.models import SyncConfig
from savelink.core.context import RunContext
from savelink.core.git.adapter import GitAdapter
from savelink.core.git.models import unmerged_paths
from savelink.core.probe import is_online
from savelink.core.sync.backup import create_snapshot
from savelink.core.sync.models import (
    ConflictChoice,
    PostSyncOutcome,
    PostSyncReport,
    PreSyncOutcome,
    PreSyncReport,
)

logger = logging.getLogger(__name__)

ConflictResolver = Callable[[list[str]], ConflictChoice]


class SyncOrchestrator:
    """
    Runs pre-launch and post-launch synchronization of the shared store.

    Example:
        >>> sync = SyncOrchestrator(GitAdapter(ctx.store_dir), ctx, config.sync)
        >>> sync.pre_sync()
        >>> # ... play ...
        >>> print(sync.post_sync().summary())
    """

    def __init__(
        self,
        git: GitAdapter,
        context: RunContext,
        config: SyncConfig,
        *,
        probe: Callable[[], bool] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            git: Adapter bound to the shared store
            context: Run context (store, backups, machine name)
            config: Sync settings (remote, branch, retry policy)
            probe: Connectivity check; defaults to an HTTP probe of config.probe_url
            sleep: Sleep function used between staging attempts
            clock: Source of the wall-clock time embedded in commit messages
        """
        self.git = git
        self.context = context
        self.config = config
        self._probe = probe or (lambda: is_online(config.probe_url, config.probe_timeout))
        self._sleep = sleep
        self._clock = clock

    @property
    def remote_ref(self) -> str:
        return self.git.remote_ref(self.config.remote_name, self.config.branch)

    def is_online(self) -> bool:
        if self.config.offline:
            return False
        return self._probe()

    # ------------------------------------------------------------------
    # Pre-sync
    # ------------------------------------------------------------------

    def pre_sync(self, resolver: ConflictResolver | None = None) -> PreSyncReport:
        """
        Pull remote changes before launching.

        Args:
            resolver: Called with the conflicted paths to choose a side. None
                means unattended mode, where the remote always wins.

        Returns:
            PreSyncReport; the outcome says what happened and
            ``rewritten_paths`` which store files git replaced
        """
        started_at = self._clock()

        if not self.is_online():
            logger.info("Offline: skipping pull")
            return PreSyncReport(
                outcome=PreSyncOutcome.OFFLINE,
                message="Offline, using local saves",
                started_at=started_at,
                completed_at=self._clock(),
            )

        before = self.git.head()
        logger.info("Pulling %s", self.remote_ref)
        pulled = self.git.pull(self.config.remote_name, self.config.branch)
        if pulled.ok:
            return PreSyncReport(
                outcome=PreSyncOutcome.CLEAN,
                message="Up to date with remote",
                rewritten_paths=self._rewritten(before),
                started_at=started_at,
                completed_at=self._clock(),
            )

        conflicts = unmerged_paths(self.git.status())
        if not conflicts:
            logger.warning("Pull failed, launching with local saves: %s", pulled.output.strip())
            return PreSyncReport(
                outcome=PreSyncOutcome.OTHER_ERROR,
                message="Pull failed, using local saves",
                output=pulled.output,
                started_at=started_at,
                completed_at=self._clock(),
            )

        logger.warning("Merge conflict in %d paths: %s", len(conflicts), ", ".join(conflicts))
        choice = resolver(conflicts) if resolver is not None else ConflictChoice.REMOTE

        if choice == ConflictChoice.LOCAL:
            report = self._keep_local(conflicts, before)
        else:
            report = self._take_remote(conflicts, before)

        report.started_at = started_at
        report.completed_at = self._clock()
        return report

    def _rewritten(
        self,
        before: str | None,
        after: str = "HEAD",
        *,
        include: list[str] | None = None,
        exclude: list[str] | None = None,
    ) -> list[str]:
        changed = set(self.git.changed_files(before, after)) | set(include or [])
        return sorted(changed - set(exclude or []))

    def _take_remote(self, conflicts: list[str], before: str | None) -> PreSyncReport:
        try:
            backup = create_snapshot(self.context.store_dir, self.context.backups_dir,
                                     now=self._clock())
        except OSError as e:
            # Without a snapshot the overwrite is not allowed to happen
            logger.error("Backup before overwrite failed, conflict left unresolved: %s", e)
            return PreSyncReport(
                outcome=PreSyncOutcome.OTHER_ERROR,
                message=f"Backup failed, conflict left unresolved: {e}",
                conflicts=conflicts,
            )

        fetched = self.git.fetch(self.config.remote_name)
        if not fetched.ok:
            logger.warning("Fetch failed, resetting to last known %s: %s",
                           self.remote_ref, fetched.output.strip())

        reset = self.git.reset_hard(self.remote_ref)
        if not reset.ok:
            logger.error("Reset to %s failed: %s", self.remote_ref, reset.output.strip())
            return PreSyncReport(
                outcome=PreSyncOutcome.CONFLICT_REMOTE,
                message=f"Reset to {self.remote_ref} failed",
                conflicts=conflicts,
                backup_path=str(backup),
                rewritten_paths=self._rewritten(before, self.remote_ref, exclude=conflicts),
                output=reset.output,
            )

        logger.info("Conflict resolved with remote version, backup at %s", backup)
        return PreSyncReport(
            outcome=PreSyncOutcome.CONFLICT_REMOTE,
            message="Conflict resolved with the remote version",
            conflicts=conflicts,
            backup_path=str(backup),
            rewritten_paths=self._rewritten(before, include=conflicts),
        )

    def _keep_local(self, conflicts: list[str], before: str | None) -> PreSyncReport:
        checkout = self.git.checkout_ours(conflicts)
        if not checkout.ok:
            logger.warning("checkout --ours failed: %s", checkout.output.strip())

        staged = self.git.add()
        if not staged.ok:
            logger.error("Staging the local resolution failed: %s", staged.output.strip())
            return PreSyncReport(
                outcome=PreSyncOutcome.CONFLICT_LOCAL,
                message="Could not stage the local resolution",
                conflicts=conflicts,
                rewritten_paths=self._rewritten(before, self.remote_ref, exclude=conflicts),
                output=staged.output,
            )

        message = (
            f"Resolve conflict keeping local version from {self.context.machine_name} "
            f"at {self._clock():%Y-%m-%d %H:%M:%S}"
        )
        committed = self.git.commit(message)
        if not committed.ok:
            logger.error("Resolution commit failed: %s", committed.output.strip())
            return PreSyncReport(
                outcome=PreSyncOutcome.CONFLICT_LOCAL,
                message="Resolution commit failed",
                conflicts=conflicts,
                rewritten_paths=self._rewritten(before, self.remote_ref, exclude=conflicts),
                output=committed.output,
            )

        logger.info("Conflict resolved with local version")
        return PreSyncReport(
            outcome=PreSyncOutcome.CONFLICT_LOCAL,
            message="Conflict resolved with the local version",
            conflicts=conflicts,
            rewritten_paths=self._rewritten(before, exclude=conflicts),
        )

    # ------------------------------------------------------------------
    # Post-sync
    # ------------------------------------------------------------------

    def commit_message(self) -> str:
        """Commit message with timestamp and machine, for provenance across machines."""
        return f"Sync saves from {self.context.machine_name} at {self._clock():%Y-%m-%d %H:%M:%S}"

    def _stage_with_retry(self) -> tuple[bool, int, str]:
        attempts = self.config.stage_attempts
        output = ""
        for attempt in range(1, attempts + 1):
            staged = self.git.add()
            if staged.ok:
                return True, attempt, ""
            output = staged.output
            logger.warning("Staging attempt %d/%d failed: %s", attempt, attempts, output.strip())
            if attempt < attempts:
                self._sleep(self.config.stage_backoff_seconds)
        return False, attempts, output

    def post_sync(self) -> PostSyncReport:
        """
        Commit and push changes made while playing.

        Returns:
            PostSyncReport; every failure is non-fatal
        """
        started_at = self._clock()

        def report(outcome: PostSyncOutcome, **fields: object) -> PostSyncReport:
            return PostSyncReport(
                outcome=outcome, started_at=started_at, completed_at=self._clock(), **fields
            )

        entries = self.git.status()
        if not entries:
            logger.info("No changes to sync")
            return report(PostSyncOutcome.NO_CHANGES, message="No changes")

        changed = [entry.path for entry in entries]

        if not self.is_online():
            logger.info("Offline: %d changed paths stay local until the next run", len(changed))
            return report(
                PostSyncOutcome.DEFERRED,
                message="Offline, changes will sync on the next run",
                changed_paths=changed,
            )

        staged, attempts, output = self._stage_with_retry()
        if not staged:
            logger.error("Staging failed after %d attempts", attempts)
            return report(
                PostSyncOutcome.STAGING_FAILED,
                message="Could not stage changes (files may be locked)",
                changed_paths=changed,
                attempts=attempts,
                output=output,
            )

        if not self.git.diff_cached_names():
            logger.info("Staged set is empty, nothing to commit")
            return report(
                PostSyncOutcome.NOTHING_STAGED,
                message="Nothing to commit",
                changed_paths=changed,
                attempts=attempts,
            )

        message = self.commit_message()
        committed = self.git.commit(message)
        if not committed.ok:
            logger.error("Commit failed: %s", committed.output.strip())
            return report(
                PostSyncOutcome.COMMIT_FAILED,
                message="Commit failed",
                changed_paths=changed,
                attempts=attempts,
                output=committed.output,
            )

        pushed = self.git.push(self.config.remote_name, self.config.branch)
        if not pushed.ok:
            remedy = (
                f"run 'git push {self.config.remote_name} {self.config.branch}' "
                f"inside {self.context.store_dir}"
            )
            logger.error("Push failed (%s): %s", remedy, pushed.output.strip())
            return report(
                PostSyncOutcome.PUSH_FAILED,
                message=f"Push failed, commit kept locally; to retry now, {remedy}",
                changed_paths=changed,
                attempts=attempts,
                commit_message=message,
                output=pushed.output,
            )

        logger.info("Pushed %d changed paths to %s", len(changed), self.remote_ref)
        return report(
            PostSyncOutcome.PUSHED,
            message=f"Pushed to {self.remote_ref}",
            changed_paths=changed,
            attempts=attempts,
            commit_message=message,
        )
