"""
savelink CLI - launch mode.

One launch cycle: pre-sync, play, post-sync. File links detached on
either side are re-joined after each step. Sync problems are printed as
warnings and never stop the game from starting.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from savelink.cli.errors import print_executable_not_found_error, print_error
from savelink.core.config.models import LauncherConfig
from savelink.core.context import RunContext
from savelink.core.errors import ExecutableNotFoundError, StoreMissingError
from savelink.core.games.discovery import inspect_folder
from savelink.core.games.models import SyncTarget
from savelink.core.games.targets import read_cached_targets
from savelink.core.git.adapter import GitAdapter
from savelink.core.launch import LaunchReport, launch
from savelink.core.links.manager import repair_file_links
from savelink.core.sync import (
    ConflictChoice,
    ConflictResolver,
    PostSyncOutcome,
    PostSyncReport,
    PreSyncOutcome,
    PreSyncReport,
    SyncOrchestrator,
)

console = Console()

PRE_SYNC_STYLES = {
    PreSyncOutcome.OFFLINE: ("○", "blue"),
    PreSyncOutcome.CLEAN: ("✓", "green"),
    PreSyncOutcome.CONFLICT_REMOTE: ("⚠", "yellow"),
    PreSyncOutcome.CONFLICT_LOCAL: ("⚠", "yellow"),
    PreSyncOutcome.OTHER_ERROR: ("⚠", "yellow"),
}

POST_SYNC_STYLES = {
    PostSyncOutcome.NO_CHANGES: ("✓", "green"),
    PostSyncOutcome.DEFERRED: ("○", "blue"),
    PostSyncOutcome.STAGING_FAILED: ("⚠", "yellow"),
    PostSyncOutcome.NOTHING_STAGED: ("✓", "green"),
    PostSyncOutcome.COMMIT_FAILED: ("⚠", "yellow"),
    PostSyncOutcome.PUSH_FAILED: ("⚠", "yellow"),
    PostSyncOutcome.PUSHED: ("✓", "green"),
}


def prompt_conflict(paths: list[str]) -> ConflictChoice:
    """Ask the operator which side of a conflict to keep; remote by default."""
    console.print("[yellow]⚠[/yellow]  Saves changed both here and on the remote:")
    for path in paths:
        console.print(f"   {path}")
    console.print("[dim]remote: overwrite local saves (a backup is taken first)[/dim]")
    console.print("[dim]local:  keep this machine's saves and commit them[/dim]")

    while True:
        answer = typer.prompt("Keep which version? (remote/local)", default="remote")
        try:
            return ConflictChoice(answer.strip().lower())
        except ValueError:
            console.print("[red]Please answer 'remote' or 'local'[/red]")


def build_resolver(prefer: ConflictChoice | None, interactive: bool) -> ConflictResolver | None:
    """
    Conflict resolver for this run.

    An explicit --prefer wins, then --interactive prompting; otherwise None,
    which means unattended remote-wins.
    """
    if prefer is not None:
        return lambda paths: prefer
    if interactive:
        return prompt_conflict
    return None


def render_pre_sync(report: PreSyncReport) -> None:
    icon, color = PRE_SYNC_STYLES[report.outcome]
    console.print(f"[{color}]{icon}[/{color}] {report.message or report.outcome.value}")
    if report.backup_path:
        console.print(f"[dim]  Backup of previous local saves: {report.backup_path}[/dim]")


def render_post_sync(report: PostSyncReport) -> None:
    icon, color = POST_SYNC_STYLES[report.outcome]
    console.print(f"[{color}]{icon}[/{color}] {report.message or report.outcome.value}")


def resolve_game_path(context: RunContext, folder: str) -> Path:
    path = Path(folder)
    if not path.is_absolute():
        path = context.root / path
    return path.resolve()


def run_launch(
    context: RunContext,
    config: LauncherConfig,
    folder: str,
    *,
    resolver: ConflictResolver | None,
    sync_enabled: bool = True,
) -> LaunchReport | None:
    """
    Run one launch cycle for ``folder``.

    Returns:
        LaunchReport, or None if nothing could be launched

    Raises:
        StoreMissingError: The marker exists but the store is gone
    """
    if not context.store_dir.is_dir():
        raise StoreMissingError(
            f"Shared store missing: {context.store_dir}", store=str(context.store_dir)
        )

    game_path = resolve_game_path(context, folder)
    game = None
    if game_path.is_dir():
        game = inspect_folder(game_path, config.launch.executable_pattern)

    git = GitAdapter(
        context.store_dir,
        executable=config.sync.git_executable,
        timeout=config.sync.git_timeout,
    )
    sync = SyncOrchestrator(git, context, config.sync)

    targets: list[SyncTarget] = []
    if game is not None:
        targets = read_cached_targets(context.targets_dir, game.game_id) or []

    if sync_enabled:
        console.print("[blue]Syncing saves...[/blue]")
        pre = sync.pre_sync(resolver)
        render_pre_sync(pre)
        if game is not None:
            rewritten = pre.rewritten_paths if pre.changed_tree else []
            repair_file_links(game, targets, context.store_dir, rewritten)

    report: LaunchReport | None = None
    try:
        report = launch(game_path, config.launch)
        console.print(f"[dim]{report.executable.name} exited with code {report.exit_code}[/dim]")
    except ExecutableNotFoundError as e:
        context.logger.error(str(e))
        print_executable_not_found_error(e)
    except OSError as e:
        context.logger.error("Could not start game in %s: %s", game_path, e)
        print_error(
            f"Could not start the game: {e}", solution="check launch.runner in savelink.json"
        )

    # Saves written by replacing the file detach the link; bring them into the store
    if game is not None:
        repair_file_links(game, targets, context.store_dir)

    if sync_enabled:
        console.print("[blue]Saving progress...[/blue]")
        render_post_sync(sync.post_sync())

    return report
