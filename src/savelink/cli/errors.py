"""
Standardized error handling and exit codes for the savelink CLI.

Consistent error messages with actionable guidance, and standardized exit
codes across the setup and launch modes.
"""

from enum import IntEnum

from rich.console import Console

from savelink.core.errors import ConfigFetchError, ExecutableNotFoundError

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for savelink."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Fatal error, or nothing could be launched."""

    USER_ERROR = 2
    """Missing or invalid arguments (actionable by user)."""

    RESTART_REQUIRED = 3
    """A tool was installed; run savelink again."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "No game folder given",
        ...     reason="Setup is complete, so a game must be chosen",
        ...     solution="savelink th07",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_no_folder_error() -> None:
    """Print error when launch mode was entered without a game folder."""
    print_error(
        "No game folder given",
        reason="Setup is complete; savelink needs to know which game to launch",
        solution="savelink <game folder>  # or use the desktop shortcut",
    )


def print_tool_missing_error(detail: str) -> None:
    """Print error when git is missing and could not be installed."""
    print_error(
        "git is not available",
        reason=detail,
        solution="install git from https://git-scm.com/downloads and run savelink again",
    )


def print_restart_required(detail: str) -> None:
    """Print notice when git was just installed."""
    console.print(f"[yellow]⚠[/yellow]  {detail}")


def print_no_games_error(root: object) -> None:
    """Print error when setup finds no game folders."""
    print_error(
        "No games found",
        reason=f"No folder under {root} contains a game executable",
        solution="run savelink from the directory that holds your game folders, or pass --root",
    )


def print_config_fetch_error(error: ConfigFetchError) -> None:
    """Print error when no sync targets could be loaded for a game."""
    game_id = error.context.get("game_id", "<game>")
    print_error(
        str(error),
        reason="Sync targets name the files to track, e.g. [\"/replay\", \"th07.cfg\"]",
        solution=f"write them to .savelink/targets/{game_id}.json, or set setup.targets_url",
    )


def print_store_missing_error(store: object) -> None:
    """Print error when the marker exists but the store does not."""
    print_error(
        f"Shared store missing: {store}",
        reason="Setup is marked complete, but the store it created is gone",
        solution="restore the store, or delete .savelink/setup-complete to run setup again",
    )


def print_executable_not_found_error(error: ExecutableNotFoundError) -> None:
    """Print error when the game folder has nothing to launch."""
    print_error(
        str(error),
        reason="Saves were still synced; only the launch was skipped",
        solution="check the folder name passed to savelink",
    )
