"""
Game launcher.

Resolves which executable to start for a game folder, runs it with the
folder as working directory, waits for it to exit and then pauses so the
game's deferred save writes reach the disk before post-sync.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Callable, Sequence
from pathlib import Path

from savelink.core.config.models import LaunchConfig
from savelink.core.errors import ExecutableNotFoundError
from savelink.core.games.discovery import find_game_executable
from savelink.core.launch.models import LaunchReport

logger = logging.getLogger(__name__)


def resolve_executable(
    folder: Path,
    executable_pattern: str,
    patch_launchers: Sequence[str] = (),
) -> tuple[Path, bool] | None:
    """
    Pick the executable to start for a game folder.

    A patch launcher present in the folder takes priority over the bare
    game executable.

    Args:
        folder: Game folder
        executable_pattern: Regex matching the game executable name
        patch_launchers: Patch launcher file names, in priority order

    Returns:
        (executable, is_patch_launcher), or None when nothing can be launched
    """
    for name in patch_launchers:
        candidate = folder / name
        if candidate.is_file():
            return candidate, True

    game_exe = find_game_executable(folder, executable_pattern)
    if game_exe is None:
        return None
    return game_exe, False


def build_command(executable: Path, runner: Sequence[str] = ()) -> list[str]:
    """Command line for the executable, prefixed by the runner (e.g. wine)."""
    return [*runner, str(executable)]


def launch(
    folder: Path,
    config: LaunchConfig,
    *,
    popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    sleep: Callable[[float], None] = time.sleep,
) -> LaunchReport:
    """
    Launch the game in ``folder`` and block until it has exited and settled.

    The wait on the game process is unbounded. The child inherits the
    launcher's environment unchanged.

    Args:
        folder: Game folder to launch
        config: Launch settings (pattern, patch launchers, runner, settle delay)
        popen: Process factory
        sleep: Sleep function for the settle delay

    Returns:
        LaunchReport with the exit code

    Raises:
        ExecutableNotFoundError: If the folder has nothing to launch
    """
    resolved = resolve_executable(folder, config.executable_pattern, config.patch_launchers)
    if resolved is None:
        raise ExecutableNotFoundError(folder)

    executable, patched = resolved
    command = build_command(executable, config.runner)
    logger.info("Launching %s", " ".join(command))

    process = popen(command, cwd=str(folder))
    exit_code = process.wait()
    logger.info("%s exited with code %s", executable.name, exit_code)

    if config.settle_delay_seconds > 0:
        sleep(config.settle_delay_seconds)

    return LaunchReport(
        executable=executable,
        command=tuple(command),
        exit_code=exit_code,
        settle_delay=config.settle_delay_seconds,
        patched=patched,
    )
