"""
Desktop and start menu shortcuts.

Each shortcut starts the launcher with the game folder as argument.

  Windows: .lnk files written through PowerShell's WScript.Shell COM object
  Linux:   freedesktop .desktop entries
  other:   not supported, nothing is created
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess
import sys
from pathlib import Path

from savelink.core.games.models import GameFolder

logger = logging.getLogger(__name__)


def launcher_command(root: Path, game: GameFolder) -> list[str]:
    """Command line that launches ``game`` through savelink."""
    exe = shutil.which("savelink")
    base = [exe] if exe else [sys.executable, "-m", "savelink"]
    return [*base, "--root", str(root), game.path.name]


def default_shortcut_dirs() -> list[Path]:
    """Desktop and start menu locations for the current platform."""
    system = platform.system()
    if system == "Windows":
        appdata = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return [
            Path.home() / "Desktop",
            appdata / "Microsoft" / "Windows" / "Start Menu" / "Programs",
        ]
    if system == "Linux":
        data_home = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
        desktop = Path(os.environ.get("XDG_DESKTOP_DIR", Path.home() / "Desktop"))
        return [data_home / "applications", desktop]
    return []


def _ps_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _write_lnk(path: Path, command: list[str], game: GameFolder) -> None:
    arguments = subprocess.list2cmdline(command[1:])
    script = "; ".join([
        "$s = (New-Object -ComObject WScript.Shell).CreateShortcut(" + _ps_quote(str(path)) + ")",
        "$s.TargetPath = " + _ps_quote(command[0]),
        "$s.Arguments = " + _ps_quote(arguments),
        "$s.WorkingDirectory = " + _ps_quote(str(game.path)),
        "$s.IconLocation = " + _ps_quote(f"{game.executable},0"),
        "$s.Save()",
    ])
    result = subprocess.run(
        ["powershell", "-NoProfile", "-NonInteractive", "-Command", script],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise OSError(result.stderr.strip() or f"powershell exited {result.returncode}")


def _desktop_quote(arg: str) -> str:
    if arg and not any(c in arg for c in ' \t\n"\'\\><~|&;$*?#()`'):
        return arg
    escaped = "".join("\\" + c if c in '"`$\\' else c for c in arg)
    return f'"{escaped}"'


def desktop_entry(command: list[str], game: GameFolder) -> str:
    """Contents of a freedesktop .desktop launcher for ``game``."""
    return "\n".join([
        "[Desktop Entry]",
        "Type=Application",
        f"Name={game.display_name}",
        f"Comment=Sync saves and play {game.display_name}",
        "Exec=" + " ".join(_desktop_quote(arg) for arg in command),
        f"Path={game.path}",
        "Terminal=false",
        "Categories=Game;",
        "",
    ])


def create_shortcuts(
    root: Path,
    games: list[GameFolder],
    directories: list[Path] | None = None,
) -> list[Path]:
    """
    Create one shortcut per game in every shortcut directory.

    Failures are logged and skipped.

    Returns:
        Shortcut files that were written
    """
    system = platform.system()
    if directories is None:
        directories = default_shortcut_dirs()

    created: list[Path] = []
    for game in games:
        command = launcher_command(root, game)
        for directory in directories:
            try:
                directory.mkdir(parents=True, exist_ok=True)
                if system == "Windows":
                    path = directory / f"{game.display_name}.lnk"
                    _write_lnk(path, command, game)
                else:
                    path = directory / f"savelink-{game.game_id}.desktop"
                    path.write_text(desktop_entry(command, game), encoding="utf-8")
                    path.chmod(0o755)
            except OSError as e:
                logger.error("Could not create shortcut for %s in %s: %s",
                             game.display_name, directory, e)
                continue
            logger.info("Created shortcut %s", path)
            created.append(path)
    return created
