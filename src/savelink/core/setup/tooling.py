"""Presence check and bootstrap installation of git."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Sequence

from savelink.core.errors import RestartRequiredError, ToolMissingError

logger = logging.getLogger(__name__)


def ensure_git(executable: str = "git", install_command: Sequence[str] = ()) -> str:
    """
    Make sure git is available, installing it through a package manager if not.

    A freshly installed git is not on this process's PATH yet, so a
    successful install still ends the run with RestartRequiredError.

    Args:
        executable: Name or path of the git executable
        install_command: Package manager command line that installs git

    Returns:
        Resolved path of the git executable

    Raises:
        ToolMissingError: git is absent and could not be installed
        RestartRequiredError: git was installed; rerun to pick it up
    """
    found = shutil.which(executable)
    if found:
        return found

    if not install_command:
        raise ToolMissingError(
            f"{executable} is not installed and no package manager is configured",
            executable=executable,
        )

    logger.info("Installing git: %s", " ".join(install_command))
    try:
        result = subprocess.run(
            list(install_command),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise ToolMissingError(
            f"Could not run {install_command[0]}: {e}", executable=executable
        ) from e

    logger.debug(result.stdout or "")
    if result.returncode != 0:
        raise ToolMissingError(
            f"Installing git failed with exit code {result.returncode}",
            executable=executable,
            output=(result.stdout or "").strip(),
        )

    raise RestartRequiredError("git was installed; start savelink again to finish setup")
