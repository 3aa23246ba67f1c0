"""
Launch controller for game executables.

Modules:
    launcher: Executable resolution (patch launcher first) and blocking launch
    models: LaunchReport

Example Usage:
    >>> from savelink.core.launch import launch
    >>> report = launch(Path("th07"), config.launch)
    >>> print(report.exit_code)
"""

from savelink.core.launch.launcher import build_command, launch, resolve_executable
from savelink.core.launch.models import LaunchReport

__all__ = [
    "LaunchReport",
    "build_command",
    "launch",
    "resolve_executable",
]
