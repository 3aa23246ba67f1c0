"""
One-time bootstrap of a launcher root.

Modules:
    bootstrap: SetupController orchestrating the setup steps
    tooling: git presence check and package-manager install
    templates: default .gitignore / .gitattributes for the store
    shortcuts: desktop and start menu shortcuts per game
"""

from savelink.core.setup.bootstrap import SetupController, SetupReport
from savelink.core.setup.shortcuts import create_shortcuts, desktop_entry, launcher_command
from savelink.core.setup.templates import write_store_files
from savelink.core.setup.tooling import ensure_git

__all__ = [
    "SetupController",
    "SetupReport",
    "create_shortcuts",
    "desktop_entry",
    "ensure_git",
    "launcher_command",
    "write_store_files",
]
