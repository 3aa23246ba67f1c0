"""Environment loading helpers.

savelink reads SAVELINK_* overrides from the process environment. Those can
also come from dotenv files:

  os.environ (pre-existing) > <root>/.env > user .env (~/.config/savelink/.env)

A dotenv file never overrides a variable that was already exported in the
shell.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

from .loader import get_xdg_config_home


def load_layered_env(
    *,
    root: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
) -> None:
    """Load variables from the user and root .env files.

    Args:
        root: launcher root whose .env is loaded (defaults to cwd)
        user_env_paths: explicit user env file paths
    """
    if root is None:
        root = Path.cwd()
    if user_env_paths is None:
        user_env_paths = [get_xdg_config_home() / "savelink" / ".env"]

    # Later files win over earlier ones
    merged: dict[str, str] = {}
    for path in [*map(Path, user_env_paths), root / ".env"]:
        if path.is_file():
            merged.update({k: v for k, v in dotenv_values(path).items() if v is not None})

    for key, value in merged.items():
        os.environ.setdefault(key, value)
