"""
Configuration models and loading.

Pydantic models for savelink configuration with multi-layer merging:
defaults < user < root < env vars.
"""

from .env import load_layered_env
from .loader import (
    get_root_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import LaunchConfig, LauncherConfig, SetupConfig, SyncConfig

__all__ = [
    # Models
    "LaunchConfig",
    "LauncherConfig",
    "SetupConfig",
    "SyncConfig",
    # Loader functions
    "get_root_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_layered_env",
]
