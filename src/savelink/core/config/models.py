"""
Configuration data models for savelink.

These models define the structure of <root>/savelink.json and
~/.config/savelink/config.json, with validation via Pydantic.
"""

import platform
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _default_runner() -> list[str]:
    # Windows executables need a compatibility layer everywhere else
    return [] if platform.system() == "Windows" else ["wine"]


def _default_install_command() -> list[str]:
    if platform.system() == "Windows":
        return ["winget", "install", "--id", "Git.Git", "-e", "--source", "winget"]
    return []


class SyncConfig(BaseModel):
    """
    Shared store and remote synchronization settings.
    """
    store_dir: str = Field(
        default="saves",
        description="Name of the shared store directory under the launcher root"
    )
    remote_name: str = Field(
        default="origin",
        description="Name of the git remote to pull from and push to"
    )
    remote_url: Optional[str] = Field(
        default=None,
        description="Remote URL registered during setup (if not prompted for)"
    )
    branch: str = Field(
        default="main",
        min_length=1,
        description="Branch holding the synchronized saves"
    )
    offline: bool = Field(
        default=False,
        description="Skip the connectivity probe and behave as offline"
    )
    probe_url: str = Field(
        default="https://github.com",
        description="Well-known URL used to decide whether we are online"
    )
    probe_timeout: float = Field(
        default=5.0,
        gt=0.0,
        description="Connectivity probe timeout in seconds"
    )
    git_executable: str = Field(
        default="git",
        description="Name or path of the git executable"
    )
    git_timeout: float = Field(
        default=120.0,
        gt=0.0,
        description="Timeout for a single git command in seconds"
    )
    stage_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts at staging changes before giving up"
    )
    stage_backoff_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Fixed delay between staging attempts"
    )


class LaunchConfig(BaseModel):
    """
    How game executables are found and started.
    """
    executable_pattern: str = Field(
        default=r"^th\d+[a-z]?\.exe$",
        description="Case-insensitive regex matching a game executable name"
    )
    patch_launchers: list[str] = Field(
        default_factory=lambda: ["vpatch.exe"],
        description="Launchers preferred over the bare game executable, in order"
    )
    runner: list[str] = Field(
        default_factory=_default_runner,
        description="Command prefix used to start the executable (e.g. wine)"
    )
    settle_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Pause after the game exits so deferred writes can land"
    )


class SetupConfig(BaseModel):
    """
    One-time bootstrap settings.
    """
    targets_url: Optional[str] = Field(
        default=None,
        description="URL template for per-game sync targets, with a {game_id} placeholder"
    )
    fetch_timeout: float = Field(
        default=10.0,
        gt=0.0,
        description="Timeout for fetching a sync target document"
    )
    install_command: list[str] = Field(
        default_factory=_default_install_command,
        description="Package manager command that installs git when it is missing"
    )
    create_shortcuts: bool = Field(
        default=True,
        description="Create desktop and start menu shortcuts for each game"
    )

    @field_validator("targets_url")
    @classmethod
    def validate_targets_url(cls, v: Optional[str]) -> Optional[str]:
        """A targets URL must name the game it is fetched for."""
        if v is not None and "{game_id}" not in v:
            raise ValueError("targets_url must contain a {game_id} placeholder")
        return v


class LauncherConfig(BaseModel):
    """
    Root configuration for savelink.

    Layered: defaults < user config < root config < environment variables.
    """
    model_config = ConfigDict(extra="ignore")

    sync: SyncConfig = Field(default_factory=SyncConfig)
    launch: LaunchConfig = Field(default_factory=LaunchConfig)
    setup: SetupConfig = Field(default_factory=SetupConfig)
