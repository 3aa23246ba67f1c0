"""
Exception hierarchy for savelink.

Most failures in a launch cycle are recoverable and are reported through
sync/link/launch reports instead of exceptions. The exceptions below are
raised for conditions a caller has to act on, and the fatal setup paths.

Exception Hierarchy:
    SavelinkError (base)
    ├── ToolMissingError (git absent and could not be installed)
    ├── RestartRequiredError (git was just installed; PATH is stale)
    ├── LinkCreationError
    ├── ExecutableNotFoundError
    ├── ConfigFetchError (no sync targets obtainable)
    ├── NoGamesFoundError (no game folder under the root)
    └── StoreMissingError (marker present but the store is gone)

Example:
    >>> from savelink.core.errors import ConfigFetchError
    >>> try:
    ...     raise ConfigFetchError("No sync targets for th07", game_id="th07")
    ... except ConfigFetchError as e:
    ...     print(e.context["game_id"])
    th07
"""


class SavelinkError(Exception):
    """
    Base exception for all savelink errors.

    Attributes:
        message: Human-readable error message
        context: Additional context as keyword arguments
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class ToolMissingError(SavelinkError):
    """The version-control tool is missing and could not be installed."""


class RestartRequiredError(SavelinkError):
    """
    A required tool was installed during this run.

    The process environment (PATH) has to be refreshed before the tool can
    be used, so the current run cannot continue.
    """


class LinkCreationError(SavelinkError):
    """A directory link or hard link could not be created."""


class ExecutableNotFoundError(SavelinkError):
    """No game executable exists in the requested folder."""

    def __init__(self, folder: object) -> None:
        super().__init__(f"No game executable found in {folder}", folder=str(folder))
        self.folder = folder


class ConfigFetchError(SavelinkError):
    """No sync target configuration could be loaded or fetched."""


class NoGamesFoundError(SavelinkError):
    """Setup found no game folder to manage."""


class StoreMissingError(SavelinkError):
    """Setup is marked complete but the shared store does not exist."""
