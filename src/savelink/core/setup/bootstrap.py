"""
First-time setup of a launcher root.

Runs once, while the setup marker is absent:

1. make sure git exists (install it and stop if it had to be installed)
2. create and initialize the shared store, register the remote
3. initial pull, with the same conflict policy as every launch
4. write default ignore/attribute files that are still missing
5. discover game folders and load their sync targets
6. link every sync target into the store
7. create shortcuts, then write the marker

There is no rollback: a step failing after the marker is written is left for
the operator to fix.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from savelink.core.config.models import LauncherConfig
from savelink.core.context import STATE_DIR_NAME, RunContext
from savelink.core.errors import NoGamesFoundError, SavelinkError
from savelink.core.games.discovery import discover_games
from savelink.core.games.models import GameFolder, SyncTarget
from savelink.core.games.targets import load_targets
from savelink.core.git.adapter import GitAdapter
from savelink.core.links.manager import link_targets
from savelink.core.links.models import LinkResult
from savelink.core.setup.shortcuts import create_shortcuts
from savelink.core.setup.templates import write_store_files
from savelink.core.setup.tooling import ensure_git
from savelink.core.sync.models import PreSyncReport
from savelink.core.sync.service import ConflictResolver, SyncOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class SetupReport:
    """What a setup run did."""

    games: list[GameFolder] = field(default_factory=list)
    links: list[LinkResult] = field(default_factory=list)
    shortcuts: list[Path] = field(default_factory=list)
    written_files: list[Path] = field(default_factory=list)
    remote_added: str | None = None
    pre_sync: PreSyncReport | None = None
    marker: Path | None = None

    @property
    def failed_links(self) -> list[LinkResult]:
        return [link for link in self.links if link.failed]


class SetupController:
    """
    Bootstraps the shared store, links and shortcuts for a launcher root.

    Example:
        >>> controller = SetupController(ctx, config)
        >>> report = controller.run(remote_url="git@example.org:me/saves.git")
        >>> print(len(report.games), "games linked")
    """

    def __init__(
        self,
        context: RunContext,
        config: LauncherConfig,
        *,
        git: GitAdapter | None = None,
        probe: Callable[[], bool] | None = None,
        prompt: Callable[[str], str] | None = None,
        installer: Callable[[str, Sequence[str]], str] = ensure_git,
        shortcut_dirs: list[Path] | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            context: Run context for the launcher root
            config: Loaded configuration
            git: Adapter for the store (built from config when omitted)
            probe: Connectivity check passed to the initial pull
            prompt: Asks the operator for text (remote URL); None disables prompting
            installer: Ensures git is present (see ensure_git)
            shortcut_dirs: Override for the shortcut directories
        """
        self.context = context
        self.config = config
        self.git = git or GitAdapter(
            context.store_dir,
            executable=config.sync.git_executable,
            timeout=config.sync.git_timeout,
        )
        self._probe = probe
        self._prompt = prompt
        self._installer = installer
        self._shortcut_dirs = shortcut_dirs

    def prepare_store(self) -> None:
        """Create the store directory and repository if needed."""
        store = self.context.store_dir
        store.mkdir(parents=True, exist_ok=True)

        if not self.git.is_repository():
            logger.info("Initializing shared store at %s", store)
            result = self.git.init()
            if not result.ok:
                raise SavelinkError(f"git init failed: {result.output.strip()}", store=str(store))
            self.git.set_head_branch(self.config.sync.branch)

        self.git.configure("pull.rebase", "false")

        # Commits fail without an identity; fall back to this machine's name
        if self.git.get_config("user.name") is None:
            self.git.configure("user.name", self.context.machine_name)
        if self.git.get_config("user.email") is None:
            self.git.configure("user.email", f"savelink@{self.context.machine_name}")

    def register_remote(self, remote_url: str | None, interactive: bool) -> str | None:
        """
        Add the sync remote if it is not configured yet.

        Returns:
            The URL that was added, or None
        """
        name = self.config.sync.remote_name
        if self.git.has_remote(name):
            return None

        url = remote_url or self.config.sync.remote_url
        if url is None and interactive and self._prompt is not None:
            url = self._prompt("Remote repository URL (leave empty for local only)").strip() or None
        if not url:
            logger.info("No remote configured; saves stay on this machine")
            return None

        result = self.git.add_remote(name, url)
        if not result.ok:
            logger.error("Could not add remote %s: %s", url, result.output.strip())
            return None
        logger.info("Added remote %s -> %s", name, url)
        return url

    def load_all_targets(self, games: list[GameFolder]) -> dict[str, list[SyncTarget]]:
        """
        Load sync targets for every game before anything is linked.

        Raises:
            ConfigFetchError: If any game has no obtainable configuration
        """
        return {
            game.game_id: load_targets(
                game.game_id,
                self.context.targets_dir,
                self.config.setup.targets_url,
                timeout=self.config.setup.fetch_timeout,
            )
            for game in games
        }

    def run(
        self,
        remote_url: str | None = None,
        interactive: bool = False,
        resolver: ConflictResolver | None = None,
    ) -> SetupReport:
        """
        Run the full bootstrap and write the setup marker.

        Args:
            remote_url: Remote to register (overrides config)
            interactive: Allow prompting for a missing remote URL
            resolver: Conflict resolver for the initial pull; None means
                remote wins

        Raises:
            ToolMissingError, RestartRequiredError: git is not usable yet
            NoGamesFoundError: No game folder under the root
            ConfigFetchError: Sync targets unobtainable for a game
        """
        report = SetupReport()
        self.context.logger.info("Setting up %s", self.context.root)

        self._installer(self.config.sync.git_executable, self.config.setup.install_command)
        self.prepare_store()
        report.remote_added = self.register_remote(remote_url, interactive)

        if self.git.has_remote(self.config.sync.remote_name):
            sync = SyncOrchestrator(self.git, self.context, self.config.sync, probe=self._probe)
            report.pre_sync = sync.pre_sync(resolver)
            logger.info(report.pre_sync.summary())

        # After the pull, so files arriving from the remote are not in the way
        report.written_files = write_store_files(self.context.store_dir)

        games = discover_games(
            self.context.root,
            self.config.launch.executable_pattern,
            skip={self.context.store_name, STATE_DIR_NAME},
        )
        if not games:
            raise NoGamesFoundError(
                f"No game executable found in any folder under {self.context.root}",
                root=str(self.context.root),
            )
        report.games = games

        targets = self.load_all_targets(games)
        for game in games:
            results = link_targets(game, targets[game.game_id], self.context.store_dir)
            report.links.extend(results)

        if self.config.setup.create_shortcuts:
            report.shortcuts = create_shortcuts(self.context.root, games, self._shortcut_dirs)

        report.marker = self.context.write_marker()
        self.context.logger.info(
            "Setup complete: %d games, %d links (%d failed), %d shortcuts",
            len(games), len(report.links), len(report.failed_links), len(report.shortcuts),
        )
        return report
