"""
savelink CLI - main application entry point.

A single command: without a setup marker it runs setup, otherwise it runs a
sync-play-sync cycle for the given game folder.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from savelink import __version__
from savelink.cli.errors import (
    ExitCode,
    print_config_fetch_error,
    print_error,
    print_no_folder_error,
    print_no_games_error,
    print_restart_required,
    print_store_missing_error,
    print_tool_missing_error,
)
from savelink.cli.launcher import build_resolver, run_launch
from savelink.cli.setup_cmd import run_setup
from savelink.core.config import load_config, load_layered_env
from savelink.core.context import RunContext
from savelink.core.errors import (
    ConfigFetchError,
    NoGamesFoundError,
    RestartRequiredError,
    SavelinkError,
    StoreMissingError,
    ToolMissingError,
)
from savelink.core.logging import setup_logging
from savelink.core.sync.models import ConflictChoice

app = typer.Typer(
    name="savelink",
    help="Sync game saves through git around every play session",
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"savelink {__version__}")
        raise typer.Exit()


@app.command()
def main(
    folder: Optional[str] = typer.Argument(
        None,
        help="Game folder to launch (name under the root, or a path)",
    ),
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        "-r",
        help="Directory holding the game folders (default: current directory)",
    ),
    remote: Optional[str] = typer.Option(
        None,
        "--remote",
        help="Remote repository URL to register during setup",
    ),
    interactive: bool = typer.Option(
        False,
        "--interactive",
        "-i",
        help="Prompt for the remote during setup and on merge conflicts",
    ),
    prefer: Optional[ConflictChoice] = typer.Option(
        None,
        "--prefer",
        help="Side that wins a merge conflict (default: remote, after a backup)",
        case_sensitive=False,
    ),
    no_sync: bool = typer.Option(
        False,
        "--no-sync",
        help="Launch without pulling or pushing saves",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """
    Sync saves, launch a game, and sync again when it exits.

    The first run in a directory performs setup: it creates the shared
    store, links each game's save data into it and creates shortcuts.
    Later runs need the game folder to launch.

    Examples:
        savelink                       # first run: setup
        savelink --remote URL -i       # setup with a remote, prompting on conflicts
        savelink th07                  # pull, play th07, push
        savelink th07 --prefer local   # keep local saves on conflict
    """
    root_dir = (root or Path.cwd()).resolve()

    load_layered_env(root=root_dir)
    config = load_config(root_dir)
    context = RunContext(root_dir, store_name=config.sync.store_dir)
    context.logger = setup_logging(context.log_file, debug=debug)

    resolver = build_resolver(prefer, interactive)

    try:
        if not context.is_setup_complete():
            run_setup(
                context,
                config,
                remote_url=remote,
                interactive=interactive,
                resolver=resolver,
            )
            return

        if folder is None:
            print_no_folder_error()
            raise typer.Exit(ExitCode.USER_ERROR)

        report = run_launch(
            context,
            config,
            folder,
            resolver=resolver,
            sync_enabled=not no_sync,
        )
        if report is None:
            raise typer.Exit(ExitCode.GENERAL_ERROR)

    except RestartRequiredError as e:
        context.logger.info(str(e))
        print_restart_required(str(e))
        raise typer.Exit(ExitCode.RESTART_REQUIRED)
    except ToolMissingError as e:
        context.logger.error(str(e))
        print_tool_missing_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except NoGamesFoundError as e:
        context.logger.error(str(e))
        print_no_games_error(context.root)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except ConfigFetchError as e:
        context.logger.error(str(e))
        print_config_fetch_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except StoreMissingError as e:
        context.logger.error(str(e))
        print_store_missing_error(context.store_dir)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except SavelinkError as e:
        context.logger.error(str(e))
        print_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except KeyboardInterrupt:
        context.logger.info("Interrupted")
        raise typer.Exit(ExitCode.SIGINT)
