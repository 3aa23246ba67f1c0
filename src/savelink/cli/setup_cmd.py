"""
savelink CLI - setup mode.

Runs the one-time bootstrap when the setup marker is absent.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from savelink.core.config.models import LauncherConfig
from savelink.core.context import RunContext
from savelink.core.links.models import LinkStatus
from savelink.core.setup import SetupController, SetupReport
from savelink.core.sync.service import ConflictResolver

console = Console()

_LINK_STYLES = {
    LinkStatus.LINKED: ("✓", "green"),
    LinkStatus.SKIPPED: ("○", "blue"),
    LinkStatus.FAILED: ("✗", "red"),
}


def _prompt_text(text: str) -> str:
    return typer.prompt(text, default="", show_default=False)


def render_setup_report(report: SetupReport, context: RunContext) -> None:
    """Print the games, links and shortcuts a setup run produced."""
    if report.pre_sync is not None:
        console.print(f"[dim]{report.pre_sync.summary()}[/dim]")

    table = Table(title="Linked save data")
    table.add_column("Game", style="cyan")
    table.add_column("Path")
    table.add_column("Status")
    table.add_column("Note", style="dim")

    for link in report.links:
        icon, color = _LINK_STYLES[link.status]
        try:
            game_dir, *rest = link.link_path.relative_to(context.root).parts
        except ValueError:
            game_dir, rest = "", [str(link.link_path)]
        table.add_row(
            game_dir,
            "/".join(rest),
            f"[{color}]{icon} {link.status.value}[/{color}]",
            link.reason,
        )

    console.print(table)

    if report.failed_links:
        console.print(
            f"[yellow]⚠[/yellow]  {len(report.failed_links)} links failed; "
            f"see {context.log_file}"
        )
    for shortcut in report.shortcuts:
        console.print(f"[dim]Shortcut: {shortcut}[/dim]")

    console.print(f"[green]✓[/green] Setup complete for {len(report.games)} games")
    console.print("[dim]Launch a game with [bold]savelink <folder>[/bold] or a shortcut.[/dim]")


def run_setup(
    context: RunContext,
    config: LauncherConfig,
    *,
    remote_url: str | None,
    interactive: bool,
    resolver: ConflictResolver | None,
) -> SetupReport:
    """
    Run setup and print its report.

    Fatal setup errors propagate to the caller.
    """
    console.print(f"[blue]Setting up savelink in {context.root}[/blue]")
    controller = SetupController(
        context,
        config,
        prompt=_prompt_text if interactive else None,
    )
    report = controller.run(remote_url=remote_url, interactive=interactive, resolver=resolver)
    render_setup_report(report, context)
    return report
