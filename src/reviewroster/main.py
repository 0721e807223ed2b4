"""Main CLI entry point for ReviewRoster.

This module provides the Typer application used to run the HTTP API and to
perform administrative tasks against the database.

Usage:
    reviewroster serve --port 8080
    reviewroster init-db
    reviewroster stats --format json
    reviewroster teams
    reviewroster deactivate-team backend --yes
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from reviewroster.config import ReviewRosterConfig, load_config
from reviewroster.database.connection import create_schema, get_engine, get_session_factory
from reviewroster.database.queries import deactivate_team, get_team, list_teams
from reviewroster.database.stores import SqlPullRequestStore
from reviewroster.domain import ReviewerStat
from reviewroster.errors import NotFoundError, ReviewRosterError
from reviewroster.logging import setup_logging
from reviewroster.services import ReviewerStatsService

app = typer.Typer(
    name="reviewroster",
    help="ReviewRoster: pull request reviewer assignment",
    no_args_is_help=True,
)

console = Console()


class AppContext:
    """Application context shared across CLI commands.

    Attributes:
        config: Loaded ReviewRoster configuration
        config_path: Configuration file given with --config, if any
    """

    def __init__(self, config: ReviewRosterConfig, config_path: Path | None = None):
        self.config = config
        self.config_path = config_path


# Global context holder
_app_context: AppContext | None = None


def get_app_context() -> AppContext:
    """Get the shared application context.

    Raises:
        RuntimeError: If context has not been initialized
    """
    if _app_context is None:
        raise RuntimeError("Application context not initialized. Call initialize_context first.")
    return _app_context


def initialize_context(
    config: ReviewRosterConfig, config_path: Path | None = None
) -> AppContext:
    """Initialize the global application context."""
    global _app_context
    _app_context = AppContext(config, config_path)
    return _app_context


@app.command()
def serve(
    host: Annotated[
        Optional[str],
        typer.Option("--host", "-h", help="Host to bind to (default from config)"),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port to bind to (default from config)"),
    ] = None,
    reload: Annotated[
        bool,
        typer.Option("--reload", "-r", help="Enable auto-reload (development)"),
    ] = False,
) -> None:
    """Start the ReviewRoster HTTP API."""
    import uvicorn

    from reviewroster.web.app import CONFIG_PATH_ENV, create_app

    context = get_app_context()
    config = context.config
    bind_host = host or config.web.host
    bind_port = port or config.web.port

    console.print("[bold cyan]Starting ReviewRoster API[/bold cyan]")
    console.print(f"[dim]Host:[/dim] {bind_host}")
    console.print(f"[dim]Port:[/dim] {bind_port}")
    console.print()

    if not reload:
        uvicorn.run(
            create_app(config),
            host=bind_host,
            port=bind_port,
            log_level=config.logging.level.lower(),
        )
        return

    # The reload worker rebuilds the app from an import string in a new process
    if context.config_path is not None:
        os.environ[CONFIG_PATH_ENV] = str(context.config_path.resolve())
    os.environ["REVIEWROSTER_LOGGING__LEVEL"] = config.logging.level
    os.environ["REVIEWROSTER_LOGGING__FORMAT"] = config.logging.format

    uvicorn.run(
        "reviewroster.web.app:create_app_from_environment",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=True,
        log_level=config.logging.level.lower(),
    )


@app.command("init-db")
def init_db() -> None:
    """Create any missing database tables.

    Production deployments should prefer ``alembic upgrade head``; this
    command is meant for local databases and throwaway environments.
    """
    config = get_app_context().config

    async def _init_db() -> None:
        engine = get_engine(config.database)
        try:
            await create_schema(engine)
        finally:
            await engine.dispose()

    try:
        asyncio.run(_init_db())
    except Exception as e:
        console.print(f"[red]Error creating schema:[/red] {e}")
        raise typer.Exit(code=1)

    console.print("[green]Database schema is up to date[/green]")


@app.command()
def stats(
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (table or json)"),
    ] = "table",
) -> None:
    """Show how many review assignments each user holds."""
    config = get_app_context().config

    async def _load_stats() -> list[ReviewerStat]:
        engine = get_engine(config.database)
        try:
            service = ReviewerStatsService(SqlPullRequestStore(get_session_factory(engine)))
            return await service.get_reviewer_stats()
        finally:
            await engine.dispose()

    try:
        reviewer_stats = asyncio.run(_load_stats())
    except ReviewRosterError as e:
        console.print(f"[red]Error loading reviewer stats:[/red] {e}")
        raise typer.Exit(code=1)

    if format == "json":
        console.print(json.dumps([stat.model_dump() for stat in reviewer_stats], indent=2))
        return

    if not reviewer_stats:
        console.print("[yellow]No review assignments found[/yellow]")
        return

    table = Table(title="Reviewer Stats")
    table.add_column("User", style="cyan", no_wrap=True)
    table.add_column("Assignments", style="bold", justify="right")
    for stat in reviewer_stats:
        table.add_row(stat.user_id, str(stat.count))
    console.print(table)


@app.command()
def teams(
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (table or json)"),
    ] = "table",
) -> None:
    """List teams with their active and total member counts."""
    config = get_app_context().config

    async def _load_teams() -> list[dict[str, Any]]:
        engine = get_engine(config.database)
        try:
            async with get_session_factory(engine)() as session:
                rows = await list_teams(session)
                return [
                    {
                        "team_name": team.team_name,
                        "members": len(team.members),
                        "active": sum(1 for member in team.members if member.is_active),
                    }
                    for team in rows
                ]
        finally:
            await engine.dispose()

    try:
        team_rows = asyncio.run(_load_teams())
    except ReviewRosterError as e:
        console.print(f"[red]Error listing teams:[/red] {e}")
        raise typer.Exit(code=1)

    if format == "json":
        console.print(json.dumps(team_rows, indent=2))
        return

    if not team_rows:
        console.print("[yellow]No teams found[/yellow]")
        return

    table = Table(title="Teams")
    table.add_column("Team", style="cyan", no_wrap=True)
    table.add_column("Active", style="green", justify="right")
    table.add_column("Members", justify="right")
    for row in team_rows:
        table.add_row(row["team_name"], str(row["active"]), str(row["members"]))
    console.print(table)


@app.command("deactivate-team")
def deactivate_team_command(
    team_name: Annotated[str, typer.Argument(help="Team whose members are flagged inactive")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip the confirmation prompt"),
    ] = False,
) -> None:
    """Flag every member of a team inactive without reassigning reviews.

    Open pull requests keep their current reviewers. Use the
    ``/team/deactivateMembers`` endpoint to rebalance reviews instead.
    """
    config = get_app_context().config

    if not yes:
        typer.confirm(
            f"Deactivate every member of {team_name} without reassigning reviews?",
            abort=True,
        )

    async def _deactivate() -> int:
        engine = get_engine(config.database)
        try:
            async with get_session_factory(engine)() as session:
                if await get_team(session, team_name) is None:
                    raise NotFoundError(
                        f"team {team_name} not found",
                        entity="team",
                        entity_id=team_name,
                        operation="deactivate_team",
                    )
                return await deactivate_team(session, team_name)
        finally:
            await engine.dispose()

    try:
        updated = asyncio.run(_deactivate())
    except ReviewRosterError as e:
        console.print(f"[red]Error deactivating team:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"[green]Deactivated {updated} member(s) of {team_name}[/green]")


@app.callback()
def main_callback(
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (TOML format)",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Load configuration, configure logging and initialize the context."""
    try:
        config = load_config(config_path)
    except ValueError as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        raise typer.Exit(code=1)

    if verbose:
        config.logging.level = "DEBUG"
        config.logging.format = "console"

    setup_logging(config.logging)
    initialize_context(config, config_path)

    if verbose:
        console.print("[dim]Debug logging enabled[/dim]")


if __name__ == "__main__":
    app()
