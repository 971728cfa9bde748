"""
Timeline CLI: replay tic-tac-toe session scripts and inspect the state tree.

Session scripts are YAML lists of branch/edit/remove operations (see
timeline.io.session_loader). Each run starts from an empty board.
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from timeline.cli.formatters import build_operations_table, build_state_tree
from timeline.config import configure_logging, load_settings
from timeline.core.projections import cache_as_tree
from timeline.core.timeline import Timeline
from timeline.games.tictactoe import TRANSFORMATIONS, create_initial_board, game_outcome
from timeline.io.errors import LoaderError
from timeline.io.session_loader import load_session, replay

app = typer.Typer(help="Timeline CLI: replay tic-tac-toe sessions over a branching timeline.")
console = Console()


def _load_session_or_exit(session: str, *, verbose: bool = False):
    try:
        return load_session(session)
    except LoaderError as err:
        if verbose and err.cause:
            console.print(f"[red]Failed to load session:[/red] {err.message}\n{err.cause}")
        else:
            console.print(f"[red]Failed to load session:[/red] {err}")
        raise typer.Exit(code=1)


@app.command()
def validate(
    session: str = typer.Argument(..., help="Session YAML file"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Validate a session file without running it."""
    spec = _load_session_or_exit(session, verbose=verbose)
    console.print(f"[green]OK[/green] Loaded {len(spec.operations)} operation(s)")


@app.command()
def play(
    session: str = typer.Argument(..., help="Session YAML file"),
    config: str | None = typer.Option(None, "--config", "-c", help="Timeline settings YAML"),
    strict: bool = typer.Option(False, "--strict", help="Exit with code 1 if any operation was rejected"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine activity"),
) -> None:
    """Replay a session on a fresh tic-tac-toe timeline and show the resulting tree."""
    try:
        settings = load_settings(config)
    except LoaderError as err:
        console.print(f"[red]Failed to load settings:[/red] {err}")
        raise typer.Exit(code=1)
    configure_logging("DEBUG" if verbose else settings.log_level)

    spec = _load_session_or_exit(session, verbose=verbose)

    timeline = Timeline(TRANSFORMATIONS, create_initial_board, settings=settings)
    reports = asyncio.run(replay(timeline, spec))

    console.print(build_operations_table(reports))

    states = timeline.get_states()
    cache = timeline.get_cache()
    console.print(build_state_tree(cache_as_tree(states, cache), states, render_data=lambda board: board.render()))

    verdict, x_wins, o_wins = game_outcome(cache)
    if verdict == "x":
        console.print(f"[bold green]X won on {x_wins} board(s)![/bold green]")
    elif verdict == "o":
        console.print(f"[bold green]O won on {o_wins} board(s)![/bold green]")
    elif verdict == "tie":
        console.print(f"[bold yellow]Tie! X won on {x_wins} board(s) and O won on {o_wins} board(s)[/bold yellow]")
    else:
        console.print("[dim]No winner yet[/dim]")

    rejected = sum(1 for r in reports if not r.applied)
    if rejected:
        console.print(f"[red]Rejected: {rejected}[/red]")
        if strict:
            raise typer.Exit(code=1)


__all__ = ["app"]
