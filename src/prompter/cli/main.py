"""Prompter CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from prompter.cli.init import init_cmd
from prompter.cli.search import search_cmd
from prompter.cli.stats import stats_cmd
from prompter.cli.use import use_cmd


def _version() -> str:
    try:
        return importlib.metadata.version("prompter")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"prompter {_version()}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=verbose, show_path=verbose)],
        force=True,
    )


app = typer.Typer(
    name="prompter",
    help=(
        "Prompter — find a saved prompt, fill it in, copy or paste it.\n\n"
        "  prompter search   Fuzzy + frecency ranked search over the library.\n"
        "  prompter use      Render a prompt and copy (or paste) it."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log debug output to stderr."),
    ] = False,
) -> None:
    """Prompter — prompt launcher CLI."""
    _configure_logging(verbose)


app.command("init")(init_cmd)
app.command("search")(search_cmd)
app.command("use")(use_cmd)
app.command("stats")(stats_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed Prompter version."""
    typer.echo(f"prompter {_version()}")


if __name__ == "__main__":
    app()
