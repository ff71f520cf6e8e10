"""prompter search — ranked prompt list for a query.

An empty query lists prompts by frecency (most used recently first).
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from prompter.cli.library import load_prompts, load_settings, open_tracker
from prompter.search.ranking import RankingEngine, SearchResult

console = Console()

_SNIPPET_LEN = 60


def search_cmd(
    query: Annotated[str, typer.Argument(help="Search text. Omit to list by frecency.")] = "",
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Maximum results (default: search.limit)."),
    ] = None,
    prompts_dir: Annotated[
        Path | None,
        typer.Option("--prompts-dir", help="Override library.prompts_dir."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Override library.db_path."),
    ] = None,
) -> None:
    """Search the prompt library."""
    cfg = load_settings(prompts_dir, db)
    prompts = load_prompts(cfg)

    ranking = cfg.search.ranking()
    if limit is not None:
        ranking.limit = limit

    with open_tracker(cfg) as tracker:
        snapshot = tracker.snapshot()
    results = RankingEngine(ranking).rank(query, prompts, snapshot)

    if not results:
        console.print(f"[dim]No prompts match '{query}'.[/]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Prompt")
    table.add_column("ID", style="dim")
    table.add_column("Match")
    table.add_column("Score", justify="right")

    for pos, result in enumerate(results, start=1):
        table.add_row(
            str(pos),
            _name_cell(result),
            result.prompt.id,
            _match_cell(result),
            f"{result.score:.3f}",
        )
    console.print(table)


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def highlight(text: str, ranges: tuple[tuple[int, int], ...], limit: int | None = None) -> Text:
    """Return *text* as rich Text with *ranges* in bold yellow, cut to *limit* chars."""
    shown = text if limit is None or len(text) <= limit else text[: limit - 1] + "…"
    out = Text(shown)
    for start, end in ranges:
        end = min(end, len(shown))
        if start < end:
            out.stylize("bold yellow", start, end)
    return out


def _name_cell(result: SearchResult) -> Text:
    if result.matched_field == "name":
        return highlight(result.prompt.name, result.highlights)
    return Text(result.prompt.name)


def _match_cell(result: SearchResult) -> Text:
    if result.matched_field is None:
        return Text("frecency", style="dim")
    if result.matched_field == "name":
        return Text("name", style="dim")
    label = Text(f"{result.matched_field}: ", style="dim")
    snippet = highlight(result.matched_text.replace("\n", " "), result.highlights, _SNIPPET_LEN)
    return label + snippet
