"""prompter stats — usage counters and frecency per prompt."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from prompter.cli.library import load_settings, open_tracker
from prompter.corpus.provider import FileCorpusProvider
from prompter.errors import CorpusLoadError

console = Console()

_BARS = " ▁▂▃▄▅▆▇█"


def stats_cmd(
    days: Annotated[
        int,
        typer.Option("--days", min=1, max=90, help="Window for the daily usage column."),
    ] = 7,
    prompts_dir: Annotated[
        Path | None,
        typer.Option("--prompts-dir", help="Override library.prompts_dir."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Override library.db_path."),
    ] = None,
) -> None:
    """Show how often and how recently each prompt was used."""
    cfg = load_settings(prompts_dir, db)

    # Library is optional here; unknown ids are shown raw.
    try:
        names = {p.id: p.name for p in FileCorpusProvider(cfg.library.prompts_dir).get_all_prompts()}
    except CorpusLoadError:
        names = {}

    today = datetime.now(timezone.utc).date()
    with open_tracker(cfg) as tracker:
        snapshot = tracker.snapshot()
        rows = []
        for record in tracker.records():
            daily = tracker.daily_usage(record.prompt_id, days=days, today=today)
            rows.append((record, snapshot.score(record.prompt_id), daily))

    if not rows:
        console.print("[dim]No usage recorded yet.[/]  Run:  prompter use <prompt>")
        return

    rows.sort(key=lambda row: (-row[1], row[0].prompt_id))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Prompt")
    table.add_column("Uses", justify="right")
    table.add_column("Last used")
    table.add_column("Frecency", justify="right")
    table.add_column(f"Last {days}d", justify="right")
    table.add_column("Trend")

    for record, score, daily in rows:
        name = names.get(record.prompt_id)
        label = f"{name} [dim]({record.prompt_id})[/]" if name else f"[dim]{record.prompt_id}[/]"
        counts = _series(daily, today, days)
        table.add_row(
            label,
            str(record.use_count),
            record.last_used.strftime("%Y-%m-%d %H:%M"),
            f"{score:.3f}",
            str(sum(counts)),
            _sparkline(counts),
        )
    console.print(table)


def _series(daily: dict[str, int], today: date, days: int) -> list[int]:
    """Dense per-day counts, oldest first."""
    start = today - timedelta(days=days - 1)
    return [daily.get((start + timedelta(days=i)).isoformat(), 0) for i in range(days)]


def _sparkline(counts: list[int]) -> str:
    peak = max(counts, default=0)
    if peak == 0:
        return ""
    return "".join(_BARS[round(c / peak * (len(_BARS) - 1))] for c in counts)
