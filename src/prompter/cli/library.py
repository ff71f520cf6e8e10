"""Shared wiring: config, prompt library, usage tracker, launcher controller."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.console import Console

from prompter.cli.errors import err_config, err_db, err_library_not_found
from prompter.config import ConfigError, PrompterConfig, load_config
from prompter.corpus.models import Prompt
from prompter.corpus.provider import FileCorpusProvider
from prompter.db.connection import Database
from prompter.db.repository import UsageRepository
from prompter.db.schema import initialize
from prompter.errors import CorpusLoadError
from prompter.launcher.controller import NotificationSink, SelectionController
from prompter.launcher.paste import ClipboardAdapter, PasteOrchestrator
from prompter.search.frecency import FrecencyTracker
from prompter.search.ranking import RankingEngine

console = Console()


def load_settings(
    prompts_dir: Path | None = None,
    db: Path | None = None,
    *,
    config_path: Path | None = None,
) -> PrompterConfig:
    """Load layered config and apply CLI flag overrides on top."""
    try:
        cfg = load_config(global_config_path=config_path)
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)
    if prompts_dir is not None:
        cfg.library.prompts_dir = str(prompts_dir)
    if db is not None:
        cfg.library.db_path = str(db)
    return cfg


def load_prompts(cfg: PrompterConfig) -> list[Prompt]:
    """Read the prompt library, exiting with an actionable message if it is missing."""
    provider = FileCorpusProvider(cfg.library.prompts_dir)
    try:
        prompts = provider.get_all_prompts()
    except CorpusLoadError:
        console.print(err_library_not_found(str(provider.root)))
        raise typer.Exit(1)
    for path, reason in provider.skipped:
        console.print(f"[yellow]⚠[/]  Skipped {path}: {reason}")
    return prompts


@contextmanager
def open_tracker(cfg: PrompterConfig) -> Iterator[FrecencyTracker]:
    """Yield a FrecencyTracker over the SQLite usage store; closes the connection."""
    db_path = Path(cfg.library.db_path).expanduser()
    try:
        conn = Database(db_path).connect()
        initialize(conn)
    except sqlite3.Error as exc:
        console.print(err_db(str(db_path), str(exc)))
        raise typer.Exit(1)
    try:
        yield FrecencyTracker(UsageRepository(conn), cfg.frecency.tracker())
    finally:
        conn.close()


def build_controller(
    cfg: PrompterConfig,
    tracker: FrecencyTracker,
    clipboard: ClipboardAdapter,
    notify: NotificationSink | None = None,
) -> SelectionController:
    """Wire a SelectionController over the configured library for a window layer."""
    return SelectionController(
        FileCorpusProvider(cfg.library.prompts_dir),
        tracker,
        RankingEngine(cfg.search.ranking()),
        PasteOrchestrator(tracker, clipboard, cfg.paste.orchestrator()),
        coalescer=cfg.search.coalescer(),
        notify=notify,
    )
