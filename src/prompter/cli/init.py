"""prompter init — create the global config and a starter prompt library.

Creates (existing files are never overwritten):
  ~/.prompter/config.yaml          — global config (mode 0o600)
  <prompts_dir>/                   — prompt library
  <prompts_dir>/code-review.md     — example prompt with a variable
  <db_path>                        — usage database with schema
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from prompter.cli.library import load_settings, open_tracker
from prompter.config import ensure_global_config

console = Console()

_EXAMPLE_NAME = "code-review.md"
_EXAMPLE_PROMPT = """\
---
name: Code Review
description: Ask for a focused review of a diff
tags: [coding, review]
variables:
  - name: language
    default: Python
    required: true
    description: Language of the code under review
auto_paste: false
---
Review the following {{language}} code. Point out bugs first, then
readability issues. Keep each remark to one or two sentences.
"""


def init_cmd(
    config_path: Annotated[
        Path | None,
        typer.Option("--config", hidden=True, help="Override global config path (for testing)."),
    ] = None,
    prompts_dir: Annotated[
        Path | None,
        typer.Option("--prompts-dir", help="Library directory to create."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Usage database to create."),
    ] = None,
    no_example: Annotated[
        bool,
        typer.Option("--no-example", help="Do not write the example prompt."),
    ] = False,
) -> None:
    """Set up Prompter: global config, prompt library, usage database."""
    cfg_path = ensure_global_config(config_path)
    console.print(f"  [green]✓[/] {cfg_path} (global config)")

    cfg = load_settings(prompts_dir, db, config_path=cfg_path)
    library = Path(cfg.library.prompts_dir).expanduser()
    library.mkdir(parents=True, exist_ok=True)
    console.print(f"  [green]✓[/] {library}/")

    if not no_example:
        example = library / _EXAMPLE_NAME
        if example.exists():
            console.print(f"  [dim]-[/] {example} exists, left untouched")
        else:
            example.write_text(_EXAMPLE_PROMPT, encoding="utf-8")
            console.print(f"  [green]✓[/] {example}")

    with open_tracker(cfg):
        pass
    console.print(f"  [green]✓[/] {Path(cfg.library.db_path).expanduser()} (usage database)")

    console.print("\n[bold green]✓ Prompter initialized.[/]")
    console.print("\nNext steps:")
    console.print("  1. Add prompts as Markdown files to the library")
    console.print("  2. prompter search <text>          (find a prompt)")
    console.print("  3. prompter use <id> --var k=v     (copy it to the clipboard)")
