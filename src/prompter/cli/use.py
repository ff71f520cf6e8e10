"""prompter use — render a prompt, copy it, and optionally paste it.

Runs the same dispatch sequence as the launcher: usage is recorded, the
rendered text goes to the clipboard, and when auto-paste applies the paste
shortcut is sent to the focused window. The outcome is printed as a
success / partial / error notification.

Exit codes:
  0  copied (paste may be uncertain)
  1  prompt not found, invalid variables, or clipboard failure
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from prompter.cli.errors import err_bad_var, err_clipboard, err_prompt_not_found, err_validation
from prompter.cli.library import load_prompts, load_settings, open_tracker
from prompter.clipboard import SystemClipboard
from prompter.corpus.models import Prompt
from prompter.corpus.provider import find_prompt
from prompter.errors import ValidationError
from prompter.launcher.paste import Notification, PasteOrchestrator, classify
from prompter.launcher.templates import TemplateRenderer, undeclared_placeholders

console = Console()

_STYLES = {
    "success": "[green]✓[/]",
    "partial": "[yellow]⚠[/]",
    "error": "[red]✗[/]",
}


def use_cmd(
    prompt_key: Annotated[str, typer.Argument(help="Prompt id (relative path) or name.")],
    var: Annotated[
        list[str] | None,
        typer.Option("--var", "-v", help="Variable value as name=value (repeatable)."),
    ] = None,
    paste: Annotated[
        bool | None,
        typer.Option("--paste/--no-paste", help="Override the prompt's auto_paste setting."),
    ] = None,
    ask: Annotated[
        bool,
        typer.Option("--ask", help="Prompt for each variable not given with --var."),
    ] = False,
    show: Annotated[
        bool,
        typer.Option("--print", help="Also print the rendered text."),
    ] = False,
    prompts_dir: Annotated[
        Path | None,
        typer.Option("--prompts-dir", help="Override library.prompts_dir."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Override library.db_path."),
    ] = None,
) -> None:
    """Copy a prompt to the clipboard, filling in its variables."""
    cfg = load_settings(prompts_dir, db)
    prompt = find_prompt(load_prompts(cfg), prompt_key)
    if prompt is None:
        console.print(err_prompt_not_found(prompt_key))
        raise typer.Exit(1)

    if paste is not None:
        prompt = dataclasses.replace(prompt, auto_paste=paste)

    supplied = _parse_vars(var or [])
    if ask:
        supplied = _ask_missing(prompt, supplied)

    for name in undeclared_placeholders(prompt.content, prompt.variables):
        if name not in supplied:
            console.print(f"[yellow]⚠[/]  '{{{{{name}}}}}' is not a declared variable; left as is.")

    try:
        text = _render(prompt, supplied)
    except ValidationError as exc:
        console.print(err_validation(exc.field_errors))
        raise typer.Exit(1)

    with open_tracker(cfg) as tracker:
        orchestrator = PasteOrchestrator(tracker, SystemClipboard(), cfg.paste.orchestrator())
        outcome = orchestrator.dispatch(prompt, text)

    if show:
        typer.echo(text)

    if not outcome.clipboard_success:
        console.print(err_clipboard(outcome.message))
        raise typer.Exit(1)
    _print_notification(classify(outcome, prompt.name))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_vars(raw: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for item in raw:
        name, sep, value = item.partition("=")
        if not sep or not name:
            console.print(err_bad_var(item))
            raise typer.Exit(1)
        values[name] = value
    return values


def _render(prompt: Prompt, supplied: dict[str, str]) -> str:
    """Render *prompt*; raises ValidationError carrying the per-field messages."""
    result = TemplateRenderer().render(prompt, supplied)
    if not result.ok or result.text is None:
        raise ValidationError(result.errors)
    return result.text


def _ask_missing(prompt: Prompt, supplied: dict[str, str]) -> dict[str, str]:
    values = dict(supplied)
    for spec in prompt.variables:
        if spec.name in values:
            continue
        label = spec.name + (f" ({spec.description})" if spec.description else "")
        values[spec.name] = typer.prompt(label, default=spec.default, show_default=bool(spec.default))
    return values


def _print_notification(notification: Notification) -> None:
    marker = _STYLES.get(notification.kind, "")
    console.print(f"{marker} {notification.title}")
    console.print(f"  [dim]{notification.detail}[/]")
