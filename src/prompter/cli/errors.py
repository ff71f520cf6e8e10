"""Prompter rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from prompter.cli.errors import err_library_not_found
    console.print(err_library_not_found("~/.prompter/prompts"))
    raise typer.Exit(1)
"""

from __future__ import annotations


def err_library_not_found(prompts_dir: str) -> str:
    """Prompt library directory does not exist."""
    return (
        f"[red]Error:[/] Prompt library not found at '{prompts_dir}'.\n"
        "  Run:  prompter init\n"
        "  Or set library.prompts_dir in prompter.yaml (or PROMPTER_PROMPTS_DIR)."
    )


def err_prompt_not_found(key: str) -> str:
    """No prompt with this id or name."""
    return (
        f"[red]Error:[/] No prompt matches '{key}'.\n"
        f"  Search for it:  prompter search {key}"
    )


def err_validation(field_errors: dict[str, str]) -> str:
    """Variable values failed validation; one line per field."""
    lines = "\n".join(f"    {name}: {msg}" for name, msg in sorted(field_errors.items()))
    return (
        "[red]Error:[/] Invalid variable values:\n"
        f"{lines}\n"
        "  Pass values with:  --var name=value"
    )


def err_bad_var(raw: str) -> str:
    """--var argument is not of the form name=value."""
    return (
        f"[red]Error:[/] Invalid --var '{raw}'.\n"
        "  Expected:  --var name=value"
    )


def err_clipboard(message: str) -> str:
    """The rendered prompt could not be copied."""
    return (
        f"[red]Error:[/] {message}\n"
        "  On Linux install xclip or xsel (or wl-clipboard under Wayland)."
    )


def err_config(detail: str) -> str:
    """A config file holds an invalid value."""
    return (
        f"[red]Error:[/] Invalid configuration: {detail}\n"
        "  Fix ~/.prompter/config.yaml or ./prompter.yaml."
    )


def err_db(db_path: str, detail: str) -> str:
    """The usage database could not be opened."""
    return (
        f"[red]Error:[/] Cannot open usage database '{db_path}': {detail}\n"
        "  Check the path, or set library.db_path (or PROMPTER_DB)."
    )
