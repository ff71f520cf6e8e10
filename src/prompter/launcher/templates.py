"""Variable substitution for prompt templates.

Placeholders are written ``{{name}}`` with the exact variable name between
the braces (no inner whitespace trimming). Substitution is a single pass over
the original content: a value that itself contains ``{{other}}`` is inserted
verbatim and never expanded. Nested templates are unsupported.

Variable names are escaped before they become part of the match pattern, so a
name such as ``a.b`` or ``x*y`` only ever matches its own literal token.

Value resolution at dispatch time (resolve_values):
  supplied non-empty value → declared default → "" (non-required only)

Validation never raises; it returns a field → message dict.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from prompter.corpus.models import Prompt, VariableSpec

_PLACEHOLDER_RE = re.compile(r"\{\{(.+?)\}\}")


@dataclass
class RenderResult:
    text: str | None
    errors: dict[str, str] = field(default_factory=dict)
    values: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class TemplateRenderer:
    """Resolves, validates and substitutes prompt variables."""

    def substitute(
        self,
        content: str,
        values: Mapping[str, str],
        variables: Sequence[VariableSpec] = (),
    ) -> str:
        """Replace ``{{name}}`` tokens in *content* in one pass.

        A token is replaced when its name is declared in *variables* or
        supplied in *values* and a value resolves: the supplied value if
        non-empty, else the declared default, else an explicitly supplied
        empty string. Tokens with no resolvable value are left untouched.
        """
        replacements: dict[str, str] = {}
        for spec in variables:
            if spec.default:
                replacements[spec.name] = spec.default
        for name, value in values.items():
            if value:
                replacements[name] = value
            elif name not in replacements:
                replacements[name] = value

        if not replacements:
            return content

        # Longest names first so overlapping alternatives prefer the full token.
        names = sorted(replacements, key=len, reverse=True)
        pattern = re.compile(
            "|".join(re.escape("{{" + name + "}}") for name in names)
        )
        return pattern.sub(lambda m: replacements[m.group(0)[2:-2]], content)

    def resolve_values(
        self, variables: Sequence[VariableSpec], supplied: Mapping[str, str]
    ) -> dict[str, str]:
        """Return the final value for every declared variable.

        Required variables with nothing supplied and no default are omitted;
        validate() reports them.
        """
        resolved: dict[str, str] = {}
        for spec in variables:
            value = supplied.get(spec.name) or spec.default
            if value:
                resolved[spec.name] = value
            elif not spec.required:
                resolved[spec.name] = ""
        return resolved

    def validate(
        self, variables: Sequence[VariableSpec], values: Mapping[str, str]
    ) -> dict[str, str]:
        """Check resolved *values* against each VariableSpec.

        Returns:
            Mapping of variable name → message. Empty when everything passes.
        """
        errors: dict[str, str] = {}
        for spec in variables:
            value = values.get(spec.name, "")
            if not value.strip():
                if spec.required:
                    errors[spec.name] = f"'{spec.name}' is required"
                continue
            if spec.validation_regex:
                try:
                    pattern = re.compile(spec.validation_regex)
                except re.error as exc:
                    errors[spec.name] = f"invalid validation pattern for '{spec.name}': {exc}"
                    continue
                if pattern.fullmatch(value) is None:
                    errors[spec.name] = (
                        f"'{value}' does not match the required format "
                        f"({spec.validation_regex})"
                    )
        return errors

    def render(self, prompt: Prompt, supplied: Mapping[str, str] | None = None) -> RenderResult:
        """Resolve, validate and substitute *prompt*'s variables.

        Returns:
            RenderResult with ``text=None`` and populated ``errors`` when
            validation fails; otherwise the rendered text.
        """
        values = self.resolve_values(prompt.variables, supplied or {})
        errors = self.validate(prompt.variables, values)
        if errors:
            return RenderResult(text=None, errors=errors, values=values)
        text = self.substitute(prompt.content, values, prompt.variables)
        return RenderResult(text=text, values=values)


def find_placeholders(content: str) -> list[str]:
    """Return placeholder names in order of first appearance (deduplicated)."""
    seen: dict[str, None] = {}
    for match in _PLACEHOLDER_RE.finditer(content):
        seen.setdefault(match.group(1), None)
    return list(seen)


def undeclared_placeholders(content: str, variables: Iterable[VariableSpec]) -> list[str]:
    """Return placeholders in *content* that no VariableSpec declares."""
    declared = {spec.name for spec in variables}
    return [name for name in find_placeholders(content) if name not in declared]
