"""Prompter configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (PROMPTER_PROMPTS_DIR, PROMPTER_DB)
  3. Per-directory prompter.yaml
  4. Global ~/.prompter/config.yaml
  5. Hardcoded defaults

All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from prompter.launcher.debounce import QueryCoalescer
from prompter.launcher.paste import PasteConfig
from prompter.search.frecency import FrecencyConfig
from prompter.search.ranking import RankingConfig

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".prompter"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "prompter.yaml"

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["library", "search", "frecency", "paste"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class LibraryCfg:
    """Where prompts and usage data live (prompter.yaml: library:)."""

    prompts_dir: str = str(_GLOBAL_CONFIG_DIR / "prompts")
    db_path: str = str(_GLOBAL_CONFIG_DIR / "usage.db")


@dataclass
class SearchCfg:
    """Ranking + debounce configuration (prompter.yaml: search:).

    Attributes:
        limit: Maximum results shown; 0 means unlimited.
        debounce_ms: Quiet period before a query edit is re-ranked.
        fuzzy_weight: Weight of fuzzy relevance for non-empty queries.
        frecency_weight: Weight of frecency for non-empty queries. Keep well
            below fuzzy_weight so usage never overrides a strong match.
    """

    limit: int = 50
    debounce_ms: int = 150
    fuzzy_weight: float = 1.0
    frecency_weight: float = 0.15

    def ranking(self) -> RankingConfig:
        return RankingConfig(
            fuzzy_weight=self.fuzzy_weight,
            frecency_weight=self.frecency_weight,
            limit=self.limit or None,
        )

    def coalescer(self) -> QueryCoalescer:
        return QueryCoalescer(delay_ms=self.debounce_ms)


@dataclass
class FrecencyCfg:
    """Frecency decay constants (prompter.yaml: frecency:)."""

    half_life_days: float = 14.0
    frequency_scale: float = 5.0

    def tracker(self) -> FrecencyConfig:
        return FrecencyConfig(
            half_life_days=self.half_life_days, frequency_scale=self.frequency_scale
        )


@dataclass
class PasteCfg:
    """Clipboard/paste timing (prompter.yaml: paste:)."""

    clipboard_settle_ms: int = 20
    paste_delay_ms: int = 100
    verify_clipboard: bool = True

    def orchestrator(self) -> PasteConfig:
        return PasteConfig(
            clipboard_settle_ms=self.clipboard_settle_ms,
            paste_delay_ms=self.paste_delay_ms,
            verify_clipboard=self.verify_clipboard,
        )


@dataclass
class PrompterConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    library: LibraryCfg = field(default_factory=LibraryCfg)
    search: SearchCfg = field(default_factory=SearchCfg)
    frecency: FrecencyCfg = field(default_factory=FrecencyCfg)
    paste: PasteCfg = field(default_factory=PasteCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _validate(cfg: PrompterConfig) -> None:
    """Raise ConfigError for values the pipeline cannot work with."""
    if cfg.search.limit < 0:
        raise ConfigError(f"search.limit must be >= 0, got {cfg.search.limit}")
    if cfg.search.debounce_ms < 0:
        raise ConfigError(f"search.debounce_ms must be >= 0, got {cfg.search.debounce_ms}")
    if cfg.search.fuzzy_weight < 0 or cfg.search.frecency_weight < 0:
        raise ConfigError("search.fuzzy_weight and search.frecency_weight must be >= 0")
    if cfg.frecency.half_life_days <= 0:
        raise ConfigError(
            f"frecency.half_life_days must be > 0, got {cfg.frecency.half_life_days}"
        )
    if cfg.frecency.frequency_scale <= 0:
        raise ConfigError(
            f"frecency.frequency_scale must be > 0, got {cfg.frecency.frequency_scale}"
        )
    if cfg.paste.clipboard_settle_ms < 0 or cfg.paste.paste_delay_ms < 0:
        raise ConfigError("paste delays must be >= 0")


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    raw = data.get(name)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(raw).__name__}")
    return raw


def _cfg_from_dict(data: dict[str, Any]) -> PrompterConfig:
    """Build a *PrompterConfig* from a merged raw YAML dict."""
    cfg = PrompterConfig()

    try:
        lib = _section(data, "library")
        cfg.library = LibraryCfg(
            prompts_dir=str(lib.get("prompts_dir", cfg.library.prompts_dir)),
            db_path=str(lib.get("db_path", cfg.library.db_path)),
        )

        s = _section(data, "search")
        cfg.search = SearchCfg(
            limit=int(s.get("limit", cfg.search.limit)),
            debounce_ms=int(s.get("debounce_ms", cfg.search.debounce_ms)),
            fuzzy_weight=float(s.get("fuzzy_weight", cfg.search.fuzzy_weight)),
            frecency_weight=float(s.get("frecency_weight", cfg.search.frecency_weight)),
        )

        f = _section(data, "frecency")
        cfg.frecency = FrecencyCfg(
            half_life_days=float(f.get("half_life_days", cfg.frecency.half_life_days)),
            frequency_scale=float(f.get("frequency_scale", cfg.frecency.frequency_scale)),
        )

        p = _section(data, "paste")
        cfg.paste = PasteCfg(
            clipboard_settle_ms=int(p.get("clipboard_settle_ms", cfg.paste.clipboard_settle_ms)),
            paste_delay_ms=int(p.get("paste_delay_ms", cfg.paste.paste_delay_ms)),
            verify_clipboard=bool(p.get("verify_clipboard", cfg.paste.verify_clipboard)),
        )
    except (TypeError, ValueError) as exc:
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(f"Invalid config value: {exc}") from exc

    return cfg


def _apply_env_overrides(cfg: PrompterConfig) -> PrompterConfig:
    """Apply PROMPTER_* environment variable overrides (priority 2)."""
    if prompts_dir := os.environ.get("PROMPTER_PROMPTS_DIR"):
        cfg.library.prompts_dir = prompts_dir
    if db_path := os.environ.get("PROMPTER_DB"):
        cfg.library.db_path = db_path
    return cfg


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file '{path}' is not valid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping at the top level.")
    return raw


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> PrompterConfig:
    """Load and return a merged *PrompterConfig*.

    Applies layers in order: global → per-directory → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *prompter.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged *PrompterConfig* with env var overrides applied.

    Raises:
        ConfigError: If a config file is not valid YAML or holds a value of
            the wrong type or range.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    # Layer 2: per-directory config
    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)

    # Layer 3: env var overrides
    cfg = _apply_env_overrides(cfg)

    _validate(cfg)
    return cfg


def ensure_global_config(
    global_config_path: Path | None = None,
) -> Path:
    """Create ``~/.prompter/config.yaml`` with defaults if it does not exist.

    Creates parent directory with mode 0o700 and the config file with
    mode 0o600 (owner-readable only).

    Args:
        global_config_path: Override path (for testing).

    Returns:
        Path to the global config file.
    """
    target = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    if not target.exists():
        prompts_dir = target.parent / "prompts"
        db_path = target.parent / "usage.db"
        content = (
            "# Prompter global configuration.\n"
            "# A prompter.yaml in the working directory overrides these values.\n"
            "\n"
            "library:\n"
            f"  prompts_dir: {prompts_dir}\n"
            f"  db_path: {db_path}\n"
            "\n"
            "search:\n"
            "  limit: 50\n"
            "  debounce_ms: 150\n"
            "\n"
            "frecency:\n"
            "  half_life_days: 14\n"
            "  frequency_scale: 5\n"
        )
        target.write_text(content, encoding="utf-8")
        target.chmod(0o600)

    return target
