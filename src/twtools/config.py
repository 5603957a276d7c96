"""twtools configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site, not in this module)
  2. Environment variables  (TWTOOLS_CACHE_DIR, TWTOOLS_USER_AGENT)
  3. Per-project twtools.yaml  (current working directory)
  4. Global ~/.twtools/config.yaml
  5. Hardcoded defaults

All YAML reads use yaml.safe_load(), never yaml.load().
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".twtools"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "twtools.yaml"

DEFAULT_CACHE_DIR: Path = Path.home() / ".cache" / "twitter-tools"
DEFAULT_USER_AGENT: str = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["cache", "http"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class CacheCfg:
    """Cache location (twtools.yaml: cache:)."""

    dir: Path = field(default_factory=lambda: DEFAULT_CACHE_DIR)


@dataclass
class HttpCfg:
    """HTTP client settings (twtools.yaml: http:).

    Attributes:
        user_agent: Sent with every lookup and media download.
        timeout: Socket timeout in seconds; None leaves urllib's default in place.
    """

    user_agent: str = DEFAULT_USER_AGENT
    timeout: float | None = None


@dataclass
class TwtoolsConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    cache: CacheCfg = field(default_factory=CacheCfg)
    http: HttpCfg = field(default_factory=HttpCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}'; ignored.",
                UserWarning,
                stacklevel=4,
            )


def _read_yaml(path: Path) -> dict[str, Any]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(
            f"Config file '{path}' must contain a mapping at the top level."
        )
    return raw


def _parse_timeout(value: Any, source: str) -> float | None:
    if value is None:
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"http.timeout must be a number in {source}, got {value!r}")
    if timeout <= 0:
        raise ConfigError(f"http.timeout must be > 0 in {source}, got {value!r}")
    return timeout


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


def _cfg_from_dict(data: dict[str, Any]) -> TwtoolsConfig:
    """Build a *TwtoolsConfig* from a merged raw YAML dict."""
    cfg = TwtoolsConfig()

    if "cache" in data:
        c = data["cache"] or {}
        if c.get("dir"):
            cfg.cache = CacheCfg(dir=Path(str(c["dir"])).expanduser())

    if "http" in data:
        h = data["http"] or {}
        cfg.http = HttpCfg(
            user_agent=str(h.get("user_agent", cfg.http.user_agent)),
            timeout=_parse_timeout(h.get("timeout"), "config"),
        )

    return cfg


def _apply_env_overrides(cfg: TwtoolsConfig) -> TwtoolsConfig:
    """Apply TWTOOLS_* environment variable overrides."""
    if cache_dir := os.environ.get("TWTOOLS_CACHE_DIR"):
        cfg.cache.dir = Path(cache_dir).expanduser()
    if user_agent := os.environ.get("TWTOOLS_USER_AGENT"):
        cfg.http.user_agent = user_agent
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> TwtoolsConfig:
    """Load and return a merged *TwtoolsConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *twtools.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged *TwtoolsConfig* with env var overrides applied.

    Raises:
        ConfigError: If a config file is not a mapping or holds an invalid value.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    # Layer 2: per-project config
    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)

    # Layer 3: env var overrides
    return _apply_env_overrides(cfg)
