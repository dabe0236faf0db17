#!/usr/bin/env python3
"""Settings loader for NumberKit."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, List
import logging
import os

import yaml

PACKAGE_ROOT = Path(__file__).resolve().parent
CONFIG_DIR = PACKAGE_ROOT / "configs"
APP_CONFIG_PATH = CONFIG_DIR / "app.yaml"
CULTURES_PATH = CONFIG_DIR / "cultures.yaml"

APP_CONFIG_ENV = "NUMBERKIT_APP_CONFIG"

logger = logging.getLogger(__name__)

_reload_hooks: List[Callable[[], None]] = []


def app_config_path() -> Path:
    """Path of the active app config (env override first)."""
    override = os.environ.get(APP_CONFIG_ENV)
    if override:
        return resolve_path(override, base=Path.cwd())
    return APP_CONFIG_PATH


@lru_cache(maxsize=1)
def load_app_config() -> dict:
    path = app_config_path()
    if not path.exists():
        raise FileNotFoundError(f"Missing app config: {path}")
    logger.debug(f"Loading app config from {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    return data or {}


@lru_cache(maxsize=1)
def load_cultures() -> dict:
    """Load the raw cultural profile table."""
    if not CULTURES_PATH.exists():
        raise FileNotFoundError(f"Missing culture table: {CULTURES_PATH}")
    data = yaml.safe_load(CULTURES_PATH.read_text(encoding="utf-8"))
    return data or {}


def get_setting(path: str, default: Any = None) -> Any:
    """Get nested setting by dotted path."""
    data = load_app_config()
    current: Any = data
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def require_setting(path: str) -> Any:
    """Like get_setting, but a missing key is a configuration error."""
    value = get_setting(path)
    if value is None:
        raise ValueError(f"{path} must be set in app.yaml")
    return value


def resolve_path(value: str, base: Path | None = None) -> Path:
    """Resolve a path string relative to the package root (unless absolute)."""
    if value is None:
        raise ValueError("path value is required")
    expanded = os.path.expanduser(str(value))
    path = Path(expanded)
    if not path.is_absolute():
        base = base or PACKAGE_ROOT
        path = (base / path).resolve()
    return path


def on_reload(hook: Callable[[], None]) -> Callable[[], None]:
    """Register a callable that drops a cache built from the settings."""
    _reload_hooks.append(hook)
    return hook


def reload_settings() -> None:
    """Drop cached config so the next read hits the files again."""
    load_app_config.cache_clear()
    load_cultures.cache_clear()
    for hook in _reload_hooks:
        hook()


__all__ = [
    "load_app_config",
    "load_cultures",
    "get_setting",
    "require_setting",
    "resolve_path",
    "reload_settings",
    "on_reload",
    "app_config_path",
    "PACKAGE_ROOT",
    "APP_CONFIG_PATH",
    "CULTURES_PATH",
    "APP_CONFIG_ENV",
]
