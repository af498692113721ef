"""Configuration loader for the Neato bridge.

Loads settings from environment variables (.env file) and config/default.yaml,
with environment variables taking precedence over YAML defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Project root is two levels up from this file (neatobridge/core/config.py -> project root)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Minimum fixed refresh interval, to not overload the Neato servers.
MIN_REFRESH_SECONDS = 60
DEFAULT_REFRESH_SECONDS = 60

HIDEABLE_CATEGORIES = (
    "spot",
    "dock",
    "dockstate",
    "eco",
    "nogolines",
    "extracare",
    "schedule",
    "find",
)


@dataclass(frozen=True)
class Settings:
    """Immutable configuration for the Neato bridge."""

    # Neato cloud account
    email: str
    password: str

    # "auto" or a fixed interval in seconds (0 disables background refresh)
    refresh: int | str

    # Optional toggle categories hidden from the Main accessory
    hidden: tuple[str, ...]

    # Logging
    log_level: str


def _load_yaml_defaults(yaml_path: Path) -> dict[str, Any]:
    """Load default values from a YAML config file.

    Args:
        yaml_path: Path to the YAML configuration file.

    Returns:
        Dictionary of configuration values. Empty dict if file not found.
    """
    if not yaml_path.exists():
        return {}
    with open(yaml_path) as f:
        data = yaml.safe_load(f)
    return data if data else {}


def _get(env_key: str, yaml_defaults: dict[str, Any], yaml_key: str, default: Any = None) -> Any:
    """Get a config value with precedence: env var > yaml default > hardcoded default.

    Args:
        env_key: Environment variable name.
        yaml_defaults: Dictionary from YAML config file.
        yaml_key: Dot-separated key path in YAML (e.g., "neato.email").
        default: Fallback default value.

    Returns:
        The resolved configuration value.
    """
    env_val = os.environ.get(env_key)
    if env_val is not None and env_val != "":
        return env_val

    parts = yaml_key.split(".")
    node = yaml_defaults
    for part in parts:
        if isinstance(node, dict) and part in node:
            node = node[part]
        else:
            return default
    return node if node is not None else default


def parse_refresh(value: Any) -> int | str:
    """Normalize the refresh setting.

    Args:
        value: Raw value, ``"auto"`` or a number of seconds.

    Returns:
        ``"auto"``, 0 (no background refresh) or seconds >= 60. Values that
        are not a non-negative integer fall back to 60; 1-59 are raised to 60.
    """
    if value is None or str(value).strip().lower() == "auto":
        return "auto"

    if isinstance(value, float):
        seconds = int(value) if value.is_integer() else -1
    else:
        try:
            seconds = int(str(value).strip())
        except ValueError:
            seconds = -1

    if seconds < 0:
        logger.warning(
            "Invalid refresh value %r, using %d seconds", value, DEFAULT_REFRESH_SECONDS
        )
        return DEFAULT_REFRESH_SECONDS
    if 0 < seconds < MIN_REFRESH_SECONDS:
        logger.warning(
            "Minimum refresh time is %d seconds to not overload the Neato servers",
            MIN_REFRESH_SECONDS,
        )
        return MIN_REFRESH_SECONDS
    return seconds


def parse_hidden(value: Any) -> tuple[str, ...]:
    """Normalize the hidden toggle categories.

    Args:
        value: A list of names or a comma separated string.

    Returns:
        Known category names, lowercased; unknown ones are dropped with a warning.
    """
    if not value:
        return ()
    names = value.split(",") if isinstance(value, str) else list(value)

    hidden: list[str] = []
    for name in names:
        name = str(name).strip().lower()
        if not name:
            continue
        if name not in HIDEABLE_CATEGORIES:
            logger.warning("Ignoring unknown hidden category: %s", name)
            continue
        hidden.append(name)
    return tuple(hidden)


def load_settings(
    env_path: Path | None = None,
    yaml_path: Path | None = None,
) -> Settings:
    """Load settings from .env and config/default.yaml.

    Environment variables take precedence over YAML defaults.

    Args:
        env_path: Path to .env file. Defaults to PROJECT_ROOT/.env.
        yaml_path: Path to YAML config. Defaults to PROJECT_ROOT/config/default.yaml.

    Returns:
        Frozen Settings dataclass with all configuration values.

    Raises:
        ValueError: If the Neato account credentials are missing.
    """
    if env_path is None:
        env_path = PROJECT_ROOT / ".env"
    if yaml_path is None:
        yaml_path = PROJECT_ROOT / "config" / "default.yaml"

    load_dotenv(env_path, override=False)
    yaml_defaults = _load_yaml_defaults(yaml_path)

    email = str(_get("NEATO_EMAIL", yaml_defaults, "neato.email", ""))
    password = str(_get("NEATO_PASSWORD", yaml_defaults, "neato.password", ""))
    if not email or not password:
        raise ValueError(
            "NEATO_EMAIL and NEATO_PASSWORD are required. "
            "Set them in .env or as environment variables."
        )

    # "hidden" replaced the older "disabled" key; both are accepted.
    hidden = _get(
        "NEATO_HIDDEN",
        yaml_defaults,
        "hidden",
        _get("NEATO_DISABLED", yaml_defaults, "disabled", ()),
    )

    refresh = parse_refresh(_get("NEATO_REFRESH", yaml_defaults, "refresh", "auto"))
    logger.info(
        "Refresh is set to: %s%s", refresh, " seconds" if refresh != "auto" else ""
    )

    return Settings(
        email=email,
        password=password,
        refresh=refresh,
        hidden=parse_hidden(hidden),
        log_level=str(_get("LOG_LEVEL", yaml_defaults, "logging.level", "INFO")).upper(),
    )
