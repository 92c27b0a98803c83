#!/usr/bin/env python3
"""
Settings from environment variables and an optional TOML file.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .storage import DEFAULT_TASKS_FILE, get_tasks_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "TASKPAD"
CONFIG_ENV_VAR = f"{ENV_PREFIX}_CONFIG"
LOG_LEVEL_ENV_VAR = f"{ENV_PREFIX}_LOG_LEVEL"
LOG_DIR_ENV_VAR = f"{ENV_PREFIX}_LOG_DIR"
DEFAULT_MARGIN = 1
MAX_MARGIN = 20


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings.

    Attributes
    ----------
    tasks_path : Path
        JSON file holding the tasks.
    margin : int
        Initial display margin around the task list.
    log_level : str
        Level name for the log file.
    log_dir : Path
        Directory for the log file.
    """

    tasks_path: Path
    margin: int = DEFAULT_MARGIN
    log_level: str = "INFO"
    log_dir: Path = Path.home() / ".local" / "state" / "taskpad"


def _expand(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(value)))


def get_config_path() -> Path:
    """
    Return the path of the optional TOML config file.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return _expand(env_path)
    return Path.home() / ".config" / "taskpad" / "config.toml"


def _coerce_margin(value: Any, default: int) -> int:
    """
    Parse a margin value, clamping it into the allowed range.

    Examples
    --------
    >>> _coerce_margin("3", 1)
    3
    >>> _coerce_margin(99, 1)
    20
    >>> _coerce_margin("wide", 1)
    1
    """
    try:
        margin = int(value)
    except (TypeError, ValueError):
        return default
    return max(0, min(margin, MAX_MARGIN))


def read_config_file(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read the TOML config file.

    Parameters
    ----------
    path : Optional[Path], optional
        Override for the config path.

    Returns
    -------
    Dict[str, Any]
        Parsed table, or an empty dict when missing or invalid.
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        return {}
    try:
        parsed = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring config %s: %s", config_path, exc)
        return {}
    return parsed


def load_settings(
    tasks_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> Settings:
    """
    Resolve settings from CLI overrides, environment, config file and defaults.

    Parameters
    ----------
    tasks_path : Optional[Path], optional
        Tasks file given on the command line.
    config_path : Optional[Path], optional
        Override for the config file path.

    Returns
    -------
    Settings
        Resolved settings.
    """
    raw = read_config_file(config_path)
    settings = Settings(tasks_path=Path(DEFAULT_TASKS_FILE))

    if isinstance(raw.get("tasks_path"), str) and raw["tasks_path"].strip():
        settings = replace(settings, tasks_path=_expand(raw["tasks_path"]))
    if "margin" in raw:
        settings = replace(settings, margin=_coerce_margin(raw["margin"], settings.margin))
    if isinstance(raw.get("log_level"), str):
        settings = replace(settings, log_level=raw["log_level"].upper())
    if isinstance(raw.get("log_dir"), str) and raw["log_dir"].strip():
        settings = replace(settings, log_dir=_expand(raw["log_dir"]))

    settings = replace(settings, tasks_path=get_tasks_path(settings.tasks_path))
    env_level = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip()
    if env_level:
        settings = replace(settings, log_level=env_level.upper())
    env_log_dir = os.environ.get(LOG_DIR_ENV_VAR, "").strip()
    if env_log_dir:
        settings = replace(settings, log_dir=_expand(env_log_dir))

    if tasks_path is not None:
        settings = replace(settings, tasks_path=tasks_path)
    return settings
