#!/usr/bin/env python3
"""
Load and save the task list as a JSON file.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from .store import TaskStore

logger = logging.getLogger(__name__)

TASKS_ENV_VAR = "TASKPAD_PATH"
DEFAULT_TASKS_FILE = "tasks.json"


def get_tasks_path(default: Optional[Path] = None) -> Path:
    """
    Return the path of the tasks file.

    Parameters
    ----------
    default : Optional[Path], optional
        Path used when the environment is silent (default: ``tasks.json``).

    Returns
    -------
    Path
        ``$TASKPAD_PATH`` when set, otherwise ``default``.
    """
    env_path = os.environ.get(TASKS_ENV_VAR, "").strip()
    if env_path:
        return Path(os.path.expandvars(os.path.expanduser(env_path)))
    return default if default is not None else Path(DEFAULT_TASKS_FILE)


def load_tasks(path: Optional[Path] = None) -> TaskStore:
    """
    Load the task store from disk.

    A missing, unreadable or malformed file yields an empty store so the
    program always starts.

    Parameters
    ----------
    path : Optional[Path], optional
        Override for the tasks file path.

    Returns
    -------
    TaskStore
        Loaded store.
    """
    path = path or get_tasks_path()
    if not path.exists():
        logger.info("No tasks file at %s; starting empty", path)
        return TaskStore()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Could not read %s (%s); starting empty", path, exc)
        return TaskStore()
    if not isinstance(data, list):
        logger.warning("Tasks file %s does not hold a list; starting empty", path)
        return TaskStore()
    store = TaskStore.from_json(record for record in data if isinstance(record, dict))
    logger.info("Loaded %d tasks from %s", len(store), path)
    return store


def save_tasks(store: TaskStore, path: Optional[Path] = None) -> None:
    """
    Write the task store to disk, replacing the previous file.

    Parameters
    ----------
    store : TaskStore
        Store to write.
    path : Optional[Path], optional
        Override for the tasks file path.

    Raises
    ------
    OSError
        If the file cannot be written.
    """
    path = path or get_tasks_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(store.to_json(), indent=2, ensure_ascii=False)
    path.write_text(payload + "\n", encoding="utf-8")
    logger.info("Saved %d tasks to %s", len(store), path)
