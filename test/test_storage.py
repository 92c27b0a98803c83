"""
Tests for JSON persistence of the task store.
"""

import json

import pytest

import taskpad.storage as storage
from taskpad.store import TaskStore
from taskpad.task import Priority


@pytest.mark.unit
def test_get_tasks_path_uses_env(monkeypatch, tmp_path):
    """
    Ensure the tasks path honours the environment override.

    Returns
    -------
    None
        This test asserts path resolution.
    """
    monkeypatch.setenv(storage.TASKS_ENV_VAR, str(tmp_path / "mine.json"))
    assert storage.get_tasks_path() == tmp_path / "mine.json"

    monkeypatch.delenv(storage.TASKS_ENV_VAR)
    assert storage.get_tasks_path().name == storage.DEFAULT_TASKS_FILE


@pytest.mark.unit
def test_missing_file_loads_empty_store(tmp_path):
    """
    Ensure a missing file starts an empty store.

    Returns
    -------
    None
        This test asserts the never-fail-to-start policy.
    """
    store = storage.load_tasks(tmp_path / "absent.json")

    assert len(store) == 0


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '{"id": 1, "description": "object, not list"}',
        "",
        "null",
    ],
)
@pytest.mark.unit
def test_malformed_file_loads_empty_store(tmp_path, content):
    """
    Ensure malformed content starts an empty store.

    Parameters
    ----------
    content : str
        File content.

    Returns
    -------
    None
        This test asserts malformed files are tolerated.
    """
    path = tmp_path / "tasks.json"
    path.write_text(content, encoding="utf-8")

    assert len(storage.load_tasks(path)) == 0


@pytest.mark.unit
def test_undecodable_file_loads_empty_store(tmp_path):
    """
    Ensure binary garbage starts an empty store.

    Returns
    -------
    None
        This test asserts decode errors are tolerated.
    """
    path = tmp_path / "tasks.json"
    path.write_bytes(b"\xff\xfe\x00garbage")

    assert len(storage.load_tasks(path)) == 0


@pytest.mark.unit
def test_save_then_load_preserves_tasks(tmp_path):
    """
    Ensure a saved store loads back with subtasks and metadata.

    Returns
    -------
    None
        This test asserts persistence.
    """
    store = TaskStore()
    store.add("Plan trip #travel", priority=Priority.HIGH, due_date="2024-07-01")
    store.add("Read")
    store.add_subtask(1, "Pack #bag")
    store.toggle_completed(2)
    path = tmp_path / "nested" / "tasks.json"

    storage.save_tasks(store, path)
    loaded = storage.load_tasks(path)

    assert list(loaded.tasks) == list(store.tasks)


@pytest.mark.unit
def test_save_replaces_previous_content(tmp_path):
    """
    Ensure saving truncates and rewrites the whole file.

    Returns
    -------
    None
        This test asserts full-image writes.
    """
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": n, "description": "old"} for n in range(1, 50)]), encoding="utf-8")
    store = TaskStore()
    store.add("new")

    storage.save_tasks(store, path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == [
        {
            "id": 1,
            "description": "new",
            "completed": False,
            "priority": "Medium",
            "due_date": None,
            "tags": [],
            "sub_tasks": [],
        }
    ]


@pytest.mark.unit
def test_load_skips_non_object_records(tmp_path):
    """
    Ensure stray non-object entries are ignored.

    Returns
    -------
    None
        This test asserts lenient record loading.
    """
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([1, "two", {"id": 3, "description": "ok"}]), encoding="utf-8")

    assert [task.id for task in storage.load_tasks(path)] == [3]


@pytest.mark.unit
def test_load_uses_env_path_by_default(tmp_path, monkeypatch):
    """
    Ensure load and save default to the configured tasks path.

    Returns
    -------
    None
        This test asserts default paths.
    """
    monkeypatch.setenv(storage.TASKS_ENV_VAR, str(tmp_path / "env.json"))
    store = TaskStore()
    store.add("via env")

    storage.save_tasks(store)

    assert (tmp_path / "env.json").exists()
    assert storage.load_tasks().find(1).description == "via env"
