"""
Tests for task entities, tag extraction and priorities.
"""

import doctest

import pytest

import taskpad.task as task_module
from taskpad.task import Priority, Subtask, Task, extract_tags


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("buy milk #errand #urgent", ["#errand", "#urgent"]),
        ("#Home  clean   #home", ["#Home", "#home"]),
        ("dup #x #x", ["#x", "#x"]),
        ("mid#word is not a tag", []),
        ("# lone hash", ["#"]),
        ("", []),
    ],
)
@pytest.mark.unit
def test_extract_tags(text, expected):
    """
    Ensure tags are whitespace-split words starting with ``#``, verbatim.

    Parameters
    ----------
    text : str
        Raw task input.
    expected : list[str]
        Expected tags in order.

    Returns
    -------
    None
        This test asserts tag extraction.
    """
    assert extract_tags(text) == expected


@pytest.mark.unit
def test_priority_cycle_returns_to_start():
    """
    Ensure three cycles bring Medium back to Medium via High and Low.

    Returns
    -------
    None
        This test asserts priority cycling order.
    """
    seen = []
    priority = Priority.MEDIUM
    for _ in range(3):
        priority = priority.cycled()
        seen.append(priority)

    assert seen == [Priority.HIGH, Priority.LOW, Priority.MEDIUM]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("High", Priority.HIGH),
        ("medium", Priority.MEDIUM),
        ("med", Priority.MEDIUM),
        ("L", Priority.LOW),
        (3, Priority.HIGH),
        (7, Priority.MEDIUM),
        (None, Priority.MEDIUM),
        (True, Priority.MEDIUM),
    ],
)
@pytest.mark.unit
def test_priority_parse(value, expected):
    """
    Ensure persisted and typed priority values parse leniently.

    Parameters
    ----------
    value : object
        Raw value.
    expected : Priority
        Expected priority.

    Returns
    -------
    None
        This test asserts priority parsing.
    """
    assert Priority.parse(value) is expected


@pytest.mark.unit
def test_task_from_json_reads_nested_subtasks_one_level():
    """
    Ensure subtasks load while deeper nesting is dropped.

    Returns
    -------
    None
        This test asserts the one-level subtask contract.
    """
    payload = {
        "id": 1,
        "description": "Trip #travel",
        "completed": False,
        "priority": "High",
        "due_date": "2024-07-01",
        "tags": ["#travel"],
        "sub_tasks": [
            {
                "id": 1,
                "description": "Pack",
                "completed": True,
                "priority": "Low",
                "due_date": None,
                "tags": [],
                "sub_tasks": [{"id": 1, "description": "too deep"}],
            },
            {"id": "bad"},
            "not a record",
        ],
    }

    task = Task.from_json(payload)

    assert task.priority is Priority.HIGH
    assert task.due_date == "2024-07-01"
    assert task.sub_tasks == [
        Subtask(id=1, description="Pack", completed=True, priority=Priority.LOW)
    ]
    assert not hasattr(task.sub_tasks[0], "sub_tasks")


@pytest.mark.parametrize("value", ["false", "true", 1, None])
@pytest.mark.unit
def test_from_json_completed_requires_real_boolean(value):
    """
    Ensure only a JSON true marks a task or subtask completed.

    Parameters
    ----------
    value : object
        Hand-edited completed value.

    Returns
    -------
    None
        This test asserts strict completion parsing.
    """
    payload = {
        "id": 1,
        "description": "Edited by hand",
        "completed": value,
        "sub_tasks": [{"id": 1, "description": "Child", "completed": value}],
    }

    task = Task.from_json(payload)

    assert task.completed is False
    assert task.sub_tasks[0].completed is False


@pytest.mark.parametrize(
    "payload",
    [
        {"description": "no id"},
        {"id": 0, "description": "zero"},
        {"id": "1", "description": "string id"},
        {"id": 1, "description": 5},
        ["not", "a", "dict"],
    ],
)
@pytest.mark.unit
def test_task_from_json_rejects_unusable_records(payload):
    """
    Ensure records without a usable id or description are rejected.

    Parameters
    ----------
    payload : object
        Malformed record.

    Returns
    -------
    None
        This test asserts validation errors.
    """
    with pytest.raises(ValueError):
        Task.from_json(payload)


@pytest.mark.unit
def test_task_to_json_uses_persisted_field_names():
    """
    Ensure the persisted record uses the documented field names.

    Returns
    -------
    None
        This test asserts the JSON schema.
    """
    task = Task(
        id=2,
        description="Trip",
        sub_tasks=[Subtask(id=1, description="Pack #bag", tags=["#bag"])],
    )

    record = task.to_json()

    assert list(record) == [
        "id",
        "description",
        "completed",
        "priority",
        "due_date",
        "tags",
        "sub_tasks",
    ]
    assert record["sub_tasks"][0]["tags"] == ["#bag"]
    assert record["sub_tasks"][0]["sub_tasks"] == []


@pytest.mark.unit
def test_task_copy_is_detached():
    """
    Ensure copies do not share subtasks or tags with the original.

    Returns
    -------
    None
        This test asserts copy isolation.
    """
    task = Task(id=1, description="a", tags=["#a"], sub_tasks=[Subtask(id=1, description="b")])

    clone = task.copy()
    clone.tags.append("#b")
    clone.sub_tasks[0].completed = True

    assert task.tags == ["#a"]
    assert task.sub_tasks[0].completed is False
    assert clone == Task(
        id=1,
        description="a",
        tags=["#a", "#b"],
        sub_tasks=[Subtask(id=1, description="b", completed=True)],
    )


@pytest.mark.unit
def test_task_doctest_examples():
    """
    Run doctest examples embedded in task helpers.

    Returns
    -------
    None
        This test asserts doctest coverage for task helpers.
    """
    results = doctest.testmod(task_module)
    assert results.failed == 0
