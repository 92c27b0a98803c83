#!/usr/bin/env python3
"""
Derive the displayed task sequence from the store and a search query.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .task import Priority, Subtask, Task

PRIORITY_KEYWORDS: Dict[str, Priority] = {
    "high": Priority.HIGH,
    "h": Priority.HIGH,
    "medium": Priority.MEDIUM,
    "med": Priority.MEDIUM,
    "m": Priority.MEDIUM,
    "low": Priority.LOW,
    "l": Priority.LOW,
}
STATUS_KEYWORDS: Dict[str, bool] = {
    "completed": True,
    "done": True,
    "finished": True,
    "incomplete": False,
    "pending": False,
    "todo": False,
}
SEARCH_HELP = (
    "Search by: description, tags, priority (high/medium/low), "
    "status (completed/incomplete), due date"
)


def _text_matches(entry: Task | Subtask, needle: str) -> bool:
    if needle in entry.description.lower():
        return True
    return any(needle in tag.lower() for tag in entry.tags)


def task_matches(task: Task, query: str) -> bool:
    """
    Return True when a task satisfies a non-empty search query.

    Parameters
    ----------
    task : Task
        Task to test.
    query : str
        Search text; matching is case-insensitive.

    Returns
    -------
    bool
        True when any matching rule applies.

    Examples
    --------
    >>> task = Task(id=1, description="Pay rent", priority=Priority.HIGH)
    >>> task_matches(task, "RENT"), task_matches(task, "high"), task_matches(task, "done")
    (True, True, False)
    """
    needle = query.lower()
    if _text_matches(task, needle):
        return True
    priority = PRIORITY_KEYWORDS.get(needle)
    if priority is not None and task.priority is priority:
        return True
    status = STATUS_KEYWORDS.get(needle)
    if status is not None and task.completed is status:
        return True
    if task.due_date and needle in task.due_date:
        return True
    return any(_text_matches(sub, needle) for sub in task.sub_tasks)


def displayed(tasks: Iterable[Task], query: Optional[str] = None) -> List[Task]:
    """
    Return a snapshot of the tasks to display for a query.

    Parameters
    ----------
    tasks : Iterable[Task]
        Top-level tasks in store order.
    query : Optional[str], optional
        Search text; empty or None shows every task.

    Returns
    -------
    List[Task]
        Detached copies of the matching tasks, in store order.

    Examples
    --------
    >>> tasks = [Task(id=1, description="Pay rent"), Task(id=2, description="Read book")]
    >>> [task.id for task in displayed(tasks, "")]
    [1, 2]
    >>> [task.id for task in displayed(tasks, "book")]
    [2]
    """
    if not query:
        return [task.copy() for task in tasks]
    return [task.copy() for task in tasks if task_matches(task, query)]
