#!/usr/bin/env python3
"""
Ordered task store with identity-based mutation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Union

from .task import Priority, Subtask, Task, extract_tags

logger = logging.getLogger(__name__)


class TaskNotFoundError(LookupError):
    """
    Raised when an operation needs a task that is not in the store.
    """

    def __init__(self, task_id: int) -> None:
        super().__init__(f"No task with id {task_id}")
        self.task_id = task_id


@dataclass(frozen=True)
class TaskRef:
    """
    Stable reference to a top-level task or one of its subtasks.

    Attributes
    ----------
    id : int
        Task ID within its level.
    parent_id : Optional[int]
        Parent task ID for subtasks, None for top-level tasks.
    """

    id: int
    parent_id: Optional[int] = None

    @property
    def is_subtask(self) -> bool:
        return self.parent_id is not None


TaskKey = Union[int, TaskRef]


def _as_ref(key: TaskKey) -> TaskRef:
    if isinstance(key, TaskRef):
        return key
    return TaskRef(id=key)


class TaskStore:
    """
    Own the canonical ordered list of top-level tasks.

    Tasks are always located by ID, never by position. Mutations that miss
    are silent no-ops; only ``add_subtask`` reports a missing parent.

    Examples
    --------
    >>> store = TaskStore()
    >>> store.add("Pay rent #home")
    1
    >>> store.add("Read book")
    2
    >>> store.delete(1)
    >>> [task.id for task in store]
    [2]
    >>> store.add("Call mum")
    3
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None) -> None:
        self._tasks: List[Task] = list(tasks or [])

    @property
    def tasks(self) -> Sequence[Task]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    def next_id(self) -> int:
        """
        Return the ID the next top-level task will receive.
        """
        return max((task.id for task in self._tasks), default=0) + 1

    def add(
        self,
        description: str,
        priority: Priority = Priority.MEDIUM,
        due_date: Optional[str] = None,
    ) -> int:
        """
        Append a new top-level task.

        Parameters
        ----------
        description : str
            Raw input text; tags are extracted from it.
        priority : Priority, optional
            Initial priority (default: MEDIUM).
        due_date : Optional[str], optional
            Due date as ``YYYY-MM-DD``.

        Returns
        -------
        int
            ID assigned to the new task.
        """
        task_id = self.next_id()
        self._tasks.append(
            Task(
                id=task_id,
                description=description,
                priority=priority,
                due_date=due_date,
                tags=extract_tags(description),
            )
        )
        logger.debug("Added task %s", task_id)
        return task_id

    def add_subtask(
        self,
        parent_id: int,
        description: str,
        priority: Priority = Priority.MEDIUM,
        due_date: Optional[str] = None,
    ) -> int:
        """
        Append a subtask to a top-level task.

        Parameters
        ----------
        parent_id : int
            ID of the parent task.
        description : str
            Raw input text; tags are extracted from it.
        priority : Priority, optional
            Initial priority (default: MEDIUM).
        due_date : Optional[str], optional
            Due date as ``YYYY-MM-DD``.

        Returns
        -------
        int
            ID assigned to the subtask, scoped to the parent.

        Raises
        ------
        TaskNotFoundError
            If no top-level task has ``parent_id``.
        """
        parent = self.find(parent_id)
        if parent is None:
            raise TaskNotFoundError(parent_id)
        sub_id = parent.next_subtask_id()
        parent.sub_tasks.append(
            Subtask(
                id=sub_id,
                description=description,
                priority=priority,
                due_date=due_date,
                tags=extract_tags(description),
            )
        )
        logger.debug("Added subtask %s to task %s", sub_id, parent_id)
        return sub_id

    def find(self, task_id: int) -> Optional[Task]:
        """
        Return the stored top-level task with ``task_id``, if any.
        """
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def resolve(self, key: TaskKey) -> Optional[Union[Task, Subtask]]:
        """
        Return the stored task or subtask a key refers to.

        Examples
        --------
        >>> store = TaskStore()
        >>> parent = store.add("Trip")
        >>> store.add_subtask(parent, "Pack")
        1
        >>> store.resolve(TaskRef(id=1, parent_id=parent)).description
        'Pack'
        >>> store.resolve(TaskRef(id=9, parent_id=parent)) is None
        True
        """
        ref = _as_ref(key)
        if ref.parent_id is None:
            return self.find(ref.id)
        parent = self.find(ref.parent_id)
        if parent is None:
            return None
        return parent.find_subtask(ref.id)

    def delete(self, task_id: int) -> None:
        """
        Remove a top-level task and its subtasks; no-op when absent.
        """
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                del self._tasks[index]
                logger.debug("Deleted task %s", task_id)
                return

    def delete_ref(self, key: TaskKey) -> None:
        """
        Remove a top-level task or a single subtask; no-op when absent.
        """
        ref = _as_ref(key)
        if ref.parent_id is None:
            self.delete(ref.id)
            return
        parent = self.find(ref.parent_id)
        if parent is None:
            return
        parent.sub_tasks = [sub for sub in parent.sub_tasks if sub.id != ref.id]

    def set_due_date(self, key: TaskKey, due_date: Optional[str]) -> None:
        target = self.resolve(key)
        if target is None:
            logger.debug("set_due_date: %s not found", key)
            return
        target.due_date = due_date

    def toggle_completed(self, key: TaskKey) -> None:
        target = self.resolve(key)
        if target is None:
            logger.debug("toggle_completed: %s not found", key)
            return
        target.completed = not target.completed

    def cycle_priority(self, key: TaskKey) -> None:
        target = self.resolve(key)
        if target is None:
            logger.debug("cycle_priority: %s not found", key)
            return
        target.priority = target.priority.cycled()

    def to_json(self) -> List[Dict[str, Any]]:
        return [task.to_json() for task in self._tasks]

    @classmethod
    def from_json(cls, records: Iterable[Dict[str, Any]]) -> "TaskStore":
        """
        Build a store from persisted records, skipping malformed ones.

        Records whose ID repeats an earlier one are skipped too, so the
        loaded store keeps IDs unique.

        Examples
        --------
        >>> store = TaskStore.from_json([{"id": 2, "description": "a"}, {"id": "x"}, {"id": 2, "description": "b"}])
        >>> [(task.id, task.description) for task in store]
        [(2, 'a')]
        """
        tasks: List[Task] = []
        seen = set()
        for record in records:
            try:
                task = Task.from_json(record)
            except ValueError as exc:
                logger.warning("Skipping malformed task record: %s", exc)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id %s", task.id)
                continue
            seen.add(task.id)
            tasks.append(task)
        return cls(tasks)
