#!/usr/bin/env python3
"""
Task entities and their persisted JSON form.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional


class Priority(IntEnum):
    """
    Task priority, ordered from least to most urgent.
    """

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        """
        Return the persisted label for the priority.

        Examples
        --------
        >>> Priority.HIGH.label
        'High'
        """
        return self.name.capitalize()

    def cycled(self) -> "Priority":
        """
        Return the next priority in Low -> Medium -> High -> Low order.

        Examples
        --------
        >>> Priority.MEDIUM.cycled()
        <Priority.HIGH: 3>
        >>> Priority.HIGH.cycled()
        <Priority.LOW: 1>
        """
        if self is Priority.HIGH:
            return Priority.LOW
        return Priority(self.value + 1)

    @classmethod
    def parse(cls, value: object, default: Optional["Priority"] = None) -> "Priority":
        """
        Parse a persisted or user-entered priority value.

        Parameters
        ----------
        value : object
            Raw value (label, name or integer).
        default : Priority, optional
            Fallback when the value is not recognized (default: MEDIUM).

        Returns
        -------
        Priority
            Parsed priority.

        Examples
        --------
        >>> Priority.parse("High")
        <Priority.HIGH: 3>
        >>> Priority.parse("l")
        <Priority.LOW: 1>
        >>> Priority.parse("urgent")
        <Priority.MEDIUM: 2>
        """
        if default is None:
            default = cls.MEDIUM
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                return default
        text = str(value or "").strip().lower()
        for priority in cls:
            name = priority.name.lower()
            if text in (name, name[0]) or (priority is cls.MEDIUM and text == "med"):
                return priority
        return default


def extract_tags(text: str) -> List[str]:
    """
    Collect ``#``-prefixed words from task input.

    Parameters
    ----------
    text : str
        Raw task input.

    Returns
    -------
    List[str]
        Tags in input order, verbatim and not deduplicated.

    Examples
    --------
    >>> extract_tags("buy milk #errand #urgent")
    ['#errand', '#urgent']
    >>> extract_tags("#A #a #A")
    ['#A', '#a', '#A']
    >>> extract_tags("no tags here")
    []
    """
    return [word for word in text.split() if word.startswith("#")]


def _parse_tags(value: object) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(tag) for tag in value]


def _parse_due_date(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_fields(payload: Dict[str, Any]) -> tuple[int, str]:
    raw_id = payload.get("id")
    if isinstance(raw_id, bool) or not isinstance(raw_id, int) or raw_id < 1:
        raise ValueError(f"Invalid task id: {raw_id!r}")
    description = payload.get("description", "")
    if not isinstance(description, str):
        raise ValueError(f"Invalid description for task {raw_id}")
    return raw_id, description


@dataclass
class Subtask:
    """
    A task nested one level below a top-level task.

    Attributes
    ----------
    id : int
        Identifier, unique among the parent's subtasks.
    description : str
        Raw input text.
    completed : bool
        Completion flag.
    priority : Priority
        Priority level.
    due_date : Optional[str]
        Due date as ``YYYY-MM-DD``.
    tags : List[str]
        Tags extracted from the description.
    """

    id: int
    description: str
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    due_date: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "completed": self.completed,
            "priority": self.priority.label,
            "due_date": self.due_date,
            "tags": list(self.tags),
            "sub_tasks": [],
        }

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "Subtask":
        """
        Build a subtask from a persisted record.

        Nested ``sub_tasks`` entries are ignored.
        """
        task_id, description = _require_fields(payload)
        return cls(
            id=task_id,
            description=description,
            completed=payload.get("completed") is True,
            priority=Priority.parse(payload.get("priority")),
            due_date=_parse_due_date(payload.get("due_date")),
            tags=_parse_tags(payload.get("tags")),
        )


@dataclass
class Task:
    """
    A top-level task and its subtasks.

    Attributes
    ----------
    id : int
        Identifier, unique among top-level tasks.
    description : str
        Raw input text.
    completed : bool
        Completion flag.
    priority : Priority
        Priority level.
    due_date : Optional[str]
        Due date as ``YYYY-MM-DD``.
    tags : List[str]
        Tags extracted from the description.
    sub_tasks : List[Subtask]
        Owned subtasks, one level deep.
    """

    id: int
    description: str
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    due_date: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    sub_tasks: List[Subtask] = field(default_factory=list)

    def next_subtask_id(self) -> int:
        """
        Return the ID the next subtask will receive.

        Examples
        --------
        >>> Task(id=1, description="x").next_subtask_id()
        1
        >>> Task(id=1, description="x", sub_tasks=[Subtask(id=4, description="y")]).next_subtask_id()
        5
        """
        return max((sub.id for sub in self.sub_tasks), default=0) + 1

    def find_subtask(self, subtask_id: int) -> Optional[Subtask]:
        for sub in self.sub_tasks:
            if sub.id == subtask_id:
                return sub
        return None

    def copy(self) -> "Task":
        """
        Return a detached copy, including copies of the subtasks.
        """
        return Task(
            id=self.id,
            description=self.description,
            completed=self.completed,
            priority=self.priority,
            due_date=self.due_date,
            tags=list(self.tags),
            sub_tasks=[
                Subtask(
                    id=sub.id,
                    description=sub.description,
                    completed=sub.completed,
                    priority=sub.priority,
                    due_date=sub.due_date,
                    tags=list(sub.tags),
                )
                for sub in self.sub_tasks
            ],
        )

    def to_json(self) -> Dict[str, Any]:
        """
        Return the persisted record for the task.

        Examples
        --------
        >>> Task(id=1, description="Pay rent #home", tags=["#home"]).to_json()["priority"]
        'Medium'
        """
        return {
            "id": self.id,
            "description": self.description,
            "completed": self.completed,
            "priority": self.priority.label,
            "due_date": self.due_date,
            "tags": list(self.tags),
            "sub_tasks": [sub.to_json() for sub in self.sub_tasks],
        }

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "Task":
        """
        Build a task from a persisted record.

        Parameters
        ----------
        payload : Dict[str, Any]
            Decoded JSON object.

        Returns
        -------
        Task
            Parsed task.

        Raises
        ------
        ValueError
            If the record has no usable ``id`` or ``description``.

        Examples
        --------
        >>> task = Task.from_json({"id": 3, "description": "Read", "priority": "Low"})
        >>> (task.id, task.priority, task.completed, task.sub_tasks)
        (3, <Priority.LOW: 1>, False, [])
        """
        if not isinstance(payload, dict):
            raise ValueError("Task record must be an object")
        task_id, description = _require_fields(payload)
        raw_subtasks = payload.get("sub_tasks") or []
        sub_tasks: List[Subtask] = []
        if isinstance(raw_subtasks, list):
            for raw in raw_subtasks:
                if not isinstance(raw, dict):
                    continue
                try:
                    sub_tasks.append(Subtask.from_json(raw))
                except ValueError:
                    continue
        return cls(
            id=task_id,
            description=description,
            completed=payload.get("completed") is True,
            priority=Priority.parse(payload.get("priority")),
            due_date=_parse_due_date(payload.get("due_date")),
            tags=_parse_tags(payload.get("tags")),
            sub_tasks=sub_tasks,
        )
