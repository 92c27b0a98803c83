#!/usr/bin/env python3
"""
Track the highlighted entry of the displayed task list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .store import TaskRef
from .task import Task


@dataclass
class Selection:
    """
    Position-based selection into the displayed sequence.

    ``index`` points at a displayed top-level task. ``sub_index`` is set only
    while navigation has descended into that task's subtasks.

    Attributes
    ----------
    index : Optional[int]
        Selected position, or None when nothing is displayed.
    sub_index : Optional[int]
        Selected subtask position within the selected task.

    Examples
    --------
    >>> selection = Selection()
    >>> selection.advance(3); selection.index
    0
    >>> selection.retreat(3); selection.index
    2
    >>> selection.advance(0); selection.index
    2
    """

    index: Optional[int] = None
    sub_index: Optional[int] = None

    @property
    def descended(self) -> bool:
        return self.sub_index is not None

    def reset(self, length: int) -> None:
        """
        Select the first entry, or nothing when the sequence is empty.
        """
        self.index = 0 if length > 0 else None
        self.sub_index = None

    def advance(self, length: int) -> None:
        """
        Move to the next entry, wrapping around.

        While descended, ``length`` is the number of subtasks.
        """
        if length <= 0:
            return
        if self.descended:
            self.sub_index = (self.sub_index + 1) % length
            return
        if self.index is None:
            self.index = 0
            return
        self.index = (self.index + 1) % length

    def retreat(self, length: int) -> None:
        """
        Move to the previous entry, wrapping around.

        While descended, ``length`` is the number of subtasks.
        """
        if length <= 0:
            return
        if self.descended:
            self.sub_index = (self.sub_index + length - 1) % length
            return
        if self.index is None:
            self.index = 0
            return
        self.index = (self.index + length - 1) % length

    def descend(self, sub_count: int) -> bool:
        """
        Move the selection into the selected task's subtasks.

        Returns
        -------
        bool
            True when there was a task with subtasks to descend into.
        """
        if self.index is None or sub_count <= 0:
            return False
        self.sub_index = 0
        return True

    def ascend(self) -> None:
        self.sub_index = None

    def clamp(self, displayed: Sequence[Task]) -> None:
        """
        Keep the selection inside a new displayed sequence.

        The index stays at the same position unless that position no longer
        exists, in which case it moves to the last entry. Identity is not
        preserved.

        Examples
        --------
        >>> selection = Selection(index=2)
        >>> selection.clamp([Task(id=1, description="a"), Task(id=2, description="b")])
        >>> selection.index
        1
        >>> selection.clamp([])
        >>> selection.index is None
        True
        """
        if not displayed:
            self.index = None
            self.sub_index = None
            return
        if self.index is None:
            self.sub_index = None
            return
        self.index = min(self.index, len(displayed) - 1)
        if self.sub_index is None:
            return
        sub_count = len(displayed[self.index].sub_tasks)
        if sub_count == 0:
            self.sub_index = None
        else:
            self.sub_index = min(self.sub_index, sub_count - 1)

    def selected_task(self, displayed: Sequence[Task]) -> Optional[Task]:
        if self.index is None or not 0 <= self.index < len(displayed):
            return None
        return displayed[self.index]

    def resolve(self, displayed: Sequence[Task]) -> Optional[TaskRef]:
        """
        Translate the selected position into a stable task reference.

        Parameters
        ----------
        displayed : Sequence[Task]
            The sequence currently displayed.

        Returns
        -------
        Optional[TaskRef]
            Reference to the selected task or subtask, or None.

        Examples
        --------
        >>> shown = [Task(id=2, description="b"), Task(id=3, description="c")]
        >>> Selection(index=0).resolve(shown)
        TaskRef(id=2, parent_id=None)
        >>> Selection(index=5).resolve(shown) is None
        True
        """
        task = self.selected_task(displayed)
        if task is None:
            return None
        if self.sub_index is None:
            return TaskRef(id=task.id)
        if not 0 <= self.sub_index < len(task.sub_tasks):
            return None
        return TaskRef(id=task.sub_tasks[self.sub_index].id, parent_id=task.id)
