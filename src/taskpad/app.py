#!/usr/bin/env python3
"""
Application state and one operation per user intent.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from .config import DEFAULT_MARGIN, MAX_MARGIN
from .dates import format_due_date, parse_due_date
from .selection import Selection
from .storage import save_tasks
from .store import TaskNotFoundError, TaskRef, TaskStore
from .task import Task
from .view import displayed

logger = logging.getLogger(__name__)


class AppMode(Enum):
    """
    Input mode of the interactive list.
    """

    NORMAL = "normal"
    INSERT = "insert"
    DATE_INPUT = "date"
    SEARCH = "search"


TEXT_MODES = (AppMode.INSERT, AppMode.DATE_INPUT, AppMode.SEARCH)


class App:
    """
    Own the task store, the selection and the input buffers.

    Every command that acts on "the selected task" resolves the selection
    against the current displayed sequence and dispatches to the store by
    ID.

    Parameters
    ----------
    store : Optional[TaskStore], optional
        Task store (default: empty).
    tasks_path : Optional[Path], optional
        File used by ``save``.
    margin : int, optional
        Initial display margin.
    clock : Callable[[], datetime], optional
        Source of the current time for date parsing.

    Examples
    --------
    >>> app = App()
    >>> app.begin_add(); app.input = "Pay rent #home"; app.commit()
    >>> [(task.id, task.tags) for task in app.displayed()]
    [(1, ['#home'])]
    >>> app.selection.index
    0
    """

    def __init__(
        self,
        store: Optional[TaskStore] = None,
        tasks_path: Optional[Path] = None,
        margin: int = DEFAULT_MARGIN,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store if store is not None else TaskStore()
        self.tasks_path = tasks_path
        self.margin = margin
        self.clock = clock
        self.mode = AppMode.NORMAL
        self.input = ""
        self.date_input = ""
        self.search_input = ""
        self.adding_subtask = False
        self.status = ""
        self.selection = Selection()
        self.selection.reset(len(self.store))

    # ---- read-only accessors ----

    def displayed(self) -> List[Task]:
        """
        Return the tasks currently shown, filtered by the active search.
        """
        return displayed(self.store.tasks, self.search_input)

    def selected_ref(self) -> Optional[TaskRef]:
        return self.selection.resolve(self.displayed())

    def buffer(self) -> str:
        """
        Return the text buffer edited in the current mode.
        """
        if self.mode is AppMode.DATE_INPUT:
            return self.date_input
        if self.mode is AppMode.SEARCH:
            return self.search_input
        return self.input

    # ---- navigation ----

    def _nav_length(self) -> int:
        shown = self.displayed()
        if self.selection.descended:
            task = self.selection.selected_task(shown)
            return len(task.sub_tasks) if task else 0
        return len(shown)

    def next(self) -> None:
        self.selection.advance(self._nav_length())

    def previous(self) -> None:
        self.selection.retreat(self._nav_length())

    def enter_subtasks(self) -> None:
        task = self.selection.selected_task(self.displayed())
        if task is None:
            return
        if not self.selection.descend(len(task.sub_tasks)):
            self.status = "No subtasks"

    def leave_subtasks(self) -> None:
        self.selection.ascend()

    # ---- mutations of the selected task ----

    def toggle_completed(self) -> None:
        ref = self.selected_ref()
        if ref is not None:
            self.store.toggle_completed(ref)
            self._refresh_selection()

    def cycle_priority(self) -> None:
        ref = self.selected_ref()
        if ref is not None:
            self.store.cycle_priority(ref)
            self._refresh_selection()

    def delete_selected(self) -> None:
        """
        Delete the selected task or subtask and clamp the selection.
        """
        ref = self.selected_ref()
        if ref is None:
            return
        self.store.delete_ref(ref)
        self._refresh_selection()
        self.status = "Deleted"

    def _refresh_selection(self) -> None:
        self.selection.clamp(self.displayed())

    # ---- text input modes ----

    def begin_add(self) -> None:
        self.mode = AppMode.INSERT
        self.adding_subtask = False
        self.input = ""

    def begin_add_subtask(self) -> None:
        if self.selection.selected_task(self.displayed()) is None:
            self.status = "Select a task first"
            return
        self.mode = AppMode.INSERT
        self.adding_subtask = True
        self.input = ""

    def begin_set_due_date(self) -> None:
        ref = self.selected_ref()
        if ref is None:
            self.status = "Select a task first"
            return
        target = self.store.resolve(ref)
        self.date_input = (target.due_date or "") if target else ""
        self.mode = AppMode.DATE_INPUT

    def begin_search(self) -> None:
        self.mode = AppMode.SEARCH

    def type_char(self, text: str) -> None:
        if self.mode is AppMode.INSERT:
            self.input += text
        elif self.mode is AppMode.DATE_INPUT:
            self.date_input += text
        elif self.mode is AppMode.SEARCH:
            self.search_input += text
            self.selection.reset(len(self.displayed()))

    def backspace(self) -> None:
        if self.mode is AppMode.INSERT:
            self.input = self.input[:-1]
        elif self.mode is AppMode.DATE_INPUT:
            self.date_input = self.date_input[:-1]
        elif self.mode is AppMode.SEARCH:
            self.search_input = self.search_input[:-1]
            self.selection.reset(len(self.displayed()))

    def commit(self) -> None:
        """
        Apply the buffer of the current text mode and return to NORMAL.
        """
        if self.mode is AppMode.INSERT:
            self._commit_add()
        elif self.mode is AppMode.DATE_INPUT:
            self._commit_due_date()
        elif self.mode is AppMode.SEARCH:
            self.status = f"Filter: {self.search_input}" if self.search_input else ""
        self.mode = AppMode.NORMAL

    def cancel(self) -> None:
        """
        Leave the current text mode without applying it.

        Cancelling a search clears the filter.
        """
        if self.mode is AppMode.SEARCH:
            self.search_input = ""
            self.selection.reset(len(self.displayed()))
        self.input = ""
        self.date_input = ""
        self.adding_subtask = False
        self.mode = AppMode.NORMAL

    def _parse_due(self, text: str) -> Optional[str]:
        parsed = parse_due_date(text, self.clock())
        return format_due_date(parsed) if parsed else None

    def _commit_add(self) -> None:
        description = self.input
        self.input = ""
        due_date = self._parse_due(description)
        if self.adding_subtask:
            self.adding_subtask = False
            parent = self.selection.selected_task(self.displayed())
            if parent is None:
                self.status = "Select a task first"
                return
            try:
                self.store.add_subtask(parent.id, description, due_date=due_date)
            except TaskNotFoundError as exc:
                logger.warning("Subtask not added: %s", exc)
                self.status = "Parent task no longer exists"
                return
            self.status = "Subtask added"
        else:
            self.store.add(description, due_date=due_date)
            self.status = "Task added"
        if self.selection.index is None:
            self.selection.reset(len(self.displayed()))
        else:
            self._refresh_selection()

    def _commit_due_date(self) -> None:
        text = self.date_input
        self.date_input = ""
        ref = self.selected_ref()
        if ref is None:
            return
        due_date = self._parse_due(text)
        if due_date is None:
            self.status = f"Could not read a date from {text!r}"
            return
        self.store.set_due_date(ref, due_date)
        self.status = f"Due {due_date}"
        self._refresh_selection()

    # ---- display and persistence ----

    def zoom_in(self) -> None:
        self.margin = max(0, self.margin - 1)

    def zoom_out(self) -> None:
        self.margin = min(MAX_MARGIN, self.margin + 1)

    def save(self) -> Optional[OSError]:
        """
        Write the store to the tasks file.

        Returns
        -------
        Optional[OSError]
            The write error, or None on success. Callers may ignore it;
            persistence is best effort.
        """
        try:
            save_tasks(self.store, self.tasks_path)
        except OSError as exc:
            logger.warning("Could not save tasks: %s", exc)
            self.status = "Save failed"
            return exc
        self.status = "Saved"
        return None
