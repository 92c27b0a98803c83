#!/usr/bin/env python3
"""
Terminal task tracker with nested subtasks, tags and search.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from .app import App
from .config import Settings, load_settings
from .dates import format_due_date, parse_due_date
from .logging_setup import setup_logging
from .storage import load_tasks
from .task import Subtask, Task
from .view import PRIORITY_KEYWORDS, displayed

HELP_TEXT = "Terminal task tracker with nested subtasks, tags and search."


def format_task_line(task: Task | Subtask, parent_id: Optional[int] = None) -> str:
    """
    Format a task for plain-text listings.

    Parameters
    ----------
    task : Task | Subtask
        Task to format.
    parent_id : Optional[int], optional
        Parent ID when formatting a subtask.

    Returns
    -------
    str
        One listing line.

    Examples
    --------
    >>> format_task_line(Task(id=3, description="Pay rent #home", tags=["#home"]))
    '[ ] 3 - Pay rent #home (Medium)'
    >>> format_task_line(Subtask(id=1, description="Pack", completed=True, due_date="2024-06-01"), parent_id=3)
    '    [x] 3.1 - Pack (Medium, due 2024-06-01)'
    """
    status = "[x]" if task.completed else "[ ]"
    details = [task.priority.label]
    if task.due_date:
        details.append(f"due {task.due_date}")
    if parent_id is None:
        return f"{status} {task.id} - {task.description} ({', '.join(details)})"
    return f"    {status} {parent_id}.{task.id} - {task.description} ({', '.join(details)})"


def build_listing(tasks: Sequence[Task]) -> List[str]:
    """
    Build listing lines for tasks and their subtasks.

    Examples
    --------
    >>> build_listing([])
    ['No tasks yet!']
    """
    if not tasks:
        return ["No tasks yet!"]
    lines: List[str] = []
    for task in tasks:
        lines.append(format_task_line(task))
        for sub in task.sub_tasks:
            lines.append(format_task_line(sub, parent_id=task.id))
    return lines


def _save_or_exit(app: App) -> None:
    import typer

    error = app.save()
    if error is not None:
        print(f"taskpad: could not save tasks: {error}", file=sys.stderr)
        raise typer.Exit(code=1)


def build_app():
    """
    Build the Typer app lazily to keep fast-path imports light.

    Returns
    -------
    typer.Typer
        Configured Typer application for the taskpad CLI.
    """
    import typer

    app = typer.Typer(help=HELP_TEXT, add_completion=False)

    def open_app(ctx: typer.Context) -> App:
        settings: Settings = ctx.obj
        store = load_tasks(settings.tasks_path)
        return App(store=store, tasks_path=settings.tasks_path, margin=settings.margin)

    @app.callback(invoke_without_command=True)
    def main_callback(
        ctx: typer.Context,
        file: Optional[Path] = typer.Option(
            None,
            "--file",
            "-f",
            help="Tasks file (default: $TASKPAD_PATH or ./tasks.json).",
        ),
    ):
        settings = load_settings(tasks_path=file)
        ctx.obj = settings
        interactive = ctx.invoked_subcommand in (None, "tui")
        setup_logging(
            log_dir=settings.log_dir,
            level=settings.log_level,
            console=not interactive,
        )
        if ctx.invoked_subcommand is None:
            tui_cmd(ctx)

    @app.command("tui")
    def tui_cmd(ctx: typer.Context):
        """
        Open the interactive task list.
        """
        from .ui import run_tui

        run_tui(open_app(ctx))

    @app.command("add")
    def add_cmd(
        ctx: typer.Context,
        words: List[str] = typer.Argument(..., help="Task description; #words become tags."),
        priority: str = typer.Option(
            "medium",
            "--priority",
            "-p",
            help="Priority: low/medium/high.",
        ),
        due: Optional[str] = typer.Option(
            None,
            "--due",
            help="Due date (YYYY-MM-DD, 'tomorrow', 'friday', ...).",
        ),
        parent: Optional[int] = typer.Option(
            None,
            "--parent",
            help="Add as a subtask of this task ID.",
        ),
    ):
        """
        Add a task (or subtask) and save.
        """
        description = " ".join(words)
        level = PRIORITY_KEYWORDS.get(priority.strip().lower())
        if level is None:
            raise typer.BadParameter(f"Unknown priority: {priority}", param_hint="--priority")
        now = datetime.now()
        if due:
            parsed = parse_due_date(due, now)
            if parsed is None:
                raise typer.BadParameter(f"Could not read a date from {due!r}", param_hint="--due")
        else:
            parsed = parse_due_date(description, now)
        due_date = format_due_date(parsed) if parsed else None

        tracker = open_app(ctx)
        if parent is None:
            new_id = tracker.store.add(description, priority=level, due_date=due_date)
            label = str(new_id)
        else:
            from .store import TaskNotFoundError

            try:
                new_id = tracker.store.add_subtask(
                    parent, description, priority=level, due_date=due_date
                )
            except TaskNotFoundError:
                print(f"Task with ID {parent} not found.", file=sys.stderr)
                raise typer.Exit(code=1)
            label = f"{parent}.{new_id}"
        _save_or_exit(tracker)
        print(f"Added task {label}.")

    @app.command("list")
    def list_cmd(
        ctx: typer.Context,
        query: Optional[str] = typer.Argument(
            None,
            help="Search text: words, #tags, high/medium/low, done/pending, dates.",
        ),
    ):
        """
        Print tasks, optionally filtered by a search query.
        """
        tracker = open_app(ctx)
        for line in build_listing(displayed(tracker.store.tasks, query or "")):
            print(line)

    @app.command("done")
    def done_cmd(
        ctx: typer.Context,
        task_id: int = typer.Argument(..., help="ID of the task to complete."),
    ):
        """
        Mark a top-level task completed and save.
        """
        tracker = open_app(ctx)
        task = tracker.store.find(task_id)
        if task is None:
            print(f"Task with ID {task_id} not found.", file=sys.stderr)
            raise typer.Exit(code=1)
        if not task.completed:
            tracker.store.toggle_completed(task_id)
        _save_or_exit(tracker)
        print(f"Completed task {task_id}.")

    @app.command("help")
    def help_cmd(ctx: typer.Context):
        """
        Show usage for all commands.
        """
        print(ctx.parent.get_help())

    return app


def main():
    """
    Entry point for the taskpad command.
    """
    app = build_app()
    app()


if __name__ == "__main__":
    main()
