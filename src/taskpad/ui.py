#!/usr/bin/env python3
"""
Full-screen task list on prompt_toolkit.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple

from prompt_toolkit import Application
from prompt_toolkit.data_structures import Point
from prompt_toolkit.filters import Condition
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import (
    ConditionalContainer,
    Float,
    FloatContainer,
    HSplit,
    Layout,
    VSplit,
    Window,
)
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from .app import TEXT_MODES, App, AppMode
from .dates import is_overdue
from .task import Priority, Subtask, Task
from .view import SEARCH_HELP

logger = logging.getLogger(__name__)

Fragments = List[Tuple[str, str]]

PRIORITY_SYMBOLS = {
    Priority.HIGH: " ▲",
    Priority.MEDIUM: " ●",
    Priority.LOW: " ▼",
}
HIGHLIGHT_SYMBOL = " ➤ "
HELP_KEYS = (
    ("q", "quit"),
    ("a", "add"),
    ("A", "subtask"),
    ("D", "due"),
    ("p", "priority"),
    ("d", "delete"),
    ("/", "search"),
    ("+", "zoom-in"),
    ("-", "zoom-out"),
)
POPUP_TITLES = {
    AppMode.INSERT: " New Task ",
    AppMode.DATE_INPUT: " Set Due Date ",
    AppMode.SEARCH: " Search Tasks ",
}
# Catppuccin Mocha
STYLE = Style.from_dict(
    {
        "": "bg:#11111b #cdd6f4",
        "frame.border": "#45475a",
        "frame.label": "#b4befe",
        "popup frame.border": "#cba6f7",
        "marker": "#cba6f7",
        "tag": "#cba6f7",
        "done": "#585b70 strike",
        "due": "#bac2de",
        "due.overdue": "#f38ba8",
        "priority.high": "#f38ba8",
        "priority.medium": "#fab387",
        "priority.low": "#a6e3a1",
        "selected": "bg:#313244 #b4befe bold",
        "help.key": "#cba6f7 bold",
        "help.desc": "#bac2de",
        "status": "#a6e3a1",
    }
)


def list_title(app: App) -> str:
    """
    Return the title of the task list frame.

    Examples
    --------
    >>> app = App()
    >>> list_title(app)
    ' To-Do '
    >>> app.search_input = "rent"
    >>> list_title(app)
    ' To-Do (Search: rent) '
    """
    if app.search_input:
        return f" To-Do (Search: {app.search_input}) "
    if app.mode is AppMode.SEARCH:
        return " To-Do (Search Mode) "
    return " To-Do "


def _entry_fragments(
    entry: Task | Subtask,
    prefix: str,
    selected: bool,
    today: date,
) -> Fragments:
    base = "class:done" if entry.completed else ""
    if selected:
        base = f"{base} class:selected".strip()
    symbol = " ✔ " if entry.completed else " ❯ "
    fragments: Fragments = [
        (base, HIGHLIGHT_SYMBOL if selected else "   "),
        (base, prefix),
        (f"{base} class:marker", symbol),
        (base, entry.description),
        (
            f"{base} class:priority.{entry.priority.name.lower()}",
            PRIORITY_SYMBOLS[entry.priority],
        ),
    ]
    if entry.due_date:
        due_class = "class:due.overdue" if is_overdue(entry.due_date, today) else "class:due"
        fragments.append((f"{base} {due_class}", f" (due: {entry.due_date})"))
    if entry.tags:
        fragments.append((base, " "))
        for tag in entry.tags:
            fragments.append((f"{base} class:tag", tag))
            fragments.append((base, " "))
    fragments.append(("", "\n"))
    return fragments


def build_task_fragments(app: App, today: Optional[date] = None) -> Tuple[Fragments, int]:
    """
    Render the displayed tasks as formatted text.

    Parameters
    ----------
    app : App
        Application state.
    today : Optional[date], optional
        Reference date for overdue highlighting.

    Returns
    -------
    Tuple[Fragments, int]
        Fragments and the line number of the selected entry.
    """
    today = today or date.today()
    fragments: Fragments = []
    selected_line = 0
    line = 0
    selection = app.selection
    for position, task in enumerate(app.displayed()):
        is_current = position == selection.index
        task_selected = is_current and not selection.descended
        if task_selected:
            selected_line = line
        fragments.extend(_entry_fragments(task, "", task_selected, today))
        line += 1
        for sub_position, sub in enumerate(task.sub_tasks):
            sub_selected = is_current and selection.sub_index == sub_position
            if sub_selected:
                selected_line = line
            fragments.extend(_entry_fragments(sub, "  ↳ ", sub_selected, today))
            line += 1
    if not fragments:
        fragments.append(("class:due", "   No tasks yet! Press a to add one.\n"))
    return fragments, selected_line


def build_footer_fragments(app: App) -> Fragments:
    """
    Render the key help line and the status message.
    """
    fragments: Fragments = []
    for key, description in HELP_KEYS:
        fragments.append(("class:help.key", key))
        fragments.append(("class:help.desc", f":{description} "))
    if app.status:
        fragments.append(("class:status", f"  {app.status}"))
    return fragments


def popup_text(app: App) -> str:
    """
    Return the body text of the input popup for the current mode.

    Examples
    --------
    >>> app = App()
    >>> app.begin_search(); app.type_char("h")
    >>> popup_text(app).splitlines()[0]
    'h'
    """
    text = app.buffer()
    if app.mode is AppMode.SEARCH:
        return f"{text}\n\n{SEARCH_HELP}"
    return text


def build_key_bindings(app: App) -> KeyBindings:
    """
    Map keys to application intents.

    Parameters
    ----------
    app : App
        Application state the bindings act on.

    Returns
    -------
    KeyBindings
        Bindings for the normal and text-input modes.
    """
    kb = KeyBindings()
    is_normal = Condition(lambda: app.mode is AppMode.NORMAL)
    is_text = Condition(lambda: app.mode in TEXT_MODES)

    @kb.add("q", filter=is_normal)
    @kb.add("c-c")
    def _(event):
        event.app.exit()

    @kb.add("j", filter=is_normal)
    @kb.add("down", filter=is_normal)
    def _(event):
        app.next()

    @kb.add("k", filter=is_normal)
    @kb.add("up", filter=is_normal)
    def _(event):
        app.previous()

    @kb.add("l", filter=is_normal)
    @kb.add("right", filter=is_normal)
    def _(event):
        app.enter_subtasks()

    @kb.add("h", filter=is_normal)
    @kb.add("left", filter=is_normal)
    def _(event):
        app.leave_subtasks()

    @kb.add("space", filter=is_normal)
    @kb.add("enter", filter=is_normal)
    def _(event):
        app.toggle_completed()

    @kb.add("p", filter=is_normal)
    def _(event):
        app.cycle_priority()

    @kb.add("a", filter=is_normal)
    def _(event):
        app.begin_add()

    @kb.add("A", filter=is_normal)
    def _(event):
        app.begin_add_subtask()

    @kb.add("D", filter=is_normal)
    def _(event):
        app.begin_set_due_date()

    @kb.add("/", filter=is_normal)
    def _(event):
        app.begin_search()

    @kb.add("d", filter=is_normal)
    def _(event):
        app.delete_selected()

    @kb.add("s", filter=is_normal)
    def _(event):
        app.save()

    @kb.add("+", filter=is_normal)
    def _(event):
        app.zoom_in()

    @kb.add("-", filter=is_normal)
    def _(event):
        app.zoom_out()

    @kb.add("enter", filter=is_text)
    def _(event):
        app.commit()

    @kb.add("escape", filter=is_text)
    def _(event):
        app.cancel()

    @kb.add("backspace", filter=is_text)
    def _(event):
        app.backspace()

    @kb.add("<any>", filter=is_text)
    def _(event):
        if event.data and event.data.isprintable():
            app.type_char(event.data)

    return kb


def build_application(app: App) -> Application:
    """
    Assemble the full-screen prompt_toolkit application.
    """
    selected_line = [0]

    def task_text():
        fragments, selected_line[0] = build_task_fragments(app)
        return fragments

    list_control = FormattedTextControl(
        task_text,
        focusable=True,
        show_cursor=False,
        get_cursor_position=lambda: Point(x=0, y=selected_line[0]),
    )
    list_frame = Frame(
        Window(list_control, wrap_lines=False),
        title=lambda: list_title(app),
    )
    footer = Frame(
        Window(FormattedTextControl(lambda: build_footer_fragments(app)), height=1),
        title=" Controls ",
    )

    def vertical_pad():
        return Dimension.exact(app.margin)

    def horizontal_pad():
        return Dimension.exact(app.margin * 2)

    viewport = HSplit(
        [
            Window(height=vertical_pad),
            VSplit(
                [
                    Window(width=horizontal_pad),
                    HSplit([list_frame, footer]),
                    Window(width=horizontal_pad),
                ]
            ),
            Window(height=vertical_pad),
        ]
    )
    popup = ConditionalContainer(
        Frame(
            Window(FormattedTextControl(lambda: popup_text(app)), wrap_lines=True),
            title=lambda: POPUP_TITLES.get(app.mode, ""),
            style="class:popup",
            width=Dimension(preferred=70, max=90),
            height=Dimension(preferred=6, max=8),
        ),
        filter=Condition(lambda: app.mode in TEXT_MODES),
    )
    container = FloatContainer(content=viewport, floats=[Float(content=popup)])
    return Application(
        layout=Layout(container, focused_element=list_control),
        key_bindings=build_key_bindings(app),
        style=STYLE,
        full_screen=True,
    )


def run_tui(app: App) -> None:
    """
    Run the interactive list until the user quits, then save.
    """
    logger.info("Starting interactive session with %d tasks", len(app.store))
    build_application(app).run()
    # Best-effort persistence: a failed save is logged and otherwise ignored.
    app.save()
