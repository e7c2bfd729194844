"""Frame building and rendering.

build_frame() is a pure function of the navigation state and the store;
render_frame() turns its result into a rich renderable. Neither touches
the terminal.
"""

from dataclasses import dataclass, field
from typing import Optional

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .constants import CATEGORY_ORDER, LIST_ORDER
from .form import FORM_FIELDS, EditForm
from .keys import HELP
from .navigation import NavigationState
from .store import Store

COLUMNS = ["Name", "Year", "Progress", "Status", "Rating", "Score", "Started"]


@dataclass
class Frame:
    """Everything needed to draw one screen."""

    list_tabs: list[str]
    active_list: int
    category_tabs: list[str]
    active_category: int
    columns: list[str]
    rows: list[list[str]]
    selected_row: Optional[int]
    form_title: Optional[str] = None
    form_lines: list[tuple[str, str, bool]] = field(default_factory=list)
    form_error: Optional[str] = None
    notice: Optional[str] = None
    help: list[tuple[str, str]] = field(default_factory=lambda: list(HELP))


def build_frame(
    nav: NavigationState,
    store: Store,
    form: Optional[EditForm] = None,
    notice: Optional[str] = None,
) -> Frame:
    """Describe the screen for the current state."""
    counts = store.counts(nav.active_list)
    rows = [
        [
            entry.name,
            "" if entry.year is None else str(entry.year),
            entry.progress,
            entry.status.label,
            f"{entry.rating:g}",
            str(entry.score),
            entry.started.isoformat(),
        ]
        for _, entry in store.filtered(nav.active_list, nav.active_category)
    ]
    columns = list(COLUMNS)
    columns[2] = nav.active_list.unit_label

    frame = Frame(
        list_tabs=[kind.label for kind in LIST_ORDER],
        active_list=LIST_ORDER.index(nav.active_list),
        category_tabs=[f"{category.label} ({counts[category]})" for category in CATEGORY_ORDER],
        active_category=CATEGORY_ORDER.index(nav.active_category),
        columns=columns,
        rows=rows,
        selected_row=nav.selection,
        notice=notice,
    )
    if form is not None:
        frame.form_title = form.title
        frame.form_lines = [
            (label, form.values[name], index == form.focus)
            for index, (name, label) in enumerate(FORM_FIELDS)
        ]
        frame.form_error = form.error
    return frame


def _tabs(titles: list[str], active: int) -> Text:
    text = Text()
    for index, title in enumerate(titles):
        if index:
            text.append(" | ", style="white")
        style = "bold bright_cyan underline" if index == active else "white"
        text.append(title, style=style)
    return text


def render_frame(frame: Frame) -> RenderableType:
    """Turn a frame into a rich renderable."""
    header = Table.grid(padding=(0, 2))
    header.add_column()
    header.add_column()
    header.add_row(
        Panel(_tabs(frame.list_tabs, frame.active_list), title="Menu", border_style="white"),
        Panel(_tabs(frame.category_tabs, frame.active_category), title="Status", border_style="white"),
    )

    table = Table(expand=True, header_style="bold", border_style="white")
    for column in frame.columns:
        table.add_column(column)
    for index, row in enumerate(frame.rows):
        style = "black on bright_cyan" if index == frame.selected_row else None
        table.add_row(*row, style=style)
    if not frame.rows:
        table.caption = "No entries"

    parts: list[RenderableType] = [header, table]

    if frame.form_title is not None:
        form = Text()
        for label, value, focused in frame.form_lines:
            marker = "▶ " if focused else "  "
            form.append(f"{marker}{label:<8} ", style="bold" if focused else "dim")
            form.append(value + ("_" if focused else ""), style="bright_cyan" if focused else "white")
            form.append("\n")
        if frame.form_error:
            form.append(frame.form_error, style="red")
        parts.append(Panel(form, title=frame.form_title, subtitle="enter: next/save  esc: cancel"))

    if frame.notice:
        parts.append(Text(frame.notice, style="yellow"))

    footer = Text()
    for key, description in frame.help:
        footer.append(f" {key} ", style="bold reverse")
        footer.append(f" {description}  ", style="dim")
    parts.append(footer)
    return Group(*parts)
