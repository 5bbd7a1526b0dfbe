from __future__ import annotations

from enum import IntEnum
from typing import List, Optional, Sequence

from rich import box
from rich.align import Align
from rich.console import Group
from rich.layout import Layout
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from .model import Record

LIGHT_CYAN = "#E0FFFF"
WHITE = "#FFFFFF"
YELLOW = "#FFFF00"
LIGHT_SKY_BLUE = "#87CEFA"
DARK_GRAY = "#A9A9A9"

MENU_TITLES = ["Home", "Pets", "Add", "Delete", "Quit"]
DETAIL_COLUMNS = ["ID", "Name", "Category", "Age", "Created At"]

HEADER_HEIGHT = 3
FOOTER_HEIGHT = 3

HIGHLIGHT_STYLE = Style(color="black", bgcolor=YELLOW, bold=True)
HIGHLIGHT_SYMBOL = "> "


class MenuItem(IntEnum):
    HOME = 0
    PETS = 1


def render_tabs(active: MenuItem) -> Panel:
    """The menu strip: every title with its hot key underlined, active tab highlighted."""
    strip = Text()
    for i, title in enumerate(MENU_TITLES):
        if i:
            strip.append(" | ", style=WHITE)
        first, rest = title[:1], title[1:]
        rest_style = YELLOW if i == active.value else WHITE
        strip.append(first, style=Style(color=YELLOW, underline=True))
        strip.append(rest, style=Style(color=rest_style, bold=i == active.value))
    return Panel(strip, title="Menu", title_align="left", box=box.SQUARE)


def render_footer(footer: str) -> Panel:
    return Panel(
        Align.center(Text(footer, style=LIGHT_CYAN)),
        title="Copyright",
        title_align="left",
        border_style=WHITE,
        box=box.SQUARE,
    )


def render_home() -> Panel:
    lines = [
        Text(""),
        Text("Welcome"),
        Text(""),
        Text("to"),
        Text(""),
        Text("pet-CLI", style=Style(color=LIGHT_SKY_BLUE, bold=True)),
        Text(""),
        Text(
            "Press 'p' to access pets, 'a' to add random new pets "
            "and 'd' to delete the currently selected pet."
        ),
    ]
    for line in lines:
        line.justify = "center"
    return Panel(
        Group(*lines),
        title="Home",
        title_align="left",
        border_style=WHITE,
        box=box.SQUARE,
    )


def selected_record(
    records: Sequence[Record], selected: Optional[int]
) -> Optional[Record]:
    if selected is None or not 0 <= selected < len(records):
        return None
    return records[selected]


def render_pet_list(records: Sequence[Record], selected: Optional[int]) -> Panel:
    lines: List[Text] = []
    for i, record in enumerate(records):
        if i == selected:
            lines.append(Text(f"{HIGHLIGHT_SYMBOL}{record.name}", style=HIGHLIGHT_STYLE))
        else:
            lines.append(Text(f"{' ' * len(HIGHLIGHT_SYMBOL)}{record.name}"))
    body = Group(*lines) if lines else Text("no pets", style=DARK_GRAY)
    return Panel(body, title="Pets", title_align="left", border_style=WHITE, box=box.SQUARE)


def render_pet_detail(record: Optional[Record]) -> Panel:
    table = Table(box=box.SIMPLE_HEAD, expand=True, header_style=Style(bold=True))
    for column in DETAIL_COLUMNS:
        table.add_column(column)
    if record is not None:
        table.add_row(
            str(record.id),
            record.name,
            record.category,
            str(record.age),
            record.created_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
        )
    return Panel(table, title="Detail", title_align="left", border_style=WHITE, box=box.SQUARE)


def compose_frame(
    active: MenuItem,
    records: Sequence[Record],
    selected: Optional[int],
    footer: str = "pet-CLI 2021 - all rights reserved",
) -> Layout:
    """
    Build the whole screen for the current state.

    Header (menu strip), body and footer are stacked vertically; the body is
    the home panel or, on the pets tab, the pet list beside the detail table
    of the selected pet. A cursor that does not point at a pet yields an
    empty detail table. Nothing is drawn or mutated here.
    """
    layout = Layout(name="root")
    layout.split_column(
        Layout(render_tabs(active), name="header", size=HEADER_HEIGHT),
        Layout(name="body", minimum_size=2),
        Layout(render_footer(footer), name="footer", size=FOOTER_HEIGHT),
    )
    if active == MenuItem.PETS:
        layout["body"].split_row(
            Layout(render_pet_list(records, selected), name="list", ratio=1),
            Layout(
                render_pet_detail(selected_record(records, selected)),
                name="detail",
                ratio=4,
            ),
        )
    else:
        layout["body"].update(render_home())
    return layout
