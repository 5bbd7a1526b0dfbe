from __future__ import annotations

import sys
from enum import Enum
from typing import Callable, Dict, Optional, TextIO

from rich.console import Console, RenderableType
from rich.live import Live

from .cursor import SelectionCursor
from .events import EventSource, Event, KeyPress, Tick
from .model import RecordStore
from .petcli_env import UIConfig
from .shared import log_msg, quiet_console
from .terminal import KEY_DOWN, KEY_UP, KeyReader, raw_input_mode
from .view import MenuItem, compose_frame


class State(Enum):
    RUNNING = "running"
    EXITING = "exiting"


class Controller:
    """
    Owns the session state (active tab, selection cursor) and applies one
    event at a time to it and to the record store.

    Store errors are not caught here; they end the session.
    """

    def __init__(self, store: RecordStore, ui: Optional[UIConfig] = None):
        self.store = store
        self.ui = ui or UIConfig()
        self.active = MenuItem.HOME
        self.cursor = SelectionCursor()
        self.cursor.select_first()
        self.state = State.RUNNING

        self.bindings: Dict[str, Callable[[], None]] = {
            "q": self.action_quit,
            "h": self.action_home,
            "p": self.action_pets,
            "a": self.action_add,
            "d": self.action_delete,
            KEY_UP: self.action_up,
            KEY_DOWN: self.action_down,
        }

    @property
    def running(self) -> bool:
        return self.state == State.RUNNING

    def frame(self) -> RenderableType:
        records = self.store.load_all() if self.active == MenuItem.PETS else []
        return compose_frame(self.active, records, self.cursor.selected, self.ui.footer)

    def handle(self, event: Event) -> bool:
        """Apply ``event``; return False once the session should end."""
        if isinstance(event, KeyPress):
            action = self.bindings.get(event.key)
            if action is not None:
                action()
        elif isinstance(event, Tick):
            # nothing changes; the caller redraws anyway
            pass
        return self.running

    def action_quit(self):
        log_msg("quit requested")
        self.state = State.EXITING

    def action_home(self):
        self.active = MenuItem.HOME

    def action_pets(self):
        self.active = MenuItem.PETS

    def action_add(self):
        self.store.append_random()

    def action_delete(self):
        records = self.store.load_all()
        if not self.cursor.valid_for(len(records)):
            log_msg(f"nothing to delete: {self.cursor}, {len(records) = }")
            return
        self.store.remove_at(self.cursor.selected)
        self.cursor.remove_selected_adjust(len(records) - 1)

    def action_up(self):
        self.cursor.move_up(len(self.store.load_all()))

    def action_down(self):
        self.cursor.move_down(len(self.store.load_all()))

    def run(self, events: EventSource, draw: Callable[[RenderableType], None]):
        """Draw, wait for the next event, dispatch; until quit."""
        while self.running:
            draw(self.frame())
            self.handle(events.next_event())


def run_ui(
    controller: Controller,
    console: Optional[Console] = None,
    stdin: Optional[TextIO] = None,
):
    """
    Run an interactive session on the real terminal.

    Raw input mode, the alternate screen and the event thread are all scoped
    to this call and are released on every exit path, errors included.
    """
    console = console or Console()
    stdin = stdin or sys.stdin
    tick_rate = controller.ui.tick_rate_ms / 1000
    log_msg(f"session start: {controller.store.db_path}, {tick_rate = }")
    with quiet_console(), raw_input_mode(stdin, console.file):
        with Live(
            console=console,
            screen=True,
            auto_refresh=False,
            redirect_stdout=False,
            redirect_stderr=False,
        ) as live:
            reader = KeyReader(stdin.fileno())
            with EventSource(reader.poll, reader.read_key, tick_rate=tick_rate) as events:
                controller.run(events, lambda frame: live.update(frame, refresh=True))
    log_msg("session end")
