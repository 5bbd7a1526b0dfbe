import io
import termios
from collections import deque

import pytest
from rich.console import Console

from petcli.controller import Controller, State, run_ui
from petcli.events import KeyPress, Tick
from petcli.model import StorageError
from petcli.terminal import KEY_DOWN, KEY_UP
from petcli.view import MenuItem


class ScriptedEvents:
    """Stands in for EventSource: hands out a fixed list of events."""

    def __init__(self, *events):
        self.events = deque(events)

    def next_event(self, timeout=None):
        return self.events.popleft()


def keys(*names):
    return [KeyPress(name) for name in names]


def test_end_to_end_add_move_delete_quit(store):
    controller = Controller(store)
    frames = []
    events = ScriptedEvents(*keys("p", "a", "a", "a"))

    for _ in range(4):
        controller.handle(events.next_event())
    assert len(store.load_all()) == 3
    assert controller.cursor.selected == 0

    controller.handle(KeyPress(KEY_DOWN))
    controller.handle(KeyPress(KEY_DOWN))
    assert controller.cursor.selected == 2

    before = store.load_all()
    controller.handle(KeyPress("d"))
    after = store.load_all()
    assert len(after) == 2
    assert after == before[:2]
    assert controller.cursor.selected == 1

    controller.run(ScriptedEvents(Tick(), KeyPress("q")), frames.append)
    assert controller.state == State.EXITING
    assert not controller.running
    # one frame per event handled
    assert len(frames) == 2


def test_run_draws_before_every_event(store):
    controller = Controller(store)
    frames = []
    controller.run(ScriptedEvents(*keys("a", "p", "q")), frames.append)
    assert len(frames) == 3
    assert len(store.load_all()) == 1


def test_down_on_empty_store_leaves_cursor(store):
    controller = Controller(store)
    assert controller.handle(KeyPress(KEY_DOWN))
    assert controller.cursor.selected == 0
    assert controller.handle(KeyPress(KEY_UP))
    assert controller.cursor.selected == 0


def test_delete_with_nothing_selectable_changes_nothing(store):
    controller = Controller(store)
    controller.handle(KeyPress("d"))
    assert store.load_all() == []
    assert controller.cursor.selected == 0


def test_deleting_last_record_clears_selection(store):
    controller = Controller(store)
    controller.handle(KeyPress("a"))
    controller.handle(KeyPress("d"))
    assert store.load_all() == []
    assert controller.cursor.selected is None

    controller.handle(KeyPress("a"))
    controller.handle(KeyPress(KEY_DOWN))
    assert controller.cursor.selected == 0


def test_up_wraps_to_last(filled_store):
    controller = Controller(filled_store)
    controller.handle(KeyPress(KEY_UP))
    assert controller.cursor.selected == 4


def test_tabs_switch_only_on_navigation_keys(store):
    controller = Controller(store)
    assert controller.active == MenuItem.HOME
    controller.handle(KeyPress("p"))
    assert controller.active == MenuItem.PETS
    controller.handle(Tick())
    controller.handle(KeyPress("x"))
    controller.handle(KeyPress(KEY_DOWN))
    assert controller.active == MenuItem.PETS
    controller.handle(KeyPress("h"))
    assert controller.active == MenuItem.HOME


def test_tick_is_a_no_op(filled_store):
    controller = Controller(filled_store)
    before = filled_store.load_all()
    assert controller.handle(Tick())
    assert controller.cursor.selected == 0
    assert controller.active == MenuItem.HOME
    assert filled_store.load_all() == before


def test_storage_error_ends_the_loop(store, db_path):
    controller = Controller(store)
    db_path.write_text("garbage")
    frames = []
    with pytest.raises(StorageError):
        controller.run(ScriptedEvents(KeyPress("a"), KeyPress("q")), frames.append)
    assert controller.running
    assert db_path.read_text() == "garbage"


def test_run_ui_restores_terminal_when_the_store_fails(store, db_path, pty_stdin):
    fd = pty_stdin.fileno()
    before = termios.tcgetattr(fd)
    controller = Controller(store)
    controller.handle(KeyPress("p"))
    db_path.write_text("garbage")

    screen = io.StringIO()
    with pytest.raises(StorageError):
        run_ui(controller, Console(file=screen), stdin=pty_stdin)

    assert termios.tcgetattr(fd) == before
    assert screen.getvalue().endswith("\x1b[?25h")
