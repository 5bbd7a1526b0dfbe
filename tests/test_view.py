import io
from datetime import datetime, timezone

import pytest
from rich.console import Console

from petcli.model import Record
from petcli.view import MenuItem, compose_frame, selected_record


def make_records(*names):
    return [
        Record(
            id=100 + i,
            name=name,
            category="cats" if i % 2 else "dogs",
            age=i + 1,
            created_at=datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc),
        )
        for i, name in enumerate(names)
    ]


def render(frame) -> str:
    console = Console(width=120, height=30, file=io.StringIO(), record=True)
    console.print(frame)
    return console.export_text()


def test_home_frame_shows_menu_welcome_and_footer():
    text = render(compose_frame(MenuItem.HOME, [], 0, footer="made with care"))
    for title in ("Home", "Pets", "Add", "Delete", "Quit"):
        assert title in text
    assert "Welcome" in text
    assert "made with care" in text


def test_frame_layout_has_header_body_footer():
    frame = compose_frame(MenuItem.HOME, [], None)
    assert frame["header"].size == 3
    assert frame["footer"].size == 3
    assert frame["body"].size is None


def test_pets_frame_lists_names_and_details_of_selection():
    records = make_records("Rexxxxxxxx", "Tomxxxxxxx", "Kikixxxxxx")
    text = render(compose_frame(MenuItem.PETS, records, 1))
    for record in records:
        assert record.name in text
    assert "> Tomxxxxxxx" in text
    assert "101" in text
    assert "2021-03-04 05:06:07" in text
    assert "Rexxxxxxxx" in text and "100" not in text


@pytest.mark.parametrize("selected", [None, 3, 99])
def test_pets_frame_with_cursor_off_the_list_has_empty_detail(selected):
    records = make_records("Rexxxxxxxx", "Tomxxxxxxx", "Kikixxxxxx")
    text = render(compose_frame(MenuItem.PETS, records, selected))
    assert "Created At" in text
    assert "2021-03-04" not in text
    assert "> " not in text


def test_pets_frame_for_empty_store():
    text = render(compose_frame(MenuItem.PETS, [], 0))
    assert "no pets" in text


def test_compose_frame_does_not_touch_records():
    records = make_records("Rexxxxxxxx")
    snapshot = [r.model_copy() for r in records]
    compose_frame(MenuItem.PETS, records, 0)
    assert records == snapshot


def test_selected_record_bounds():
    records = make_records("a", "b")
    assert selected_record(records, 0).name == "a"
    assert selected_record(records, 1).name == "b"
    assert selected_record(records, 2) is None
    assert selected_record(records, -1) is None
    assert selected_record(records, None) is None
