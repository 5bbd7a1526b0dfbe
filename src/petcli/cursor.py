from __future__ import annotations

from typing import Optional


class SelectionCursor:
    """
    The optional index of the selected pet in the displayed list.

    Every transition takes the current list length ``n``. For ``n >= 1`` no
    transition leaves the cursor at an index ``>= n``; for ``n == 0`` the
    movement transitions leave it untouched.
    """

    def __init__(self, selected: Optional[int] = None):
        self.selected = selected

    def __repr__(self) -> str:
        return f"SelectionCursor({self.selected!r})"

    def select(self, index: Optional[int]):
        self.selected = index

    def select_first(self):
        # Some(0) even for an empty list; the view and the delete key both
        # treat an index past the end as "nothing selected".
        self.selected = 0

    def move_down(self, n: int):
        if n <= 0:
            return
        if self.selected is None:
            self.selected = 0
        elif self.selected >= n - 1:
            self.selected = 0
        else:
            self.selected += 1

    def move_up(self, n: int):
        if n <= 0:
            return
        if self.selected is not None and 0 < self.selected < n:
            self.selected -= 1
        else:
            self.selected = n - 1

    def remove_selected_adjust(self, remaining: int):
        """Re-aim the cursor after the selected pet was removed.

        ``remaining`` is the list length after the removal.
        """
        if self.selected is None:
            return
        if self.selected > 0:
            self.selected -= 1
        elif remaining == 0:
            self.selected = None
        else:
            self.selected = 0

    def valid_for(self, n: int) -> bool:
        return self.selected is not None and 0 <= self.selected < n
