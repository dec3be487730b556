"""Editor state for the interactive mode.

:class:`EditorState` is a plain mutable model: the session applies key
events to it and the renderer reads it. Nothing here talks to the
terminal or the environment, so tests build states directly::

    state = EditorState(entries=(Variable(key="A", value="1"),))
    state.move_down()
    assert state.current_index == 0
"""

from typing import Literal

from pydantic import BaseModel, Field

from envfetch.models import Variable, VariableSnapshot

Mode = Literal["list", "edit_key", "edit_value", "create_new"]

DEFAULT_VISIBLE_ROWS = 30

# Rows kept between the cursor and the bottom of the page while scrolling.
SCROLL_MARGIN = 4


class EditorState(BaseModel):
    """Snapshot, cursor and edit buffer of the interactive editor.

    Invariants kept by every method:
    - ``current_index < len(entries)`` (``0`` when there are no entries)
    - ``scroll_offset <= current_index``
    - ``value_scroll_offset <= len(selected value)``
    """

    mode: Mode = "list"
    entries: VariableSnapshot = ()
    current_index: int = 0
    scroll_offset: int = 0
    value_scroll_offset: int = 0
    input_buffer: str = ""
    error_message: str | None = None
    visible_rows: int = Field(default=DEFAULT_VISIBLE_ROWS, ge=1)
    exit: bool = False

    @property
    def selected(self) -> Variable | None:
        if not self.entries:
            return None
        return self.entries[self.current_index]

    @property
    def visible_entries(self) -> list[tuple[int, Variable]]:
        """``(index, variable)`` pairs on the current page."""
        end = self.scroll_offset + self.visible_rows
        return list(enumerate(self.entries))[self.scroll_offset : end]

    # -- cursor -----------------------------------------------------------------

    def move_down(self) -> None:
        if not self.entries:
            return
        self.current_index = min(self.current_index + 1, len(self.entries) - 1)
        self.value_scroll_offset = 0
        self.follow_cursor()

    def move_up(self) -> None:
        if self.current_index == 0:
            return
        self.current_index -= 1
        self.value_scroll_offset = 0
        self.follow_cursor()

    def follow_cursor(self) -> None:
        """Recompute ``scroll_offset`` so the cursor stays inside the page."""
        page = self.visible_rows
        margin = min(SCROLL_MARGIN, (page - 1) // 2)
        if self.current_index < self.scroll_offset:
            self.scroll_offset = self.current_index
        elif self.current_index > self.scroll_offset + page - 1 - margin:
            self.scroll_offset = self.current_index - (page - 1 - margin)
        last_page_start = max(0, len(self.entries) - page)
        self.scroll_offset = max(
            0, min(self.scroll_offset, last_page_start, self.current_index)
        )

    def resize(self, visible_rows: int) -> None:
        self.visible_rows = max(1, visible_rows)
        self.follow_cursor()

    # -- value scrolling --------------------------------------------------------

    def scroll_value_left(self) -> None:
        if self.value_scroll_offset > 0:
            self.value_scroll_offset -= 1

    def scroll_value_right(self) -> None:
        selected = self.selected
        if selected is not None and self.value_scroll_offset < len(selected.value):
            self.value_scroll_offset += 1

    # -- snapshots --------------------------------------------------------------

    def reset(self, entries: VariableSnapshot) -> None:
        """Replace the snapshot and move back to the top."""
        self.entries = entries
        self.current_index = 0
        self.scroll_offset = 0
        self.value_scroll_offset = 0

    def replace_entries(
        self, entries: VariableSnapshot, select_key: str | None = None
    ) -> None:
        """Replace the snapshot after a write, keeping the cursor nearby.

        The cursor moves to ``select_key`` when it is present, otherwise it
        stays at the same index, clamped to the new snapshot.
        """
        self.entries = entries
        keys = [variable.key for variable in entries]
        if select_key is not None and select_key in keys:
            self.current_index = keys.index(select_key)
        else:
            self.current_index = min(self.current_index, max(len(entries) - 1, 0))
        self.value_scroll_offset = 0
        self.follow_cursor()
