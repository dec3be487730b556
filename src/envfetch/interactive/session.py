"""Key handling for the interactive editor.

Each key press is looked up in a transition table for the current mode
and applied to the :class:`~envfetch.interactive.state.EditorState`.
Writes go through :class:`~envfetch.service.VariableService`; after a
successful write the snapshot is re-read from the process environment.

Keys are prompt_toolkit key names (``"down"``, ``"c-q"``, ``"c-m"`` for
Enter) or single characters, so tests can drive a session without a
terminal::

    session = EditorSession(service)
    session.handle_key(Keys.Down)
    session.handle_key("v")
"""

import logging
from collections.abc import Callable

from prompt_toolkit.keys import Keys

from envfetch.interactive.state import EditorState
from envfetch.lib.errors import EnvfetchError
from envfetch.models import VariableSnapshot
from envfetch.service import VariableService

logger = logging.getLogger(__name__)


class EditorSession:
    """Interactive editor over the live process environment.

    Args:
        service: Service used for every write.
        state: Initial state. Defaults to a fresh snapshot in list mode.
    """

    def __init__(self, service: VariableService, state: EditorState | None = None) -> None:
        self.service = service
        self.state = state or EditorState(entries=self.snapshot())

    def snapshot(self) -> VariableSnapshot:
        """Current variables, sorted by name."""
        return tuple(sorted(self.service.snapshot(), key=lambda v: v.key))

    def handle_key(self, key: str) -> None:
        """Apply one key press."""
        if isinstance(key, Keys):
            key = key.value
        self.state.error_message = None

        if self.state.mode == "list":
            action = LIST_ACTIONS.get(key)
            if action is not None:
                action(self)
            return

        action = EDIT_ACTIONS.get(key)
        if action is not None:
            action(self)
        elif len(key) == 1 and key.isprintable():
            self.state.input_buffer += key

    # -- list mode --------------------------------------------------------------

    def quit(self) -> None:
        self.state.exit = True

    def move_down(self) -> None:
        self.state.move_down()

    def move_up(self) -> None:
        self.state.move_up()

    def scroll_value_left(self) -> None:
        self.state.scroll_value_left()

    def scroll_value_right(self) -> None:
        self.state.scroll_value_right()

    def reload(self) -> None:
        self.state.reset(self.snapshot())

    def delete_selected(self) -> None:
        selected = self.state.selected
        if selected is None:
            return
        try:
            self.service.delete(selected.key)
        except EnvfetchError as e:
            self.state.error_message = str(e)
            return
        self.state.replace_entries(self.snapshot())

    def start_edit_key(self) -> None:
        selected = self.state.selected
        if selected is None:
            return
        self.state.input_buffer = selected.key
        self.state.mode = "edit_key"

    def start_edit_value(self) -> None:
        selected = self.state.selected
        if selected is None:
            return
        self.state.input_buffer = selected.value
        self.state.mode = "edit_value"

    def start_create(self) -> None:
        self.state.input_buffer = ""
        self.state.mode = "create_new"

    # -- edit modes -------------------------------------------------------------

    def backspace(self) -> None:
        self.state.input_buffer = self.state.input_buffer[:-1]

    def cancel(self) -> None:
        self.state.input_buffer = ""
        self.state.mode = "list"

    def commit(self) -> None:
        """Apply the input buffer according to the current mode.

        Input that can't form a valid edit is ignored and the mode is kept.
        Service errors are shown in the status line, also keeping the mode.
        """
        buffer = self.state.input_buffer
        selected = self.state.selected
        try:
            match self.state.mode:
                case "edit_key":
                    new_key = buffer.strip()
                    if not new_key or selected is None:
                        return
                    self.service.rename(selected.key, new_key)
                    select = new_key
                case "edit_value":
                    if selected is None:
                        return
                    self.service.set(selected.key, buffer.strip())
                    select = selected.key
                case "create_new":
                    key, sep, value = buffer.partition("=")
                    key, value = key.strip(), value.strip()
                    if not sep or not key or not value:
                        return
                    self.service.set(key, value)
                    select = key
                case _:
                    return
        except EnvfetchError as e:
            logger.debug("Edit failed: %s", e)
            self.state.error_message = str(e)
            return

        self.state.mode = "list"
        self.state.input_buffer = ""
        self.state.replace_entries(self.snapshot(), select_key=select)


LIST_ACTIONS: dict[str, Callable[[EditorSession], None]] = {
    Keys.ControlQ.value: EditorSession.quit,
    Keys.Down.value: EditorSession.move_down,
    Keys.Up.value: EditorSession.move_up,
    Keys.Left.value: EditorSession.scroll_value_left,
    Keys.Right.value: EditorSession.scroll_value_right,
    Keys.ControlR.value: EditorSession.reload,
    "d": EditorSession.delete_selected,
    "e": EditorSession.start_edit_key,
    "v": EditorSession.start_edit_value,
    "n": EditorSession.start_create,
}

EDIT_ACTIONS: dict[str, Callable[[EditorSession], None]] = {
    Keys.Enter.value: EditorSession.commit,
    Keys.Escape.value: EditorSession.cancel,
    Keys.Backspace.value: EditorSession.backspace,
}
