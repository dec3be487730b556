"""Full-screen prompt_toolkit application for the interactive editor.

The application is a thin shell around :class:`EditorSession`: every key
press is forwarded to the session, and the panes are redrawn from the
pure functions in :mod:`envfetch.interactive.render`.
"""

from prompt_toolkit.application import Application, get_app
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from envfetch.interactive.render import render_detail, render_list, render_status
from envfetch.interactive.session import EditorSession
from envfetch.service import VariableService

STYLE = Style.from_dict(
    {
        "selected": "reverse bold",
        "key": "fg:ansiblue bold",
        "indicator": "fg:ansiyellow",
        "prompt": "fg:ansiblue bold",
        "cursor": "reverse",
        "empty": "italic fg:#888888",
        "help": "fg:#888888",
        "error": "fg:ansired bold",
    }
)

# Frame borders plus the status line.
_CHROME_ROWS = 3
_LIST_WEIGHT = 2
_DETAIL_WEIGHT = 3


def _pane_widths() -> tuple[int, int]:
    columns = get_app().output.get_size().columns
    inner = max(columns - 4, 2)
    list_width = inner * _LIST_WEIGHT // (_LIST_WEIGHT + _DETAIL_WEIGHT)
    return list_width, inner - list_width


def build_application(session: EditorSession) -> Application[None]:
    """Create the editor application bound to ``session``."""
    kb = KeyBindings()

    @kb.add(Keys.Any)
    def dispatch(event: KeyPressEvent) -> None:
        for key_press in event.key_sequence:
            if key_press.key == Keys.BracketedPaste:
                for char in key_press.data:
                    session.handle_key(char)
            else:
                session.handle_key(key_press.key)
        if session.state.exit:
            event.app.exit()

    def fit_to_screen(app: Application[None]) -> None:
        session.state.resize(app.output.get_size().rows - _CHROME_ROWS)

    def list_text() -> StyleAndTextTuples:
        return render_list(session.state, _pane_widths()[0])

    def detail_text() -> StyleAndTextTuples:
        return render_detail(session.state, _pane_widths()[1])

    list_window = Window(
        FormattedTextControl(list_text, focusable=True),
        width=Dimension(weight=_LIST_WEIGHT),
    )
    detail_window = Window(
        FormattedTextControl(detail_text),
        width=Dimension(weight=_DETAIL_WEIGHT),
        wrap_lines=False,
    )
    status_window = Window(
        FormattedTextControl(lambda: render_status(session.state)),
        height=1,
    )

    root = HSplit(
        [
            VSplit(
                [
                    Frame(list_window, title="Variables"),
                    Frame(detail_window, title="Value"),
                ]
            ),
            status_window,
        ]
    )

    return Application(
        layout=Layout(root, focused_element=list_window),
        key_bindings=kb,
        style=STYLE,
        full_screen=True,
        before_render=fit_to_screen,
    )


def run_interactive(service: VariableService) -> None:
    """Run the editor until the user quits with Ctrl-Q."""
    build_application(EditorSession(service)).run()
