"""Pure rendering of the editor state into prompt_toolkit fragments.

Every function here only reads the state and the pane size it is given,
so the output can be asserted on directly in tests.
"""

from prompt_toolkit.formatted_text import StyleAndTextTuples

from envfetch.interactive.state import EditorState, Mode

LEFT_INDICATOR = "◀"
RIGHT_INDICATOR = "▶"

INPUT_LABELS: dict[Mode, str] = {
    "edit_key": "New name: ",
    "edit_value": "New value: ",
    "create_new": "NAME=VALUE: ",
}

HELP: dict[Mode, str] = {
    "list": (
        "↑/↓ move  ←/→ scroll value  e rename  v edit value  n new  "
        "d delete  Ctrl-R reload  Ctrl-Q quit"
    ),
    "edit_key": "Enter save  Esc cancel",
    "edit_value": "Enter save  Esc cancel",
    "create_new": "Enter create  Esc cancel",
}


def truncate(text: str, width: int) -> str:
    """Cut ``text`` to ``width`` columns, marking the cut with an ellipsis."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"


def value_window(value: str, offset: int, width: int) -> tuple[str, bool, bool]:
    """Slice of ``value`` visible from ``offset`` in ``width`` columns.

    Returns:
        ``(visible_text, more_on_left, more_on_right)``.
    """
    width = max(width, 1)
    visible = value[offset : offset + width]
    return visible, offset > 0, offset + width < len(value)


def render_list(state: EditorState, width: int) -> StyleAndTextTuples:
    """Variable names on the current page, the selected one marked."""
    if not state.entries:
        return [("class:empty", "No environment variables\n")]

    fragments: StyleAndTextTuples = []
    for index, variable in state.visible_entries:
        selected = index == state.current_index
        marker = "> " if selected else "  "
        style = "class:selected" if selected else ""
        fragments.append((style, marker + truncate(variable.key, width - 2) + "\n"))
    return fragments


def render_detail(state: EditorState, width: int) -> StyleAndTextTuples:
    """Selected variable, or the input line while editing."""
    if state.mode != "list":
        label = INPUT_LABELS[state.mode]
        return [
            ("class:prompt", label),
            ("", state.input_buffer),
            ("class:cursor", " "),
            ("", "\n"),
        ]

    selected = state.selected
    if selected is None:
        return [("class:empty", "Nothing selected\n")]

    # Two columns are reserved for the scroll indicators.
    text, more_left, more_right = value_window(
        selected.value, state.value_scroll_offset, width - 2
    )
    return [
        ("class:key", truncate(selected.key, width) + "\n"),
        ("", "\n"),
        ("class:indicator", LEFT_INDICATOR if more_left else " "),
        ("", text),
        ("class:indicator", RIGHT_INDICATOR if more_right else ""),
        ("", "\n"),
    ]


def render_status(state: EditorState) -> StyleAndTextTuples:
    """Error message if there is one, otherwise key help for the mode."""
    if state.error_message:
        return [("class:error", f"Error: {state.error_message}")]
    position = f"{state.current_index + 1}/{len(state.entries)}  " if state.entries else ""
    return [("class:help", position + HELP[state.mode])]
