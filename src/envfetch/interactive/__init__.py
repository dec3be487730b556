"""Interactive full-screen editor.

Structure:
- state.py: EditorState model (cursor, scroll, edit buffer)
- session.py: Key event → transition tables, writes via VariableService
- render.py: Pure rendering of the state into formatted text
- app.py: prompt_toolkit Application wiring
"""

from envfetch.interactive.app import build_application, run_interactive
from envfetch.interactive.session import EditorSession
from envfetch.interactive.state import EditorState, Mode

__all__ = [
    "EditorSession",
    "EditorState",
    "Mode",
    "build_application",
    "run_interactive",
]
