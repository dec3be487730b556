"""Persistent variable backends.

A persistent variable survives the envfetch process: new shells pick it
up. Two backends implement the same :class:`PersistentStore` protocol:

- :class:`RcFileStore` rewrites ``export KEY="VALUE"`` lines in a shell
  init file (``~/.bashrc`` by default). Used everywhere but Windows.
- :class:`RegistryStore` writes ``HKEY_CURRENT_USER\\Environment`` and
  broadcasts ``WM_SETTINGCHANGE`` so running programs reload it.

:func:`select_persistent_store` picks the one for the running platform.

The rc-file rewrite goes through :class:`RcDocument`, a line model that
can be exercised without touching the filesystem::

    >>> doc = RcDocument.parse('export A="1"\\nexport A=2\\n')
    >>> doc.assign("A", "3")
    >>> doc.render()
    'export A="3"\\n'
"""

import logging
import sys
import threading
from collections.abc import Callable
from pathlib import Path
from types import ModuleType
from typing import Any, Protocol

from envfetch.lib.errors import InvalidFormatError, PersistError
from envfetch.lib.validation import validate_var_name

logger = logging.getLogger(__name__)

RC_HEADER = "# Environment variables\n"
REGISTRY_ENV_PATH = "Environment"

# Characters that keep a special meaning inside double quotes in sh.
_DOUBLE_QUOTE_SPECIALS = ("\\", '"', "$", "`")


class PersistentStore(Protocol):
    """Durably record or remove a variable for future shell sessions."""

    def persist_set(self, key: str, value: str) -> None: ...

    def persist_unset(self, key: str) -> None: ...


def check_assignment(key: str, value: str | None = None) -> None:
    """Validate a key (and value, if given) before any backend write.

    Raises:
        NameValidationError: The key is empty or contains a space.
        InvalidFormatError: The value contains ``==``.
    """
    validate_var_name(key)
    if value is not None and "==" in value:
        raise InvalidFormatError()


# -- rc file ------------------------------------------------------------------


def quote_value(value: str) -> str:
    """Double-quote ``value`` for an ``export`` line."""
    for char in _DOUBLE_QUOTE_SPECIALS:
        value = value.replace(char, "\\" + char)
    return f'"{value}"'


def assignment_prefixes(key: str) -> tuple[str, ...]:
    """Line prefixes that assign ``key``: unquoted, double and single quoted."""
    return tuple(f"export {key}={quote}" for quote in ("", '"', "'"))


class RcDocument:
    """Line-oriented model of a shell init file."""

    def __init__(self, lines: list[str] | None = None) -> None:
        self.lines = lines or []

    @classmethod
    def parse(cls, text: str) -> "RcDocument":
        return cls(text.splitlines())

    def assignments(self, key: str) -> list[str]:
        """Lines that currently assign ``key``, in file order."""
        prefixes = assignment_prefixes(key)
        return [line for line in self.lines if line.lstrip().startswith(prefixes)]

    def remove(self, key: str) -> int:
        """Drop every line assigning ``key``. Returns how many were dropped."""
        prefixes = assignment_prefixes(key)
        kept = [line for line in self.lines if not line.lstrip().startswith(prefixes)]
        removed = len(self.lines) - len(kept)
        self.lines = kept
        return removed

    def assign(self, key: str, value: str) -> None:
        """Replace all assignments of ``key`` with a single trailing one."""
        self.remove(key)
        self.lines.append(f"export {key}={quote_value(value)}")

    def render(self) -> str:
        """Serialize back to text, dropping blank lines."""
        lines = [line for line in self.lines if line.strip()]
        if not lines:
            return ""
        return "\n".join(lines) + "\n"


def default_rc_path() -> Path:
    return Path.home() / ".bashrc"


class RcFileStore:
    """Persist variables as ``export`` lines in a shell init file.

    Every call is a full read-modify-write of the file. Calls from
    several threads of this process are serialized; separate envfetch
    processes are not coordinated and the last writer wins.

    Args:
        path: The init file. Defaults to ``~/.bashrc``.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path or default_rc_path()

    def ensure_file(self) -> Path:
        """Return the init file path, creating it with a header if absent."""
        path = self.path
        try:
            if not path.exists():
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(RC_HEADER, encoding="utf-8")
                logger.info("Created %s", path)
        except OSError as e:
            raise PersistError(f"can't create {path}: {e}") from e
        return path

    def persist_set(self, key: str, value: str) -> None:
        """Replace every assignment of ``key`` with ``export KEY="VALUE"``.

        Raises:
            InvalidFormatError: The value contains ``==`` or a line break.
                Each assignment has to stay on one line to be found again.
        """
        check_assignment(key, value)
        if "\n" in value or "\r" in value:
            raise InvalidFormatError("value contains a line break")
        self._rewrite(lambda doc: doc.assign(key, value))

    def persist_unset(self, key: str) -> None:
        check_assignment(key)
        self._rewrite(lambda doc: doc.remove(key))

    def _rewrite(self, edit: Callable[[RcDocument], object]) -> None:
        with self._lock:
            path = self.ensure_file()
            try:
                doc = RcDocument.parse(path.read_text(encoding="utf-8"))
                edit(doc)
                # TODO: write to a sibling temp file and os.replace() it so a
                # killed process can't leave a truncated init file behind.
                path.write_text(doc.render(), encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise PersistError(f"can't update {path}: {e}") from e
        logger.debug("Rewrote %s", path)


# -- Windows registry ---------------------------------------------------------


def broadcast_environment_change() -> None:
    """Tell running Windows programs that the user environment changed."""
    import ctypes

    hwnd_broadcast = 0xFFFF
    wm_settingchange = 0x001A
    smto_abortifhung = 0x0002

    result = ctypes.windll.user32.SendMessageTimeoutW(  # type: ignore[attr-defined]
        hwnd_broadcast,
        wm_settingchange,
        0,
        REGISTRY_ENV_PATH,
        smto_abortifhung,
        5000,
        None,
    )
    if not result:
        logger.warning("Environment change broadcast timed out or failed")


class RegistryStore:
    """Persist variables as string values under ``HKCU\\Environment``.

    Args:
        registry: Module exposing the ``winreg`` API. Defaults to ``winreg``.
        notify: Called after every successful write. Defaults to
            :func:`broadcast_environment_change`.
    """

    def __init__(
        self,
        registry: ModuleType | None = None,
        notify: Callable[[], None] | None = None,
    ) -> None:
        if registry is None:
            import winreg

            registry = winreg
        self._reg = registry
        self._notify = notify or broadcast_environment_change

    def _open_environment(self) -> Any:
        return self._reg.CreateKeyEx(
            self._reg.HKEY_CURRENT_USER,
            REGISTRY_ENV_PATH,
            0,
            self._reg.KEY_SET_VALUE,
        )

    def persist_set(self, key: str, value: str) -> None:
        check_assignment(key, value)
        try:
            with self._open_environment() as env:
                self._reg.SetValueEx(env, key, 0, self._reg.REG_SZ, value)
        except OSError as e:
            raise PersistError(str(e)) from e
        self._notify()

    def persist_unset(self, key: str) -> None:
        check_assignment(key)
        try:
            with self._open_environment() as env:
                try:
                    self._reg.DeleteValue(env, key)
                except FileNotFoundError:
                    logger.debug("%s not present in the registry", key)
        except OSError as e:
            raise PersistError(str(e)) from e
        self._notify()


def select_persistent_store(rc_file: Path | None = None) -> PersistentStore:
    """Backend for the running platform: registry on Windows, rc file elsewhere."""
    if sys.platform == "win32":
        return RegistryStore()
    return RcFileStore(rc_file)
