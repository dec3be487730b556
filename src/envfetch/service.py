"""Variable service: the single API behind the commands and the editor.

Combines name validation, the process-scoped store and a persistent
backend. Both stores are injected, so tests run against a dict and a
temporary rc file::

    service = VariableService(ProcessStore({}), RcFileStore(tmp_path / ".bashrc"))
    service.set("EDITOR", "vim", persistent=True)

A persistent ``set`` writes the process store first. If the persistent
write then fails, the error is raised and the process value is kept:
the two scopes stay diverged until the next successful write.
"""

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

from envfetch.lib.envfile import read_dotenv
from envfetch.lib.errors import (
    CannotDeleteVariableGloballyError,
    CannotSetVariableGloballyError,
    EnvfetchError,
    FileError,
    PersistError,
    VariableNotFoundError,
)
from envfetch.lib.persistence import PersistentStore, select_persistent_store
from envfetch.lib.store import ProcessStore
from envfetch.lib.validation import validate_var_name
from envfetch.models import VariableSnapshot

logger = logging.getLogger(__name__)


class VariableService:
    """Read and write environment variables in process and persistent scope.

    Args:
        store: Process-scoped store. Defaults to one over ``os.environ``.
        persistent_store: Backend for persistent writes. Defaults to the
            one for the running platform.
    """

    def __init__(
        self,
        store: ProcessStore | None = None,
        persistent_store: PersistentStore | None = None,
    ) -> None:
        self.store = store or ProcessStore()
        self._persistent_store = persistent_store

    @property
    def persistent_store(self) -> PersistentStore:
        # Resolved lazily so process-only commands never touch the home directory.
        if self._persistent_store is None:
            self._persistent_store = select_persistent_store()
        return self._persistent_store

    # -- reads ------------------------------------------------------------------

    def get(self, key: str, suggest_similar: bool = True) -> str:
        """Return the value of ``key``.

        Raises:
            VariableNotFoundError: No such variable. ``suggest_similar`` is
                carried on the error for the caller to act on.
        """
        value = self.store.get(key)
        if value is None:
            raise VariableNotFoundError(key, suggest_similar)
        return value

    def keys(self) -> list[str]:
        return [variable.key for variable in self.store.list()]

    def snapshot(self) -> VariableSnapshot:
        return self.store.list()

    # -- writes -----------------------------------------------------------------

    def set(self, key: str, value: str, persistent: bool = False) -> None:
        """Set ``key`` for this process and, if ``persistent``, for future shells.

        Raises:
            NameValidationError: Invalid key.
            CannotSetVariableGloballyError: The persistent backend failed.
                The process-scoped value has already been written.
        """
        validate_var_name(key)
        self.store.set(key, value)
        if not persistent:
            return
        try:
            self.persistent_store.persist_set(key, value)
        except PersistError as e:
            raise CannotSetVariableGloballyError(key, str(e)) from e
        logger.info("Persisted %s", key)

    def append(self, key: str, suffix: str, persistent: bool = False) -> None:
        """Append ``suffix`` to the current value of ``key`` (empty if unset)."""
        validate_var_name(key)
        current = self.store.get(key) or ""
        self.set(key, current + suffix, persistent)

    def delete(self, key: str, persistent: bool = False) -> bool:
        """Remove ``key``.

        A non-persistent delete of a missing variable only logs a warning.

        Returns:
            False if the variable was absent from the process environment.

        Raises:
            NameValidationError: Invalid key.
            CannotDeleteVariableGloballyError: The persistent backend failed.
        """
        validate_var_name(key)
        existed = self.store.contains(key)

        if persistent:
            try:
                self.persistent_store.persist_unset(key)
            except PersistError as e:
                raise CannotDeleteVariableGloballyError(key, str(e)) from e
            self.store.remove(key)
            logger.info("Removed %s from persistent storage", key)
            return existed

        if not existed:
            logger.warning("variable '%s' doesn't exist", key)
            return False
        self.store.remove(key)
        return True

    def rename(self, old_key: str, new_key: str) -> None:
        """Bind the value of ``old_key`` to ``new_key``, then drop ``old_key``.

        Removing the old key is best effort: once the new key is set, a
        failure there is logged and not raised.
        """
        value = self.store.get(old_key)
        if value is None:
            raise VariableNotFoundError(old_key, suggest_similar=False)
        self.set(new_key, value)
        if new_key == old_key:
            return
        try:
            self.delete(old_key)
        except EnvfetchError as e:
            logger.debug("Could not remove %s after rename: %s", old_key, e)

    # -- files ------------------------------------------------------------------

    def export(self, path: Path, keys: Iterable[str]) -> list[str]:
        """Write ``KEY=VALUE`` lines for ``keys`` to ``path``.

        All keys are validated before anything is written. Missing and
        repeated keys are skipped with a warning.

        Returns:
            The keys written, in input order.

        Raises:
            NameValidationError: A key is invalid; nothing is written.
            FileError: The file could not be written.
        """
        keys = list(keys)
        for key in keys:
            validate_var_name(key)

        seen: set[str] = set()
        written: list[str] = []
        lines: list[str] = []
        for key in keys:
            if key in seen:
                logger.warning("Duplicate var %s found, skipping", key)
                continue
            value = self.store.get(key)
            if value is None:
                logger.warning("can't find '%s', skipping", key)
                continue
            seen.add(key)
            written.append(key)
            lines.append(f"{key}={value}\n")

        try:
            path.write_text("".join(lines), encoding="utf-8")
        except OSError as e:
            raise FileError(f"can't write {path}: {e}") from e
        logger.info("Exported %d variable(s) to %s", len(lines), path)
        return written

    def load(self, path: Path, persistent: bool = False) -> dict[str, str]:
        """Set every variable from a dotenv file.

        The file is parsed completely before anything is set. Keys are
        then written concurrently; the first failure is raised.

        Raises:
            FileError: The file could not be read.
            ParsingError: The file is not valid dotenv.
        """
        variables = read_dotenv(path)
        asyncio.run(self._set_all(variables, persistent))
        logger.info("Loaded %d variable(s) from %s", len(variables), path)
        return variables

    async def _set_all(self, variables: dict[str, str], persistent: bool) -> None:
        await asyncio.gather(
            *(
                asyncio.to_thread(self.set, key, value, persistent)
                for key, value in variables.items()
            )
        )
