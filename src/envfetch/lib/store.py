"""Process-scoped variable store.

Wraps the environment table of the running process so the service never
touches ``os.environ`` directly. Tests pass a plain dict instead::

    store = ProcessStore({"HOME": "/home/me"})
    store.set("EDITOR", "vim")
    assert store.get("EDITOR") == "vim"
"""

import os
from collections.abc import MutableMapping

from envfetch.models import Variable, VariableSnapshot


class ProcessStore:
    """get/set/remove against an in-memory environment table.

    Args:
        environ: The mapping to operate on. Defaults to ``os.environ``,
            whose writes are also visible to child processes.
    """

    def __init__(self, environ: MutableMapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def get(self, key: str) -> str | None:
        return self._environ.get(key)

    def contains(self, key: str) -> bool:
        return key in self._environ

    def set(self, key: str, value: str) -> None:
        self._environ[key] = value

    def remove(self, key: str) -> None:
        """Remove ``key``; does nothing if it is absent."""
        self._environ.pop(key, None)

    def list(self) -> VariableSnapshot:
        """Snapshot of all variables, in whatever order the table yields them."""
        return tuple(Variable(key=k, value=v) for k, v in list(self._environ.items()))

    def as_dict(self) -> dict[str, str]:
        """Plain copy of the table, used as a child process environment."""
        return dict(self._environ)
