"""Shared test fixtures.

Add fixtures here that are used across multiple test files.
"""

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from envfetch.config import configure
from envfetch.lib.persistence import RcFileStore
from envfetch.lib.store import ProcessStore
from envfetch.service import VariableService


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the config file at a temporary path and drop ENVFETCH_* overrides."""
    for name in list(os.environ):
        if name.startswith("ENVFETCH_"):
            monkeypatch.delenv(name)
    config_file = tmp_path / "config" / "config.toml"
    configure(config_file=config_file)
    yield config_file
    configure(config_file=None)


@pytest.fixture
def environ() -> dict[str, str]:
    """In-memory environment table."""
    return {"HOME": "/home/test", "PATH": "/usr/bin:/bin", "USER": "test"}


@pytest.fixture
def rc_file(tmp_path: Path) -> Path:
    """Shell init file path (not created)."""
    return tmp_path / "home" / ".bashrc"


@pytest.fixture
def service(environ: dict[str, str], rc_file: Path) -> VariableService:
    """Service over the in-memory environment and a temporary rc file."""
    return VariableService(ProcessStore(environ), RcFileStore(rc_file))


@pytest.fixture
def restore_os_environ() -> Iterator[None]:
    """Undo any change the test makes to the real process environment."""
    saved = dict(os.environ)
    yield
    os.environ.clear()
    os.environ.update(saved)
