"""Tests for the persistent backends."""

from pathlib import Path
from typing import Any

import pytest

from envfetch.lib.errors import (
    ContainsSpaceError,
    EmptyNameError,
    InvalidFormatError,
    PersistError,
)
from envfetch.lib.persistence import (
    RC_HEADER,
    RcDocument,
    RcFileStore,
    RegistryStore,
    quote_value,
)


class TestQuoteValue:
    """Tests for export-line quoting."""

    def test_plain(self) -> None:
        assert quote_value("hello world") == '"hello world"'

    def test_escapes_shell_specials(self) -> None:
        assert quote_value('a"b$c`d\\e') == '"a\\"b\\$c\\`d\\\\e"'

    def test_empty(self) -> None:
        assert quote_value("") == '""'


class TestRcDocument:
    """Tests for the line model, no filesystem involved."""

    def test_assign_appends(self) -> None:
        doc = RcDocument.parse("# header\n")
        doc.assign("A", "1")
        assert doc.render() == '# header\nexport A="1"\n'

    def test_assign_replaces_every_quoting_style(self) -> None:
        doc = RcDocument.parse("export A=1\nexport A=\"2\"\nexport A='3'\nexport B=4\n")
        doc.assign("A", "5")
        assert doc.render() == 'export B=4\nexport A="5"\n'

    def test_prefix_is_exact(self) -> None:
        """Assigning A leaves AB alone."""
        doc = RcDocument.parse('export AB="x"\n')
        doc.assign("A", "1")
        assert doc.assignments("AB") == ['export AB="x"']
        assert doc.assignments("A") == ['export A="1"']

    def test_indented_assignment_matches(self) -> None:
        doc = RcDocument.parse('  export A="1"\n')
        assert doc.remove("A") == 1

    def test_remove_returns_count(self) -> None:
        doc = RcDocument.parse("export A=1\nexport A=2\nalias ll='ls -l'\n")
        assert doc.remove("A") == 2
        assert doc.render() == "alias ll='ls -l'\n"

    def test_remove_missing(self) -> None:
        doc = RcDocument.parse("alias ll='ls -l'\n")
        assert doc.remove("A") == 0

    def test_render_drops_blank_lines(self) -> None:
        doc = RcDocument.parse("a\n\n   \nb\n")
        assert doc.render() == "a\nb\n"

    def test_render_empty(self) -> None:
        assert RcDocument().render() == ""


class TestRcFileStore:
    """Tests against a temporary init file."""

    def test_creates_file_with_header(self, rc_file: Path) -> None:
        RcFileStore(rc_file).persist_set("A", "1")
        assert rc_file.read_text() == RC_HEADER + 'export A="1"\n'

    def test_set_twice_keeps_one_line(self, rc_file: Path) -> None:
        store = RcFileStore(rc_file)
        store.persist_set("A", "1")
        store.persist_set("A", "2")
        content = rc_file.read_text()
        assert content.count("export A=") == 1
        assert 'export A="2"' in content

    def test_keeps_unrelated_lines(self, rc_file: Path) -> None:
        rc_file.parent.mkdir(parents=True)
        rc_file.write_text("alias ll='ls -l'\nexport PATH=/bin\n")
        RcFileStore(rc_file).persist_set("A", "1")
        assert rc_file.read_text() == "alias ll='ls -l'\nexport PATH=/bin\nexport A=\"1\"\n"

    def test_unset(self, rc_file: Path) -> None:
        store = RcFileStore(rc_file)
        store.persist_set("A", "1")
        store.persist_set("B", "2")
        store.persist_unset("A")
        content = rc_file.read_text()
        assert "export A=" not in content
        assert 'export B="2"' in content

    def test_unset_missing_is_noop(self, rc_file: Path) -> None:
        RcFileStore(rc_file).persist_unset("A")
        assert rc_file.read_text() == RC_HEADER

    def test_rejects_double_equals(self, rc_file: Path) -> None:
        with pytest.raises(InvalidFormatError):
            RcFileStore(rc_file).persist_set("A", "x==y")
        assert not rc_file.exists()

    @pytest.mark.parametrize("value", ["a\nb", "a\r\nb", "trailing\n"])
    def test_rejects_line_breaks(self, rc_file: Path, value: str) -> None:
        """A multi-line value would leave a dangling quote behind on rewrite."""
        store = RcFileStore(rc_file)
        store.persist_set("K", "old")
        with pytest.raises(InvalidFormatError, match="line break"):
            store.persist_set("K", value)
        assert rc_file.read_text() == RC_HEADER + 'export K="old"\n'

    def test_one_line_per_key_after_rejected_value(self, rc_file: Path) -> None:
        store = RcFileStore(rc_file)
        with pytest.raises(InvalidFormatError):
            store.persist_set("K", "a\nb")
        store.persist_set("K", "c")
        assert rc_file.read_text() == RC_HEADER + 'export K="c"\n'

    def test_rejects_invalid_name(self, rc_file: Path) -> None:
        store = RcFileStore(rc_file)
        with pytest.raises(EmptyNameError):
            store.persist_set("", "1")
        with pytest.raises(ContainsSpaceError):
            store.persist_unset("A B")

    def test_unwritable_location(self, tmp_path: Path) -> None:
        """A path under a regular file can't be created."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(PersistError):
            RcFileStore(blocker / ".bashrc").persist_set("A", "1")

    def test_default_path_is_bashrc(self) -> None:
        assert RcFileStore().path == Path.home() / ".bashrc"


class _FakeKey:
    def __enter__(self) -> "_FakeKey":
        return self

    def __exit__(self, *exc: object) -> None:
        return None


class FakeRegistry:
    """Just enough of the winreg API for RegistryStore."""

    HKEY_CURRENT_USER = object()
    KEY_SET_VALUE = 0x0002
    REG_SZ = 1

    def __init__(self, fail: bool = False) -> None:
        self.values: dict[str, Any] = {}
        self.fail = fail
        self.opened: list[str] = []

    def CreateKeyEx(self, root: object, path: str, reserved: int, access: int) -> _FakeKey:  # noqa: N802
        if self.fail:
            raise PermissionError("access denied")
        self.opened.append(path)
        return _FakeKey()

    def SetValueEx(self, key: _FakeKey, name: str, reserved: int, kind: int, value: str) -> None:  # noqa: N802
        self.values[name] = (kind, value)

    def DeleteValue(self, key: _FakeKey, name: str) -> None:  # noqa: N802
        if name not in self.values:
            raise FileNotFoundError(name)
        del self.values[name]


class TestRegistryStore:
    """Tests against an in-memory registry."""

    def _store(self, registry: FakeRegistry, calls: list[str]) -> RegistryStore:
        return RegistryStore(registry, notify=lambda: calls.append("notify"))  # type: ignore[arg-type]

    def test_set_writes_string_value(self) -> None:
        registry, calls = FakeRegistry(), []
        self._store(registry, calls).persist_set("A", "1")
        assert registry.values == {"A": (FakeRegistry.REG_SZ, "1")}
        assert registry.opened == ["Environment"]
        assert calls == ["notify"]

    def test_unset(self) -> None:
        registry, calls = FakeRegistry(), []
        store = self._store(registry, calls)
        store.persist_set("A", "1")
        store.persist_unset("A")
        assert registry.values == {}
        assert calls == ["notify", "notify"]

    def test_unset_missing_is_noop(self) -> None:
        registry, calls = FakeRegistry(), []
        self._store(registry, calls).persist_unset("A")
        assert calls == ["notify"]

    def test_os_error_becomes_persist_error(self) -> None:
        registry, calls = FakeRegistry(fail=True), []
        with pytest.raises(PersistError, match="access denied"):
            self._store(registry, calls).persist_set("A", "1")
        assert calls == []

    def test_rejects_double_equals(self) -> None:
        registry, calls = FakeRegistry(), []
        with pytest.raises(InvalidFormatError):
            self._store(registry, calls).persist_set("A", "==")
        assert registry.opened == []
