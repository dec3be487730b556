"""Read dotenv-style ``KEY=VALUE`` files with python-dotenv.

The whole file is rejected if any statement is malformed, so a broken
file never gets half applied.
"""

from io import StringIO
from pathlib import Path

from dotenv.parser import parse_stream

from envfetch.lib.errors import FileError, ParsingError


def parse_dotenv(text: str) -> dict[str, str]:
    """Parse dotenv text into an ordered ``{key: value}`` mapping.

    A bare ``KEY`` without ``=`` maps to the empty string. Later
    assignments of the same key win.

    Raises:
        ParsingError: A statement could not be parsed.
    """
    variables: dict[str, str] = {}
    for binding in parse_stream(StringIO(text)):
        if binding.error:
            statement = binding.original.string.strip()
            raise ParsingError(
                f"invalid statement on line {binding.original.line}: {statement!r}"
            )
        if binding.key is None:
            continue
        variables[binding.key] = binding.value or ""
    return variables


def read_dotenv(path: Path) -> dict[str, str]:
    """Read and parse a dotenv file.

    Raises:
        FileError: The file could not be read.
        ParsingError: The file is not valid dotenv.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileError(f"can't read {path}: {e}") from e
    return parse_dotenv(text)
