"""Variable name validation.

Only empty names and names containing a space are rejected. Names that
are not valid POSIX identifiers (``MY-VAR``, ``1ST``, ``TEST_SPECIAL_$#@``)
are accepted.
"""

from envfetch.lib.errors import ContainsSpaceError, EmptyNameError


def validate_var_name(name: str) -> None:
    """Raise a ``NameValidationError`` if ``name`` can't be used as a key.

    Raises:
        EmptyNameError: The name is the empty string.
        ContainsSpaceError: The name contains a space character.
    """
    if not name:
        raise EmptyNameError()
    if " " in name:
        raise ContainsSpaceError(name)
