"""Error taxonomy shared by the stores, the service and the CLI.

Everything raised on purpose derives from :class:`EnvfetchError`, so the
CLI dispatcher can report any failure in one place::

    try:
        service.set("MY VAR", "value")
    except EnvfetchError as e:
        typer.echo(f"Error: {e}", err=True)
"""


class EnvfetchError(Exception):
    """Base class for all envfetch failures."""


# -- Names --------------------------------------------------------------------


class NameValidationError(EnvfetchError):
    """The variable name was rejected by the validator."""


class EmptyNameError(NameValidationError):
    def __init__(self) -> None:
        super().__init__("Variable name cannot be empty")


class ContainsSpaceError(NameValidationError):
    def __init__(self, name: str) -> None:
        super().__init__("Variable name cannot contain spaces")
        self.name = name


# -- Lookup -------------------------------------------------------------------


class VariableNotFoundError(EnvfetchError):
    """No variable with this key exists in the process environment.

    ``suggest_similar`` tells the caller whether it should look for
    similarly named variables before reporting the error.
    """

    def __init__(self, key: str, suggest_similar: bool = True) -> None:
        super().__init__(f"can't find '{key}'")
        self.key = key
        self.suggest_similar = suggest_similar


# -- Files --------------------------------------------------------------------


class FileError(EnvfetchError):
    """Reading or writing a file failed."""


class ParsingError(EnvfetchError):
    """A dotenv file could not be parsed."""


# -- Persistence --------------------------------------------------------------


class PersistError(EnvfetchError):
    """A persistent backend failed to record or remove a variable."""


class InvalidFormatError(PersistError):
    def __init__(self, reason: str = "value contains double equals") -> None:
        super().__init__(f"Invalid variable format: {reason}")


class CannotSetVariableGloballyError(EnvfetchError):
    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"can't set '{key}' globally: {reason}")
        self.key = key


class CannotDeleteVariableGloballyError(EnvfetchError):
    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"can't delete '{key}' globally: {reason}")
        self.key = key


# -- Child processes ----------------------------------------------------------


class StartingProcessError(EnvfetchError):
    """The child process could not be started at all."""


class ProcessFailedError(EnvfetchError):
    """The child process ran but exited with a non-zero status."""

    def __init__(self, exit_code: int) -> None:
        super().__init__(f"process exited with status {exit_code}")
        self.exit_code = exit_code
