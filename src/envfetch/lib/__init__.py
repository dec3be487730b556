"""Library building blocks for envfetch.

Modules:
- errors: Exception hierarchy rooted at EnvfetchError
- validation: Variable name validation
- similarity: Fuzzy name matching for suggestions
- store: Process-scoped variable store
- persistence: Persistent backends and platform selection
- envfile: Dotenv file reading
- process: Running scoped commands in the system shell
"""

from envfetch.lib.envfile import parse_dotenv, read_dotenv
from envfetch.lib.errors import (
    CannotDeleteVariableGloballyError,
    CannotSetVariableGloballyError,
    ContainsSpaceError,
    EmptyNameError,
    EnvfetchError,
    FileError,
    InvalidFormatError,
    NameValidationError,
    ParsingError,
    PersistError,
    ProcessFailedError,
    StartingProcessError,
    VariableNotFoundError,
)
from envfetch.lib.persistence import (
    PersistentStore,
    RcDocument,
    RcFileStore,
    RegistryStore,
    select_persistent_store,
)
from envfetch.lib.process import CommandResult, run_command
from envfetch.lib.similarity import find_similar, similarity
from envfetch.lib.store import ProcessStore
from envfetch.lib.validation import validate_var_name

__all__ = [
    # Dotenv
    "parse_dotenv",
    "read_dotenv",
    # Errors
    "CannotDeleteVariableGloballyError",
    "CannotSetVariableGloballyError",
    "ContainsSpaceError",
    "EmptyNameError",
    "EnvfetchError",
    "FileError",
    "InvalidFormatError",
    "NameValidationError",
    "ParsingError",
    "PersistError",
    "ProcessFailedError",
    "StartingProcessError",
    "VariableNotFoundError",
    # Persistence
    "PersistentStore",
    "RcDocument",
    "RcFileStore",
    "RegistryStore",
    "select_persistent_store",
    # Process
    "CommandResult",
    "run_command",
    # Similarity
    "find_similar",
    "similarity",
    # Store
    "ProcessStore",
    # Validation
    "validate_var_name",
]
