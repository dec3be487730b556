"""envfetch: inspect, set and persist environment variables.

Structure:
- envfetch/lib/: Building blocks with no CLI knowledge
  - errors.py: Exception hierarchy
  - validation.py: Variable name rules
  - similarity.py: "Did you mean" matching
  - store.py: Process-scoped store over os.environ
  - persistence.py: Persistent backends (rc file, Windows registry)
  - envfile.py: Dotenv parsing via python-dotenv
  - process.py: Scoped command execution
- envfetch/service.py: VariableService, the API used by CLI and editor
- envfetch/config.py: Configuration via pydantic-settings
- envfetch/interactive/: Full-screen editor (prompt_toolkit)
- envfetch/cli/: Typer command-line interface
"""

from envfetch.version import VERSION

__version__ = VERSION
