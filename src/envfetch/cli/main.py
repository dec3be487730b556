"""envfetch command-line interface.

Usage:
    envfetch get PATH
    envfetch print --format '{name}={value}'
    envfetch set MY_VAR "Hello" -- sh -c 'echo $MY_VAR'
    envfetch set --global EDITOR vim
    envfetch add PATH ":/opt/bin" --global
    envfetch delete MY_VAR -- env
    envfetch load --file .env.local -- npm start
    envfetch export backup HOME PATH
    envfetch interactive
    envfetch init-config

Commands given after the variable arguments run in the system shell
with the modified environment; envfetch then exits with their status.
"""

import json
import logging
import tomllib
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer
from pydantic import BaseModel, ConfigDict, ValidationError
from rich.console import Console
from rich.text import Text

from envfetch.config import DEFAULT_PRINT_FORMAT, Settings, init_config, load_settings
from envfetch.interactive.app import run_interactive
from envfetch.lib.errors import EnvfetchError, ProcessFailedError, VariableNotFoundError
from envfetch.lib.persistence import select_persistent_store
from envfetch.lib.process import run_command
from envfetch.lib.similarity import find_similar
from envfetch.models import Variable
from envfetch.service import VariableService
from envfetch.version import VERSION

logger = logging.getLogger(__name__)

console = Console(highlight=False)

app = typer.Typer(
    name="envfetch",
    help="envfetch - lightweight tool for working with environment variables",
    epilog="Get more info at the project's repo: https://github.com/ankddev/envfetch",
    no_args_is_help=True,
    add_completion=False,
    pretty_exceptions_show_locals=False,
)

# Lets trailing commands carry their own flags: `envfetch set K V ls -la`.
SCOPED = {"allow_extra_args": True, "ignore_unknown_options": True}

GlobalFlag = Annotated[
    bool,
    typer.Option("--global", "-g", help="Apply permanently, for future shells too"),
]
ScopedCommand = Annotated[
    list[str] | None,
    typer.Argument(help="Command to run with the modified environment"),
]


class AppContext(BaseModel):
    """Objects shared by all commands of one invocation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    settings: Settings
    service: VariableService


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"envfetch {VERSION}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit",
        ),
    ] = False,
) -> None:
    """envfetch - lightweight tool for working with environment variables."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        raise typer.Exit()
    # init-config has to work over a broken config file to repair it.
    if ctx.invoked_subcommand == "init-config":
        return

    try:
        settings = load_settings()
    except (ValidationError, tomllib.TOMLDecodeError) as e:
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise typer.Exit(1) from e

    service = VariableService(
        persistent_store=select_persistent_store(settings.resolved_rc_file)
    )
    ctx.obj = AppContext(settings=settings, service=service)


@contextmanager
def reported() -> Iterator[None]:
    """Report envfetch errors on stderr and exit with a failure status."""
    try:
        yield
    except EnvfetchError as e:
        logger.debug("Command failed", exc_info=True)
        typer.echo(f"Error: {e}", err=True)
        code = e.exit_code if isinstance(e, ProcessFailedError) else 1
        raise typer.Exit(code) from e


def _run_scoped(service: VariableService, command: list[str] | None) -> None:
    """Run the trailing command, if any, failing with its exit status."""
    if not command:
        return
    result = run_command(" ".join(command), service.store.as_dict())
    if not result.ok:
        raise ProcessFailedError(result.exit_code)


def format_entry(template: str, variable: Variable) -> Text:
    """Fill ``{name}`` and ``{value}`` in ``template``; the name is coloured."""
    text = Text()
    for i, chunk in enumerate(template.split("{name}")):
        if i:
            text.append(variable.key, style="blue")
        text.append(chunk.replace("{value}", variable.value))
    return text


@app.command()
def get(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Environment variable name")],
    no_similar_names: Annotated[
        bool,
        typer.Option(
            "--no-similar-names",
            "-s",
            help="Don't suggest similar names if the variable is not found",
        ),
    ] = False,
) -> None:
    """Print the value of an environment variable."""
    obj: AppContext = ctx.obj
    try:
        value = obj.service.get(key, suggest_similar=not no_similar_names)
    except VariableNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        if e.suggest_similar:
            similar = find_similar(
                key, obj.service.keys(), obj.settings.similarity_threshold
            )
            if similar:
                typer.echo("Did you mean:", err=True)
                for name in similar:
                    typer.echo(f"  {name}", err=True)
        raise typer.Exit(1) from e
    typer.echo(json.dumps(value, ensure_ascii=False))


@app.command("print")
def print_cmd(
    ctx: typer.Context,
    format_: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            help="Line format with {name} and {value} placeholders",
        ),
    ] = None,
) -> None:
    """Print all environment variables."""
    obj: AppContext = ctx.obj
    template = format_ or obj.settings.print_format or DEFAULT_PRINT_FORMAT
    for variable in obj.service.snapshot():
        console.print(format_entry(template, variable), soft_wrap=True)


@app.command("set", context_settings=SCOPED)
def set_cmd(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Environment variable name")],
    value: Annotated[str, typer.Argument(help="Value for the variable")],
    command: ScopedCommand = None,
    global_: GlobalFlag = False,
) -> None:
    """Set an environment variable, optionally running a command with it."""
    obj: AppContext = ctx.obj
    with reported():
        obj.service.set(key, value, persistent=global_)
        _run_scoped(obj.service, command)


@app.command(context_settings=SCOPED)
def add(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Environment variable name")],
    value: Annotated[str, typer.Argument(help="Text to append to the value")],
    command: ScopedCommand = None,
    global_: GlobalFlag = False,
) -> None:
    """Append to an environment variable, optionally running a command with it."""
    obj: AppContext = ctx.obj
    with reported():
        obj.service.append(key, value, persistent=global_)
        _run_scoped(obj.service, command)


@app.command(context_settings=SCOPED)
def delete(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Environment variable name")],
    command: ScopedCommand = None,
    global_: GlobalFlag = False,
) -> None:
    """Delete an environment variable, optionally running a command without it."""
    obj: AppContext = ctx.obj
    with reported():
        obj.service.delete(key, persistent=global_)
        _run_scoped(obj.service, command)


@app.command(context_settings=SCOPED)
def load(
    ctx: typer.Context,
    command: ScopedCommand = None,
    file: Annotated[
        Path, typer.Option("--file", "-f", help="Path to the dotenv file")
    ] = Path(".env"),
    global_: GlobalFlag = False,
) -> None:
    """Load variables from a dotenv file, optionally running a command with them."""
    obj: AppContext = ctx.obj
    with reported():
        obj.service.load(file, persistent=global_)
        _run_scoped(obj.service, command)


@app.command()
def export(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Output file name, without .env")],
    keys: Annotated[list[str], typer.Argument(help="Variables to export")],
) -> None:
    """Export variables to NAME.env."""
    obj: AppContext = ctx.obj
    with reported():
        obj.service.export(Path(f"{name.strip()}.env"), keys)


@app.command()
def interactive(ctx: typer.Context) -> None:
    """Browse and edit variables in a full-screen editor."""
    obj: AppContext = ctx.obj
    run_interactive(obj.service)


@app.command("init-config")
def init_config_cmd(
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite an existing config file")
    ] = False,
) -> None:
    """Write the default config file."""
    with reported():
        path = init_config(force=force)
    typer.echo(f"Config written to {path}")
