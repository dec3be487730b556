"""Run the CLI with ``python -m envfetch.cli``."""

from envfetch.cli.main import app

if __name__ == "__main__":
    app()
