"""Command-line interface, exposed as the ``envfetch`` entry point."""
