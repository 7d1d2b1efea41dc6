"""monorun CLI."""

from monorun.cli.app import app, main

__all__ = ["app", "main"]
