"""operant command-line interface."""

from operant.cli.app import app

__all__ = ["app"]
