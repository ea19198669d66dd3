"""CLI for cachedfonts."""

from cachedfonts.cli.main import app, main


__all__ = ["app", "main"]
