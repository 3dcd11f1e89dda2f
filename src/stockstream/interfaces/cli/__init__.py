"""CLI interface for stockstream."""

from stockstream.interfaces.cli.main import app

__all__ = ["app"]
