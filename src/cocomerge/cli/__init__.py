"""
Command Line Interface for cocomerge using Typer.
"""

from .cli import app

__all__ = ["app"]
