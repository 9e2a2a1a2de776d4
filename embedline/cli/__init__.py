"""
Main embedline CLI module.

Provides the top-level `embedline` command.
"""

from embedline.cli.cli import app

__all__ = ["app"]
