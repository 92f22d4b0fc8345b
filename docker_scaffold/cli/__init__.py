"""
CLI module for docker-scaffold.

This module provides the command-line interface, including the main entry
point installed as the ``docker-scaffold`` console script.
"""

from .commands import main

__all__ = ["main"]
