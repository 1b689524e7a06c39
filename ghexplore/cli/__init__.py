"""Command-line interface for ghexplore.

This module provides the CLI functionality for GitHub repository exploration.
"""

from .main import main

__all__ = ["main"]
