"""Command-line interface for simplexml.

This module provides the ``simplexml`` tool: strict reformatting,
well-formedness validation and element search over XML files.
"""

from .main import main

__all__ = ["main"]
