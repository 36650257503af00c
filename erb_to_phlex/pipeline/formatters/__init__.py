"""
Post-processing formatters for generated code.
"""

from __future__ import annotations

from .base import Formatter
from .syntax_tree_formatter import SyntaxTreeFormatter

__all__ = [
    "Formatter",
    "SyntaxTreeFormatter",
]
