"""
Markup parsing.
"""

from __future__ import annotations

from .parser import MarkupDocument, parse_attribute_value, parse_markup

__all__ = [
    "MarkupDocument",
    "parse_attribute_value",
    "parse_markup",
]
