"""
Analyzer module.

Classifies the names referenced by embedded Ruby: fields, free variables,
helpers, constants and the phlex-rails modules they need.
"""

from __future__ import annotations

from .analyzer import RubyAnalyzer, analyze
from .classification import NameClassification
from .ruby_parser import RubyParser

__all__ = [
    "NameClassification",
    "RubyAnalyzer",
    "RubyParser",
    "analyze",
]
