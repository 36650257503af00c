"""
Pipeline - ERB to Phlex converter.

The conversion runs in phases:

1. Phase 1 (Codec): Encode ERB tags as comments the markup parser keeps intact
2. Phase 2 (Markup): Parse the encoded template into a markup tree
3. Phase 3 (Analyzer): Classify the names referenced by the embedded Ruby
4. Phase 4 (Backend): Generate Phlex calls, optionally wrapped in a component
5. Phase 5 (Formatter): Optional post-processing with stree
"""

from __future__ import annotations

from .config import ConverterConfig, FormatterConfig
from .converter import PhlexConverter, convert
from .errors import (
    ConversionError,
    EmbeddedCodeParseError,
    FormatError,
    FragmentDecodeError,
    MarkupParseError,
    UnsupportedNodeError,
)

__all__ = [
    "PhlexConverter",
    "convert",
    "ConverterConfig",
    "FormatterConfig",
    "ConversionError",
    "EmbeddedCodeParseError",
    "FormatError",
    "FragmentDecodeError",
    "MarkupParseError",
    "UnsupportedNodeError",
]
