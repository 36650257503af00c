"""ERB to Phlex Converter

A Python package for converting ERB templates into Phlex components.
Embedded Ruby is analysed with tree-sitter to infer component parameters
and helper registrations.
"""

__version__ = "1.0.1"

from .pipeline import (
    ConversionError,
    ConverterConfig,
    FormatterConfig,
    PhlexConverter,
    convert,
)

__all__ = [
    "PhlexConverter",
    "convert",
    "ConverterConfig",
    "FormatterConfig",
    "ConversionError",
]
