"""
Error types raised by the conversion pipeline.

Every recoverable failure derives from ConversionError. In the default
(non-strict) mode the pipeline degrades instead of raising; with
``raise_errors`` enabled the first error surfaces unchanged.
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for errors raised while converting a template."""


class MarkupParseError(ConversionError):
    """The encoded template could not be parsed into a markup tree."""


class FragmentDecodeError(ConversionError):
    """A comment payload does not have the PHLEX:ERB:<kind>:<base64> form."""


class EmbeddedCodeParseError(ConversionError):
    """A fragment body is not valid Ruby."""

    def __init__(self, message: str, source: str = "", line: int | None = None):
        super().__init__(message)
        self.source = source
        self.line = line


class FormatError(ConversionError):
    """The pretty printer rejected the generated Ruby source."""


class UnsupportedNodeError(TypeError):
    """The markup tree contains a node kind the generator does not handle.

    This is a contract violation and is never swallowed, whatever the mode.
    """
