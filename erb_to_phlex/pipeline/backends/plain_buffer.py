"""
Buffer merging adjacent text and ERB output into one `plain` call.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Union

from .ruby_source import RubyLiterals, escape_double_quoted, quote

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextSegment:
    """Literal markup text, unescaped."""

    text: str


@dataclass(frozen=True)
class CodeSegment:
    """A Ruby expression whose value is output."""

    code: str


Segment = Union[TextSegment, CodeSegment]


class PlainOutputBuffer:
    """
    Ordered segments waiting to be written as a single ``plain`` statement.

    One segment is written as the argument itself: ``plain %(Text)`` or
    ``plain some_local``. Several are merged into one double-quoted string,
    ``plain "Text#{some_local}"``.
    """

    def __init__(self, emit: Callable[[str], None], literals: RubyLiterals | None = None):
        self._emit = emit
        self._literals = literals or RubyLiterals()
        self.segments: list[Segment] = []

    def __len__(self) -> int:
        return len(self.segments)

    def __bool__(self) -> bool:
        return bool(self.segments)

    def add_text(self, text: str) -> None:
        self.segments.append(TextSegment(text))

    def add_code(self, code: str) -> None:
        self.segments.append(CodeSegment(code.strip()))

    def merged(self) -> str:
        """The argument of the ``plain`` call for the current segments."""
        if len(self.segments) == 1:
            segment = self.segments[0]
            if isinstance(segment, TextSegment):
                return quote(segment.text)
            return segment.code

        parts = []
        for segment in self.segments:
            if isinstance(segment, TextSegment):
                parts.append(escape_double_quoted(segment.text))
            else:
                parts.append(self._literals.inline_in_double_quotes(segment.code))
        return '"' + "".join(parts) + '"'

    def flush(self) -> None:
        if not self.segments:
            return
        logger.debug(f"plain buffer: {self.segments}")
        self._emit(f"plain {self.merged()}")
        self.segments.clear()

    @contextmanager
    def drained(self) -> Iterator[PlainOutputBuffer]:
        """Scope a container traversal; whatever is still buffered is flushed on exit."""
        try:
            yield self
        finally:
            self.flush()
