"""
Markup parsing on top of BeautifulSoup.

The transformed template is parsed with the ``html.parser`` tree builder,
which keeps the document as written: no implied html/head/body elements
and no reordering. ERB survives as comment nodes.
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag

from ..codec.erb_transformer import encode_erb_tags
from ..codec.fragments import FragmentOrigin
from ..errors import MarkupParseError

logger = logging.getLogger(__name__)

_START_TAG = re.compile(r"""<[^\s/>]+(?P<attributes>(?:"[^"]*"|'[^']*'|[^'">])*)>""")
_ATTRIBUTE = re.compile(r"""(?P<name>[^\s/>"'=]+)(?P<assignment>\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]*))?""")


class MarkupDocument:
    """A parsed template together with the text it was parsed from."""

    def __init__(self, soup: BeautifulSoup, source: str):
        self.soup = soup
        self.source = source
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", source)]
        self._assigned: dict[int, set[str] | None] = {}

    @property
    def children(self) -> list:
        return list(self.soup.children)

    def select(self, selector: str) -> list[Tag]:
        """CSS selector lookup, e.g. ``select("svg")``."""
        return self.soup.select(selector)

    def elements(self) -> list[Tag]:
        """Every element in document order."""
        return self.soup.find_all(True)

    def descendants(self):
        return self.soup.descendants

    def written_with_value(self, tag: Tag, attribute: str) -> bool:
        """
        Whether `attribute` was written with an ``=`` in the source.

        ``<input required>`` and ``<input required="">`` parse to the same empty
        value; only the source tells them apart.
        """
        key = id(tag)
        if key not in self._assigned:
            self._assigned[key] = self._assigned_attributes(tag)
        assigned = self._assigned[key]
        if assigned is None:
            return True
        return attribute.lower() in assigned

    def _assigned_attributes(self, tag: Tag) -> set[str] | None:
        line = getattr(tag, "sourceline", None)
        column = getattr(tag, "sourcepos", None)
        if line is None or column is None or line > len(self._line_starts):
            return None

        offset = self._line_starts[line - 1] + column
        match = _START_TAG.match(self.source, offset)
        if match is None:
            return None

        return {
            attribute.group("name").lower()
            for attribute in _ATTRIBUTE.finditer(match.group("attributes"))
            if attribute.group("assignment")
        }


def parse_markup(text: str) -> MarkupDocument:
    """
    Parse transformed template text.

    Args:
        text: Output of the ERB transformer

    Returns:
        The parsed document

    Raises:
        MarkupParseError: If the text cannot be parsed at all
    """
    try:
        soup = BeautifulSoup(text, "html.parser", multi_valued_attributes=None)
    except (ParserRejectedMarkup, AssertionError) as e:
        raise MarkupParseError(f"Failed to parse markup: {e}") from e

    logger.debug(f"AFTER Parser: {soup!r}")
    return MarkupDocument(soup, text)


def parse_attribute_value(value: str) -> MarkupDocument:
    """
    Parse the value of a ``data-erb-*`` attribute.

    The value is the attribute text as written, so its ERB tags are encoded
    again and it is parsed as a standalone fragment: literal text and ERB
    comments in their original order.
    """
    return parse_markup(encode_erb_tags(value, FragmentOrigin.ATTRIBUTE_VALUE))
