"""
Semantic analysis of the Ruby embedded in a parsed template.

Phase 3 of the pipeline. Fragments only form valid Ruby together
(``<% if x %>`` ... ``<% end %>``), so they are joined in document order and
parsed as one program: all tag-body fragments together, and the fragments of
each ``data-erb-*`` value together.
"""

from __future__ import annotations

import logging

from bs4 import Comment

from ..codec.erb_transformer import ERB_ATTRIBUTE_PREFIX
from ..codec.fragments import Fragment, FragmentKind, FragmentOrigin, decode_fragment, is_fragment_comment
from ..config import ConverterConfig
from ..errors import EmbeddedCodeParseError
from ..markup.parser import MarkupDocument, parse_attribute_value
from .classification import NameClassification
from .ruby_parser import RubyParser
from .visitor import NameVisitor

logger = logging.getLogger(__name__)


class RubyAnalyzer:
    """Classifies every name referenced by the Ruby in a template."""

    def __init__(self, config: ConverterConfig | None = None):
        self.config = config or ConverterConfig()
        self.parser = RubyParser()
        self.classification = NameClassification()

    @property
    def strict(self) -> bool:
        return self.config.raise_errors

    def analyze(self, document: MarkupDocument) -> NameClassification:
        """
        Analyze a parsed template.

        Args:
            document: Template parsed by parse_markup

        Returns:
            The classification of every referenced name

        Raises:
            EmbeddedCodeParseError: In strict mode, when embedded Ruby does not parse
            FragmentDecodeError: In strict mode, when a fragment comment is malformed
        """
        self._analyze_fragments(self.tag_fragments(document), allow_output_helpers=True)

        for fragments in self.attribute_fragments(document):
            self._analyze_fragments(fragments, allow_output_helpers=False)

        logger.debug(f"AFTER RubyAnalyzer: {self.classification}")
        return self.classification

    def analyze_ruby(self, code: str, allow_output_helpers: bool = True) -> NameClassification:
        """Parse one Ruby program and add its names to the classification."""
        tree = self.parser.parse(code)
        NameVisitor(self.classification, allow_output_helpers).visit(tree.root_node)
        return self.classification

    def tag_fragments(self, document: MarkupDocument) -> list[Fragment]:
        """Code-bearing fragments found in element content, in document order."""
        fragments = []
        for node in document.descendants():
            if isinstance(node, Comment) and is_fragment_comment(node):
                fragment = decode_fragment(node, FragmentOrigin.TAG_BODY, strict=self.strict)
                if fragment.kind is not FragmentKind.COMMENT and fragment.code:
                    fragments.append(fragment)
        return fragments

    def attribute_fragments(self, document: MarkupDocument) -> list[list[Fragment]]:
        """Code-bearing fragments of each ``data-erb-*`` attribute, one list per attribute."""
        groups = []
        for tag in document.elements():
            for name, value in tag.attrs.items():
                if not name.startswith(ERB_ATTRIBUTE_PREFIX):
                    continue
                fragments = []
                for node in parse_attribute_value(value).descendants():
                    if isinstance(node, Comment) and is_fragment_comment(node):
                        fragment = decode_fragment(node, FragmentOrigin.ATTRIBUTE_VALUE, strict=self.strict)
                        if fragment.kind is not FragmentKind.COMMENT and fragment.code:
                            fragments.append(fragment)
                if fragments:
                    groups.append(fragments)
        return groups

    def _analyze_fragments(self, fragments: list[Fragment], allow_output_helpers: bool) -> None:
        if not fragments:
            return

        program = "\n".join(fragment.code for fragment in fragments)
        try:
            self.analyze_ruby(program, allow_output_helpers)
            return
        except EmbeddedCodeParseError as e:
            if self.strict:
                raise
            logger.warning(f"Template code does not parse as a whole, analyzing fragments one by one: {e}")

        for fragment in fragments:
            try:
                self.analyze_ruby(fragment.code, allow_output_helpers)
            except EmbeddedCodeParseError as e:
                logger.debug(f"Skipping fragment {fragment.code!r}: {e}")


def analyze(document: MarkupDocument, config: ConverterConfig | None = None) -> NameClassification:
    """Convenience wrapper around RubyAnalyzer."""
    return RubyAnalyzer(config).analyze(document)
