"""
Phlex code generation from a parsed template.

Phase 4 of the pipeline. The markup tree is walked once, depth first, and
every node is written as the Phlex call that renders it. ERB fragments are
dispatched by kind: output is merged into ``plain`` calls where possible,
statements are passed through with their block structure.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    PreformattedString,
    ProcessingInstruction,
    Tag,
)

from ...utils import is_blank, remove_prefix, underscore
from ..analyzer.classification import NameClassification
from ..analyzer.known_helpers import is_output_method
from ..codec.erb_transformer import ERB_ATTRIBUTE_PREFIX
from ..codec.fragments import (
    Fragment,
    FragmentKind,
    FragmentOrigin,
    decode_fragment,
    is_fragment_comment,
    parse_erb_tag,
)
from ..config import ConverterConfig
from ..errors import ConversionError, FragmentDecodeError, UnsupportedNodeError
from ..markup.parser import MarkupDocument, parse_attribute_value
from .plain_buffer import PlainOutputBuffer
from .ruby_source import (
    RubyLiterals,
    escape_parens,
    interpolate,
    is_control_statement,
    leading_name,
    one_line,
    opens_block,
    parens,
    quote,
)
from .ruby_writer import RubyWriter
from .svg_elements import svg_element_name

logger = logging.getLogger(__name__)

# Whitespace between the children of these elements is not rendered
WHITESPACE_INSENSITIVE_PARENTS = ("table", "thead", "tbody", "tfoot", "tr")

_ERB_INTERPOLATION_ATTRIBUTE = re.compile(rf"^{ERB_ATTRIBUTE_PREFIX}\d+$")
_RUBY_KEYWORD_KEY = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Local that collects an attribute value built from statements
ATTRIBUTE_BUFFER = "_attribute"


@dataclass
class GeneratedDocument:
    """Generated template body, with the classification used to wrap it."""

    body: str
    classification: NameClassification = field(default_factory=NameClassification)


class TemplateGenerator:
    """Writes the Phlex calls for a parsed template."""

    def __init__(self, config: ConverterConfig | None = None, classification: NameClassification | None = None):
        self.config = config or ConverterConfig()
        self.classification = classification or NameClassification()
        self.literals = RubyLiterals()
        self.out = RubyWriter()
        self.plain = PlainOutputBuffer(self.out.line, self.literals)
        self.document: MarkupDocument | None = None
        self._whitespace = self.config.whitespace
        self._svg_prefix: str | None = None
        self._floor = 0

    @property
    def strict(self) -> bool:
        return self.config.raise_errors

    def generate(self, document: MarkupDocument) -> GeneratedDocument:
        """
        Generate the template body.

        Args:
            document: The parsed template

        Returns:
            The generated body; in non-strict mode a conversion error ends
            generation early and the text written so far is returned

        Raises:
            ConversionError: In strict mode
            UnsupportedNodeError: For node kinds outside the supported set, in any mode
        """
        self.document = document
        try:
            self.handle_children(document.soup, level=0)
        except ConversionError as e:
            if self.strict:
                raise
            logger.warning(f"Generation stopped early, returning partial output: {e}")

        body = self.out.getvalue()
        logger.debug(f"AFTER TemplateGenerator:\n{body}")
        return GeneratedDocument(body=body, classification=self.classification)

    # Traversal

    def handle_node(self, node, level: int) -> None:
        if isinstance(node, Doctype):
            self.handle_doctype(node, level)
        elif isinstance(node, Comment):
            self.handle_comment(node)
        elif isinstance(node, (Declaration, ProcessingInstruction)):
            raise UnsupportedNodeError(f"Unsupported markup node {type(node).__name__}: {str(node)[:40]!r}")
        elif isinstance(node, CData) or (isinstance(node, NavigableString) and not isinstance(node, PreformattedString)):
            self.handle_text(node)
        elif isinstance(node, Tag):
            self.handle_element(node, level)
        else:
            raise UnsupportedNodeError(f"Unsupported markup node {type(node).__name__}")

    def handle_children(self, node: Tag, level: int) -> None:
        floor = self.out.level
        saved_floor = self._floor
        self._floor = floor
        try:
            with self.plain.drained():
                for child in list(node.children):
                    self.handle_node(child, level + 1)
        finally:
            self.out.level = floor
            self._floor = saved_floor

    def handle_doctype(self, node: Doctype, level: int) -> None:
        self.plain.flush()
        self.out.line("doctype")
        self._separate(level)

    def handle_element(self, tag: Tag, level: int) -> None:
        self.plain.flush()

        call = self.tag_name(tag) + self.attributes(tag)
        starts_svg = tag.name == "svg" and self._svg_prefix is None

        if tag.contents:
            params = f" |{self.config.svg_param}|" if starts_svg else ""
            self.out.open_block(f"{call} do{params}")
            if starts_svg:
                with self._namespaced(self.config.svg_param):
                    self.handle_children(tag, level)
            else:
                self.handle_children(tag, level)
            self.out.close_block("end", self._floor)
        else:
            self.out.line(call)

        self._separate(level)

    def handle_text(self, node: NavigableString) -> None:
        text = str(node)

        if is_blank(text):
            if text and self._whitespace and not self._in_whitespace_insensitive_parent(node):
                self.plain.flush()
                self.out.line("whitespace")
            return

        if self.has_siblings(node):
            self.plain.add_text(text)
        else:
            self.plain.flush()
            self.out.line(quote(text))

    def handle_comment(self, node: Comment) -> None:
        text = str(node)
        if not is_fragment_comment(text):
            self.plain.flush()
            self.out.line(f"comment {{ {quote(text.strip())} }}")
            return

        try:
            fragment = decode_fragment(text, FragmentOrigin.TAG_BODY, strict=True)
        except FragmentDecodeError as e:
            if self.strict:
                raise
            logger.warning(f"Skipping undecodable fragment: {e}")
            return

        self.handle_fragment(node, fragment)

    def handle_fragment(self, node: Comment, fragment: Fragment) -> None:
        code = fragment.code

        if fragment.kind is FragmentKind.COMMENT:
            self.plain.flush()
            self.out.comment(fragment.comment_text)
        elif fragment.kind is FragmentKind.LOUD:
            if not code:
                return
            if fragment.is_raw_output:
                self.plain.flush()
                self.out.statement(f"unsafe_raw {code}", self._floor)
            elif self.has_siblings(node) and self.is_value_output(code):
                self.plain.add_code(code)
            else:
                self.plain.flush()
                self.out.statement(code, self._floor)
        else:
            if not code:
                return
            self.plain.flush()
            self.out.blank()
            self.out.statement(code, self._floor)

    # Attributes

    def attributes(self, tag: Tag) -> str:
        arguments = [argument for argument in (self.attribute(tag, name, value) for name, value in tag.attrs.items()) if argument]
        if not arguments:
            return ""
        return parens(", ".join(arguments))

    def attribute(self, tag: Tag, name: str, value: str) -> str | None:
        value = value or ""

        if _ERB_INTERPOLATION_ATTRIBUTE.match(name):
            return self.erb_spread(value)

        if name.startswith(ERB_ATTRIBUTE_PREFIX):
            return f"{self.attribute_key(remove_prefix(name, ERB_ATTRIBUTE_PREFIX))} {self.erb_attribute_value(value)}"

        key = self.attribute_key(name)
        if value == "" and self.document is not None and not self.document.written_with_value(tag, name):
            return f"{key} true"
        return f"{key} {quote(value)}"

    def attribute_key(self, name: str) -> str:
        key = underscore(name)
        if _RUBY_KEYWORD_KEY.match(key):
            return f"{key}:"
        escaped = name.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}":'

    def erb_spread(self, value: str) -> str | None:
        """ERB written in attribute position, `<div <%= attrs %>>`."""
        try:
            fragment = parse_erb_tag(value, FragmentOrigin.ATTRIBUTE_VALUE)
        except ValueError:
            logger.warning(f"Skipping attribute ERB {value!r}")
            return None

        if fragment.kind is not FragmentKind.LOUD or not fragment.code:
            logger.warning(f"Skipping non-output ERB in attribute position: {value!r}")
            return None
        return f"**({{ ({fragment.code}) => true }})"

    def erb_attribute_value(self, value: str) -> str:
        """
        Attribute value containing ERB.

        A single output tag is written as a bare expression and output mixed
        with text as an interpolated string. Silent code such as ``if`` or
        ``each`` cannot live inside an interpolation, so a value holding any
        is built statement by statement into ``_attribute``.
        """
        stripped = value.strip()
        if stripped.startswith("<%=") and stripped.count("<%") == 1 and stripped.endswith("%>"):
            code = parse_erb_tag(stripped, FragmentOrigin.ATTRIBUTE_VALUE).code
            return parens(code) if " " in code else code

        statements = []
        parts = []
        for node in parse_attribute_value(value).children:
            if isinstance(node, Comment) and is_fragment_comment(node):
                fragment = decode_fragment(node, FragmentOrigin.ATTRIBUTE_VALUE, strict=self.strict)
                if not fragment.code or fragment.kind is FragmentKind.COMMENT:
                    continue
                if fragment.kind is FragmentKind.LOUD:
                    parts.append(interpolate(fragment.code))
                else:
                    if parts:
                        statements.append(f"{ATTRIBUTE_BUFFER} << %({''.join(parts)})")
                        parts = []
                    statements.append(one_line(fragment.code))
            else:
                parts.append(escape_parens(str(node)))

        if not statements:
            return f"%({''.join(parts)})"
        if parts:
            statements.append(f"{ATTRIBUTE_BUFFER} << %({''.join(parts)})")
        return parens("; ".join([f'{ATTRIBUTE_BUFFER} = +""', *statements, ATTRIBUTE_BUFFER]))

    # Naming

    def tag_name(self, tag: Tag) -> str:
        if self._svg_prefix is not None:
            return f"{self._svg_prefix}.{svg_element_name(tag.name).replace('-', '_')}"
        return underscore(tag.name)

    @contextmanager
    def _namespaced(self, prefix: str) -> Iterator[None]:
        saved = (self._svg_prefix, self._whitespace)
        self._svg_prefix = prefix
        self._whitespace = False
        try:
            yield
        finally:
            self._svg_prefix, self._whitespace = saved

    # Predicates

    def has_siblings(self, node) -> bool:
        parent = node.parent
        return parent is not None and len(parent.contents) > 1

    def is_value_output(self, code: str) -> bool:
        """Whether loud code only produces a value, so it can be merged into `plain`."""
        if is_control_statement(code) or opens_block(code):
            return False
        name = leading_name(code)
        if name is not None and (self.classification.is_output_helper(name) or is_output_method(name)):
            return False
        return True

    def _in_whitespace_insensitive_parent(self, node) -> bool:
        parent = node.parent
        return parent is not None and parent.name in WHITESPACE_INSENSITIVE_PARENTS

    def _separate(self, level: int) -> None:
        if level == 1 or self.config.blank_line_between_children:
            self.out.blank()


def generate(document: MarkupDocument, config: ConverterConfig | None = None, classification: NameClassification | None = None) -> GeneratedDocument:
    """Convenience wrapper around TemplateGenerator."""
    return TemplateGenerator(config, classification).generate(document)
