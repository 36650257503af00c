"""
ERB to parser-safe HTML transformation.

Phase 1 of the pipeline: hide every piece of embedded Ruby from the markup
parser so that it survives parsing untouched.

1. Verbatim regions (script, style, pre, textarea) are replaced by opaque
   placeholder comments.
2. ERB inside start tags is moved into ``data-erb-*`` attributes.
3. Every remaining ERB tag becomes a ``<!--PHLEX:ERB:<kind>:<base64>-->`` comment,
   so newlines inside Ruby code survive the next step.
4. Newlines are removed and the template is trimmed.
5. ``<template>`` is renamed to its ``template-tag`` alias.
6. Whitespace is minified.
7. Verbatim regions are restored.
"""

from __future__ import annotations

import html
import logging
import re

from .fragments import (
    ERB_TAG_PATTERN,
    PRESERVED_PREFIX,
    FragmentOrigin,
    decode_preserved,
    encode_fragment,
    encode_preserved,
)

logger = logging.getLogger(__name__)

PRESERVED_TAGS = ("script", "style", "pre", "textarea")

PRESERVED_PATTERN = re.compile(rf"<({'|'.join(PRESERVED_TAGS)})\b.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
PRESERVED_COMMENT_PATTERN = re.compile(rf"<!--{PRESERVED_PREFIX}:(.*?)-->", re.DOTALL)

# `template` is a reserved word of the Phlex DSL
TEMPLATE_TAG_ALIAS = "template-tag"

ERB_ATTRIBUTE_PREFIX = "data-erb-"

# Whitespace before these opening tags and after their closing tags carries no meaning
BLOCK_ELEMENTS = (
    "address",
    "article",
    "aside",
    "blockquote",
    "body",
    "dd",
    "details",
    "dialog",
    "div",
    "dl",
    "dt",
    "fieldset",
    "figcaption",
    "figure",
    "footer",
    "form",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "head",
    "header",
    "hgroup",
    "hr",
    "html",
    "li",
    "link",
    "main",
    "meta",
    "nav",
    "ol",
    "p",
    "section",
    "summary",
    "table",
    "tbody",
    "td",
    "tfoot",
    "th",
    "thead",
    "title",
    "tr",
    "ul",
)

_BLOCK_NAMES = "|".join(BLOCK_ELEMENTS)
_SPACE_BEFORE_BLOCK_OPEN = re.compile(rf" +(<(?:{_BLOCK_NAMES})(?=[\s>/]))", re.IGNORECASE)
_SPACE_AFTER_BLOCK_CLOSE = re.compile(rf"(</(?:{_BLOCK_NAMES})\s*>) +", re.IGNORECASE)
_WHITESPACE_RUN = re.compile(r"[ \t\f\v]+")

_TEMPLATE_OPEN = re.compile(r"<template(?=[\s>/])", re.IGNORECASE)
_TEMPLATE_CLOSE = re.compile(r"</template\s*>", re.IGNORECASE)

_TAG_NAME = re.compile(r"<([^\s/>]+)")


def preserve_literal_regions(text: str) -> str:
    """Replace each verbatim region with a placeholder comment carrying its base64 text.

    The match is non-greedy: a region nested inside a same-named region ends at
    the first closing tag.
    """
    return PRESERVED_PATTERN.sub(lambda m: encode_preserved(m.group(0)), text)


def restore_literal_regions(text: str) -> str:
    """Inverse of preserve_literal_regions."""
    return PRESERVED_COMMENT_PATTERN.sub(lambda m: decode_preserved(m.group(1)), text)


def encode_erb_tags(text: str, origin: FragmentOrigin = FragmentOrigin.TAG_BODY) -> str:
    """Replace every ERB tag in text with its fragment comment."""
    return ERB_TAG_PATTERN.sub(lambda m: f"<!--{encode_fragment(m.group(0), origin)}-->", text)


def minify(text: str) -> str:
    """Collapse whitespace runs and drop the padding around block-level elements."""
    text = _WHITESPACE_RUN.sub(" ", text)
    text = _SPACE_BEFORE_BLOCK_OPEN.sub(r"\1", text)
    return _SPACE_AFTER_BLOCK_CLOSE.sub(r"\1", text)


def _skip_past(text: str, start: int, terminator: str) -> int:
    end = text.find(terminator, start)
    return len(text) if end == -1 else end + len(terminator)


def _find_tag_end(text: str, start: int) -> int:
    """Index just past the ``>`` closing the start tag opened at `start`."""
    quote = None
    i = start + 1
    while i < len(text):
        if text.startswith("<%", i):
            i = _skip_past(text, i + 2, "%>")
            continue
        char = text[i]
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == ">":
            return i + 1
        i += 1
    return len(text)


class _StartTagRewriter:
    """Moves ERB found inside one start tag into ``data-erb-*`` attributes."""

    def __init__(self, tag: str):
        self.tag = tag
        self.attributes: list[str] = []
        self.erb_index = 0

    def rewrite(self) -> str:
        name = _TAG_NAME.match(self.tag).group(1)
        inner = self.tag[len(name) + 1 : -1] if self.tag.endswith(">") else self.tag[len(name) + 1 :]
        self_closing = inner.rstrip().endswith("/")
        if self_closing:
            inner = inner.rstrip()[:-1]

        self._scan(inner)

        parts = [f"<{name}"] + self.attributes
        return " ".join(parts) + (" />" if self_closing else ">")

    def _scan(self, inner: str) -> None:
        i = 0
        while i < len(inner):
            if inner[i].isspace():
                i += 1
            elif inner.startswith("<%", i):
                end = _skip_past(inner, i + 2, "%>")
                self._add_erb(inner[i:end])
                i = end
            else:
                i = self._scan_attribute(inner, i)

    def _scan_attribute(self, inner: str, start: int) -> int:
        i = start
        while i < len(inner) and not inner[i].isspace() and inner[i] != "=" and not inner.startswith("<%", i):
            i += 1
        name = inner[start:i]

        j = i
        while j < len(inner) and inner[j].isspace():
            j += 1
        if j >= len(inner) or inner[j] != "=":
            self.attributes.append(name)
            return i

        j += 1
        while j < len(inner) and inner[j].isspace():
            j += 1
        value_start = j
        if j < len(inner) and inner[j] in "\"'":
            quote = inner[j]
            j += 1
            while j < len(inner) and inner[j] != quote:
                j = _skip_past(inner, j + 2, "%>") if inner.startswith("<%", j) else j + 1
            value = inner[value_start + 1 : j]
            j += 1
        else:
            while j < len(inner) and not inner[j].isspace():
                j = _skip_past(inner, j + 2, "%>") if inner.startswith("<%", j) else j + 1
            value = inner[value_start:j]

        if "<%" in value:
            self.attributes.append(f'{ERB_ATTRIBUTE_PREFIX}{name}="{html.escape(value)}"')
        else:
            self.attributes.append(inner[start:j])
        return j

    def _add_erb(self, erb: str) -> None:
        self.attributes.append(f'{ERB_ATTRIBUTE_PREFIX}{self.erb_index}="{html.escape(erb)}"')
        self.erb_index += 1


def rewrite_start_tags(text: str) -> str:
    """Rewrite the start tags that contain ERB; everything else is copied as is."""
    out = []
    i = 0
    while i < len(text):
        j = text.find("<", i)
        if j == -1:
            out.append(text[i:])
            break
        out.append(text[i:j])
        if text.startswith("<!--", j):
            end = _skip_past(text, j + 4, "-->")
        elif text.startswith("<%", j):
            end = _skip_past(text, j + 2, "%>")
        elif j + 1 < len(text) and text[j + 1].isalpha():
            end = _find_tag_end(text, j)
            tag = text[j:end]
            if "<%" in tag:
                out.append(_StartTagRewriter(tag).rewrite())
                i = end
                continue
        else:
            end = j + 1
        out.append(text[j:end])
        i = end
    return "".join(out)


class ErbTransformer:
    """Takes ERB and transforms it into HTML a markup parser can read safely."""

    def __init__(self, source: str):
        self.source = str(source or "")

    def transform(self) -> str:
        self.source = preserve_literal_regions(self.source)
        self.source = rewrite_start_tags(self.source)
        self.source = encode_erb_tags(self.source)
        self._remove_newlines()
        self.source = self.source.strip()
        self._transform_template_tags()
        self.source = minify(self.source)
        self.source = restore_literal_regions(self.source)

        logger.debug(f"AFTER ErbTransformer: {self.source}")
        return self.source

    def _remove_newlines(self) -> None:
        self.source = self.source.replace("\n", "").replace("\r", "")

    def _transform_template_tags(self) -> None:
        self.source = _TEMPLATE_OPEN.sub(f"<{TEMPLATE_TAG_ALIAS}", self.source)
        self.source = _TEMPLATE_CLOSE.sub(f"</{TEMPLATE_TAG_ALIAS}>", self.source)


def transform(source: str) -> str:
    """Convenience wrapper around ErbTransformer."""
    return ErbTransformer(source).transform()
