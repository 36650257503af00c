"""
Fragments of embedded Ruby and their comment encoding.

An ERB tag is carried through the markup parser as a single HTML comment
of the form ``PHLEX:ERB:<kind>:<base64>``. The body travels base64-encoded
so quotes, newlines, ``-->`` and any other character survive untouched.
"""

from __future__ import annotations

import base64
import binascii
import html
import re
from dataclasses import dataclass
from enum import Enum

from ..errors import FragmentDecodeError

FRAGMENT_PREFIX = "PHLEX:ERB"
PRESERVED_PREFIX = "PHLEX:PRESERVED"

RAW_MARKER = "="
COMMENT_MARKER = "#"

ERB_TAG_PATTERN = re.compile(
    r"<%(?P<trim_left>-)?(?P<marker>==|=|#)?(?P<body>.*?)(?P<trim_right>-)?%>",
    re.DOTALL,
)


class FragmentKind(str, Enum):
    """What an ERB tag does when the template renders."""

    LOUD = "loud"  # <%= expr %>, output
    SILENT = "silent"  # <% stmt %>, evaluated only
    COMMENT = "comment"  # <%# text %>


class FragmentOrigin(str, Enum):
    """Where in the markup a fragment was found."""

    TAG_BODY = "tag"
    ATTRIBUTE_VALUE = "attribute"


@dataclass(frozen=True)
class Fragment:
    """One ERB tag, with its exact Ruby body."""

    kind: FragmentKind
    raw_text: str
    origin: FragmentOrigin = FragmentOrigin.TAG_BODY
    trim_left: bool = False
    trim_right: bool = False

    @property
    def is_raw_output(self) -> bool:
        """True for `<%== expr %>`, whose body keeps the leading raw marker."""
        return self.kind is FragmentKind.LOUD and self.raw_text.startswith(RAW_MARKER)

    @property
    def code(self) -> str:
        """The Ruby source of the fragment, without the raw marker."""
        if self.is_raw_output:
            return self.raw_text[len(RAW_MARKER) :].strip()
        return self.raw_text.strip()

    @property
    def comment_text(self) -> str:
        return self.raw_text.strip().lstrip(COMMENT_MARKER).strip()


def _b64encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _b64decode(payload: str) -> str:
    return base64.b64decode(payload.encode("ascii"), validate=True).decode("utf-8")


def parse_erb_tag(
    tag_text: str,
    origin: FragmentOrigin = FragmentOrigin.TAG_BODY,
    entity_escaped: bool = False,
) -> Fragment:
    """
    Build a Fragment from the full text of one ERB tag.

    Args:
        tag_text: The tag including its delimiters, e.g. ``<%= @user.name -%>``
        origin: Where the tag was found
        entity_escaped: Whether the body was HTML-escaped and must be unescaped

    Returns:
        The fragment

    Raises:
        ValueError: If tag_text is not a single ERB tag
    """
    match = ERB_TAG_PATTERN.fullmatch(tag_text.strip())
    if match is None:
        raise ValueError(f"Not an ERB tag: {tag_text!r}")

    marker = match.group("marker") or ""
    body = match.group("body")
    if entity_escaped:
        body = html.unescape(body)

    if marker == "==":
        kind = FragmentKind.LOUD
        body = RAW_MARKER + body.strip()
    elif marker == "=":
        kind = FragmentKind.LOUD
    elif marker == COMMENT_MARKER or body.strip().startswith(COMMENT_MARKER):
        kind = FragmentKind.COMMENT
        body = COMMENT_MARKER + body.strip().lstrip(COMMENT_MARKER)
    else:
        kind = FragmentKind.SILENT

    return Fragment(
        kind=kind,
        raw_text=body.strip(),
        origin=origin,
        trim_left=match.group("trim_left") is not None,
        trim_right=match.group("trim_right") is not None,
    )


def encode_fragment(tag_text: str, origin: FragmentOrigin = FragmentOrigin.TAG_BODY, entity_escaped: bool = False) -> str:
    """Encode one ERB tag as the text of a markup comment."""
    return serialize_fragment(parse_erb_tag(tag_text, origin, entity_escaped))


def serialize_fragment(fragment: Fragment) -> str:
    return f"{FRAGMENT_PREFIX}:{fragment.kind.value}:{_b64encode(fragment.raw_text)}"


def is_fragment_comment(comment_text: str) -> bool:
    return comment_text.strip().startswith(FRAGMENT_PREFIX + ":")


def decode_fragment(
    comment_text: str,
    origin: FragmentOrigin = FragmentOrigin.TAG_BODY,
    strict: bool = False,
) -> Fragment:
    """
    Decode a comment produced by encode_fragment.

    Args:
        comment_text: The comment text (without ``<!--`` / ``-->``)
        origin: Origin to stamp on the decoded fragment
        strict: Raise on malformed payloads instead of returning an empty body

    Returns:
        The decoded fragment; malformed payloads give an empty silent fragment

    Raises:
        FragmentDecodeError: In strict mode, when the payload is malformed
    """
    text = comment_text.strip()
    try:
        if not is_fragment_comment(text):
            raise FragmentDecodeError(f"Missing {FRAGMENT_PREFIX} prefix: {text[:40]!r}")
        parts = text.split(":", 3)
        if len(parts) != 4:
            raise FragmentDecodeError(f"Truncated fragment comment: {text[:40]!r}")
        _, _, kind, payload = parts
        try:
            fragment_kind = FragmentKind(kind)
        except ValueError as e:
            raise FragmentDecodeError(f"Unknown fragment kind {kind!r}") from e
        try:
            body = _b64decode(payload)
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            raise FragmentDecodeError(f"Invalid fragment payload: {e}") from e
    except FragmentDecodeError:
        if strict:
            raise
        return Fragment(kind=FragmentKind.SILENT, raw_text="", origin=origin)

    return Fragment(kind=fragment_kind, raw_text=body, origin=origin)


def encode_preserved(region: str) -> str:
    return f"<!--{PRESERVED_PREFIX}:{_b64encode(region)}-->"


def decode_preserved(payload: str) -> str:
    return _b64decode(payload)
