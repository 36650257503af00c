"""
Embedding codec.

Hides ERB from the markup parser by encoding every tag as a comment.
"""

from __future__ import annotations

from .erb_transformer import ErbTransformer, transform
from .fragments import (
    Fragment,
    FragmentKind,
    FragmentOrigin,
    decode_fragment,
    encode_fragment,
    is_fragment_comment,
    parse_erb_tag,
)

__all__ = [
    "ErbTransformer",
    "Fragment",
    "FragmentKind",
    "FragmentOrigin",
    "decode_fragment",
    "encode_fragment",
    "is_fragment_comment",
    "parse_erb_tag",
    "transform",
]
