"""
Helpers for writing Ruby source text.

Escaping for the ``%(...)`` and ``"..."`` literals the generator emits, and
the line-level block structure used to indent pass-through statements.
"""

from __future__ import annotations

import re

from tree_sitter import Node

from ..analyzer.ruby_parser import RubyParser
from ..errors import EmbeddedCodeParseError

INDENT = "  "

# Statements that open a block: keyword openers, and lines ending in `do` or `{`
# with optional block parameters.
_KEYWORD_OPENER = re.compile(r"^(if|unless|while|until|case|begin|for|def|class|module)\b")
_BLOCK_OPENER = re.compile(r"(\bdo|\{)\s*(\|[^|]*\|)?\s*$")
_ASSIGNED_OPENER = re.compile(r"=\s*(if|unless|case|begin|while|until)\b")
_ONE_LINER = re.compile(r"\bend\s*$")
_MIDDLE = re.compile(r"^(else|elsif|when|in|rescue|ensure)\b")
_CLOSER = re.compile(r"^(end\b|\})")

_CONTROL_KEYWORD = re.compile(r"^(if|unless|while|until|case|begin|for|def|class|module|end|else|elsif|when|in|rescue|ensure|return|next|break|redo|retry|yield)\b")

_LEADING_NAME = re.compile(r"^[A-Za-z_]\w*[?!]?")

_STRING_LITERAL_TYPES = ("string",)


def escape_parens(text: str) -> str:
    """Escape text for a ``%(...)`` literal."""
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)").replace("#{", "\\#{")


def quote(text: str) -> str:
    """Literal text as a ``%(...)`` string."""
    return f"%({escape_parens(text)})"


def escape_double_quoted(text: str) -> str:
    """Escape text for a ``"..."`` literal."""
    return escape_parens(text).replace('"', '\\"')


def interpolate(code: str) -> str:
    return f"#{{{code}}}"


def parens(text: str) -> str:
    return f"({text})"


def one_line(code: str) -> str:
    """Join the lines of a statement with ``;`` so it fits inside an argument list."""
    return "; ".join(line.strip() for line in code.splitlines() if line.strip())


def opens_block(line: str) -> bool:
    line = line.strip()
    if _ONE_LINER.search(line) and not _BLOCK_OPENER.search(line):
        return False
    if _KEYWORD_OPENER.match(line) or _ASSIGNED_OPENER.search(line):
        return True
    return _BLOCK_OPENER.search(line) is not None


def continues_block(line: str) -> bool:
    """True for `else`, `elsif`, `when` and the other clauses that split a block."""
    return _MIDDLE.match(line.strip()) is not None


def closes_block(line: str) -> bool:
    return _CLOSER.match(line.strip()) is not None


def is_control_statement(code: str) -> bool:
    return _CONTROL_KEYWORD.match(code.strip()) is not None


def leading_name(code: str) -> str | None:
    match = _LEADING_NAME.match(code.strip())
    return match.group(0) if match else None


class RubyLiterals:
    """Recognises Ruby code that is a single string literal."""

    def __init__(self, parser: RubyParser | None = None):
        self.parser = parser or RubyParser()

    def string_literal(self, code: str) -> Node | None:
        """The string node when code is exactly one string literal, else None."""
        try:
            tree = self.parser.parse(code)
        except EmbeddedCodeParseError:
            return None
        statements = [child for child in tree.root_node.named_children if child.type != "comment"]
        if len(statements) == 1 and statements[0].type in _STRING_LITERAL_TYPES:
            return statements[0]
        return None

    def is_string_literal(self, code: str) -> bool:
        return self.string_literal(code) is not None

    def inline_in_double_quotes(self, code: str) -> str:
        """
        Text to splice into a ``"..."`` literal so that it produces what code produces.

        ``"..."`` bodies are spliced as they are, ``%(...)`` bodies need their
        double quotes escaped, ``'...'`` bodies are unescaped and escaped again.
        Anything else becomes an interpolation.
        """
        code = code.strip()
        if self.string_literal(code) is None:
            return interpolate(code)

        if code.startswith('"'):
            return code[1:-1]
        if code.startswith("'"):
            body = code[1:-1].replace("\\\\", "\\").replace("\\'", "'")
            return escape_double_quoted(body)
        if code.startswith("%Q"):
            return _escape_unescaped_quotes(code[3:-1])
        if code.startswith("%") and code[1:2] in tuple("([{<|!/"):
            return _escape_unescaped_quotes(code[2:-1])
        # %q(...) does not interpolate
        return interpolate(code)


def _escape_unescaped_quotes(body: str) -> str:
    out = []
    escaped = False
    for char in body:
        if char == '"' and not escaped:
            out.append('\\"')
        else:
            out.append(char)
        escaped = char == "\\" and not escaped
    return "".join(out)
