"""
Utility functions for the ERB to Phlex converter.
"""

import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

_BLANK = re.compile(r"[ \t\n\r\f]+")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens) to spaces."""
    return text.replace("_", " ").replace("-", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def _capitalize_and_join(words: list[str]) -> str:
    """Capitalize each word and join them together."""
    return "".join(word.capitalize() for word in words if word)


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Examples:
        "link_to" -> "LinkTo"
        "javascript_include_tag" -> "JavascriptIncludeTag"
        "t" -> "T"

    Args:
        text: The text to convert (snake_case, camelCase, UPPER_SNAKE_CASE, or space-separated)

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    normalized = _normalize_separators(text)
    words = _split_into_words(normalized)
    return _capitalize_and_join(words)


def underscore(text: str) -> str:
    """Convert dashed or camelCase names to snake_case.

    Examples:
        "data-controller" -> "data_controller"
        "viewBox" -> "view_box"
        "template-tag" -> "template_tag"
    """
    return _CAMEL_BOUNDARY.sub("_", text).replace("-", "_").lower()


def squish(text: str) -> str:
    """Collapse runs of markup whitespace into single spaces and strip the ends.

    Non-breaking spaces are content, not whitespace, and are kept.
    """
    return _BLANK.sub(" ", text).strip(" ")


def is_blank(text: str) -> bool:
    """True when text holds nothing but markup whitespace."""
    return squish(text) == ""


def remove_prefix(text: str, prefix: str) -> str:
    if text.startswith(prefix):
        return text[len(prefix) :]
    return text


def safe_constant_name(name: str) -> str:
    """Make a Ruby constant name safe to declare.

    Constant names cannot start with a digit, so "1Component" becomes "A1Component".
    """
    name = str(name)
    if name[:1].isdigit():
        return f"A{name}"
    return name
