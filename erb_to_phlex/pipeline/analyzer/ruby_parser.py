"""
Ruby parsing with tree-sitter and tree-sitter-ruby.
"""

from __future__ import annotations

import tree_sitter_ruby as ts_ruby
from tree_sitter import Language, Node, Parser, Tree

from ..errors import EmbeddedCodeParseError

RUBY_LANGUAGE = Language(ts_ruby.language())


def node_text(node: Node) -> str:
    return node.text.decode("utf8")


class RubyParser:
    """Parses embedded Ruby into tree-sitter trees, rejecting code with syntax errors."""

    def __init__(self):
        self._parser = Parser(RUBY_LANGUAGE)

    def parse(self, code: str) -> Tree:
        """Parse Ruby source code into a tree-sitter tree.

        Args:
            code: Ruby source code string

        Returns:
            tree-sitter Tree object

        Raises:
            EmbeddedCodeParseError: If the code cannot be parsed
        """
        tree = self._parser.parse(bytes(code, "utf8"))

        if tree.root_node.has_error:
            errors = self._find_errors(tree.root_node)
            if errors:
                first_error = errors[0]
                line = first_error.start_point[0] + 1
                near = node_text(first_error)[:50]
                raise EmbeddedCodeParseError(f"Failed to parse Ruby at line {line}: syntax error near '{near}'", source=code, line=line)
            raise EmbeddedCodeParseError("Failed to parse Ruby: syntax error", source=code)

        return tree

    def _find_errors(self, node: Node) -> list[Node]:
        errors = []
        if node.type == "ERROR" or node.is_missing:
            errors.append(node)
        for child in node.children:
            errors.extend(self._find_errors(child))
        return errors
