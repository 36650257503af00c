"""
Name classification over a tree-sitter-ruby syntax tree.

The visitor keeps an explicit stack of ``(node_type, field_role)`` pairs for
the path from the root to the current node, and a stack of scopes holding
the names bound so far.
"""

from __future__ import annotations

from tree_sitter import Node

from .classification import NameClassification
from .known_helpers import PHLEX_BUILTINS, RUBY_KEYWORDS, is_route_helper, rails_helper_module
from .ruby_parser import node_text

# A call whose parent is one of these is a statement, so its value is discarded
STATEMENT_CONTAINERS = frozenset(
    {
        "program",
        "then",
        "else",
        "body_statement",
        "block_body",
        "begin",
        "ensure",
        "do",
    }
)

MODIFIERS = frozenset(
    {
        "if_modifier",
        "unless_modifier",
        "while_modifier",
        "until_modifier",
        "rescue_modifier",
    }
)

HELPER_SUFFIXES = ("?", "!")


class NameVisitor:
    """Walks one Ruby program and records the names it references."""

    def __init__(self, classification: NameClassification, allow_output_helpers: bool = True):
        self.classification = classification
        self.allow_output_helpers = allow_output_helpers
        self._ancestors: list[tuple[str, str | None]] = []
        self._scopes: list[set[str]] = [set()]

    def visit(self, node: Node, role: str | None = None) -> None:
        self._ancestors.append((node.type, role))
        try:
            handler = getattr(self, f"visit_{node.type}", None)
            if handler is not None:
                handler(node)
            else:
                self.visit_children(node)
        finally:
            self._ancestors.pop()

    def visit_children(self, node: Node, skip: tuple[str, ...] = ()) -> None:
        for index, child in enumerate(node.children):
            if child.is_named and child.type not in skip:
                self.visit(child, node.field_name_for_child(index))

    # Leaves

    def visit_instance_variable(self, node: Node) -> None:
        self.classification.fields.add(node_text(node)[1:])

    def visit_constant(self, node: Node) -> None:
        self.classification.consts.add(node_text(node))

    def visit_identifier(self, node: Node) -> None:
        self._reference(node_text(node))

    def visit_alias(self, node: Node) -> None:
        pass

    def visit_undef(self, node: Node) -> None:
        pass

    # Calls

    def visit_call(self, node: Node) -> None:
        receiver = node.child_by_field_name("receiver")
        method = node.child_by_field_name("method")
        name = node_text(method) if method is not None else None

        if receiver is not None:
            self._record_receiver(receiver)
            self.visit(receiver, "receiver")
            if name is not None and is_route_helper(name):
                self._is_provided(name)
        elif method is not None and method.type == "identifier":
            has_arguments = node.child_by_field_name("arguments") is not None
            has_block = node.child_by_field_name("block") is not None
            if self._is_provided(name):
                pass
            elif has_arguments or has_block:
                self._helper_call(name)
            else:
                self._reference(name)
        elif method is not None and method.type == "constant":
            self.visit(method, "method")

        self._visit_call_children(node)

    def _visit_call_children(self, node: Node) -> None:
        for index, child in enumerate(node.children):
            role = node.field_name_for_child(index)
            if child.is_named and role in ("arguments", "block"):
                self.visit(child, role)

    def _record_receiver(self, receiver: Node) -> None:
        if receiver.type == "instance_variable":
            self.classification.calls.add(node_text(receiver)[1:])
        elif receiver.type in ("identifier", "constant", "scope_resolution"):
            self.classification.calls.add(node_text(receiver))

    def _helper_call(self, name: str) -> None:
        self.classification.calls.add(name)
        if self.allow_output_helpers and self._at_statement_position():
            self.classification.output_helpers.add(name)
        else:
            self.classification.value_helpers.add(name)

    def _at_statement_position(self) -> bool:
        if len(self._ancestors) < 2:
            return True
        parent_type, _ = self._ancestors[-2]
        _, role = self._ancestors[-1]
        if parent_type in STATEMENT_CONTAINERS:
            return True
        return parent_type in MODIFIERS and role == "body"

    def _reference(self, name: str) -> None:
        if name in RUBY_KEYWORDS or self._is_provided(name):
            return
        if name.endswith(HELPER_SUFFIXES):
            self._helper_call(name)
            return
        if self._is_bound(name):
            return
        self.classification.locals.add(name)

    def _is_provided(self, name: str) -> bool:
        """True for names Phlex or phlex-rails provide; Rails helpers also record their include."""
        module = rails_helper_module(name)
        if module is not None:
            self.classification.includes.add(module)
            return True
        return name in PHLEX_BUILTINS

    # Scopes and binders

    def _is_bound(self, name: str) -> bool:
        return any(name in scope for scope in self._scopes)

    def _bind(self, name: str) -> None:
        self._scopes[-1].add(name)
        self.classification.bound.add(name)

    def _visit_scoped(self, node: Node) -> None:
        self._scopes.append(set())
        try:
            for index, child in enumerate(node.children):
                if not child.is_named:
                    continue
                role = node.field_name_for_child(index)
                if child.type.endswith("parameters"):
                    self._ancestors.append((child.type, role))
                    try:
                        self._bind_parameters(child)
                    finally:
                        self._ancestors.pop()
                elif role != "name":
                    self.visit(child, role)
        finally:
            self._scopes.pop()

    visit_block = _visit_scoped
    visit_do_block = _visit_scoped
    visit_lambda = _visit_scoped
    visit_method = _visit_scoped
    visit_singleton_method = _visit_scoped

    def _bind_parameters(self, parameters: Node) -> None:
        for index, child in enumerate(parameters.children):
            if not child.is_named:
                continue
            if child.type == "identifier":
                self._bind(node_text(child))
            elif child.type in ("optional_parameter", "keyword_parameter"):
                name = child.child_by_field_name("name")
                value = child.child_by_field_name("value")
                if value is not None:
                    self.visit(value, "value")
                if name is not None:
                    self._bind(node_text(name))
            elif child.type in ("splat_parameter", "hash_splat_parameter", "block_parameter"):
                name = child.child_by_field_name("name")
                if name is not None:
                    self._bind(node_text(name))
            elif child.type == "destructured_parameter":
                self._bind_parameters(child)
            else:
                self.visit(child, parameters.field_name_for_child(index))

    def visit_assignment(self, node: Node) -> None:
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if right is not None:
            self.visit(right, "right")
        if left is not None:
            self._bind_target(left)

    visit_operator_assignment = visit_assignment

    def _bind_target(self, target: Node) -> None:
        if target.type == "identifier":
            self._bind(node_text(target))
        elif target.type in ("left_assignment_list", "destructured_left_assignment", "rest_assignment"):
            for child in target.named_children:
                self._bind_target(child)
        else:
            self.visit(target, "left")

    def visit_for(self, node: Node) -> None:
        pattern = node.child_by_field_name("pattern")
        value = node.child_by_field_name("value")
        body = node.child_by_field_name("body")
        if value is not None:
            self.visit(value, "value")
        if pattern is not None:
            self._bind_target(pattern)
        if body is not None:
            self.visit(body, "body")

    def visit_exception_variable(self, node: Node) -> None:
        for child in node.named_children:
            self._bind_target(child)
