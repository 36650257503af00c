"""
Names provided by Phlex and phlex-rails.

These never become component parameters or helper registrations. Rails
helpers are recorded as the phlex-rails module that has to be included.
"""

from __future__ import annotations

import re

from ...utils import snake_to_pascal_case

RAILS_HELPERS_NAMESPACE = "Phlex::Rails::Helpers"

ROUTES_MODULE = f"{RAILS_HELPERS_NAMESPACE}::Routes"

# phlex-rails helpers that write to the output buffer themselves
RAILS_OUTPUT_HELPERS = (
    "audio_tag",
    "auto_discovery_link_tag",
    "button_tag",
    "button_to",
    "check_box_tag",
    "csp_meta_tag",
    "csrf_meta_tags",
    "favicon_link_tag",
    "form_for",
    "form_tag",
    "form_with",
    "hidden_field_tag",
    "image_tag",
    "javascript_importmap_tags",
    "javascript_include_tag",
    "javascript_tag",
    "label_tag",
    "link_to",
    "link_to_if",
    "link_to_unless",
    "mail_to",
    "preload_link_tag",
    "select_tag",
    "simple_format",
    "stylesheet_link_tag",
    "submit_tag",
    "text_area_tag",
    "text_field_tag",
    "turbo_frame_tag",
    "turbo_stream_from",
    "video_tag",
)

# phlex-rails helpers that only return a value
RAILS_VALUE_HELPERS = (
    "asset_path",
    "asset_url",
    "class_names",
    "content_for",
    "dom_class",
    "dom_id",
    "image_path",
    "l",
    "number_to_currency",
    "number_with_delimiter",
    "options_for_select",
    "pluralize",
    "t",
    "time_ago_in_words",
    "truncate",
    "url_for",
)

# Module names that do not follow plain PascalCase
_MODULE_NAME_OVERRIDES = {
    "asset_url": "AssetURL",
    "csp_meta_tag": "CSPMetaTag",
    "csrf_meta_tags": "CSRFMetaTags",
    "dom_class": "DOMClass",
    "dom_id": "DOMID",
    "url_for": "URLFor",
}

ROUTE_HELPER_PATTERNS = (
    re.compile(r"^\w+_path$"),
    re.compile(r"^\w+_url$"),
)

# Methods every Phlex component already has
PHLEX_BUILTINS = frozenset(
    {
        "capture",
        "comment",
        "doctype",
        "flush",
        "format_object",
        "helpers",
        "plain",
        "raw",
        "render",
        "safe",
        "tag",
        "unsafe_raw",
        "vanish",
        "whitespace",
        "yield_content",
    }
)

# Reserved words; a lone clause fragment such as ``<% end %>`` parses as an identifier
RUBY_KEYWORDS = frozenset(
    {
        "BEGIN",
        "END",
        "__ENCODING__",
        "__FILE__",
        "__LINE__",
        "alias",
        "and",
        "begin",
        "break",
        "case",
        "class",
        "def",
        "defined?",
        "do",
        "else",
        "elsif",
        "end",
        "ensure",
        "false",
        "for",
        "if",
        "in",
        "module",
        "next",
        "nil",
        "not",
        "or",
        "redo",
        "rescue",
        "retry",
        "return",
        "self",
        "super",
        "then",
        "true",
        "undef",
        "unless",
        "until",
        "when",
        "while",
        "yield",
    }
)

PHLEX_OUTPUT_METHODS = frozenset(
    {
        "comment",
        "doctype",
        "plain",
        "raw",
        "render",
        "tag",
        "unsafe_raw",
        "whitespace",
        "yield_content",
    }
)


def rails_helper_module(name: str) -> str | None:
    """
    Module to include for a Rails helper name.

    Args:
        name: Method name as written in the template

    Returns:
        Fully qualified phlex-rails module, or None when name is not a known helper
    """
    if name in RAILS_OUTPUT_HELPERS or name in RAILS_VALUE_HELPERS:
        module = _MODULE_NAME_OVERRIDES.get(name, snake_to_pascal_case(name))
        return f"{RAILS_HELPERS_NAMESPACE}::{module}"
    if is_route_helper(name):
        return ROUTES_MODULE
    return None


def is_route_helper(name: str) -> bool:
    return any(pattern.match(name) for pattern in ROUTE_HELPER_PATTERNS)


def is_output_method(name: str) -> bool:
    """True for calls that render by themselves and must not be wrapped in `plain`."""
    return name in PHLEX_OUTPUT_METHODS or name in RAILS_OUTPUT_HELPERS
