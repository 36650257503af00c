import pytest

from erb_to_phlex.utils import (
    is_blank,
    remove_prefix,
    safe_constant_name,
    snake_to_pascal_case,
    squish,
    underscore,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("link_to", "LinkTo"),
        ("javascript_include_tag", "JavascriptIncludeTag"),
        ("t", "T"),
        ("turbo-frame", "TurboFrame"),
        ("", ""),
    ],
)
def test_snake_to_pascal_case(text, expected):
    assert snake_to_pascal_case(text) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("data-controller", "data_controller"),
        ("viewBox", "view_box"),
        ("template-tag", "template_tag"),
        ("class", "class"),
        ("aria-label", "aria_label"),
    ],
)
def test_underscore(text, expected):
    assert underscore(text) == expected


def test_squish():
    assert squish("  a \n\t b  ") == "a b"
    assert squish("\u00a0") == "\u00a0"


def test_is_blank():
    assert is_blank("")
    assert is_blank(" \n\t ")
    assert not is_blank("\u00a0")
    assert not is_blank(" a ")


def test_remove_prefix():
    assert remove_prefix("data-erb-class", "data-erb-") == "class"
    assert remove_prefix("class", "data-erb-") == "class"


def test_safe_constant_name():
    assert safe_constant_name("1Component") == "A1Component"
    assert safe_constant_name("Component") == "Component"
