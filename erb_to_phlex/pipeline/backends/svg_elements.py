"""
SVG element names.

The markup parser lowercases tag names; Phlex's SVG methods use the
camel-cased names of the SVG vocabulary.
"""

SVG_ELEMENT_NAMES = (
    "altGlyph",
    "altGlyphDef",
    "altGlyphItem",
    "animateColor",
    "animateMotion",
    "animateTransform",
    "clipPath",
    "feBlend",
    "feColorMatrix",
    "feComponentTransfer",
    "feComposite",
    "feConvolveMatrix",
    "feDiffuseLighting",
    "feDisplacementMap",
    "feDistantLight",
    "feDropShadow",
    "feFlood",
    "feFuncA",
    "feFuncB",
    "feFuncG",
    "feFuncR",
    "feGaussianBlur",
    "feImage",
    "feMerge",
    "feMergeNode",
    "feMorphology",
    "feOffset",
    "fePointLight",
    "feSpecularLighting",
    "feSpotLight",
    "feTile",
    "feTurbulence",
    "foreignObject",
    "glyphRef",
    "linearGradient",
    "radialGradient",
    "textPath",
)

SVG_ELEMENTS = {name.lower(): name for name in SVG_ELEMENT_NAMES}


def svg_element_name(name: str) -> str:
    return SVG_ELEMENTS.get(name, name)
