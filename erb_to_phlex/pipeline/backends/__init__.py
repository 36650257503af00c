"""
Code generation backends.

Contains the Phlex template generator and the component wrapper.
"""

from __future__ import annotations

from .component import ComponentWrapper
from .plain_buffer import CodeSegment, PlainOutputBuffer, TextSegment
from .template_generator import GeneratedDocument, TemplateGenerator, generate

__all__ = [
    "CodeSegment",
    "ComponentWrapper",
    "GeneratedDocument",
    "PlainOutputBuffer",
    "TemplateGenerator",
    "TextSegment",
    "generate",
]
