"""
Configuration for the ERB to Phlex conversion pipeline.

A single ConverterConfig value is threaded through every stage; there is
no process-wide default instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..utils import safe_constant_name


@dataclass
class FormatterConfig:
    """Configuration for the post-processing pretty printer."""

    # Whether formatting is enabled
    enabled: bool = False

    # Maximum line width handed to the formatter
    line_length: int = 80

    # Executable of the syntax_tree gem
    command: str = "stree"


@dataclass
class ConverterConfig:
    """Configuration options for template conversion."""

    # Wrap the generated body in a component class
    component: bool = False

    # Name of the generated component class
    component_name: str = "Component"

    # Superclass of the generated component
    parent_component: str = "Phlex::HTML"

    # Emit `whitespace` for whitespace-only text between nodes
    whitespace: bool = True

    # Block parameter used for the SVG subtree (`svg do |s|`)
    svg_param: str = "s"

    # Name of the method holding the template body
    template_name: str = "view_template"

    # Propagate parse/decode/format errors instead of degrading
    raise_errors: bool = False

    # Separate every emitted element with a blank line, not only top-level ones
    blank_line_between_children: bool = False

    # Add a "Generated by" comment above the component
    add_generation_comment: bool = False

    # Formatter configuration
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    def __post_init__(self):
        self.component_name = safe_constant_name(self.component_name)
        self.parent_component = safe_constant_name(self.parent_component)

    @property
    def max_line_length(self) -> int:
        return self.formatter.line_length

    @staticmethod
    def from_dict(d: dict) -> ConverterConfig:
        """Create a config from a dictionary."""
        config = ConverterConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "max_line_length":
                config.formatter.line_length = v
            elif hasattr(config, k):
                setattr(config, k, v)
        config.__post_init__()
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "component": self.component,
            "component_name": self.component_name,
            "parent_component": self.parent_component,
            "whitespace": self.whitespace,
            "svg_param": self.svg_param,
            "template_name": self.template_name,
            "raise_errors": self.raise_errors,
            "blank_line_between_children": self.blank_line_between_children,
            "add_generation_comment": self.add_generation_comment,
            "formatter": {
                "enabled": self.formatter.enabled,
                "line_length": self.formatter.line_length,
                "command": self.formatter.command,
            },
        }
