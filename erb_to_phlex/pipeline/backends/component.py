"""
Component class wrapper for a generated template body.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import jinja2

from ..config import ConverterConfig
from .template_generator import GeneratedDocument

logger = logging.getLogger(__name__)


def _ruby_symbol(name: str) -> str:
    return f":{name}"


def _ruby_keyword(name: str) -> str:
    return f"{name}:"


class ComponentWrapper:
    """Wraps a generated body in a Phlex component class declaration."""

    # Template directory name
    TEMPLATE_LANG: str = "ruby"

    def __init__(self, config: ConverterConfig | None = None):
        self.config = config or ConverterConfig()
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.jinja_env.filters["ruby_symbol"] = _ruby_symbol
        self.jinja_env.filters["ruby_keyword"] = _ruby_keyword

        self.component_template = self.jinja_env.get_template("component.rb.jinja2")

    def wrap(self, document: GeneratedDocument, generation_comment: str | None = None) -> str:
        """
        Render the component declaration around a generated body.

        Args:
            document: Generator output
            generation_comment: Optional comment placed above the class

        Returns:
            Ruby source of the component class
        """
        context = self._prepare_context(document, generation_comment)
        logger.debug(f"Component context: {context}")
        return self.component_template.render(**context)

    def _prepare_context(self, document: GeneratedDocument, generation_comment: str | None) -> dict[str, Any]:
        classification = document.classification
        return {
            "generation_comment": generation_comment,
            "name": self.config.component_name,
            "parent": self.config.parent_component,
            "includes": classification.registered_includes,
            "output_helpers": classification.registered_output_helpers,
            "value_helpers": classification.registered_value_helpers,
            "accessors": classification.accessors,
            "parameters": classification.parameters,
            "template_name": self.config.template_name,
            "body": document.body.strip("\n"),
        }
