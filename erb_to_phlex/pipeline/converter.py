"""
Pipeline orchestrator.

Coordinates all pipeline phases to turn an ERB template into Phlex code.
"""

from __future__ import annotations

import logging

from .analyzer import RubyAnalyzer
from .backends import ComponentWrapper, GeneratedDocument, TemplateGenerator
from .codec import ErbTransformer
from .config import ConverterConfig
from .formatters import SyntaxTreeFormatter
from .markup import parse_markup

logger = logging.getLogger(__name__)


class PhlexConverter:
    """
    Converts one ERB template to Phlex.

    Pipeline phases:
    1. Transform: encode ERB so the markup parser leaves it alone
    2. Parse: markup tree with ERB fragments as comments
    3. Analyze: classify the names used by the embedded Ruby
    4. Generate: Phlex calls for the tree
    5. Wrap: optional component class
    6. Format: optional pretty printing with stree
    """

    def __init__(self, source: str, config: ConverterConfig | None = None, generation_comment: str | None = None):
        """
        Initialize the converter.

        Args:
            source: ERB template source
            config: Conversion configuration
            generation_comment: Comment placed above the component when enabled
        """
        self.source = source or ""
        self.config = config or ConverterConfig()
        self.generation_comment = generation_comment
        self.document: GeneratedDocument | None = None

    def convert(self) -> str:
        """
        Run the full pipeline.

        Returns:
            Generated Ruby source

        Raises:
            MarkupParseError: If the template cannot be parsed as markup, in any mode
            ConversionError: In strict mode, for any other conversion failure
        """
        transformed = ErbTransformer(self.source).transform()
        markup = parse_markup(transformed)

        classification = RubyAnalyzer(self.config).analyze(markup)

        self.document = TemplateGenerator(self.config, classification).generate(markup)
        code = self.document.body

        if self.config.component:
            comment = self.generation_comment if self.config.add_generation_comment else None
            code = ComponentWrapper(self.config).wrap(self.document, comment)

        if self.config.formatter.enabled:
            logger.debug(f"BEFORE Formatter:\n{code}")
            formatter = SyntaxTreeFormatter(self.config.formatter.command)
            code = formatter.format(code, self.config.formatter, strict=self.config.raise_errors)

        return code.strip()


def convert(source: str, config: ConverterConfig | None = None, **overrides) -> str:
    """
    Convert an ERB template to Phlex.

    Args:
        source: ERB template source
        config: Conversion configuration, defaults to ConverterConfig()
        **overrides: Config fields to override, e.g. ``component=True``

    Returns:
        Generated Ruby source
    """
    if config is None:
        config = ConverterConfig.from_dict(overrides)
    elif overrides:
        config = ConverterConfig.from_dict({**config.to_dict(), **overrides})
    return PhlexConverter(source, config).convert()
