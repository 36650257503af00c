"""
Base class for code formatters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import FormatterConfig


class Formatter(ABC):
    """Abstract base class for code formatters."""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig, strict: bool = False) -> str:
        """
        Format the given code.

        Args:
            code: The source code to format
            config: Formatter configuration
            strict: Raise FormatError instead of returning the code unchanged

        Returns:
            Formatted code
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the formatter is available (its executable is installed).

        Returns:
            True if the formatter can be used
        """
