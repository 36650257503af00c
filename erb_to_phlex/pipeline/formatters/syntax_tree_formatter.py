"""
syntax_tree formatter for Ruby code.
"""

from __future__ import annotations

import logging
import re
import subprocess
import tempfile
from pathlib import Path

from ..config import FormatterConfig
from ..errors import FormatError
from .base import Formatter

logger = logging.getLogger(__name__)

# A bare `yield` outside a method body is rejected by the Ruby parser
_YIELD = re.compile(r"\byield\b")
_YIELD_PLACEHOLDER = "__yield__"
_YIELD_PLACEHOLDER_PATTERN = re.compile(rf"\b{_YIELD_PLACEHOLDER}\b")


class SyntaxTreeFormatter(Formatter):
    """Formatter using `stree format` from the syntax_tree gem."""

    def __init__(self, command: str = "stree"):
        self.command = command
        self._available = None

    def is_available(self) -> bool:
        """Check if stree is installed."""
        if self._available is None:
            try:
                result = subprocess.run(
                    [self.command, "version"],
                    capture_output=True,
                    text=True,
                    timeout=5,
                )
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
        return self._available

    def format(self, code: str, config: FormatterConfig, strict: bool = False) -> str:
        """
        Format Ruby code using stree.

        Args:
            code: Ruby source code to format
            config: Formatter configuration
            strict: Raise FormatError instead of returning the code unchanged

        Returns:
            Formatted code

        Raises:
            FormatError: In strict mode, when stree is missing or rejects the code
        """
        if not self.is_available():
            if strict:
                raise FormatError(f"{self.command} is not installed. Install with: gem install syntax_tree")
            logger.warning(f"{self.command} is not installed, leaving output unformatted")
            return code

        protected = _YIELD.sub(_YIELD_PLACEHOLDER, code)

        # stree format works on files and prints the result
        with tempfile.NamedTemporaryFile(mode="w", suffix=".rb", delete=False, encoding="utf-8") as f:
            f.write(protected)
            temp_path = Path(f.name)

        try:
            cmd = [self.command, "format"]
            if config.line_length:
                cmd.append(f"--print-width={config.line_length}")
            cmd.append(str(temp_path))

            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=30,
            )
        except subprocess.SubprocessError as e:
            if strict:
                raise FormatError(f"{self.command} failed: {e}") from e
            logger.warning(f"{self.command} failed, leaving output unformatted: {e}")
            return code
        finally:
            temp_path.unlink(missing_ok=True)

        if result.returncode != 0:
            if strict:
                raise FormatError(f"{self.command} rejected the generated code: {result.stderr.strip()}")
            logger.warning(f"{self.command} rejected the generated code, leaving output unformatted")
            return code

        return _YIELD_PLACEHOLDER_PATTERN.sub("yield", result.stdout)
