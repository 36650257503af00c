#!/usr/bin/env python3

import click
import pytest
from click.testing import CliRunner

from erb_to_phlex.cli_utils import reconstruct_command_line
from erb_to_phlex.erb_to_phlex import erb_to_phlex


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Without an active Click context the program name is returned"""
        assert reconstruct_command_line(erb_to_phlex) == "erb_to_phlex"

    def test_reconstruct_command_line_with_context(self, tmp_path):
        """Arguments by file name, then options that differ from their defaults"""
        template = tmp_path / "card.html.erb"
        template.write_text("<p></p>")

        @click.command()
        @click.option("--name", "-n", default=None)
        @click.option("--component/--no-component", default=None)
        @click.option("--strict", is_flag=True, default=False)
        @click.argument("path", type=click.Path(exists=True))
        def command(name, component, strict, path):
            click.echo(reconstruct_command_line(command))

        result = CliRunner().invoke(command, ["--no-component", "-n", "Card", str(template)])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "erb_to_phlex card.html.erb --name Card --no-component"

    def test_program_name(self):
        assert reconstruct_command_line(erb_to_phlex, program_name="erb2phlex") == "erb2phlex"


if __name__ == "__main__":
    pytest.main([__file__])
