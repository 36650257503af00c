"""
CLI utilities for command line reconstruction and introspection.
"""

from pathlib import Path

import click

PROGRAM_NAME = "erb_to_phlex"


def reconstruct_command_line(click_command: click.Command, program_name: str = PROGRAM_NAME) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection
        program_name: Name the command line starts with

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context
        return program_name

    if not cli_args:
        return program_name

    arguments = []
    options = []

    for param in click_command.params:
        if param.name not in cli_args:
            continue

        value = cli_args[param.name]
        if value is None or value == "":
            continue

        # Paths are shown by file name only
        if isinstance(value, (str, Path)):
            path_obj = Path(str(value))
            formatted_value = path_obj.name if path_obj.exists() else str(value)
        else:
            formatted_value = str(value)

        if isinstance(param, click.Argument):
            arguments.append(formatted_value)
        elif isinstance(param, click.Option):
            if value == param.default:
                continue

            if param.is_flag:
                # --flag/--no-flag pairs: pick the spelling matching the value
                flag = param.opts[0] if value else (param.secondary_opts[0] if param.secondary_opts else param.opts[0])
                options.append(flag)
            else:
                flag = param.opts[0] if param.opts else f"--{param.name}"
                options.extend([flag, formatted_value])

    return " ".join([program_name] + arguments + options)
