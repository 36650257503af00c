import json
import logging

import click

from .cli_utils import reconstruct_command_line
from .pipeline import ConversionError, ConverterConfig, PhlexConverter


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--component/--no-component", default=None, help="Wrap the output in a component class")
@click.option("--name", "-n", default=None, type=str, help="Component class name")
@click.option("--parent", default=None, type=str, help="Component superclass")
@click.option("--no-whitespace", is_flag=True, default=False, help="Do not emit `whitespace` between nodes")
@click.option("--svg-param", default=None, type=str, help="Block parameter used inside <svg>")
@click.option("--template-name", default=None, type=str, help="Name of the template method")
@click.option("--blank-lines", is_flag=True, default=False, help="Blank line between every element")
@click.option("--strict", is_flag=True, default=False, help="Fail on malformed ERB instead of degrading")
@click.option("--format", "format_", is_flag=True, default=False, help="Pretty print with stree (syntax_tree gem)")
@click.option("--line-length", default=None, type=int, help="Maximum line length for stree")
@click.option("--generation-comment", is_flag=True, default=False, help="Add a 'Generated by' comment")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.argument("output", default=None, required=False, type=click.Path(dir_okay=False, resolve_path=True))
def erb_to_phlex(
    config,
    component,
    name,
    parent,
    no_whitespace,
    svg_param,
    template_name,
    blank_lines,
    strict,
    format_,
    line_length,
    generation_comment,
    verbose,
    path,
    output,
):
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    with open(path, encoding="utf-8") as f:
        source = f.read()

    if config is not None:
        with open(config, encoding="utf-8") as f:
            config = ConverterConfig.from_dict(json.load(f))
    else:
        config = ConverterConfig()

    # CLI flags override the config file
    if component is not None:
        config.component = component
    if name is not None:
        config.component_name = name
    if parent is not None:
        config.parent_component = parent
    if no_whitespace:
        config.whitespace = False
    if svg_param is not None:
        config.svg_param = svg_param
    if template_name is not None:
        config.template_name = template_name
    if blank_lines:
        config.blank_line_between_children = True
    if strict:
        config.raise_errors = True
    if format_:
        config.formatter.enabled = True
    if line_length is not None:
        config.formatter.line_length = line_length
    if generation_comment:
        config.add_generation_comment = True
    config.__post_init__()

    comment = f"Generated by {reconstruct_command_line(erb_to_phlex)}"

    try:
        out = PhlexConverter(source, config, generation_comment=comment).convert()
    except ConversionError as e:
        raise click.ClickException(str(e)) from e

    if output is None:
        click.echo(out)
    else:
        with open(output, "w", encoding="utf-8") as f:
            f.write(out + "\n")
