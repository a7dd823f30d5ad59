import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ..config import ViewConfig, load_view_config
from ..exceptions import ViewError
from ..view import View

console = Console(stderr=True)


def parse_vars(pairs: Tuple[str, ...]) -> Dict[str, str]:
    """Parse KEY=VALUE pairs given on the command line."""
    params: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(
                f"'{pair}' is not of the form KEY=VALUE", param_hint="--var"
            )
        params[key] = value
    return params


def build_view(
    config_path: Optional[Path],
    paths: Tuple[Path, ...],
    delimiters: Optional[Tuple[str, str]],
) -> View:
    """Create a view from an optional config file plus command-line overrides."""
    config = load_view_config(config_path) if config_path else ViewConfig()
    view = View.from_config(config)
    for path in paths:
        view.add_path(path)
    if not view.paths:
        view.set_path(".")
    if delimiters:
        view.set_delimiters(*delimiters)
    return view


def write_output(content: bytes, output: Optional[Path]) -> None:
    if output:
        output.write_bytes(content)
        console.print(f"📄 Output saved to {output}")
    else:
        click.echo(content, nl=False)


config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="View configuration file (YAML)",
)
var_option = click.option(
    "--var",
    "-v",
    "variables",
    multiple=True,
    metavar="KEY=VALUE",
    help="Template variable (repeatable)",
)
delimiters_option = click.option(
    "--delimiters",
    nargs=2,
    type=str,
    default=None,
    metavar="LEFT RIGHT",
    help="Expression delimiters, e.g. --delimiters '<%' '%>'",
)
output_option = click.option(
    "--output", "-o", type=click.Path(path_type=Path), help="Write output to a file"
)


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def tplview(verbose: bool) -> None:
    """tplview - render templates from search paths with bound variables."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@tplview.command("render")
@click.argument("template")
@click.option(
    "--path",
    "-p",
    "paths",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Template search directory (repeatable, searched in order)",
)
@var_option
@delimiters_option
@config_option
@output_option
def render(
    template: str,
    paths: Tuple[Path, ...],
    variables: Tuple[str, ...],
    delimiters: Optional[Tuple[str, str]],
    config_path: Optional[Path],
    output: Optional[Path],
) -> None:
    """Render a template file found in the search paths."""
    params = parse_vars(variables)
    try:
        view = build_view(config_path, paths, delimiters)
        content = view.parse(template, params)
    except (ViewError, ValueError) as e:
        console.print(f"❌ [red]Error rendering {escape(template)}:[/red] {escape(str(e))}")
        raise click.Abort()

    write_output(content, output)


@tplview.command("render-content")
@click.argument("text")
@var_option
@delimiters_option
@config_option
@output_option
def render_content(
    text: str,
    variables: Tuple[str, ...],
    delimiters: Optional[Tuple[str, str]],
    config_path: Optional[Path],
    output: Optional[Path],
) -> None:
    """Render template text given as an argument, or '-' to read stdin."""
    if text == "-":
        text = click.get_text_stream("stdin").read()

    params = parse_vars(variables)
    try:
        view = build_view(config_path, (), delimiters)
        content = view.parse_content(text, params)
    except (ViewError, ValueError) as e:
        console.print(f"❌ [red]Error rendering template text:[/red] {escape(str(e))}")
        raise click.Abort()

    write_output(content, output)


if __name__ == "__main__":
    tplview()
