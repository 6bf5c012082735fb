"""CLI entry point for pi-mdterm. Uses Click for argument parsing."""

from __future__ import annotations

import logging

import click

from pi.mdterm.ansi import ansi_to_styled_text
from pi.mdterm.config import load_config
from pi.mdterm.renderer import render_markdown
from pi.mdterm.theme import available_themes, load_theme, load_theme_file

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.option(
    "--log-level",
    default="warning",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging verbosity (written to stderr)",
)
@click.pass_context
def main(ctx, log_level):
    """Render markdown for the terminal."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.argument("file", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--width", "-w", type=click.IntRange(min=1), default=None, help="Terminal columns")
@click.option("--theme", "-t", "theme_name", default=None, help="Bundled theme name")
@click.option(
    "--theme-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Theme JSON file (overrides --theme)",
)
@click.option("--mode", type=click.Choice(["dark", "light"]), default=None, help="Theme variant")
@click.option("--no-color", is_flag=True, help="Plain text output, no escape codes")
def render(file, width, theme_name, theme_file, mode, no_color):
    """Render FILE (or stdin) as styled terminal text."""
    config = load_config()
    cols = width or config.cols
    mode = mode or config.mode
    colors = config.colors and not no_color

    theme = None
    if colors:
        if theme_file:
            try:
                theme = load_theme_file(theme_file, mode)
            except ValueError as e:
                raise click.BadParameter(str(e), param_hint="--theme-file") from e
        else:
            theme = load_theme(theme_name or config.theme, mode)

    text = file.read()
    logger.debug("Rendering %d characters (cols=%s, colors=%s)", len(text), cols, colors)
    # Colour decisions are made by config / --no-color, not by click's tty check.
    click.echo(render_markdown(text, cols=cols, colors=colors, theme=theme), nl=False, color=colors)


@main.command()
def themes():
    """List bundled themes."""
    config = load_config()
    for name in available_themes():
        marker = "*" if name == config.theme else " "
        click.echo(f"{marker} {name}")


@main.command()
@click.argument("file", type=click.File("r", encoding="utf-8"), default="-")
def strip(file):
    """Print FILE (or stdin) with ANSI styling removed."""
    click.echo(ansi_to_styled_text(file.read()).plain_text, nl=False)


if __name__ == "__main__":
    main()
