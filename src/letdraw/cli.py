"""CLI for letdraw."""

import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from .config import CanvasConfig, Config


@click.group()
def main():
    """letdraw - Draw pictures from streams of letters."""
    pass


def _chars(stream):
    """Yield a byte stream one character per byte."""
    for byte in iter(lambda: stream.read(1), b""):
        yield chr(byte[0])


def _load_config(config_path: Path | None, **overrides) -> Config:
    """Load the config file (if any) and apply command line overrides."""
    try:
        config = Config.load(config_path) if config_path else Config()
    except (ValidationError, json.JSONDecodeError, TypeError) as e:
        raise click.BadParameter(str(e), param_hint="--config")

    updates = {k: v for k, v in overrides.items() if v is not None}
    if updates.get("line_cap") == "normal":
        updates["line_cap"] = "butt"
    try:
        canvas = CanvasConfig(**{**config.canvas.model_dump(), **updates})
    except ValidationError as e:
        raise click.UsageError(str(e))
    return config.model_copy(update={"canvas": canvas})


input_option = click.option(
    "--in",
    "-i",
    "input_file",
    type=click.File("rb"),
    default="-",
    help="File containing the sequence of characters (default: stdin)",
)
config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON config file; command line options take precedence",
)


@main.command()
@click.option("--out", "-o", "output", required=True, type=Path, help="Output file (.png, .pdf, .svg, .gcode, ...)")
@input_option
@click.option("--width", "-w", type=click.IntRange(min=1), help="Width of image canvas (default: 800)")
@click.option("--height", "-H", type=click.IntRange(min=1), help="Height of image canvas (default: 600)")
@click.option("--origin-x", "-x", type=float, help="X of starting point (default: width/2)")
@click.option("--origin-y", "-y", type=float, help="Y of starting point (default: height/2)")
@click.option("--scale", "-s", type=click.FloatRange(min=0, min_open=True), help="Scale drawing lines (default: 1.0)")
@click.option("--line-width", "-l", type=click.FloatRange(min=0, min_open=True), help="Width of line stroke (default: 2.0)")
@click.option("--line-cap", "-c", type=click.Choice(["normal", "round", "square"]), help="Line end shape (default: normal)")
@click.option("--line-join", "-j", type=click.Choice(["miter", "round", "bevel"]), help="Line corner shape (default: miter)")
@config_option
def draw(output: Path, input_file, config_path: Path | None, **overrides):
    """Interpret characters as drawing instructions and write an image."""
    from .canvas import open_canvas
    from .interpreter import Interpreter

    config = _load_config(config_path, **overrides)
    canvas = open_canvas(config.canvas, output, config.pen)
    result = Interpreter(canvas, config.stack_limit).run(_chars(input_file))

    if not result.ok:
        click.echo(click.style(f"Error: {result.error}", fg="red"), err=True)

    try:
        canvas.finish(output)
    except (OSError, ValueError) as e:
        click.echo(click.style(f"Error writing image ({output}): {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Saved: {output} ({result.segments} segments)")
    if not result.ok:
        sys.exit(1)


@main.command()
@input_option
@config_option
def check(input_file, config_path: Path | None):
    """Run instructions without rendering and report stats."""
    from .canvas import RecordingCanvas
    from .interpreter import Interpreter

    config = _load_config(config_path)
    canvas = RecordingCanvas()
    result = Interpreter(canvas, config.stack_limit).run(_chars(input_file))

    click.echo(f"Characters: {result.consumed}")
    click.echo(f"Commands: {result.commands}")
    click.echo(f"Segments: {result.segments}")
    click.echo(f"Max stack depth: {result.max_depth}")
    bounds = canvas.bounds()
    if bounds:
        min_x, min_y, max_x, max_y = bounds
        click.echo(f"Bounds: x [{min_x:.2f}, {max_x:.2f}] y [{min_y:.2f}, {max_y:.2f}]")

    if result.ok:
        click.echo(click.style("OK", fg="green"))
    else:
        click.echo(click.style(f"Error: {result.error}", fg="red"), err=True)
        sys.exit(1)


@main.command()
def commands():
    """List supported characters."""
    from .interpreter import COMMANDS

    for ch, (_, description) in COMMANDS.items():
        click.echo(f"  {ch} : {description}")
    click.echo("  # : Execute next instruction # times")
    click.echo("# = any single digit number.")
    click.echo("# instruction is cumulative. Ex.: 2d = dd, 3d = ddd, 23d = 6d.")
    click.echo("Stack usage must be balanced (can't pop an empty stack).")
    click.echo("All other characters are ignored.")


if __name__ == "__main__":
    main()
