"""Command-line interface.

Usage:
    tagcloud render <tags.txt> -o cloud.svg [options]
    tagcloud validate <tags.txt>
"""

from __future__ import annotations

import logging
import random
from pathlib import Path

import click

from tagcloud import __version__
from tagcloud.errors import TagCloudError
from tagcloud.layout import constants
from tagcloud.layout.engine import TagCloud
from tagcloud.options import BoundaryPolicy, CloudOptions
from tagcloud.parser.tags import parse_tags
from tagcloud.render.svg import render_svg
from tagcloud.themes import THEMES


def _read_tags(path: Path):
    try:
        return parse_tags(path.read_text())
    except TagCloudError as exc:
        raise click.ClickException(f"{path}: {exc}") from exc


@click.group()
@click.version_option(__version__, prog_name="tagcloud")
@click.option("-v", "--verbose", is_flag=True, help="Log layout progress.")
def cli(verbose: bool) -> None:
    """Lay out weighted tags as a non-overlapping cloud."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("tags_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Output file; .png is rendered through cairosvg, anything else is SVG.",
)
@click.option("--mask", "mask_source", type=click.Path(exists=True, dir_okay=False), help="Silhouette image.")
@click.option("--width", type=int, default=constants.WIDTH, show_default=True)
@click.option("--height", type=int, default=constants.HEIGHT, show_default=True)
@click.option("--cell-size", type=float, default=constants.CELL_SIZE, show_default=True)
@click.option("--opacity-threshold", type=int, default=constants.OPACITY_THRESHOLD, show_default=True)
@click.option("--luminance-threshold", type=int, default=constants.LUMINANCE_THRESHOLD, show_default=True)
@click.option("--min-font-size", type=int, default=constants.MIN_FONT_SIZE, show_default=True)
@click.option("--max-font-size", type=int, default=constants.MAX_FONT_SIZE, show_default=True)
@click.option("--angle-from", type=float, default=constants.ANGLE_FROM, show_default=True)
@click.option("--angle-to", type=float, default=constants.ANGLE_TO, show_default=True)
@click.option("--angle-count", type=int, default=constants.ANGLE_COUNT, show_default=True)
@click.option("--font", "font_family", default=constants.FONT_FAMILY, show_default=True,
              help="Font family name or path to a font file.")
@click.option(
    "--boundary",
    "boundary_policy",
    type=click.Choice([p.value for p in BoundaryPolicy]),
    default=constants.BOUNDARY_POLICY,
    show_default=True,
)
@click.option("--padding", type=int, default=constants.PADDING, show_default=True)
@click.option("--theme", type=click.Choice(sorted(THEMES)), default="random", show_default=True)
@click.option("--seed", type=int, default=None, help="Seed for angles, directions and colours.")
@click.option("--dump-grid", is_flag=True, help="Print the final occupancy grid.")
def render(
    tags_file: Path,
    output: Path,
    theme: str,
    seed: int | None,
    dump_grid: bool,
    **option_values,
) -> None:
    """Lay out TAGS_FILE and write the rendered cloud."""
    tags = _read_tags(tags_file)
    rng = random.Random(seed)
    try:
        options = CloudOptions(**option_values)
        cloud = TagCloud(options, rng=rng)
        cloud.prepare()
        results = cloud.draw(tags)
    except TagCloudError as exc:
        raise click.ClickException(str(exc)) from exc

    svg = render_svg(results, options, THEMES[theme], rng)
    if output.suffix.lower() == ".png":
        try:
            import cairosvg
        except ImportError:
            raise click.ClickException(
                "PNG output needs cairosvg (pip install tagcloud[png])"
            ) from None
        cairosvg.svg2png(bytestring=svg.encode(), write_to=str(output))
    else:
        output.write_text(svg)

    placed = sum(1 for r in results if r.placed)
    click.echo(f"Placed {placed}/{len(results)} tags -> {output}")
    for r in results:
        if not r.placed:
            click.echo(f"  unplaced: {r.text} ({r.font_size}px)")
    if dump_grid and cloud.session is not None:
        click.echo(cloud.session.grid.to_text(filled="#", empty="."))


@cli.command()
@click.argument("tags_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(tags_file: Path) -> None:
    """Check that TAGS_FILE parses."""
    tags = _read_tags(tags_file)
    click.echo(f"{tags_file}: {len(tags)} tags")
