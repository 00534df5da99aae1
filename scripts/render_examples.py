#!/usr/bin/env python3
"""Batch render every examples/*.tags file to SVG and PNG.

Outputs go to /tmp/tagcloud_renders/.

Usage:
    python scripts/render_examples.py [--seed N] [--theme NAME]
"""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from tagcloud.layout.engine import TagCloud  # noqa: E402
from tagcloud.options import CloudOptions  # noqa: E402
from tagcloud.parser.tags import parse_tags  # noqa: E402
from tagcloud.render.svg import render_svg  # noqa: E402
from tagcloud.themes import THEMES  # noqa: E402

OUTPUT_DIR = Path("/tmp/tagcloud_renders")
EXAMPLES_DIR = project_root / "examples"


def render_file(
    tags_path: Path,
    output_dir: Path,
    *,
    seed: int,
    theme_name: str,
) -> tuple[str, list[str]]:
    """Parse, lay out and render a .tags file to SVG (and optionally PNG).

    Returns (name, list_of_issues).  Unplaced tags are reported as issues
    but do not fail the file.
    """
    name = tags_path.stem
    issues: list[str] = []

    try:
        tags = parse_tags(tags_path.read_text())
    except Exception as e:
        return name, [f"PARSE ERROR: {e}"]

    # A silhouette next to the tag file (same stem, .png) constrains the layout
    mask_path = tags_path.with_suffix(".png")
    options = CloudOptions(mask_source=str(mask_path) if mask_path.exists() else None)
    rng = random.Random(seed)

    try:
        cloud = TagCloud(options, rng=rng)
        cloud.prepare()
        results = cloud.draw(tags)
    except Exception as e:
        return name, [f"LAYOUT ERROR: {e}"]

    issues.extend(f"unplaced: {r.text}" for r in results if not r.placed)

    svg_str = render_svg(results, options, THEMES[theme_name], rng)
    svg_path = output_dir / f"{name}.svg"
    svg_path.write_text(svg_str)

    # Try PNG conversion via cairosvg (optional)
    try:
        import cairosvg

        png_path = output_dir / f"{name}.png"
        cairosvg.svg2png(bytestring=svg_str.encode(), write_to=str(png_path), scale=2)
    except ImportError:
        issues.append("cairosvg not available, skipping PNG")
    except Exception as e:
        issues.append(f"PNG conversion error: {e}")

    return name, issues


def main():
    parser = argparse.ArgumentParser(description="Batch render all example tag lists")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--theme", choices=sorted(THEMES), default="light")
    args = parser.parse_args()

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    all_files = sorted(EXAMPLES_DIR.glob("*.tags"))
    print(f"Rendering {len(all_files)} files to {OUTPUT_DIR}/")
    print()

    max_name_len = max((len(f.stem) for f in all_files), default=0)
    any_errors = False

    for tags_path in all_files:
        name, issues = render_file(
            tags_path, OUTPUT_DIR, seed=args.seed, theme_name=args.theme
        )
        status = "OK" if not issues else "ISSUES"
        if any("ERROR" in i for i in issues):
            status = "FAIL"
            any_errors = True

        print(f"  {name:<{max_name_len}}  [{status}]")
        for issue in issues:
            print(f"    - {issue}")

    print(f"\nOutputs in: {OUTPUT_DIR}/")

    if any_errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
