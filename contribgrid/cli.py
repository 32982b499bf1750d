"""
contribgrid — recover a contribution calendar from a heatmap screenshot.

Usage:
  contribgrid screenshot.png                         # years from settings, JSON to stdout
  contribgrid screenshot.png --years 2022,2023       # one year per grid, top to bottom
  contribgrid screenshot.png --theme green -o out.json
"""

from __future__ import annotations

import argparse
import logging
import sys

from contribgrid.config import settings
from contribgrid.engine.config import PipelineConfig
from contribgrid.engine.context import DetectionStatus
from contribgrid.engine.palette import THEMES
from contribgrid.engine.pipeline import parse_heatmap
from contribgrid.heatmap.loader import ImageDecodeError, load_image
from contribgrid.heatmap.serializer import calendar_to_json

logger = logging.getLogger("contribgrid")

EXIT_OK = 0
EXIT_NO_GRID = 1
EXIT_BAD_INPUT = 2


def parse_years(value: str) -> list[int]:
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"years must be comma-separated integers, got {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contribgrid",
        description="Recover year/week/day activity levels from a contribution heatmap screenshot",
    )
    parser.add_argument("image", help="Screenshot file (PNG, JPEG, ...)")
    parser.add_argument(
        "-y", "--years", type=parse_years, default=None,
        help="Comma-separated target years, one per grid top to bottom (default: %s)"
        % ",".join(str(y) for y in settings.default_years),
    )
    parser.add_argument(
        "-t", "--theme", choices=sorted(THEMES), default=settings.default_theme,
        help="Palette calibration (default: %(default)s)",
    )
    parser.add_argument("-o", "--output", help="Write JSON here instead of stdout")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: %(default)s)")
    parser.add_argument(
        "--log-level", default=settings.contribgrid_log_level,
        help="Logging level (default: %(default)s)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    years = args.years if args.years is not None else list(settings.default_years)
    try:
        pixels = load_image(args.image)
    except (ImageDecodeError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    ctx = parse_heatmap(pixels, years, PipelineConfig(theme=args.theme))
    text = calendar_to_json(ctx.calendar, indent=args.indent)

    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(text + "\n")
        except OSError as e:
            print(f"error: cannot write {args.output}: {e}", file=sys.stderr)
            return EXIT_BAD_INPUT
        logger.info("Wrote %d year(s) to %s", len(ctx.calendar), args.output)
    else:
        print(text)

    status = ctx.status
    if status in (DetectionStatus.NO_REGIONS, DetectionStatus.NO_GRID, DetectionStatus.FAILED):
        print(f"warning: no heatmap grid detected ({status.value})", file=sys.stderr)
        return EXIT_NO_GRID
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
