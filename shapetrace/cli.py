import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import ShapetraceConfig, default_config_path
from .errors import ShapetraceError
from .geometry.primitives import shapes_to_dicts
from .geometry.visualize import shapes_image_path
from .logging_setup import setup_logging
from .mapfile import create_backup, inspect_map
from .pipeline.shape_tracer import ShapeTracer
from .raster import load_image

logger = logging.getLogger(__name__)

ABOUT = "Detect geometric shapes in raster images and trace them onto an overlay."

EPILOG = f"""\
Argument values are processed in the following order, using the last processed value:

  1. config file (e.g. {default_config_path()})
  2. environment variable (e.g. SHAPETRACE_MIN_AREA=250)
  3. explicit argument (e.g. --min-area 250)
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shapetrace",
        description=ABOUT,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s v{__version__}")
    parser.add_argument("-c", "--config", type=Path, default=None, metavar="FILE",
                        help=f"Custom config file [default: {default_config_path()}]")
    parser.add_argument("-v", "--verbose", default=None, metavar="LEVEL",
                        help="Log level: error, warn, info, debug, trace [default: info]")
    parser.add_argument("mapfile", nargs="?", type=Path, default=None,
                        help="A .dungeondraft_map file to inspect (a backup is written once)")
    parser.add_argument("-i", "--image", action="append", type=Path, default=[], metavar="FILE",
                        help="Image to analyze; may be given more than once")
    parser.add_argument("--trace", action="store_true",
                        help="Also write <image>.shapes.png with the detected contours")
    parser.add_argument("--json", action="store_true", help="Print shapes as JSON")
    parser.add_argument("--canny-low", type=float, default=None, help="Lower Canny threshold [50]")
    parser.add_argument("--canny-high", type=float, default=None, help="Upper Canny threshold [150]")
    parser.add_argument("--aperture", type=int, default=None, help="Sobel aperture for Canny [3]")
    parser.add_argument("--l2-gradient", action="store_true", default=None,
                        help="Use the L2 norm for gradient magnitude")
    parser.add_argument("--min-area", type=float, default=None,
                        help="Keep contours with area strictly greater than this [100]")
    parser.add_argument("--epsilon-factor", type=float, default=None,
                        help="Approximation epsilon as a fraction of the perimeter [0.04]")
    return parser


def _inspect_mapfile(path: Path) -> None:
    logger.debug("Reading %s", path)
    map_file = inspect_map(path)
    if create_backup(path):
        logger.info("Created backup for %s", path)
    print(f"{path}: keys {', '.join(map_file.top_level_keys())}")


def _report(image_path: Path, tracer: ShapeTracer, trace: bool, as_json: bool) -> None:
    logger.debug("Analyzing %s", image_path)
    image = load_image(image_path)
    shapes = tracer.analyze_image(image)
    overlay = tracer.write_overlay(image, shapes, shapes_image_path(image_path)) if trace else None

    if as_json:
        payload = {"image": str(image_path), "shapes": shapes_to_dicts(shapes)}
        if overlay is not None:
            payload["overlay"] = str(overlay)
        print(json.dumps(payload, indent=2))
        return

    for shape in shapes:
        box = shape.bounding_box
        print(
            f"Shape detected at ({box.x}, {box.y}) with width: {box.width} "
            f"and height {box.height} ({shape.label})"
        )
    if overlay is not None:
        print(f"Saved: {overlay}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ShapetraceConfig.load(
            config_path=args.config,
            overrides={
                "verbose": args.verbose,
                "canny_low": args.canny_low,
                "canny_high": args.canny_high,
                "aperture": args.aperture,
                "l2_gradient": args.l2_gradient,
                "min_area": args.min_area,
                "epsilon_factor": args.epsilon_factor,
            },
        )
    except ShapetraceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    setup_logging(config.verbose)
    logger.debug("%r", config)

    if args.mapfile is None and not args.image:
        parser.print_usage(sys.stderr)
        return 2

    tracer = ShapeTracer(config)
    try:
        if args.mapfile is not None:
            _inspect_mapfile(args.mapfile)
        for image in args.image:
            _report(image, tracer, args.trace, args.json)
    except ShapetraceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
