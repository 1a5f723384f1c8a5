"""Command-line interface for png2svg."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from PIL import Image

from .options import options_to_json, parse_mode
from .pipeline import RENDERERS, Pipeline
from .svg import save_svg
from .types import OptionsError, VectorizeOptions

logger = logging.getLogger(__name__)


def _mode_arg(token: str):
    try:
        return parse_mode(token)
    except OptionsError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    defaults = VectorizeOptions()
    parser = argparse.ArgumentParser(
        prog="png2svg",
        description="Convert PNG assets into SVGs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  png2svg logo.png -o logo.svg
  png2svg poster.png -o poster.svg --mode poster -c 16 -d 0.9
  png2svg sprite.png --mode pixel-art -t 0.5 > sprite.svg
        """,
    )

    parser.add_argument("input", type=Path, help="Path to the input image")

    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Path to write the SVG output (default: standard output)",
    )

    parser.add_argument(
        "-c",
        "--colors",
        type=int,
        default=defaults.colors,
        help=f"Number of colors to quantize the image to, 2-64 (default: {defaults.colors})",
    )

    parser.add_argument(
        "-d",
        "--detail",
        type=float,
        default=defaults.detail,
        help=f"Detail level, 0.0-1.0 (default: {defaults.detail})",
    )

    parser.add_argument(
        "-s",
        "--smoothness",
        type=float,
        default=defaults.smoothness,
        help=f"Smoothness factor for curves, 0.0-1.0 (default: {defaults.smoothness})",
    )

    parser.add_argument(
        "-t",
        "--tolerance",
        type=float,
        default=defaults.tolerance,
        help=f"Path simplification tolerance, 0.1-10.0, higher = looser (default: {defaults.tolerance})",
    )

    parser.add_argument(
        "--mode",
        type=_mode_arg,
        default=defaults.mode,
        help="Rendering mode: logo, poster or pixel (aliases: pixelart, pixel-art)",
    )

    parser.add_argument(
        "--renderer",
        choices=list(RENDERERS),
        default="contours",
        help="contours (traced paths, default) or runs (one rect per row run)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print the parsed options, log pipeline stages and save stage images next to the output",
    )

    return parser


def save_debug_stages(pipeline: Pipeline, output_path: Path) -> None:
    """Save debug stage images.

    Args:
        pipeline: Pipeline instance with debug_stages
        output_path: Base output path for debug images
    """
    debug_dir = output_path.parent / f"{output_path.stem}_debug"
    debug_dir.mkdir(exist_ok=True)

    for stage_name, stage_image in pipeline.debug_stages:
        debug_file = debug_dir / f"{stage_name}.png"
        Image.fromarray(stage_image).save(debug_file)
        logger.info(f"Saved debug stage: {debug_file}")


def format_error(error: BaseException) -> str:
    """Error message followed by its chain of causes."""
    lines = [f"Error: {error}"]
    cause = _cause_of(error)
    while cause is not None:
        lines.append(f"  caused by: {cause}")
        cause = _cause_of(cause)
    return "\n".join(lines)


def _cause_of(error: BaseException) -> Optional[BaseException]:
    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__


def main(args: Optional[list] = None) -> int:
    """Main entry point for CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.debug else logging.WARNING,
        format="[png2svg] %(levelname)s %(name)s: %(message)s",
    )

    try:
        options = VectorizeOptions(
            colors=parsed.colors,
            detail=parsed.detail,
            smoothness=parsed.smoothness,
            tolerance=parsed.tolerance,
            mode=parsed.mode,
        ).validate()

        if parsed.debug:
            print(f"[png2svg] options: {options_to_json(options)}", file=sys.stderr)

        try:
            data = parsed.input.read_bytes()
        except OSError as e:
            raise OSError(f"failed to read input file: {parsed.input}") from e

        pipeline = Pipeline(options, parsed.renderer)
        svg = pipeline.process(data, debug=parsed.debug)

        if parsed.output is None:
            print(svg)
        else:
            try:
                save_svg(svg, str(parsed.output))
            except OSError as e:
                raise OSError(f"failed to write {parsed.output}") from e
            if parsed.debug:
                save_debug_stages(pipeline, parsed.output)

        return 0

    except Exception as e:
        print(format_error(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
