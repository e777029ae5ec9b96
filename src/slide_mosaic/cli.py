"""
Command line entry point.

Renders a PDF or presentation into page images, merges them into grids
or long strips and writes PNGs (and optionally a ZIP) to a directory.

Example:
    slide-mosaic deck.pptx -o out --mode grid-2x2 --zip
    slide-mosaic report.pdf -o out --mode long --group-size 3 --aspect-ratio 9:16
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from slide_mosaic import __version__
from slide_mosaic.composition import CompositionError
from slide_mosaic.output import OutputError, write_result, write_zip
from slide_mosaic.pipeline import (
    MergeCancelled,
    MergeConfig,
    MergeMode,
    RenderError,
    convert_and_merge,
    renderer_for_path,
)
from slide_mosaic.pipeline.config import (
    DEFAULT_BACKGROUND,
    DEFAULT_MAX_WORKERS,
    DEFAULT_SCALE,
    DEFAULT_SPACING_PX,
)
from slide_mosaic.pipeline.rendering import DEFAULT_SOFFICE, PDF_SUFFIXES

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slide-mosaic",
        description="Render slides or pages to PNG and merge them into grids or long images",
    )
    parser.add_argument("document", type=Path, help="PDF or presentation to convert")
    parser.add_argument("--output", "-o", type=Path, default=Path("output"),
                        help="Output directory (default: ./output)")
    parser.add_argument("--mode", "-m", default=MergeMode.SINGLE.value,
                        choices=[m.value for m in MergeMode],
                        help="Merge mode (default: single)")
    parser.add_argument("--group-size", "-n", type=int, default=None,
                        help="Pages per long image (required for long mode)")
    parser.add_argument("--spacing", type=int, default=DEFAULT_SPACING_PX,
                        help=f"Pixels between images (default: {DEFAULT_SPACING_PX})")
    parser.add_argument("--background", default=DEFAULT_BACKGROUND,
                        help=f"Background color (default: {DEFAULT_BACKGROUND})")
    parser.add_argument("--aspect-ratio", default=None,
                        help="Target W:H ratio for long images, e.g. 9:16")
    parser.add_argument("--scale", type=float, default=DEFAULT_SCALE,
                        help=f"Render scale factor (default: {DEFAULT_SCALE})")
    parser.add_argument("--workers", type=int, default=DEFAULT_MAX_WORKERS,
                        help=f"Groups composed in parallel (default: {DEFAULT_MAX_WORKERS})")
    parser.add_argument("--no-pages", action="store_true",
                        help="Only write merged images, not individual pages")
    parser.add_argument("--zip", action="store_true", help="Also bundle outputs into images.zip")
    parser.add_argument("--soffice", default=DEFAULT_SOFFICE,
                        help="LibreOffice binary used for presentations")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        config = MergeConfig(
            mode=MergeMode.parse(args.mode),
            group_size=args.group_size,
            spacing=args.spacing,
            background=args.background,
            aspect_ratio=args.aspect_ratio,
            scale=args.scale,
            max_workers=args.workers,
        )
    except ValueError as e:
        logger.error(f"Invalid options: {e}")
        return EXIT_USAGE

    if not args.document.is_file():
        logger.error(f"Document not found: {args.document}")
        return EXIT_USAGE

    try:
        renderer = renderer_for_path(args.document, soffice=args.soffice)
        result = convert_and_merge(args.document, renderer, config)
        page_prefix = "page" if args.document.suffix.lower() in PDF_SUFFIXES else "slide"
        written = write_result(
            result,
            args.output,
            page_prefix=page_prefix,
            include_pages=not args.no_pages,
            max_workers=args.workers,
        )
        if args.zip:
            archive = write_zip(list(written.all_paths), args.output / "images.zip")
            logger.info(f"Archive: {archive}")
    except (RenderError, CompositionError, OutputError, MergeCancelled, OSError) as e:
        logger.error(f"Failed: {e}")
        return EXIT_FAILURE

    logger.info(
        f"Done: {result.page_count} pages, {result.merged_count} merged image(s) in {args.output}"
    )
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
