#!/usr/bin/env python3
"""
Fix transparent pixels in PNG files.

Every fully transparent pixel gets the colour of its non-transparent
neighbours (alpha stays 0), so tools that ignore alpha while resampling
no longer bleed black or white fringes into the visible edges.

Usage: fix-transparency -g "images/**/*.png"
"""

import os
import sys
import logging
import argparse
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from .. import __version__
from ..models.errors import PatternError, DecodeError, EncodeError
from ..models.policies import FillPolicy, TargetMode
from ..pipeline.transparency_fixer import fix_transparent_pixels, WORKERS, FAIL_FAST
from ..services.image_service import ImageService
from ..services.transparency_service import TransparencyService

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="fix-transparency",
        description="Replace the colour of transparent PNG pixels with the colour "
                    "of nearby non-transparent pixels.",
    )
    ap.add_argument("-g", "--glob", required=True,
                    help="glob pattern to match image files, e.g. 'images/**/*.png'")
    ap.add_argument("--policy", type=str.lower, choices=[p.value for p in FillPolicy],
                    default=os.getenv("FILL_POLICY", FillPolicy.FIRST.value),
                    help="first: first opaque neighbour, isolated pixels turn black; "
                         "average: mean of opaque neighbours, isolated pixels untouched")
    ap.add_argument("--target", type=str.lower, choices=[t.value for t in TargetMode],
                    default=os.getenv("TARGET_MODE", TargetMode.TRANSPARENT.value),
                    help="transparent: every alpha 0 pixel; "
                         "sentinel: only (255,255,255,0) pixels")
    ap.add_argument("--workers", type=int, default=WORKERS,
                    help="number of files processed in parallel")
    ap.add_argument("--fail-fast", action="store_true", default=FAIL_FAST,
                    help="abort on the first file that cannot be read or written")
    ap.add_argument("--progress", action="store_true",
                    help="show a progress bar")
    ap.add_argument("--log-level", type=str.upper, default=os.getenv("LOG_LEVEL", "INFO"),
                    choices=LOG_LEVELS)
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    # argparse checks choices only for values given on the command line, not env defaults
    for option, value, allowed in (
        ("--policy", args.policy, [p.value for p in FillPolicy]),
        ("--target", args.target, [t.value for t in TargetMode]),
        ("--log-level", args.log_level, LOG_LEVELS),
    ):
        if value not in allowed:
            ap.error(f"argument {option}: invalid choice: {value!r} (choose from {', '.join(allowed)})")

    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        report = fix_transparent_pixels(
            args.glob,
            image_service=ImageService(),
            transparency_service=TransparencyService(policy=args.policy, target=args.target),
            workers=args.workers,
            fail_fast=args.fail_fast,
            progress=args.progress,
        )
    except PatternError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except (DecodeError, EncodeError) as e:
        logger.error(f"Aborting: {e}")
        return 1

    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
