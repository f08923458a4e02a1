# regiongrow/__main__.py
# Entry point for running regiongrow as a module: python -m regiongrow
"""
regiongrow - Seeded region growing segmentation

Usage:
    python -m regiongrow image1.jpg image2.jpg          # segment and display
    python -m regiongrow *.png --no-show --out results  # headless, write PNGs
"""
from __future__ import annotations

import argparse
import logging
import sys

from .core.batch import process_batch_sequential
from .core.growing import BORDER_POLICIES, DEFAULTS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regiongrow",
        description="Seeded region growing segmentation of grayscale images",
    )
    parser.add_argument("images", nargs="+", help="Input image paths")
    parser.add_argument("--seeds", type=int, default=DEFAULTS["growth"]["seedCount"],
                        help="Requested number of seeds (default: %(default)s)")
    parser.add_argument("--thickness", type=int, default=DEFAULTS["borders"]["thickness"],
                        help="Border thickness in pixels (default: %(default)s)")
    parser.add_argument("--kernel", type=int, default=DEFAULTS["filter"]["kernelSize"],
                        help="Median filter kernel size, odd > 1 to enable (default: %(default)s)")
    parser.add_argument("--size", type=int, nargs=2, metavar=("W", "H"),
                        default=(DEFAULTS["image"]["width"], DEFAULTS["image"]["height"]),
                        help="Working size images are resized to (default: 512 512)")
    parser.add_argument("--policy", choices=BORDER_POLICIES, default=DEFAULTS["merge"]["borderPolicy"],
                        help="Border statistics storage (default: %(default)s)")
    parser.add_argument("--out", default=None, help="Folder to write result PNGs into")
    parser.add_argument("--no-show", action="store_true", help="Do not open display windows")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for region colors")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for info, -vv for debug logging")
    return parser


def params_from_args(args: argparse.Namespace) -> dict:
    return {
        "image": {"width": args.size[0], "height": args.size[1]},
        "filter": {"kernelSize": args.kernel},
        "growth": {"seedCount": args.seeds},
        "merge": {"borderPolicy": args.policy},
        "borders": {"thickness": args.thickness},
    }


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    if args.no_show and not args.out:
        print("Note: --no-show without --out produces no output files.")

    results = process_batch_sequential(
        args.images,
        params=params_from_args(args),
        show=not args.no_show,
        outDir=args.out,
        rng=args.seed,
    )
    failed = sum(r is None for r in results)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
