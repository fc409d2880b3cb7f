#!/usr/bin/env python3
"""
Batch editor: load one image, run a list of operations, save the result.

    photo-editor-apply in.png out.png --op grayscale --op blur --op fill:0,0,255,0,0

Operations
──────────
* colour transforms:  grayscale, grayscale_average, invert, shift,
                      keep_red, keep_green, keep_blue,
                      remove_red, remove_green, remove_blue
* kernel presets:     blur, gaussian_blur, sharpen, laplacian
* flood fill:         fill:ROW,COL,R,G,B
* history:            undo, redo
"""
import os
import sys
import logging
import argparse
from pathlib import Path
from typing import Callable, List, Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..errors import EditorError, UnknownOperationError
from ..models.color_transform import ColorTransform
from ..models.kernel import ConvolutionKernel
from ..pipeline.editing_session import EditingSession

logger = logging.getLogger(__name__)

Step = Callable[[EditingSession], object]


def parse_op(spec: str) -> Step:
    """Turn one --op string into a callable on an EditingSession."""
    name, _, args = spec.partition(":")
    key = name.strip().lower().replace("-", "_")

    if key == "fill":
        parts = [p for p in args.split(",") if p.strip()]
        if len(parts) != 5:
            raise UnknownOperationError(f"fill expects ROW,COL,R,G,B, got {args!r}")
        row, col, r, g, b = (int(p) for p in parts)
        return lambda s: s.fill_region(row, col, (r, g, b))
    if key == "undo":
        return lambda s: s.undo()
    if key == "redo":
        return lambda s: s.redo()

    try:
        kernel = ConvolutionKernel.preset(key)
        return lambda s: s.apply_convolution(kernel)
    except UnknownOperationError:
        pass
    ColorTransform.from_name(key)  # validate now, resolve later (GRAYSCALE_MODE)
    return lambda s: s.apply_color_transform(key)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="photo-editor-apply",
        description="Apply colour filters, kernels and fills to an image file.",
    )
    ap.add_argument("input", type=Path, help="image to read")
    ap.add_argument("output", type=Path, help="where to write the result")
    ap.add_argument("--op", dest="ops", action="append", default=[],
                    help="operation to apply, in order (repeatable)")
    ap.add_argument("--format", dest="fmt", default=None,
                    help="output format (default: from OUTPUT suffix, else DEFAULT_SAVE_FORMAT)")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        steps = [parse_op(op) for op in args.ops]
    except (UnknownOperationError, ValueError) as err:
        logger.error(f"Bad operation: {err}")
        return 2

    fmt = args.fmt or args.output.suffix.lstrip(".") or os.getenv("DEFAULT_SAVE_FORMAT", "PNG")

    session = EditingSession()
    try:
        session.open_bytes(args.input.read_bytes())
        for op, step in zip(args.ops, steps):
            logger.info(f"Applying {op}")
            step(session)
        data = session.save_bytes(fmt)
    except FileNotFoundError as err:
        logger.error(f"Input not found: {err.filename}")
        return 1
    except OSError as err:
        logger.error(f"Could not read {args.input}: {err}")
        return 1
    except EditorError as err:
        logger.error(f"{type(err).__name__}: {err}")
        return 1

    try:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_bytes(data)
    except OSError as err:
        logger.error(f"Could not write {args.output}: {err}")
        return 1
    logger.info(f"Saved {args.output} ({len(data)} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
