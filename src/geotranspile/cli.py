"""Command-line entry point: WKT records in, GeoJSON FeatureCollection out.

Usage:
    geotranspile [-i INPUT] [-o OUTPUT] [-l LOGFILE] [--log-level LEVEL]
                 [--precision N]

Options:
    -i INPUT       Input file (default: stdin)
    -o OUTPUT      Output file (default: stdout)
    -l LOGFILE     Append log records to this file (default: GEOTRANSPILE_LOG_FILE)
    --log-level    stderr log level (default: GEOTRANSPILE_LOG_LEVEL or INFO)
    --precision    Fractional digits per coordinate (default: 6)

Exit status is 0 on success and 1 on any file, parse or write failure.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from geotranspile import __version__
from geotranspile.config import settings
from geotranspile.errors import TranspileError
from geotranspile.features.exporters.geojson import GeoJSONWriter
from geotranspile.features.feature import FeatureCollection
from geotranspile.features.parsers.wkt import parse_lines

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"


def configure_logging(level: str, log_file: Optional[Path] = None) -> list[int]:
    """Replace loguru's handlers with stderr and an optional append-mode file.

    Returns:
        Handler ids, so the caller can remove them (and close the file).

    Raises:
        OSError: If the log file cannot be opened.
    """
    logger.remove()
    handler_ids = [logger.add(sys.stderr, level=level.upper(), format=_LOG_FORMAT)]
    if log_file is not None:
        try:
            handler_ids.append(
                logger.add(str(log_file), level="DEBUG", format=_LOG_FORMAT, mode="a", encoding="utf-8")
            )
        except OSError:
            logger.remove(handler_ids[0])
            raise
    return handler_ids


def _precision(text: str) -> int:
    """argparse type for --precision: an int in 0..17, like Settings."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}") from None
    if not 0 <= value <= 17:
        raise argparse.ArgumentTypeError(f"must be between 0 and 17, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geotranspile",
        description="Convert WKT geometry records to a GeoJSON FeatureCollection",
    )
    parser.add_argument("-i", "--input", type=Path, default=None, help="Input file (default: stdin)")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Output file (default: stdout)")
    parser.add_argument(
        "-l", "--log", type=Path, default=settings.log_file,
        help="Append log records to this file",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="stderr log level")
    parser.add_argument(
        "--precision", type=_precision, default=settings.coordinate_precision,
        help="Fractional digits per coordinate",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        handler_ids = configure_logging(args.log_level, args.log)
    except OSError as e:
        print(f"ERROR: Cannot open log file {args.log}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"ERROR: Invalid log level {args.log_level}: {e}", file=sys.stderr)
        return 1

    try:
        return _run(args)
    finally:
        for handler_id in handler_ids:
            logger.remove(handler_id)


def _run(args: argparse.Namespace) -> int:
    collection = _read_collection(args.input)
    if collection is None:
        return 1

    try:
        return _write_collection(collection, args.output, args.precision)
    finally:
        collection.destroy()


def _read_collection(path: Optional[Path]) -> Optional[FeatureCollection]:
    try:
        if path is None:
            return parse_lines(sys.stdin)
        with open(path, "r", encoding=settings.encoding) as f:
            return parse_lines(f)
    except OSError as e:
        logger.error(f"Cannot open input file {path}: {e}")
    except TranspileError as e:
        logger.error(f"Transpilation failed: {e}")
    return None


def _write_collection(collection: FeatureCollection, path: Optional[Path], precision: int) -> int:
    try:
        if path is None:
            GeoJSONWriter(sys.stdout, precision=precision).write_collection(collection)
            sys.stdout.flush()
        else:
            with open(path, "w", encoding=settings.encoding) as f:
                GeoJSONWriter(f, precision=precision).write_collection(collection)
    except OSError as e:
        logger.error(f"Cannot open output file {path}: {e}")
        return 1
    except TranspileError as e:
        logger.error(f"Writing GeoJSON failed: {e}")
        return 1
    logger.info(f"Wrote {collection.count} features to {path or 'stdout'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
