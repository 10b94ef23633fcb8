"""Parse line-oriented WKT records into a FeatureCollection.

One feature per line, geometry first, then optional properties separated
by ``|``:

    POINT (200 201) | .smd | .bga | symbol=r100.0
    LINESTRING (0 0, 10 0, 10 10)
    POLYGON ((100 50, 101 51, 102 52, 100 50)) | .nomenclature=true

A property without ``=`` is a flag and gets the value "true". Blank lines
and lines starting with ``#`` are skipped. Only 2D coordinates and
single-ring polygons are accepted.
"""

from __future__ import annotations

import math
import re
from typing import Iterable, Optional

from loguru import logger

from geotranspile.errors import ParseError
from geotranspile.features.builder import FeatureBuilder
from geotranspile.features.feature import FeatureCollection, Geometry

_RECORD_RE = re.compile(r"^\s*([A-Za-z]+)\s*\((.*)\)\s*$")
_RING_RE = re.compile(r"^\s*\((.*)\)\s*$")


def parse_wkt(text: str, builder: Optional[FeatureBuilder] = None) -> FeatureCollection:
    """Parse a WKT document into a FeatureCollection.

    Args:
        text: Raw document content.
        builder: Builder to drive. A fresh one is used when omitted.

    Returns:
        The built FeatureCollection. The caller owns it and must destroy it.

    Raises:
        ParseError: On the first malformed record. Everything built so far
            has been released.
    """
    return parse_lines(text.splitlines(), builder)


def parse_lines(lines: Iterable[str], builder: Optional[FeatureBuilder] = None) -> FeatureCollection:
    """Parse WKT records from an iterable of lines (e.g. an open file)."""
    builder = builder or FeatureBuilder()
    collection = builder.new_collection()
    lineno = 0
    try:
        for lineno, line in enumerate(lines, start=1):
            record = line.strip()
            if not record or record.startswith("#"):
                continue
            _parse_record(builder, collection, record, lineno)
    except ParseError:
        builder.abort(collection)
        raise
    except UnicodeDecodeError as exc:
        builder.abort(collection)
        raise ParseError(f"Input is not valid text: {exc}", lineno + 1) from exc
    except Exception:
        builder.abort(collection)
        logger.error(f"Build aborted at line {lineno}")
        raise
    logger.debug(f"Parsed {collection.count} features from {lineno} lines")
    return collection


def _parse_record(
    builder: FeatureBuilder, collection: FeatureCollection, record: str, lineno: int
) -> None:
    geometry_text, *property_texts = record.split("|")

    match = _RECORD_RE.match(geometry_text)
    if match is None:
        raise ParseError(f"Expected '<TYPE> (...)', got {geometry_text.strip()!r}", lineno)
    tag, body = match.group(1).upper(), match.group(2)

    if tag == "POINT":
        geometry = builder.new_point_geometry()
        _add_coordinates(builder, geometry, body, lineno)
        if geometry.coordinates.count != 1:
            raise ParseError("POINT takes exactly one coordinate", lineno)
    elif tag == "LINESTRING":
        geometry = builder.new_linestring_geometry()
        _add_coordinates(builder, geometry, body, lineno)
        if geometry.coordinates.count < 2:
            raise ParseError("LINESTRING needs at least two coordinates", lineno)
    elif tag == "POLYGON":
        ring = _RING_RE.match(body)
        if ring is None:
            raise ParseError("POLYGON ring must be wrapped in parentheses", lineno)
        if "(" in ring.group(1) or ")" in ring.group(1):
            raise ParseError("POLYGON interior rings are not supported", lineno)
        geometry = builder.new_polygon_geometry()
        _add_coordinates(builder, geometry, ring.group(1), lineno)
    else:
        raise ParseError(f"Unsupported geometry type {tag}", lineno)

    props = builder.new_property_sequence()
    for text in property_texts:
        text = text.strip()
        if not text:
            continue
        name, sep, value = text.partition("=")
        name = name.strip()
        if not name:
            raise ParseError(f"Property without a name: {text!r}", lineno)
        builder.add_property(props, name, value.strip() if sep else "true")

    builder.add_feature(collection, builder.new_feature(geometry, props))


def _add_coordinates(builder: FeatureBuilder, geometry: Geometry, body: str, lineno: int) -> None:
    if not body.strip():
        raise ParseError("Empty coordinate list", lineno)
    for pair in body.split(","):
        parts = pair.split()
        if len(parts) != 2:
            raise ParseError(f"Expected 'x y', got {pair.strip()!r}", lineno)
        x, y = (_parse_number(p, lineno) for p in parts)
        builder.add_coordinate(geometry, x, y)


def _parse_number(token: str, lineno: int) -> float:
    try:
        value = float(token)
    except ValueError:
        raise ParseError(f"Invalid number {token!r}", lineno) from None
    if not math.isfinite(value):
        raise ParseError(f"Non-finite coordinate {token!r}", lineno)
    return value
