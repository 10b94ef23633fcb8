"""Stream a FeatureCollection to GeoJSON (RFC 7946) text.

The writer walks the tree once, left to right, and appends formatted
fragments to a small buffer that is flushed to the sink whenever it
fills up. The whole document is never held in memory.

Separators are driven by a 1-based position counter per sequence: the
element at position 1 is emitted bare, every later element gets one
leading comma. The same rule applies to features, coordinate pairs and
property entries.

Output layout for one Point feature:

    {
    "type": "FeatureCollection",
    "features": [{
    "type": "Feature",
    "geometry": {
    "type": "Point",
    "coordinates": [
    200.000000, 201.000000]
    },
    "properties": {
    "symbol": "r100.0"}
    }]
    }
"""

from __future__ import annotations

import io
import json
from typing import Optional, TextIO

from loguru import logger

from geotranspile.config import settings
from geotranspile.errors import SinkWriteError
from geotranspile.features.exporters.formatting import footer, header, safe_format
from geotranspile.features.feature import (
    UNKNOWN_TYPE,
    Feature,
    FeatureCollection,
    Geometry,
    GeometryKind,
    type_name,
)
from geotranspile.features.sequence import CoordinateSequence, PropertySequence

_PAIR = "{0:.{2}f}, {1:.{2}f}"


class GeoJSONWriter:
    """Buffered GeoJSON writer over a text sink.

    The writer never opens or closes the sink; it only calls
    ``sink.write``.

    Args:
        sink: Anything with a ``write(str)`` method.
        precision: Fractional digits per coordinate. Defaults to
            ``settings.coordinate_precision``.
        buffer_size: Characters buffered before a sink write. Defaults to
            ``settings.write_buffer_size``.
    """

    def __init__(
        self,
        sink: TextIO,
        precision: Optional[int] = None,
        buffer_size: Optional[int] = None,
    ) -> None:
        self._sink = sink
        self.precision = settings.coordinate_precision if precision is None else precision
        self.buffer_size = settings.write_buffer_size if buffer_size is None else buffer_size
        self._buffer: list[str] = []
        self._buffered = 0
        self.features_written = 0

    def write_collection(self, collection: FeatureCollection) -> None:
        """Write a complete FeatureCollection document and flush.

        Raises:
            SinkWriteError: The sink rejected a write. Output already
                written stays in the sink.
        """
        self._emit(header())
        position = 1
        for feature in collection:
            if position > 1:
                self._emit(",\n")
            self._write_feature(feature)
            position += 1
        self._emit(footer())
        self.flush()
        logger.debug(f"Serialized FeatureCollection with {position - 1} features")

    def write_feature(self, feature: Feature) -> None:
        """Write a single Feature object and flush."""
        feature.validate()
        self._write_feature(feature)
        self.flush()

    def flush(self) -> None:
        """Hand buffered fragments to the sink."""
        if not self._buffer:
            return
        chunk = "".join(self._buffer)
        self._buffer.clear()
        self._buffered = 0
        try:
            self._sink.write(chunk)
        except (OSError, ValueError) as exc:
            raise SinkWriteError(f"Output sink rejected write: {exc}") from exc

    # ------------------------------------------------------------------
    # Tree walk
    # ------------------------------------------------------------------

    def _write_feature(self, feature: Feature) -> None:
        self._emit('{\n"type": "Feature",')
        self._write_geometry(feature.geometry)
        self._emit(",")
        self._write_properties(feature.properties)
        self._emit("\n}")
        self.features_written += 1

    def _write_geometry(self, geometry: Geometry) -> None:
        name = type_name(geometry.kind)
        if name == UNKNOWN_TYPE:
            logger.warning(f"Unrecognized geometry kind {geometry.kind!r}, writing {UNKNOWN_TYPE}")
        self._emit(safe_format('\n"geometry": {{\n"type": "{0}",\n"coordinates": ', name))
        self._write_coordinates(geometry.kind, geometry.coordinates)
        self._emit("\n}")

    def _write_coordinates(self, kind: object, coordinates: CoordinateSequence) -> None:
        if kind is GeometryKind.POINT:
            first = coordinates.head
            if coordinates.count > 1:
                logger.warning(
                    f"Point has {coordinates.count} coordinates, writing only the first"
                )
            if first is None:
                self._emit("[]")
            else:
                self._emit("[\n" + self._pair(first.x, first.y) + "]")
            return

        # Polygons carry their sequence as the single outer ring
        if kind is GeometryKind.POLYGON:
            opening, closing = "[[", "]]"
        else:
            opening, closing = "[", "]"
        self._emit(opening)
        position = 1
        for point in coordinates:
            separator = "\n[" if position == 1 else ",\n["
            self._emit(separator + self._pair(point.x, point.y) + "]")
            position += 1
        self._emit(closing)

    def _write_properties(self, properties: PropertySequence) -> None:
        self._emit('\n"properties": {')
        position = 1
        for entry in properties:
            separator = "\n" if position == 1 else ",\n"
            self._emit(separator + _quote(entry.name) + ": " + _quote(entry.value))
            position += 1
        self._emit("}")

    def _pair(self, x: float, y: float) -> str:
        return safe_format(_PAIR, x, y, self.precision)

    def _emit(self, fragment: str) -> None:
        self._buffer.append(fragment)
        self._buffered += len(fragment)
        if self._buffered >= self.buffer_size:
            self.flush()


def _quote(text: str) -> str:
    """JSON string literal for ``text``, non-ASCII kept as UTF-8."""
    return json.dumps(text, ensure_ascii=False)


def dump(
    collection: FeatureCollection,
    sink: TextIO,
    precision: Optional[int] = None,
    buffer_size: Optional[int] = None,
) -> int:
    """Write ``collection`` as GeoJSON to ``sink``.

    Returns:
        Number of features written.
    """
    writer = GeoJSONWriter(sink, precision=precision, buffer_size=buffer_size)
    writer.write_collection(collection)
    return writer.features_written


def dumps(collection: FeatureCollection, precision: Optional[int] = None) -> str:
    """Render ``collection`` as a GeoJSON string."""
    buf = io.StringIO()
    dump(collection, buf, precision=precision)
    return buf.getvalue()


def feature_to_string(feature: Feature, precision: Optional[int] = None) -> str:
    """Render one Feature as a standalone GeoJSON object string."""
    buf = io.StringIO()
    GeoJSONWriter(buf, precision=precision).write_feature(feature)
    return buf.getvalue()
