"""Checked string formatting for GeoJSON fragments.

safe_format() renders a str.format template and turns template or
argument mistakes into FormattingError, and memory exhaustion into
AllocationError, so callers only have to handle the package's own errors.

The envelope templates and the standalone feature snippets below are
built on it. The snippets take an already rendered coordinate string and
produce a self-contained Feature object, independent of any collection.
"""

from __future__ import annotations

from geotranspile.errors import AllocationError, FormattingError

HEADER = '{{\n"type": "FeatureCollection",\n"features": ['
FOOTER = "]\n}}\n"

_POINT_FEATURE = (
    '{{"type": "Feature", "geometry": {{"type": "Point", "coordinates": {0}}}, '
    '"properties": {1}}}'
)
_LINESTRING_FEATURE = (
    '{{"type": "Feature", "geometry": {{"type": "LineString", "coordinates": [{0}]}}, '
    '"properties": {1}}}'
)
_POLYGON_FEATURE = (
    '{{"type": "Feature", "geometry": {{"type": "Polygon", "coordinates": [[{0}]]}}, '
    '"properties": {1}}}'
)


def safe_format(template: str, *args: object, **kwargs: object) -> str:
    """Render ``template`` with ``str.format``.

    Args:
        template: A str.format template.
        *args: Positional replacement values.
        **kwargs: Named replacement values.

    Returns:
        The rendered string.

    Raises:
        FormattingError: The template is malformed or references missing
            arguments, or an argument rejects its format spec.
        AllocationError: The result could not be allocated.
    """
    try:
        return template.format(*args, **kwargs)
    except MemoryError as exc:
        raise AllocationError("Out of memory while formatting") from exc
    except (ValueError, IndexError, KeyError, TypeError, AttributeError) as exc:
        raise FormattingError(f"Cannot format {template!r}: {exc}") from exc


def header() -> str:
    return safe_format(HEADER)


def footer() -> str:
    return safe_format(FOOTER)


def point_feature(coordinates: str, properties: str = "{}") -> str:
    """Standalone Point feature; ``coordinates`` is a rendered ``[x, y]``."""
    return safe_format(_POINT_FEATURE, coordinates, properties)


def linestring_feature(coordinates: str, properties: str = "{}") -> str:
    """Standalone LineString feature; ``coordinates`` is ``[x, y], [x, y], ...``."""
    return safe_format(_LINESTRING_FEATURE, coordinates, properties)


def polygon_feature(coordinates: str, properties: str = "{}") -> str:
    """Standalone Polygon feature; ``coordinates`` is the outer ring's pairs."""
    return safe_format(_POLYGON_FEATURE, coordinates, properties)
