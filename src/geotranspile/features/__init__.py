"""GeoJSON feature tree: build, serialize, destroy.

Coordinates -> Geometry -> Properties -> Feature -> FeatureCollection,
each level an append-only sequence owned by the level above it.
"""

from geotranspile.features.builder import FeatureBuilder
from geotranspile.features.feature import (
    Feature,
    FeatureCollection,
    Geometry,
    GeometryKind,
    type_name,
)
from geotranspile.features.sequence import (
    CoordinatePoint,
    CoordinateSequence,
    PropertyEntry,
    PropertySequence,
)

__all__ = [
    "CoordinatePoint",
    "CoordinateSequence",
    "Feature",
    "FeatureBuilder",
    "FeatureCollection",
    "Geometry",
    "GeometryKind",
    "PropertyEntry",
    "PropertySequence",
    "type_name",
]
