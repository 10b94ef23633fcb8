"""Geometry, Feature and FeatureCollection for the GeoJSON feature tree.

Ownership is a strict tree:

    FeatureCollection -> Feature -> Geometry -> CoordinateSequence
                                 -> PropertySequence

Each owner destroys what it owns, so destroying the collection releases
every reachable node exactly once.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from geotranspile.errors import LifecycleError, MalformedFeatureError
from geotranspile.features import lifecycle
from geotranspile.features.sequence import (
    CoordinateSequence,
    PropertySequence,
    Sequence,
)

UNKNOWN_TYPE = "Unknown"


class GeometryKind(Enum):
    POINT = "Point"
    LINESTRING = "LineString"
    POLYGON = "Polygon"


def type_name(kind: object) -> str:
    """Map a geometry kind to its GeoJSON type string.

    Anything that is not a GeometryKind maps to "Unknown".
    """
    if kind is GeometryKind.POINT:
        return "Point"
    if kind is GeometryKind.LINESTRING:
        return "LineString"
    if kind is GeometryKind.POLYGON:
        return "Polygon"
    return UNKNOWN_TYPE


class Geometry:
    """A geometry kind tag plus exactly one owned CoordinateSequence.

    A fresh Geometry has no kind and no coordinates; the builder sets both
    before the geometry is wrapped in a Feature.
    """

    def __init__(
        self,
        kind: Optional[GeometryKind] = None,
        coordinates: Optional[CoordinateSequence] = None,
    ) -> None:
        lifecycle.allocate(lifecycle.GEOMETRY)
        self.kind = kind
        self.coordinates = coordinates
        self._destroyed = False

    def __repr__(self) -> str:
        return f"Geometry({type_name(self.kind)}, {self.coordinates!r})"

    @property
    def type_name(self) -> str:
        return type_name(self.kind)

    def destroy(self) -> None:
        if self._destroyed:
            raise LifecycleError("Geometry destroyed twice")
        if self.coordinates is not None:
            self.coordinates.destroy()
        self._destroyed = True
        lifecycle.free(lifecycle.GEOMETRY)


class Feature:
    """One Geometry paired with one PropertySequence.

    Args:
        geometry: Geometry to own.
        properties: PropertySequence to own.
    """

    def __init__(self, geometry: Geometry, properties: PropertySequence) -> None:
        lifecycle.allocate(lifecycle.FEATURE)
        self.geometry = geometry
        self.properties = properties
        self._destroyed = False

    def __repr__(self) -> str:
        return f"Feature({self.geometry!r}, {self.properties!r})"

    def validate(self) -> None:
        """Check that both owned members are present.

        Raises:
            MalformedFeatureError: If geometry, its coordinates, or the
                property sequence is missing.
        """
        if self.geometry is None:
            raise MalformedFeatureError("Feature has no geometry")
        if self.geometry.coordinates is None:
            raise MalformedFeatureError("Feature geometry has no coordinate sequence")
        if self.properties is None:
            raise MalformedFeatureError("Feature has no property sequence")

    def destroy(self) -> None:
        if self._destroyed:
            raise LifecycleError("Feature destroyed twice")
        lifecycle.release(self.geometry, self.properties)
        self._destroyed = True
        lifecycle.free(lifecycle.FEATURE)


class FeatureCollection(Sequence[Feature]):
    """Root of the ownership tree: an ordered sequence of Features."""

    header_kind = lifecycle.FEATURE_COLLECTION

    def push(self, node: Feature) -> None:
        """Append a feature, taking ownership of it.

        Raises:
            MalformedFeatureError: If the feature is missing an owned member.
            LifecycleError: If the collection was already destroyed.
        """
        node.validate()
        super().push(node)

    def _release_node(self, node: Feature) -> None:
        node.destroy()
