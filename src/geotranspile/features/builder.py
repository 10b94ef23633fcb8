"""FeatureBuilder: the construction interface driven by input readers.

A reader calls the builder in document order:

    builder = FeatureBuilder()
    collection = builder.new_collection()
    geom = builder.new_point_geometry()
    builder.add_coordinate(geom, 200.0, 201.0)
    props = builder.new_property_sequence()
    builder.add_property(props, "symbol", "r100.0")
    builder.add_feature(collection, builder.new_feature(geom, props))

The builder remembers every subtree it handed out that has not yet been
attached to a parent, so abort() can release orphans of a failed build.
"""

from __future__ import annotations

from typing import Optional, Union

from loguru import logger

from geotranspile.features import lifecycle
from geotranspile.features.feature import (
    Feature,
    FeatureCollection,
    Geometry,
    GeometryKind,
)
from geotranspile.features.sequence import (
    CoordinatePoint,
    CoordinateSequence,
    PropertyEntry,
    PropertySequence,
)

_Orphan = Union[Geometry, PropertySequence, Feature]


class FeatureBuilder:
    """Builds a FeatureCollection one call at a time."""

    def __init__(self) -> None:
        self._orphans: dict[int, _Orphan] = {}
        self._collection: Optional[FeatureCollection] = None

    @property
    def orphan_count(self) -> int:
        return len(self._orphans)

    def new_collection(self) -> FeatureCollection:
        collection = FeatureCollection()
        self._collection = collection
        return collection

    def new_point_geometry(self) -> Geometry:
        return self._new_geometry(GeometryKind.POINT)

    def new_linestring_geometry(self) -> Geometry:
        return self._new_geometry(GeometryKind.LINESTRING)

    def new_polygon_geometry(self) -> Geometry:
        return self._new_geometry(GeometryKind.POLYGON)

    def add_coordinate(self, geometry: Geometry, x: float, y: float) -> CoordinatePoint:
        return geometry.coordinates.add(x, y)

    def new_property_sequence(self) -> PropertySequence:
        props = PropertySequence()
        self._orphans[id(props)] = props
        return props

    def add_property(self, props: PropertySequence, name: str, value: str) -> PropertyEntry:
        return props.add(name, value)

    def new_feature(self, geometry: Geometry, properties: PropertySequence) -> Feature:
        """Wrap a geometry and property sequence into a Feature.

        Ownership of both arguments moves to the feature; the feature itself
        stays an orphan until it is added to a collection.
        """
        feature = Feature(geometry, properties)
        self._orphans.pop(id(geometry), None)
        self._orphans.pop(id(properties), None)
        self._orphans[id(feature)] = feature
        return feature

    def add_feature(self, collection: FeatureCollection, feature: Feature) -> None:
        collection.push(feature)
        self._orphans.pop(id(feature), None)

    def abort(self, collection: Optional[FeatureCollection] = None) -> None:
        """Release every orphaned subtree and the collection under construction.

        Args:
            collection: Collection to release. Defaults to the last one
                created by new_collection().
        """
        if collection is None:
            collection = self._collection
        orphans = list(self._orphans.values())
        self._orphans.clear()
        logger.debug(f"Aborting build: releasing {len(orphans)} orphaned subtrees")
        lifecycle.release(*orphans)
        if collection is not None and not collection.destroyed:
            collection.destroy()
        self._collection = None

    def _new_geometry(self, kind: GeometryKind) -> Geometry:
        geometry = Geometry(kind)
        self._orphans[id(geometry)] = geometry
        try:
            geometry.coordinates = CoordinateSequence()
        except Exception:
            del self._orphans[id(geometry)]
            geometry.destroy()
            raise
        return geometry
