"""Shared fixtures for feature tree tests."""

from __future__ import annotations

import pytest

from geotranspile.features import FeatureBuilder
from geotranspile.features.lifecycle import AllocationTracker, track


@pytest.fixture
def tracker():
    """Install a fresh allocation tracker for the test."""
    t = AllocationTracker()
    with track(t):
        yield t


@pytest.fixture
def add_feature():
    """Return a helper that builds one feature and appends it to a collection.

    kind is "point", "linestring" or "polygon"; props is a list of
    (name, value) tuples kept in order.
    """

    def _add(builder, collection, kind, coords, props=()):
        geometry = getattr(builder, f"new_{kind}_geometry")()
        for x, y in coords:
            builder.add_coordinate(geometry, x, y)
        seq = builder.new_property_sequence()
        for name, value in props:
            builder.add_property(seq, name, value)
        feature = builder.new_feature(geometry, seq)
        builder.add_feature(collection, feature)
        return feature

    return _add


@pytest.fixture
def make_pcb_collection(add_feature):
    """Factory for the three-feature board example (polygon, point, polygon)."""

    def _make():
        builder = FeatureBuilder()
        collection = builder.new_collection()
        add_feature(
            builder, collection, "polygon",
            [(100.0, 50.0), (101.0, 51.0), (102.0, 52.0)],
            [(".nomenclature", "true")],
        )
        add_feature(
            builder, collection, "point",
            [(200.0, 201.0)],
            [(".smd", "true"), (".bga", "true"), ("symbol", "r100.0")],
        )
        add_feature(
            builder, collection, "polygon",
            [(300.0, 80.0), (301.0, 81.0), (302.0, 82.0), (303.0, 83.0)],
            [(".sliver_fill", "true")],
        )
        return collection

    return _make
