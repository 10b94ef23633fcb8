"""geotranspile: convert geometry records to GeoJSON FeatureCollections."""

__version__ = "0.1.0"
