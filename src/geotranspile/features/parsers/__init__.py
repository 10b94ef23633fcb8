"""Input readers that drive FeatureBuilder."""
