"""Serializers for the feature tree."""
