"""Threshold notification dispatch."""
