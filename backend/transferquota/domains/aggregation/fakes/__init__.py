"""Fakes for the aggregation domain."""
