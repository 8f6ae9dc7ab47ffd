"""Temporal scheduling of the aggregation and monthly reset jobs."""
