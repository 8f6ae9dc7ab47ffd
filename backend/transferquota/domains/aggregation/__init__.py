"""Periodic aggregation of count-only download signals into estimated bytes."""
