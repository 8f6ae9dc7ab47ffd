"""Fakes for the quota domain."""
