"""Fakes for the ingestion domain."""
