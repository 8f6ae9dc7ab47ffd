"""Ingestion: collapse duplicate transfer reports before they reach the ledger."""
