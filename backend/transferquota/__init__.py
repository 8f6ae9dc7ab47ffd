"""Transfer quota monitoring: usage ledger, ingestion dedup, threshold alerts."""
