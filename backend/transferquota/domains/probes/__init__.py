"""Transfer probes: detection points that report transfers to the deduplicator."""
