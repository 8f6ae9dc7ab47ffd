"""Runtime platform integrations."""
