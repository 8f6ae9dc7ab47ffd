"""Monthly usage reset."""
