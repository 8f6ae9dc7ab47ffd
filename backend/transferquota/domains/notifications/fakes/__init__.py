"""Fakes for the notification domain."""
