"""Maintenance complaint tracking with rate-limited reminders."""

__version__ = "0.1.0"
