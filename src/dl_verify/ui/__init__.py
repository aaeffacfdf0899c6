"""User-facing terminal output."""
