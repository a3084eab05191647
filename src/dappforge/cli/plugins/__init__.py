"""Plugin commands."""
