"""Blueprint commands."""
