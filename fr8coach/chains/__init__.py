"""Model provider calls."""
