"""Prompt assembly for the coaching model."""
