"""Logging setup for stalk."""
