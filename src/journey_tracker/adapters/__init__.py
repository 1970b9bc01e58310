"""Adapters for configuration, backend access, tracking and persistence."""
