"""Contracts (protocols) between tracking components."""
