"""Live journey timeline and train position tracking."""

__version__ = "0.1.0"
