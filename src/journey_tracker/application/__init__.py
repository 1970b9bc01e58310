"""Application layer - journey timeline and live position engine."""
