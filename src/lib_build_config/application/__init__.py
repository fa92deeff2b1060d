"""Application layer: rendering, generation, settings merge and ports."""
