"""Application factory and startup wiring."""
