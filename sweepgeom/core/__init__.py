"""Internal implementation package for sweepgeom (see ``sweepgeom`` for the public API)."""
