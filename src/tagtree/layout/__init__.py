"""Layout core — hierarchy building, layer assignment, engine and graft."""
