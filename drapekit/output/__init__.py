"""Output — Mapping pipeline results onto transport responses."""
