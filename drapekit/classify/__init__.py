"""Classify — Heuristic repair of degenerate categorical output."""

from drapekit.classify.diversity import Diversifier, FieldRepair, diversify, infer_value

__all__ = ["Diversifier", "FieldRepair", "diversify", "infer_value"]
