"""Decode — Normalization and the tiered decoder cascade."""

from drapekit.decode.cascade import DecodeOutcome, Decoder, decode
from drapekit.decode.normalize import normalize_text
from drapekit.decode.tiers import DecodeState, TierResult

__all__ = [
    "DecodeOutcome",
    "DecodeState",
    "Decoder",
    "TierResult",
    "decode",
    "normalize_text",
]
