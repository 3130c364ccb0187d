"""
IR Enums — Closed vocabularies, statuses, and codes.

No stringly-typed constants scattered across passes.
"""

from enum import Enum


# ============================================================================
# Tutorial Vocabularies
# ============================================================================

class Icon(str, Enum):
    """
    Pictogram shown next to a tutorial step.

    The renderer has exactly one glyph per member; anything else
    must be repaired before it leaves the pipeline.
    """

    PIN = "pin"
    SCISSORS = "scissors"
    PENCIL = "pencil"
    RULER = "ruler"
    HAND = "hand"
    FOLD = "fold"
    IRON = "iron"
    MEASURE = "measure"
    DRAPE = "drape"
    WRAP = "wrap"
    PLEAT = "pleat"
    GATHER = "gather"
    TUCK = "tuck"
    DART = "dart"
    TRIM = "trim"
    BASTE = "baste"

    @classmethod
    def values(cls) -> set[str]:
        return {member.value for member in cls}


class Area(str, Enum):
    """Region of the dress form a step works on."""

    NECK = "neck"
    SHOULDER = "shoulder"
    CHEST = "chest"
    WAIST = "waist"
    HIP = "hip"
    HEM = "hem"
    SIDE = "side"
    BACK = "back"
    FULL = "full"

    @classmethod
    def values(cls) -> set[str]:
        return {member.value for member in cls}


DEFAULT_ICON = Icon.PIN
DEFAULT_AREA = Area.FULL


# ============================================================================
# Decoding
# ============================================================================

class DecodeTier(int, Enum):
    """
    Decoder cascade tiers, cheapest and most faithful first.
    """

    DIRECT = 0        # Parse verbatim
    BOUNDING = 1      # Slice first "{" .. last "}"
    CLEANUP = 2       # Control chars, trailing commas
    STRING_REPAIR = 3 # Escape raw newlines/tabs inside strings
    PUNCTUATION = 4   # Full-width quotes/commas/colons
    SALVAGE = 5       # Regex reconstruction of steps


class TierOutcome(str, Enum):
    """What a single tier reports back to the cascade."""

    PARSED = "parsed"      # Success, stop the cascade
    CONTINUE = "continue"  # Not applicable, try the next tier
    ABORT = "abort"        # No later tier can help


# ============================================================================
# Pipeline Status
# ============================================================================

class DiagnosticLevel(str, Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class TransformStatus(str, Enum):
    """Overall transformation status."""

    SUCCESS = "success"
    PARTIAL = "partial"  # Document recovered by structural salvage
    FAILED = "failed"    # Typed pipeline error (bad generation)
    ERROR = "error"      # Unexpected exception inside a pass
