"""
Decoder tiers — ordered repair strategies.

Each tier is a plain function `(DecodeState) -> TierResult`:
- PARSED: the tier produced a loose document; the cascade stops
- CONTINUE: the tier does not apply or its repair did not parse
- ABORT: no later tier can help; the cascade raises the attached error

Tiers after bounding share `state.working`, so each one builds on the
repairs of the previous tier. Punctuation mapping restarts from the
cleaned text (`state.cleaned`) and reruns the string scan itself.
Salvage reads `state.bounded`.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from drapekit.core.errors import DecodeError, NoJsonObjectFound, UnrecoverableContent
from drapekit.decode.salvage import salvage_document
from drapekit.decode.scanner import (
    find_object_bounds,
    repair_strings,
    strip_control_chars,
    strip_trailing_commas,
)
from drapekit.ir.enums import DecodeTier, TierOutcome

# East-Asian full-width punctuation that models emit in place of JSON syntax
FULLWIDTH_PUNCTUATION = str.maketrans({
    "\u201c": '"',
    "\u201d": '"',
    "\uff02": '"',
    "\uff0c": ",",
    "\uff1a": ":",
})


@dataclass
class DecodeState:
    """Text as it moves through the cascade."""

    source: str
    bounded: Optional[str] = None
    cleaned: Optional[str] = None
    working: Optional[str] = None
    attempts: list[DecodeTier] = field(default_factory=list)


@dataclass(frozen=True)
class TierResult:
    """What a tier reports back to the cascade."""

    outcome: TierOutcome
    document: Optional[dict[str, Any]] = None
    error: Optional[DecodeError] = None

    @classmethod
    def parsed(cls, document: dict[str, Any]) -> "TierResult":
        return cls(TierOutcome.PARSED, document=document)

    @classmethod
    def skip(cls) -> "TierResult":
        return cls(TierOutcome.CONTINUE)

    @classmethod
    def abort(cls, error: DecodeError) -> "TierResult":
        return cls(TierOutcome.ABORT, error=error)


TierFn = Callable[[DecodeState], TierResult]


def try_parse(text: str) -> Optional[dict[str, Any]]:
    """Parse text as a JSON object; None for invalid JSON or non-objects."""
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        # ValueError also covers integer literals past the int digit limit
        return None
    return value if isinstance(value, dict) else None


def _attempt(text: str) -> TierResult:
    document = try_parse(text)
    return TierResult.parsed(document) if document is not None else TierResult.skip()


# =============================================================================
# Tiers
# =============================================================================

def tier_direct(state: DecodeState) -> TierResult:
    """Tier 0 — well-formed output parses verbatim."""
    return _attempt(state.source)


def tier_bounding(state: DecodeState) -> TierResult:
    """Tier 1 — slice from the first "{" to the last "}" inclusive."""
    bounds = find_object_bounds(state.source)
    if bounds is None:
        return TierResult.abort(NoJsonObjectFound())

    start, end = bounds
    state.bounded = state.source[start:end + 1]
    state.working = state.bounded
    return TierResult.skip()


def tier_cleanup(state: DecodeState) -> TierResult:
    """Tier 2 — drop control characters and trailing commas."""
    state.working = strip_trailing_commas(strip_control_chars(state.working))
    state.cleaned = state.working
    return _attempt(state.working)


def tier_string_repair(state: DecodeState) -> TierResult:
    """Tier 3 — escape raw newlines/tabs inside strings, drop stray backslashes."""
    state.working = repair_strings(state.working)
    return _attempt(state.working)


def tier_punctuation(state: DecodeState) -> TierResult:
    """
    Tier 4 — map full-width quotes, commas and colons to ASCII.

    Maps the cleaned text from before the string scan, then reruns the
    scan. Output quoted only with full-width marks thus keeps the escapes
    inside its strings; otherwise the result equals mapping the
    string-repaired text.
    """
    base = state.cleaned if state.cleaned is not None else state.working
    mapped = base.translate(FULLWIDTH_PUNCTUATION)
    state.working = strip_trailing_commas(repair_strings(mapped))
    return _attempt(state.working)


def tier_salvage(state: DecodeState) -> TierResult:
    """Tier 5 — rebuild steps and scalars from fragments of the bounded text."""
    document = salvage_document(state.bounded or "")
    if document is None:
        return TierResult.abort(UnrecoverableContent())
    return TierResult.parsed(document)


REPAIR_TIERS: tuple[tuple[DecodeTier, TierFn], ...] = (
    (DecodeTier.DIRECT, tier_direct),
    (DecodeTier.BOUNDING, tier_bounding),
    (DecodeTier.CLEANUP, tier_cleanup),
    (DecodeTier.STRING_REPAIR, tier_string_repair),
    (DecodeTier.PUNCTUATION, tier_punctuation),
)

SALVAGE_TIER: tuple[DecodeTier, TierFn] = (DecodeTier.SALVAGE, tier_salvage)

DEFAULT_TIERS: tuple[tuple[DecodeTier, TierFn], ...] = REPAIR_TIERS + (SALVAGE_TIER,)
