"""
Tiered Decoder — recover a loose document from untrusted model output.

Runs the tiers in order and stops at the first one that parses. Tier
failures are control flow, not errors: only an ABORT or exhaustion of
the whole cascade reaches the caller, as a DecodeError.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from drapekit.core.errors import EmptyInput, UnrecoverableContent
from drapekit.core.logging import LogChannel, get_logger
from drapekit.decode.normalize import normalize_text
from drapekit.decode.tiers import (
    DEFAULT_TIERS,
    REPAIR_TIERS,
    DecodeState,
    TierFn,
)
from drapekit.ir.enums import DecodeTier, TierOutcome

log = get_logger(LogChannel.DECODE)


@dataclass(frozen=True)
class DecodeOutcome:
    """A successfully decoded loose document and where it came from."""

    document: dict[str, Any]
    tier: DecodeTier
    attempts: tuple[DecodeTier, ...] = ()

    @property
    def salvaged(self) -> bool:
        """True for lower-confidence documents rebuilt by structural salvage."""
        return self.tier is DecodeTier.SALVAGE


class Decoder:
    """
    Ordered cascade of decoding strategies.

    Args:
        tiers: (tier, function) pairs in execution order
    """

    def __init__(self, tiers: Sequence[tuple[DecodeTier, TierFn]] = DEFAULT_TIERS) -> None:
        self.tiers = tuple(tiers)

    @classmethod
    def without_salvage(cls) -> "Decoder":
        """A decoder that stops after punctuation repair."""
        return cls(REPAIR_TIERS)

    def decode(self, text: str) -> DecodeOutcome:
        """
        Decode raw model output.

        Raises:
            EmptyInput: Nothing left after normalization
            NoJsonObjectFound: No bounding braces
            UnrecoverableContent: Every tier failed
        """
        state = DecodeState(source=normalize_text(text or ""))
        if not state.source:
            raise EmptyInput()

        for tier, tier_fn in self.tiers:
            state.attempts.append(tier)
            result = tier_fn(state)

            if result.outcome is TierOutcome.PARSED:
                log.verbose(
                    "decoded",
                    tier=tier.name,
                    keys=len(result.document),
                    attempts=len(state.attempts),
                )
                return DecodeOutcome(
                    document=result.document,
                    tier=tier,
                    attempts=tuple(state.attempts),
                )

            if result.outcome is TierOutcome.ABORT:
                log.verbose("decode_aborted", tier=tier.name, code=result.error.code)
                raise result.error

            log.debug("tier_skipped", tier=tier.name)

        raise UnrecoverableContent()


_default_decoder: Optional[Decoder] = None


def decode(text: str) -> DecodeOutcome:
    """Decode with the full default cascade (salvage included)."""
    global _default_decoder
    if _default_decoder is None:
        _default_decoder = Decoder()
    return _default_decoder.decode(text)
