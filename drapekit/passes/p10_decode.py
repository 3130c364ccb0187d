"""
Pass 10 — Tiered Decoding

Recovers a loose document from the normalized text by running the
decoder cascade. Records which tier succeeded; documents rebuilt by
structural salvage mark the whole transformation PARTIAL so consumers
can treat them more conservatively.
"""

from drapekit.core.context import TransformContext
from drapekit.core.logging import get_pass_logger
from drapekit.decode.cascade import Decoder
from drapekit.ir.enums import DecodeTier, TransformStatus

PASS_NAME = "p10_decode"
log = get_pass_logger(PASS_NAME)

_FULL_DECODER = Decoder()
_STRICT_DECODER = Decoder.without_salvage()


def _run(ctx: TransformContext, decoder: Decoder) -> TransformContext:
    outcome = decoder.decode(ctx.normalized_text)

    ctx.loose_document = outcome.document
    ctx.decode_tier = outcome.tier
    ctx.salvaged = outcome.salvaged

    log.info(
        "decoded",
        tier=outcome.tier.name,
        tiers_tried=len(outcome.attempts),
        top_level_keys=len(outcome.document),
    )

    if outcome.tier is not DecodeTier.DIRECT:
        ctx.add_diagnostic(
            level="info",
            code="DECODE_REPAIRED",
            message=f"Output recovered by tier {int(outcome.tier)} ({outcome.tier.name.lower()})",
            source=PASS_NAME,
        )

    if outcome.salvaged:
        ctx.status = TransformStatus.PARTIAL
        ctx.add_diagnostic(
            level="warning",
            code="SALVAGED_CONTENT",
            message=(
                f"Rebuilt {len(outcome.document.get('steps', []))} steps from fragments; "
                "materials and tools are defaults"
            ),
            source=PASS_NAME,
        )
        log.warning("salvaged", steps=len(outcome.document.get("steps", [])))

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="decoded",
        before=f"{len(ctx.normalized_text)} chars",
        after=f"tier {int(outcome.tier)}",
    )
    return ctx


def decode_document(ctx: TransformContext) -> TransformContext:
    """
    Decode with the full cascade, structural salvage included.

    Raises:
        NoJsonObjectFound: No bounding braces in the text
        UnrecoverableContent: Every tier failed
    """
    return _run(ctx, _FULL_DECODER)


def decode_document_strict(ctx: TransformContext) -> TransformContext:
    """
    Decode without structural salvage.

    Raises:
        NoJsonObjectFound: No bounding braces in the text
        UnrecoverableContent: No repair tier produced a parseable object
    """
    return _run(ctx, _STRICT_DECODER)
