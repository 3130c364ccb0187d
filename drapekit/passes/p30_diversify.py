"""
Pass 30 — Icon/Area Diversity

Re-infers collapsed icon and area values from step text.
"""

from drapekit.classify.diversity import Diversifier
from drapekit.core.context import TransformContext
from drapekit.core.logging import get_pass_logger

PASS_NAME = "p30_diversify"
log = get_pass_logger(PASS_NAME)


def diversify_steps(ctx: TransformContext) -> TransformContext:
    """Repair degenerate icon/area output on the validated document."""
    if ctx.document is None:
        log.debug("no_document", message="Nothing to classify")
        return ctx

    result = Diversifier(ctx.domain).diversify(ctx.document)
    ctx.document = result.document

    for repair in result.repairs:
        ctx.add_diagnostic(
            level="info",
            code=f"{repair.field.upper()}_DIVERSIFIED",
            message=(
                f"All steps shared one {repair.field}; "
                f"{repair.keyword_hits} inferred from keywords, "
                f"{repair.fallback_hits} from the fallback cycle"
                + (" (cycle forced)" if repair.forced_cycle else "")
            ),
            source=PASS_NAME,
        )

    log.info("diversified", fields=[r.field for r in result.repairs])
    if result.repairs:
        ctx.add_trace(
            pass_name=PASS_NAME,
            action="diversified",
            after=",".join(r.field for r in result.repairs),
        )
    return ctx
