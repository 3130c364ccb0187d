"""
Pass 00 — Input Normalization

Strips presentation wrapping from raw model output:
- Byte-order mark
- Markdown code fences (```json ... ```)
- Surrounding whitespace

Empty output is rejected here, before any decoding is attempted.
"""

from drapekit.core.context import TransformContext
from drapekit.core.errors import EmptyInput
from drapekit.core.logging import get_pass_logger
from drapekit.decode.normalize import normalize_text

PASS_NAME = "p00_normalize"
log = get_pass_logger(PASS_NAME)


def normalize(ctx: TransformContext) -> TransformContext:
    """
    Normalize raw model output.

    Raises:
        EmptyInput: Nothing remains after stripping
    """
    raw = ctx.raw_text or ""
    raw_len = len(raw)

    log.verbose("starting_normalization", input_chars=raw_len)

    text = normalize_text(raw)
    output_len = len(text)

    log.info(
        "normalized",
        input_chars=raw_len,
        output_chars=output_len,
        chars_removed=raw_len - output_len,
    )

    ctx.normalized_text = text
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="normalized_input",
        before=f"{raw_len} chars",
        after=f"{output_len} chars",
    )

    if not text:
        raise EmptyInput()

    return ctx
