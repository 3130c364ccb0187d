"""
Prefill — Rejoin a primed response with its continuation.

Upstream requests may prime the assistant turn with the opening of the
document (typically "{") so the model continues the JSON instead of
writing prose. The model's reply then starts mid-object; the prefix has
to be put back before decoding. Some models restate the opening anyway,
in which case the continuation is used as is.
"""

from drapekit.decode.normalize import normalize_text


def reattach_prefill(prefix: str, continuation: str) -> str:
    """
    Prepend the priming prefix unless the continuation already restates it.

    Args:
        prefix: Text the assistant turn was primed with
        continuation: What the model generated after it

    Returns:
        Text suitable for the decoder
    """
    continuation = continuation or ""
    marker = (prefix or "").strip()
    if not marker:
        return continuation

    head = normalize_text(continuation)
    if head.startswith("{") or head.startswith(marker):
        return continuation
    return prefix + continuation
