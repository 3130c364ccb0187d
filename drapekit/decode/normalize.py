"""
Presentation stripping for raw model output.

Removes the wrapping a chat model puts around structured output:
- a leading byte-order mark
- one opening code fence, optionally annotated (```json, ```JSON, ``` js)
- one closing code fence
- surrounding whitespace

Pure, total, idempotent.
"""

import re

BOM = "\ufeff"

_OPENING_FENCE = re.compile(r"\A```[ \t]*(?:[a-z][\w+.-]*)?[ \t]*\r?\n?", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\s*```[ \t]*\Z")


def normalize_text(text: str) -> str:
    """Strip BOM, code fences, and surrounding whitespace from model output."""
    if not text:
        return ""

    # Applied to a fixed point so normalize_text(normalize_text(x)) == normalize_text(x)
    previous = None
    while text != previous:
        previous = text
        text = text.strip().lstrip(BOM).strip()
        text = _OPENING_FENCE.sub("", text, count=1)
        text = _CLOSING_FENCE.sub("", text, count=1)

    return text
