"""
Structural salvage — last-resort reconstruction of a minimal document.

When no repair makes the text parse, the step list is rebuilt from
`{"title": "...", "desc": "..."}` fragments and the top-level scalars
are picked out key by key. Anything recovered here is lower confidence
than a parsed document: materials and tools are always left empty, and
callers are told the document was salvaged.
"""

import json
import re
from typing import Any, Optional

# Escape-aware, non-greedy JSON string body
_STRING = r'"((?:[^"\\]|\\.)*?)"'

_STEP_FRAGMENT = re.compile(
    r'\{\s*"title"\s*:\s*' + _STRING + r'\s*,\s*"desc"\s*:\s*' + _STRING,
    re.DOTALL,
)

_DIFFICULTY = re.compile(r'"difficulty"\s*:\s*"?\s*(-?\d+(?:\.\d+)?)')

TOP_LEVEL_STRINGS = ("designName", "designAnalysis", "difficultyReason", "estimatedTime")
STEP_EXTRAS = ("technique", "icon", "area", "tips")


def _key_pattern(key: str) -> re.Pattern:
    return re.compile(r'"' + re.escape(key) + r'"\s*:\s*' + _STRING, re.DOTALL)


_KEY_PATTERNS = {key: _key_pattern(key) for key in TOP_LEVEL_STRINGS + STEP_EXTRAS}


def unescape(raw: str) -> str:
    """Decode a captured JSON string body, keeping it verbatim if it is malformed."""
    try:
        return json.loads(f'"{raw}"', strict=False)
    except json.JSONDecodeError:
        return raw


def _find_string(key: str, text: str) -> Optional[str]:
    match = _KEY_PATTERNS[key].search(text)
    return unescape(match.group(1)) if match else None


def salvage_steps(text: str) -> list[dict[str, Any]]:
    """
    Rebuild steps from title/desc fragments.

    Each fragment also claims optional technique/icon/area/tips values
    found before the next fragment starts.
    """
    matches = list(_STEP_FRAGMENT.finditer(text))
    steps: list[dict[str, Any]] = []

    for i, match in enumerate(matches):
        region_end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        region = text[match.end():region_end]

        step: dict[str, Any] = {
            "title": unescape(match.group(1)),
            "desc": unescape(match.group(2)),
        }
        for key in STEP_EXTRAS:
            value = _find_string(key, region)
            if value is not None:
                step[key] = value
        steps.append(step)

    return steps


def salvage_scalars(text: str) -> dict[str, Any]:
    """Extract top-level scalar fields by per-key pattern match."""
    fields: dict[str, Any] = {}

    for key in TOP_LEVEL_STRINGS:
        value = _find_string(key, text)
        if value is not None:
            fields[key] = value

    difficulty = _DIFFICULTY.search(text)
    if difficulty:
        fields["difficulty"] = float(difficulty.group(1))

    return fields


def salvage_document(text: str) -> Optional[dict[str, Any]]:
    """
    Reconstruct a minimal loose document.

    Returns:
        The document, or None when not a single step fragment matched
    """
    steps = salvage_steps(text)
    if not steps:
        return None

    document = salvage_scalars(text)
    document["materials"] = []
    document["tools"] = []
    document["steps"] = steps
    return document
