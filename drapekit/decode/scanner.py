"""
Escape-aware character scanning.

Models JSON string lexing as a three-state machine:

    OUTSIDE --"--> INSIDE --\\--> ESCAPE --any--> INSIDE
       ^             |
       +------"------+

The repair scan walks the text once, feeding each character (plus one
character of lookahead) through `transition`, and concatenates what each
transition emits.
"""

import re
from enum import Enum
from typing import Optional

# Characters JSON accepts after a backslash
VALID_ESCAPES = frozenset('"\\/bfnrtu')

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


class ScanState(str, Enum):
    """Lexer position relative to JSON strings."""

    OUTSIDE = "outside"
    INSIDE = "inside"
    ESCAPE = "escape"


def transition(state: ScanState, ch: str, lookahead: str = "") -> tuple[ScanState, str]:
    """
    Advance the scanner by one character.

    Args:
        state: Current state
        ch: Current character
        lookahead: The following character ("" at end of input)

    Returns:
        (next state, text to emit in place of ch)
    """
    if state is ScanState.OUTSIDE:
        if ch == '"':
            return ScanState.INSIDE, ch
        if ch == "\\":
            # Stray backslash between tokens
            return ScanState.OUTSIDE, ""
        return ScanState.OUTSIDE, ch

    if state is ScanState.INSIDE:
        if ch == "\\":
            return ScanState.ESCAPE, ch
        if ch == '"':
            return ScanState.OUTSIDE, ch
        if ch == "\n":
            return ScanState.INSIDE, "\\n"
        if ch == "\r":
            # CRLF collapses into a single escaped newline
            return ScanState.INSIDE, "" if lookahead == "\n" else "\\n"
        if ch == "\t":
            return ScanState.INSIDE, "\\t"
        if ord(ch) < 0x20:
            return ScanState.INSIDE, f"\\u{ord(ch):04x}"
        return ScanState.INSIDE, ch

    # ESCAPE: the backslash has already been emitted
    if ch in VALID_ESCAPES:
        return ScanState.INSIDE, ch
    if ch == "\n":
        return ScanState.INSIDE, "n"
    if ch == "\r":
        return ScanState.INSIDE, "r"
    if ch == "\t":
        return ScanState.INSIDE, "t"
    # Unknown escape: keep the backslash as a literal character
    return ScanState.INSIDE, "\\" + ch


def repair_strings(text: str) -> str:
    """
    Make string literals legal JSON without touching structure.

    Inside strings: raw newlines, carriage returns and tabs are escaped,
    other control characters become \\u escapes, and invalid escape
    sequences are made literal. Outside strings: stray backslashes are
    dropped.
    """
    out: list[str] = []
    state = ScanState.OUTSIDE
    last = len(text) - 1

    for i, ch in enumerate(text):
        lookahead = text[i + 1] if i < last else ""
        state, emitted = transition(state, ch, lookahead)
        out.append(emitted)

    return "".join(out)


def strip_control_chars(text: str) -> str:
    """Remove non-printable control characters, keeping \\n, \\r and \\t."""
    return _CONTROL_CHARS.sub("", text)


def strip_trailing_commas(text: str) -> str:
    """Remove separators immediately before a closing brace or bracket."""
    return _TRAILING_COMMA.sub(r"\1", text)


def find_object_bounds(text: str) -> Optional[tuple[int, int]]:
    """
    Locate the first "{" and the last "}".

    Returns:
        (start, end) inclusive indices, or None if either brace is
        missing or they are out of order
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return start, end
