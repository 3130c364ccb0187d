"""Passes — Pipeline stages for DrapeKit extraction."""

from drapekit.passes.p00_normalize import normalize
from drapekit.passes.p10_decode import decode_document, decode_document_strict
from drapekit.passes.p20_validate import validate_schema
from drapekit.passes.p30_diversify import diversify_steps

__all__ = [
    "normalize",
    "decode_document",
    "decode_document_strict",
    "validate_schema",
    "diversify_steps",
]
