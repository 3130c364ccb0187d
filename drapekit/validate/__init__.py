"""Validate — Schema validation and completion of loose documents."""

from drapekit.validate.completer import (
    Completion,
    CompletionNote,
    DocumentCompleter,
    validate_document,
)

__all__ = [
    "Completion",
    "CompletionNote",
    "DocumentCompleter",
    "validate_document",
]
