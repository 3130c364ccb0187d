"""
Errors — Typed failures surfaced by the pipeline.

Only four conditions ever reach a caller. Tier-level failures inside the
decoder are control signals and never appear here.

All of them indicate a bad generation rather than a bad pipeline, so they
are marked retryable: the caller should re-query the upstream model.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for caller-visible pipeline failures."""

    code: str = "PIPELINE_ERROR"
    retryable: bool = True
    default_message: str = "Pipeline failed"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInput(PipelineError):
    """Raw text is empty or whitespace-only after normalization."""

    code = "EMPTY_INPUT"
    default_message = "Model output is empty"


# ----------------------------------------------------------------------------
# Decode failures
# ----------------------------------------------------------------------------

class DecodeError(PipelineError):
    """The decoder cascade was exhausted."""

    code = "DECODE_ERROR"
    default_message = "Model output could not be decoded"


class NoJsonObjectFound(DecodeError):
    """No bounding pair of braces; the text is not structurally recoverable."""

    code = "NO_JSON_OBJECT_FOUND"
    default_message = "Model output contains no JSON object"


class UnrecoverableContent(DecodeError):
    """Every tier, structural salvage included, failed."""

    code = "UNRECOVERABLE_CONTENT"
    default_message = "Model output could not be repaired or salvaged"


# ----------------------------------------------------------------------------
# Validation failures
# ----------------------------------------------------------------------------

class ValidationError(PipelineError):
    """Decoding succeeded but the document is semantically incomplete."""

    code = "VALIDATION_ERROR"
    default_message = "Decoded document is incomplete"


class MissingSteps(ValidationError):
    """The decoded object has no usable step sequence."""

    code = "MISSING_STEPS"
    default_message = "Decoded document has no steps"


_BY_CODE: dict[str, type[PipelineError]] = {
    cls.code: cls
    for cls in (
        PipelineError,
        EmptyInput,
        DecodeError,
        NoJsonObjectFound,
        UnrecoverableContent,
        ValidationError,
        MissingSteps,
    )
}


def error_from_code(code: str, message: Optional[str] = None) -> PipelineError:
    """Rebuild a typed error from its code (unknown codes map to the base class)."""
    cls = _BY_CODE.get(code, PipelineError)
    return cls(message)
