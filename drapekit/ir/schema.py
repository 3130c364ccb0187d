"""
IR Schema — Pydantic models for the canonical tutorial and pipeline result.

The canonical document is the only value that crosses the pipeline's
output boundary. It is frozen once constructed; collections are tuples.

Python attributes are snake_case; the wire format is camelCase
(``designName``, ``difficultyReason``...), matching what the model is
prompted to emit.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from drapekit import __ir_version__
from drapekit.ir.enums import (
    DEFAULT_AREA,
    DEFAULT_ICON,
    Area,
    DiagnosticLevel,
    Icon,
    TransformStatus,
)

IR_VERSION = __ir_version__


class _Canonical(BaseModel):
    """Shared configuration for canonical document models."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        """Dump with camelCase keys and JSON-safe values."""
        return self.model_dump(mode="json", by_alias=True)


# ============================================================================
# Canonical Tutorial
# ============================================================================

class Material(_Canonical):
    """A material the tutorial requires."""

    item: str = Field(..., description="Material name")
    spec: str = Field(default="", description="Weight, weave, hand, etc.")
    qty: str = Field(default="", description="Amount needed")


class Tool(_Canonical):
    """A tool the tutorial requires."""

    name: str = Field(..., description="Tool name")
    purpose: str = Field(default="", description="What the tool is used for")


class Trouble(_Canonical):
    """A likely problem in a step and how to fix it."""

    q: str = ""
    a: str = ""


class Step(_Canonical):
    """A single step of the tutorial."""

    title: str
    desc: str = ""
    technique: str = ""
    icon: Icon = DEFAULT_ICON
    area: Area = DEFAULT_AREA
    tips: str = ""
    troubles: tuple[Trouble, ...] = ()


class TutorialDocument(_Canonical):
    """
    The canonical draping tutorial.

    Invariants (enforced by the validator, not re-checked here):
    - design_name is non-empty and at most 30 characters
    - difficulty is an integer in [1, 5]
    - steps is non-empty
    """

    design_name: str
    design_analysis: str = ""
    difficulty: int = Field(default=3, ge=1, le=5)
    difficulty_reason: str = ""
    estimated_time: str = ""
    materials: tuple[Material, ...] = ()
    tools: tuple[Tool, ...] = ()
    steps: tuple[Step, ...] = Field(..., min_length=1)


# ============================================================================
# Pipeline Result
# ============================================================================

class TraceEntry(BaseModel):
    """A single pipeline trace entry."""

    id: str
    timestamp: datetime
    pass_name: str
    action: str
    before: Optional[str] = None
    after: Optional[str] = None


class Diagnostic(BaseModel):
    """A diagnostic message."""

    id: str
    level: DiagnosticLevel
    code: str
    message: str
    source: str


class ErrorInfo(BaseModel):
    """The typed failure a transformation ended with."""

    code: str = Field(..., description="Error code, e.g. MISSING_STEPS")
    message: str
    retryable: bool = Field(True, description="Whether re-querying the model may help")


class TransformResult(BaseModel):
    """The complete output of one pipeline invocation."""

    version: str = Field(default=IR_VERSION, description="IR schema version")
    request_id: str = Field(..., description="Unique transformation ID")
    timestamp: datetime = Field(..., description="When transformation occurred")
    processing_duration_ms: float = 0.0

    status: TransformStatus = TransformStatus.SUCCESS
    document: Optional[TutorialDocument] = None
    decode_tier: Optional[int] = Field(
        None,
        description="Decoder tier that produced the loose document",
    )
    salvaged: bool = Field(
        False,
        description="True when recovered by structural salvage (lower confidence)",
    )
    error: Optional[ErrorInfo] = None

    trace: list[TraceEntry] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status in (TransformStatus.SUCCESS, TransformStatus.PARTIAL)
