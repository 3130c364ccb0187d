"""
Request and per-run state for the extraction pipeline.

A TransformContext is created per request, threaded through every pass
and frozen into a TransformResult at the end. Passes own disjoint groups
of fields (marked below); trace and diagnostics are append-only.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Union
from uuid import uuid4

from drapekit.core.errors import PipelineError
from drapekit.domain.schema import Domain
from drapekit.ir.enums import DecodeTier, DiagnosticLevel, TransformStatus
from drapekit.ir.schema import (
    Diagnostic,
    ErrorInfo,
    TraceEntry,
    TransformResult,
    TutorialDocument,
)


def _new_id() -> str:
    return uuid4().hex


@dataclass
class TransformRequest:
    """Raw model output plus caller metadata."""

    text: str
    request_id: str = field(default_factory=lambda: str(uuid4()))
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class TransformContext:
    request: TransformRequest
    raw_text: str
    domain: Domain

    # p00_normalize
    normalized_text: str = ""

    # p10_decode
    loose_document: Optional[dict[str, Any]] = None
    decode_tier: Optional[DecodeTier] = None
    salvaged: bool = False

    # p20_validate, p30_diversify
    document: Optional[TutorialDocument] = None

    # engine
    status: TransformStatus = TransformStatus.SUCCESS
    error: Optional[ErrorInfo] = None
    trace: list[TraceEntry] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_request(cls, request: TransformRequest, domain: Domain) -> "TransformContext":
        return cls(request=request, raw_text=request.text, domain=domain)

    def add_trace(
        self,
        pass_name: str,
        action: str,
        before: Optional[str] = None,
        after: Optional[str] = None,
    ) -> None:
        self.trace.append(TraceEntry(
            id=_new_id(),
            timestamp=datetime.now(),
            pass_name=pass_name,
            action=action,
            before=before,
            after=after,
        ))

    def add_diagnostic(
        self,
        level: Union[DiagnosticLevel, str],
        code: str,
        message: str,
        source: str,
    ) -> None:
        self.diagnostics.append(Diagnostic(
            id=_new_id(),
            level=DiagnosticLevel(level),
            code=code,
            message=message,
            source=source,
        ))

    def fail(self, error: PipelineError, source: str) -> None:
        """Record a typed failure; nothing partial is returned with it."""
        self.status = TransformStatus.FAILED
        self.document = None
        self.error = ErrorInfo(code=error.code, message=error.message, retryable=error.retryable)
        self.add_diagnostic(DiagnosticLevel.ERROR, error.code, error.message, source)

    def to_result(self) -> TransformResult:
        elapsed = datetime.now() - self.start_time
        return TransformResult(
            request_id=self.request.request_id,
            timestamp=self.start_time,
            processing_duration_ms=elapsed.total_seconds() * 1000,
            status=self.status,
            document=self.document,
            decode_tier=None if self.decode_tier is None else int(self.decode_tier),
            salvaged=self.salvaged,
            error=self.error,
            trace=self.trace,
            diagnostics=self.diagnostics,
        )
