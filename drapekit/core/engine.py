"""
Engine — runs a named pipeline of passes over one request.

Passes carry the domain logic; the engine only sequences them and turns
whatever they raise into a result:
- PipelineError: the model produced unusable output -> FAILED
- anything else: a defect in a pass -> ERROR
"""

from dataclasses import dataclass, field
from typing import Optional

from drapekit.core.context import TransformContext, TransformRequest
from drapekit.core.contracts import Pass
from drapekit.core.errors import PipelineError, error_from_code
from drapekit.core.logging import TransformLogger
from drapekit.domain.loader import get_domain
from drapekit.domain.schema import Domain
from drapekit.ir.enums import DiagnosticLevel, TransformStatus
from drapekit.ir.schema import ErrorInfo, TransformResult, TutorialDocument

DEFAULT_PIPELINE = "default"


@dataclass
class Pipeline:
    id: str
    name: str
    passes: list[Pass] = field(default_factory=list)


def _internal_error(ctx: TransformContext, code: str, message: str, source: str) -> None:
    ctx.status = TransformStatus.ERROR
    ctx.document = None
    ctx.error = ErrorInfo(code=code, message=message, retryable=False)
    ctx.add_diagnostic(DiagnosticLevel.ERROR, code, message, source)


class Engine:
    """
    Holds registered pipelines and the domain they run against.

    Args:
        domain: Domain tables for every pass (default: get_domain())
    """

    def __init__(self, domain: Optional[Domain] = None) -> None:
        self.domain = domain or get_domain()
        self._pipelines: dict[str, Pipeline] = {}

    def register_pipeline(self, pipeline: Pipeline) -> None:
        self._pipelines[pipeline.id] = pipeline

    def list_pipelines(self) -> list[str]:
        return list(self._pipelines)

    def transform(
        self,
        request: TransformRequest,
        pipeline_id: Optional[str] = None,
    ) -> TransformResult:
        """
        Run one request through a pipeline.

        Never raises for bad model output; the outcome is in the result's
        status, error and diagnostics.
        """
        pipeline_id = pipeline_id or DEFAULT_PIPELINE
        ctx = TransformContext.from_request(request, self.domain)

        pipeline = self._pipelines.get(pipeline_id)
        if pipeline is None:
            _internal_error(
                ctx,
                "PIPELINE_NOT_FOUND",
                f"Pipeline '{pipeline_id}' not registered",
                source="engine",
            )
            return ctx.to_result()

        tlog = TransformLogger(request.request_id)
        for pass_fn in pipeline.passes:
            pass_name = pass_fn.__name__
            tlog.pass_start(pass_name)
            try:
                ctx = pass_fn(ctx)
            except PipelineError as e:
                tlog.pass_failed(pass_name, e.code, e.message)
                ctx.fail(e, source=pass_name)
                ctx.add_trace(pass_name, "rejected", after=e.code)
                break
            except Exception as e:
                tlog.pass_error(pass_name, e)
                _internal_error(ctx, "PASS_ERROR", f"Pass '{pass_name}' failed: {e}", source="engine")
                ctx.add_trace(pass_name, "error")
                break
            tlog.pass_end(pass_name)

        tlog.transform_complete(
            status=ctx.status.value,
            decode_tier=None if ctx.decode_tier is None else int(ctx.decode_tier),
            steps=len(ctx.document.steps) if ctx.document else 0,
            diagnostics=len(ctx.diagnostics),
        )
        return ctx.to_result()


def setup_default_pipeline(engine: Engine) -> None:
    """
    Register the standard pipelines:
    - default: normalize, decode (with salvage), validate, diversify
    - strict: same, but decoding stops before structural salvage
    """
    from drapekit.passes import (
        decode_document,
        decode_document_strict,
        diversify_steps,
        normalize,
        validate_schema,
    )

    for pipeline_id, name, decoder in (
        (DEFAULT_PIPELINE, "Default DrapeKit Pipeline", decode_document),
        ("strict", "Strict Pipeline (no structural salvage)", decode_document_strict),
    ):
        engine.register_pipeline(Pipeline(
            id=pipeline_id,
            name=name,
            passes=[normalize, decoder, validate_schema, diversify_steps],
        ))


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Shared engine over the default domain, with the standard pipelines."""
    global _engine
    if _engine is None:
        _engine = Engine()
        setup_default_pipeline(_engine)
    return _engine


def transform(text: str, pipeline_id: Optional[str] = None) -> TransformResult:
    """Run raw model output through the shared engine."""
    return get_engine().transform(TransformRequest(text=text), pipeline_id)


def extract_tutorial(text: str, pipeline_id: Optional[str] = None) -> TutorialDocument:
    """
    Extract a tutorial or raise the typed failure.

    Raises:
        EmptyInput, NoJsonObjectFound, UnrecoverableContent, MissingSteps:
            rebuilt from the result's error code
        PipelineError: for engine-level errors (unknown pipeline, defects)
    """
    result = transform(text, pipeline_id)
    if result.document is not None:
        return result.document
    if result.error is None:
        raise PipelineError()
    raise error_from_code(result.error.code, result.error.message)
