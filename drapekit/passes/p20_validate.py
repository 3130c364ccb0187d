"""
Pass 20 — Schema Validation and Completion

Turns the loose document into the canonical TutorialDocument. Every
default, truncation and enum repair becomes a diagnostic.
"""

from drapekit.core.context import TransformContext
from drapekit.core.logging import get_pass_logger
from drapekit.validate.completer import DocumentCompleter

PASS_NAME = "p20_validate"
log = get_pass_logger(PASS_NAME)


def validate_schema(ctx: TransformContext) -> TransformContext:
    """
    Validate and complete the decoded document.

    Raises:
        MissingSteps: The document has no usable steps
    """
    completion = DocumentCompleter(ctx.domain).complete(ctx.loose_document)

    for note in completion.notes:
        ctx.add_diagnostic(
            level=note.level.value,
            code=note.code,
            message=note.message,
            source=PASS_NAME,
        )
        log.debug("completion_note", code=note.code, message=note.message)

    document = completion.document
    ctx.document = document
    # The loose document does not outlive validation
    ctx.loose_document = None

    log.info(
        "validated",
        steps=len(document.steps),
        materials=len(document.materials),
        tools=len(document.tools),
        repairs=len(completion.notes),
    )
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="validated_document",
        after=f"{len(document.steps)} steps",
    )
    return ctx
