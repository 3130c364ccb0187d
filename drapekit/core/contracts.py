"""
Pass contract shared by the engine and the pass modules.
"""

from typing import Protocol

from drapekit.core.context import TransformContext


class Pass(Protocol):
    """A pipeline stage: takes the context, returns it (usually mutated)."""

    __name__: str

    def __call__(self, ctx: TransformContext) -> TransformContext: ...
