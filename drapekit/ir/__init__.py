"""IR — Canonical tutorial models, enums, and serialization."""

from drapekit.ir.enums import Area, DecodeTier, Icon, TransformStatus
from drapekit.ir.schema import (
    Material,
    Step,
    Tool,
    TransformResult,
    Trouble,
    TutorialDocument,
)

__all__ = [
    "Area",
    "DecodeTier",
    "Icon",
    "TransformStatus",
    "Material",
    "Step",
    "Tool",
    "TransformResult",
    "Trouble",
    "TutorialDocument",
]
