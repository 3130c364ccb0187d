"""
IR Serialization — JSON import/export for pipeline results.
"""

from pathlib import Path
from typing import Union

from drapekit.core.versioning import check_ir_compatibility
from drapekit.ir.schema import TransformResult


def to_json(result: TransformResult, indent: int = 2) -> str:
    """Serialize a TransformResult to JSON string."""
    return result.model_dump_json(indent=indent, by_alias=True)


def from_json(json_str: str) -> TransformResult:
    """
    Deserialize a TransformResult from JSON string.

    Raises:
        ValueError: If the stored IR version is incompatible
    """
    result = TransformResult.model_validate_json(json_str)
    if not check_ir_compatibility(result.version):
        raise ValueError(f"Incompatible IR version: {result.version}")
    return result


def save(result: TransformResult, path: Union[str, Path]) -> None:
    """Save a TransformResult to a JSON file."""
    path = Path(path)
    path.write_text(to_json(result), encoding="utf-8")


def load(path: Union[str, Path]) -> TransformResult:
    """Load a TransformResult from a JSON file."""
    path = Path(path)
    return from_json(path.read_text(encoding="utf-8"))
