"""
Result-format versioning.

A stored TransformResult is readable when its IR version shares the
current major.minor; patch releases never change the wire shape.
"""

from typing import Optional

from drapekit import __ir_version__

IR_VERSION = __ir_version__


def _major_minor(version: str) -> Optional[tuple[str, str]]:
    parts = version.strip().split(".")
    if len(parts) < 2:
        return None
    return parts[0], parts[1]


def check_ir_compatibility(ir_version: str) -> bool:
    """True if a result written with `ir_version` can be loaded."""
    stored = _major_minor(ir_version)
    return stored is not None and stored == _major_minor(IR_VERSION)
