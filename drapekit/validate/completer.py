"""
Schema Validator/Completer — loose document in, canonical tutorial out.

Total over any document shape: missing or mistyped fields are completed
from the domain's placeholders and defaults, never rejected. The one
exception is the step list, which is the tutorial itself.

Every repair is recorded as a CompletionNote so the pipeline can report
what was filled in without re-deriving it.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, TypeVar

from drapekit.core.errors import MissingSteps
from drapekit.domain.loader import get_domain
from drapekit.domain.schema import Domain
from drapekit.ir.enums import DEFAULT_AREA, DEFAULT_ICON, Area, DiagnosticLevel, Icon
from drapekit.ir.schema import Material, Step, Tool, Trouble, TutorialDocument

DEFAULT_DIFFICULTY = 3
DIFFICULTY_RANGE = (1, 5)

E = TypeVar("E", Icon, Area)


@dataclass(frozen=True)
class CompletionNote:
    """One repair applied while completing a document."""

    code: str
    message: str
    level: DiagnosticLevel = DiagnosticLevel.INFO


@dataclass(frozen=True)
class Completion:
    document: TutorialDocument
    notes: list[CompletionNote] = field(default_factory=list)


# =============================================================================
# Coercion Helpers
# =============================================================================

def _get(doc: Mapping, key: str, *aliases: str) -> Any:
    """Read a field by wire name, falling back to alternate spellings."""
    for name in (key, *aliases):
        if name in doc:
            return doc[name]
    return None


def coerce_text(value: Any, default: str = "") -> str:
    """Strings are stripped, numbers stringified, anything else defaulted."""
    if isinstance(value, str):
        return value.strip() or default
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        return str(value)
    return default


def coerce_difficulty(value: Any) -> Optional[int]:
    """
    Coerce a difficulty rating.

    Returns:
        The rating rounded half-up, or None if it is not a finite
        number within DIFFICULTY_RANGE
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    elif isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    else:
        return None

    low, high = DIFFICULTY_RANGE
    if not math.isfinite(number) or not low <= number <= high:
        return None
    return int(math.floor(number + 0.5))


def coerce_enum(value: Any, enum_cls: type[E], default: E) -> tuple[E, bool]:
    """
    Map a loose value onto a closed enumeration.

    Returns:
        (member, repaired) where repaired is True if the default was used
    """
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        candidate = value.strip().lower()
        if candidate in enum_cls.values():
            return enum_cls(candidate), False
    return default, True


def _as_list(value: Any) -> list:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return list(value)
    return []


# =============================================================================
# Completer
# =============================================================================

class DocumentCompleter:
    """
    Converts loose documents into TutorialDocuments for one domain.

    Stateless between calls; one instance may serve concurrent callers.
    """

    def __init__(self, domain: Optional[Domain] = None) -> None:
        self.domain = domain or get_domain()

    def complete(self, doc: Any) -> Completion:
        """
        Validate and complete a loose document.

        Raises:
            MissingSteps: No usable step sequence
        """
        if not isinstance(doc, Mapping):
            raise MissingSteps("Decoded value is not an object")

        notes: list[CompletionNote] = []
        steps = self._steps(_get(doc, "steps"), notes)

        document = TutorialDocument(
            design_name=self._design_name(_get(doc, "designName", "design_name"), notes),
            design_analysis=coerce_text(_get(doc, "designAnalysis", "design_analysis")),
            difficulty=self._difficulty(_get(doc, "difficulty"), notes),
            difficulty_reason=coerce_text(_get(doc, "difficultyReason", "difficulty_reason")),
            estimated_time=coerce_text(_get(doc, "estimatedTime", "estimated_time")),
            materials=self._materials(_get(doc, "materials"), notes),
            tools=self._tools(_get(doc, "tools"), notes),
            steps=steps,
        )
        return Completion(document=document, notes=notes)

    # -------------------------------------------------------------------------
    # Scalars
    # -------------------------------------------------------------------------

    def _design_name(self, value: Any, notes: list[CompletionNote]) -> str:
        placeholders = self.domain.placeholders
        limits = self.domain.name_limits

        name = coerce_text(value)
        if not name:
            notes.append(CompletionNote("DESIGN_NAME_DEFAULTED", "designName missing"))
            return placeholders.design_name

        if len(name) > limits.max_length:
            original_length = len(name)
            name = truncate_name(name, limits.terminals, limits.truncated_length)
            notes.append(CompletionNote(
                "DESIGN_NAME_TRUNCATED",
                f"designName cut from {original_length} to {len(name)} characters",
            ))
            if not name:
                return placeholders.design_name

        if self.domain.is_conversational(name):
            notes.append(CompletionNote(
                "DESIGN_NAME_CONVERSATIONAL",
                f"designName {name!r} describes the upload, not the design",
                DiagnosticLevel.WARNING,
            ))
            return placeholders.generic_design_name

        return name

    def _difficulty(self, value: Any, notes: list[CompletionNote]) -> int:
        difficulty = coerce_difficulty(value)
        if difficulty is None:
            notes.append(CompletionNote(
                "DIFFICULTY_DEFAULTED",
                f"difficulty {value!r} invalid, using {DEFAULT_DIFFICULTY}",
            ))
            return DEFAULT_DIFFICULTY
        return difficulty

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    def _materials(self, value: Any, notes: list[CompletionNote]) -> tuple[Material, ...]:
        placeholders = self.domain.placeholders
        materials = []

        for entry in _as_list(value):
            if isinstance(entry, Mapping):
                materials.append(Material(
                    item=coerce_text(entry.get("item"), placeholders.material_item),
                    spec=coerce_text(entry.get("spec")),
                    qty=coerce_text(entry.get("qty"), placeholders.material_qty),
                ))
            elif isinstance(entry, str) and entry.strip():
                materials.append(Material(item=entry.strip(), qty=placeholders.material_qty))

        if not materials:
            notes.append(CompletionNote("MATERIALS_DEFAULTED", "No materials, using defaults"))
            value = [m.model_dump() for m in self.domain.default_materials]
            return self._materials(value, notes)
        return tuple(materials)

    def _tools(self, value: Any, notes: list[CompletionNote]) -> tuple[Tool, ...]:
        placeholders = self.domain.placeholders
        tools = []

        for entry in _as_list(value):
            if isinstance(entry, Mapping):
                tools.append(Tool(
                    name=coerce_text(entry.get("name"), placeholders.tool_name),
                    purpose=coerce_text(entry.get("purpose")),
                ))
            elif isinstance(entry, str) and entry.strip():
                tools.append(Tool(name=entry.strip()))

        if not tools:
            notes.append(CompletionNote("TOOLS_DEFAULTED", "No tools, using defaults"))
            value = [t.model_dump() for t in self.domain.default_tools]
            return self._tools(value, notes)
        return tuple(tools)

    def _steps(self, value: Any, notes: list[CompletionNote]) -> tuple[Step, ...]:
        if value is None:
            raise MissingSteps("Decoded document has no steps field")
        if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
            raise MissingSteps("steps is not a sequence")
        if not value:
            raise MissingSteps("steps is empty")

        steps: list[Step] = []
        dropped = 0
        icon_repairs = 0
        area_repairs = 0

        for entry in value:
            if isinstance(entry, str) and entry.strip():
                entry = {"title": entry}
            if not isinstance(entry, Mapping):
                dropped += 1
                continue

            icon, icon_repaired = coerce_enum(entry.get("icon"), Icon, DEFAULT_ICON)
            area, area_repaired = coerce_enum(entry.get("area"), Area, DEFAULT_AREA)
            icon_repairs += icon_repaired
            area_repairs += area_repaired

            steps.append(Step(
                title=coerce_text(
                    entry.get("title"),
                    self.domain.placeholders.step_title.format(index=len(steps) + 1),
                ),
                desc=coerce_text(entry.get("desc")),
                technique=coerce_text(entry.get("technique")),
                icon=icon,
                area=area,
                tips=coerce_text(entry.get("tips")),
                troubles=self._troubles(entry.get("troubles")),
            ))

        if not steps:
            raise MissingSteps("steps has no usable entries")

        if dropped:
            notes.append(CompletionNote(
                "STEP_ENTRIES_DROPPED",
                f"{dropped} step entries were not objects",
                DiagnosticLevel.WARNING,
            ))
        if icon_repairs:
            notes.append(CompletionNote(
                "ICON_DEFAULTED",
                f"{icon_repairs} steps had a missing or unknown icon",
            ))
        if area_repairs:
            notes.append(CompletionNote(
                "AREA_DEFAULTED",
                f"{area_repairs} steps had a missing or unknown area",
            ))

        return tuple(steps)

    @staticmethod
    def _troubles(value: Any) -> tuple[Trouble, ...]:
        return tuple(
            Trouble(q=coerce_text(entry.get("q")), a=coerce_text(entry.get("a")))
            for entry in _as_list(value)
            if isinstance(entry, Mapping)
        )


def truncate_name(name: str, terminals: str, limit: int) -> str:
    """Keep the text before the first terminal punctuation mark, capped at `limit`."""
    for i, ch in enumerate(name):
        if ch in terminals:
            name = name[:i]
            break
    return name.strip()[:limit].strip()


def validate_document(doc: Any, domain: Optional[Domain] = None) -> TutorialDocument:
    """
    Convert a loose document into a canonical TutorialDocument.

    Raises:
        MissingSteps: No usable step sequence
    """
    return DocumentCompleter(domain).complete(doc).document
