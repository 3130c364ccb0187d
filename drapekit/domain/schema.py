"""
Domain Schema — Pydantic models for domain configuration.

A domain configuration holds every immutable table the pipeline reads:
- Metadata (id, name, version)
- Placeholders and design-name limits
- Conversational-fragment patterns
- Default materials and tools
- Icon and area keyword rules with their fallback cycles

Domains are frozen once loaded and injected into the engine.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from drapekit.ir.enums import Area, Icon


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ============================================================================
# Metadata
# ============================================================================

class DomainInfo(_Frozen):
    """Domain identity."""

    id: str = Field(..., description="Domain ID (e.g., 'draping')")
    name: str = Field(..., description="Human-readable name")
    version: str = Field("1.0", description="Configuration version")
    description: str = ""


# ============================================================================
# Completion Tables
# ============================================================================

class Placeholders(_Frozen):
    """Values substituted for missing or unusable text."""

    design_name: str = Field(..., description="Used when designName is absent or empty")
    generic_design_name: str = Field(
        ...,
        description="Used when designName is a conversational fragment",
    )
    step_title: str = Field(
        "Step {index}",
        description="Template for missing step titles; {index} is 1-based",
    )
    material_item: str = "Material"
    material_qty: str = ""
    tool_name: str = "Tool"


class NameLimits(_Frozen):
    """Design-name length rules."""

    max_length: int = Field(30, ge=1)
    truncated_length: int = Field(20, ge=1)
    terminals: str = Field(
        ".,!?。，！？",
        description="Sentence-terminal punctuation a long name is cut at",
    )

    @model_validator(mode="after")
    def _truncation_fits(self) -> "NameLimits":
        if self.truncated_length > self.max_length:
            raise ValueError("truncated_length must not exceed max_length")
        return self


class MaterialDefault(_Frozen):
    item: str
    spec: str = ""
    qty: str = ""


class ToolDefault(_Frozen):
    name: str
    purpose: str = ""


# ============================================================================
# Classifier Tables
# ============================================================================

class KeywordRule(_Frozen):
    """Assign `value` when any keyword occurs in a step's title + description."""

    value: str
    keywords: list[str] = Field(..., min_length=1)
    label: Optional[str] = Field(None, description="What the rule detects, e.g. 'cutting'")

    @field_validator("keywords")
    @classmethod
    def _lowercase(cls, keywords: list[str]) -> list[str]:
        return [k.lower() for k in keywords if k.strip()]


class ClassifierTable(_Frozen):
    """Ordered keyword rules plus the cyclic fallback for unmatched steps."""

    rules: list[KeywordRule] = Field(default_factory=list)
    fallback_cycle: list[str] = Field(..., min_length=2)

    @field_validator("fallback_cycle")
    @classmethod
    def _cycle_starts_diverse(cls, cycle: list[str]) -> list[str]:
        # Any run of two or more consecutive positions must yield two values.
        if cycle[0] == cycle[1]:
            raise ValueError("fallback_cycle must start with two distinct values")
        return cycle

    def check_values(self, allowed: set[str], table: str) -> None:
        unknown = {r.value for r in self.rules} | set(self.fallback_cycle)
        unknown -= allowed
        if unknown:
            raise ValueError(f"{table}: unknown values {sorted(unknown)}")


# ============================================================================
# Domain
# ============================================================================

class Domain(_Frozen):
    """Complete domain configuration."""

    domain: DomainInfo
    placeholders: Placeholders
    name_limits: NameLimits = Field(default_factory=NameLimits)
    conversational_patterns: list[str] = Field(
        default_factory=list,
        description="Regexes marking a designName where the model talks instead of naming",
    )
    default_materials: list[MaterialDefault] = Field(..., min_length=1)
    default_tools: list[ToolDefault] = Field(..., min_length=1)
    icons: ClassifierTable
    areas: ClassifierTable

    _conversational: list[re.Pattern] = PrivateAttr(default_factory=list)

    @field_validator("conversational_patterns")
    @classmethod
    def _patterns_compile(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid conversational pattern {pattern!r}: {e}") from e
        return patterns

    @model_validator(mode="after")
    def _check_tables(self) -> "Domain":
        self.icons.check_values(Icon.values(), "icons")
        self.areas.check_values(Area.values(), "areas")

        compiled = [re.compile(p, re.IGNORECASE) for p in self.conversational_patterns]
        limit = self.name_limits.max_length
        for field in ("design_name", "generic_design_name"):
            value = getattr(self.placeholders, field)
            if not value.strip() or len(value) > limit:
                raise ValueError(f"placeholders.{field} must be 1..{limit} characters")
            if any(p.search(value) for p in compiled):
                raise ValueError(f"placeholders.{field} matches a conversational pattern")
        return self

    def model_post_init(self, __context) -> None:
        self._conversational = [
            re.compile(p, re.IGNORECASE) for p in self.conversational_patterns
        ]

    def is_conversational(self, name: str) -> bool:
        """True when a design name reads like the model describing the upload."""
        return any(p.search(name) for p in self._conversational)
