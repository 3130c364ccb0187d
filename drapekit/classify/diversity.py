"""
Heuristic Classifier — repair collapsed icon/area choices.

Models often tag every step with the same icon or area. When that
happens on a tutorial long enough to matter, each step's value is
re-inferred from its title and description using the domain's ordered
keyword rules; steps no rule matches take the next value of a fixed
fallback cycle, indexed by step position. Identical input always gives
identical output.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from drapekit.core.logging import LogChannel, get_logger
from drapekit.domain.loader import get_domain
from drapekit.domain.schema import ClassifierTable, Domain
from drapekit.ir.enums import Area, Icon
from drapekit.ir.schema import TutorialDocument

log = get_logger(LogChannel.CLASSIFY)

# Diversity is only enforced on tutorials with more steps than this
MIN_STEPS = 3


@dataclass(frozen=True)
class FieldRepair:
    """How one categorical field was reassigned."""

    field: str
    keyword_hits: int
    fallback_hits: int
    forced_cycle: bool = False


@dataclass(frozen=True)
class Diversification:
    document: TutorialDocument
    repairs: list[FieldRepair] = field(default_factory=list)


@lru_cache(maxsize=None)
def _ascii_keyword(keyword: str) -> re.Pattern:
    # Whole word plus a regular inflection: pin/pins/pinned/pinning,
    # drape/draped/draping. "pinch" and "cute" do not match.
    if keyword.endswith("e"):
        body = re.escape(keyword[:-1]) + r"(?:e[sd]?|ings?)"
    else:
        body = re.escape(keyword) + r"(?:e?s|ed|ings?|[a-z](?:ed|ings?))?"
    return re.compile(r"(?<![a-z])" + body + r"(?![a-z])")


def keyword_hit(keyword: str, text: str) -> bool:
    """
    Match a lower-cased keyword in lower-cased text.

    ASCII keywords match whole words, allowing regular English
    inflections; CJK keywords have no word boundaries and match as
    substrings.
    """
    if keyword.isascii():
        return _ascii_keyword(keyword).search(text) is not None
    return keyword in text


def infer_value(text: str, table: ClassifierTable) -> Optional[str]:
    """Return the value of the first rule with a keyword in `text`."""
    text = text.lower()
    for rule in table.rules:
        if any(keyword_hit(k, text) for k in rule.keywords):
            return rule.value
    return None


def is_degenerate(values: list[str]) -> bool:
    """True when a long enough tutorial uses at most one distinct value."""
    return len(values) > MIN_STEPS and len(set(values)) <= 1


def reassign(texts: list[str], table: ClassifierTable, name: str) -> tuple[list[str], FieldRepair]:
    """Infer one value per step text, with cyclic fallback."""
    cycle = table.fallback_cycle
    assigned: list[str] = []
    keyword_hits = 0

    for i, text in enumerate(texts):
        value = infer_value(text, table)
        if value is None:
            value = cycle[i % len(cycle)]
        else:
            keyword_hits += 1
        assigned.append(value)

    forced = False
    if len(set(assigned)) <= 1:
        # Every step hit the same rule; only position can tell them apart
        assigned = [cycle[i % len(cycle)] for i in range(len(texts))]
        forced = True

    repair = FieldRepair(
        field=name,
        keyword_hits=keyword_hits,
        fallback_hits=len(texts) - keyword_hits,
        forced_cycle=forced,
    )
    return assigned, repair


class Diversifier:
    """Restores icon/area diversity for one domain."""

    def __init__(self, domain: Optional[Domain] = None) -> None:
        self.domain = domain or get_domain()

    def diversify(self, doc: TutorialDocument) -> Diversification:
        steps = list(doc.steps)
        texts = [f"{s.title} {s.desc}" for s in steps]
        repairs: list[FieldRepair] = []

        if is_degenerate([s.icon.value for s in steps]):
            icons, repair = reassign(texts, self.domain.icons, "icon")
            steps = [s.model_copy(update={"icon": Icon(v)}) for s, v in zip(steps, icons)]
            repairs.append(repair)

        if is_degenerate([s.area.value for s in steps]):
            areas, repair = reassign(texts, self.domain.areas, "area")
            steps = [s.model_copy(update={"area": Area(v)}) for s, v in zip(steps, areas)]
            repairs.append(repair)

        if not repairs:
            return Diversification(document=doc)

        for repair in repairs:
            log.verbose(
                "field_diversified",
                field=repair.field,
                keyword_hits=repair.keyword_hits,
                fallback_hits=repair.fallback_hits,
                forced_cycle=repair.forced_cycle,
            )

        updated = doc.model_copy(update={"steps": tuple(steps)})
        return Diversification(document=updated, repairs=repairs)


def diversify(doc: TutorialDocument, domain: Optional[Domain] = None) -> TutorialDocument:
    """Return `doc` with collapsed icon/area values re-inferred per step."""
    return Diversifier(domain).diversify(doc).document
