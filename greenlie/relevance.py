"""
Relevance Heuristics — Keyword-Gated Criterion Relevance

Used only by the dynamic (non-curated) evaluation path. When a target
group does NOT control a criterion, the criterion only counts as a gap
if it is relevant to the statement at hand.

Each rule is one of:
  - keyword gated: case-insensitive match against a fixed keyword list
  - always relevant
  - source gated: relevant only for listed source types

No stemming, no negation handling. Extend a rule's keyword list
without touching the scoring code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from greenlie.models import Criterion


@dataclass(frozen=True)
class RelevanceRule:
    # Regex fragments, OR-ed together
    keywords: tuple[str, ...] = ()
    always: bool = False
    source_types: tuple[str, ...] = ()
    pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "pattern", re.compile("|".join(self.keywords), re.IGNORECASE))

    def applies(self, text: str, source_type: str) -> bool:
        if self.always:
            return True
        if self.source_types:
            return source_type in self.source_types
        if self.keywords:
            return bool(self.pattern.search(text))
        return False


RELEVANCE_RULES: dict[Criterion, RelevanceRule] = {
    Criterion.INFRASTRUCTURE_AVAILABILITY: RelevanceRule(
        keywords=("reusable", "recycle", "bike", "public transport", "refill", "solar", "compost"),
    ),
    Criterion.AFFORDABILITY: RelevanceRule(
        keywords=("buy", "purchase", "switch", "invest", "afford"),
    ),
    Criterion.DECISION_AUTHORITY: RelevanceRule(
        keywords=("should", "must", "need to", "have to", "reduce", "stop", "avoid"),
    ),
    Criterion.ACCESS_TO_ALTERNATIVES: RelevanceRule(
        always=True,
    ),
    Criterion.ENFORCEMENT_POWER: RelevanceRule(
        source_types=("Government Policy",),
    ),
}


def is_relevant(statement_text: str, criterion: Criterion, source_type: str) -> bool:
    """Does this criterion bear on this statement?"""
    return RELEVANCE_RULES[Criterion(criterion)].applies(statement_text, source_type)
