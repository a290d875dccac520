"""
Suggestion Generators

Both generators are pure functions of the missing criteria.

  - remediation_suggestions: one fixed remedy per missing criterion.
  - honest_makeover_suggestions: "make it honest" rewrites, one per
    missing criterion in input order. Infrastructure suggestions are
    picked by keyword from the statement text; the rest are templates
    filled with the target-group name.
"""

from __future__ import annotations

import re
from typing import Iterable

from greenlie.models import Criterion

REMEDIATION_TEMPLATES: dict[Criterion, str] = {
    Criterion.DECISION_AUTHORITY: (
        "Transfer decision-making power to the target group or create participatory "
        "processes where they can influence policy"
    ),
    Criterion.ACCESS_TO_ALTERNATIVES: (
        "Ensure sustainable alternatives are widely accessible, convenient, and "
        "available at point of need"
    ),
    Criterion.AFFORDABILITY: (
        "Provide subsidies, free alternatives, or implement price controls to "
        "eliminate cost barriers for the target group"
    ),
    Criterion.INFRASTRUCTURE_AVAILABILITY: (
        "Install necessary infrastructure (e.g., water refill stations, bike lanes, "
        "recycling bins, composting facilities)"
    ),
    Criterion.ENFORCEMENT_POWER: (
        "Grant institutional authority to enforce sustainability measures or create "
        "binding policies with accountability mechanisms"
    ),
}

MAKEOVER_PREFIX = "To make this honest: "

MAKEOVER_TEMPLATES: dict[Criterion, str] = {
    Criterion.AFFORDABILITY: (
        "Subsidize sustainable alternatives or provide them free to {group}"
    ),
    Criterion.DECISION_AUTHORITY: (
        "Give {group} a seat at the decision-making table through participatory governance"
    ),
    Criterion.ACCESS_TO_ALTERNATIVES: (
        "Ensure sustainable options are as convenient as unsustainable ones"
    ),
    Criterion.ENFORCEMENT_POWER: (
        "Create institutional policies that hold corporations accountable, not individuals"
    ),
    Criterion.INFRASTRUCTURE_AVAILABILITY: (
        "Provide the necessary infrastructure before placing responsibility on {group}"
    ),
}

# First match wins. Falls back to the generic infrastructure template.
INFRASTRUCTURE_MAKEOVERS: list[tuple[re.Pattern, str]] = [
    (
        re.compile(r"reusable|refill", re.IGNORECASE),
        "Install water refill stations across all campus buildings by next semester",
    ),
    (
        re.compile(r"bike|cycle", re.IGNORECASE),
        "Build protected bike lanes and secure parking before asking {group} to cycle",
    ),
    (
        re.compile(r"recycle", re.IGNORECASE),
        "Place clearly-labeled recycling bins within 50 meters of all common areas",
    ),
]


def remediation_suggestions(missing_conditions: Iterable[Criterion]) -> dict[Criterion, str]:
    """Fixed remedy per missing criterion, keyed by criterion."""
    return {
        Criterion(c): REMEDIATION_TEMPLATES[Criterion(c)]
        for c in missing_conditions
    }


def _infrastructure_template(statement_text: str) -> str:
    for pattern, template in INFRASTRUCTURE_MAKEOVERS:
        if pattern.search(statement_text):
            return template
    return MAKEOVER_TEMPLATES[Criterion.INFRASTRUCTURE_AVAILABILITY]


def honest_makeover_suggestions(
    statement_text: str,
    target_group: str,
    missing_conditions: Iterable[Criterion],
) -> list[str]:
    """One suggestion per missing criterion. Duplicates are kept."""
    suggestions = []
    for condition in missing_conditions:
        condition = Criterion(condition)
        if condition is Criterion.INFRASTRUCTURE_AVAILABILITY:
            template = _infrastructure_template(statement_text)
        else:
            template = MAKEOVER_TEMPLATES[condition]
        suggestions.append(MAKEOVER_PREFIX + template.format(group=target_group))
    return suggestions
