"""
Verdict Scorer

Two verdict paths, separated from the engine for single-responsibility:

  - Fact-based:  the verdict is recomputed from a curated statement's
                 own ground truth. User answers never change it.
  - User-based:  the verdict comes purely from the user's own per-
                 criterion choices for a custom statement.

Honesty score = (available * 1 + partial * 0.5) / 5 * 100, rounded.
It doubles as the displayed "probability". It is a weighted tally,
not a statistical estimate.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from greenlie.models import (
    CRITERIA_ORDER,
    AnalysisResult,
    ConditionStatus,
    Criterion,
    Statement,
    Statistics,
    UserSelection,
    UserVerdict,
    Verdict,
)

logger = logging.getLogger(__name__)

TOTAL_CONDITIONS = len(CRITERIA_ORDER)

# Missing-count thresholds
DISHONEST_MISSING = 3
# Partial-count threshold when nothing is missing
PARTIAL_BARRIER = 3


def verdict_for_missing_count(missing_count: int) -> Verdict:
    """>= 3 missing: dishonest. 1-2: partially valid. 0: honest."""
    if missing_count >= DISHONEST_MISSING:
        return Verdict.STRUCTURALLY_DISHONEST
    if missing_count >= 1:
        return Verdict.PARTIALLY_VALID
    return Verdict.STRUCTURALLY_HONEST


def honesty_score(available_count: int, partial_count: int, total: int = TOTAL_CONDITIONS) -> int:
    """Weighted percentage of criteria held by the target group."""
    raw = (available_count * 1 + partial_count * 0.5) / total * 100
    return int(round(raw))


def missing_from_facts(statement: Statement) -> list[Criterion]:
    """Criteria whose curated status is not_available, in display order."""
    return [
        c for c in CRITERIA_ORDER
        if statement.status_of(c) is ConditionStatus.NOT_AVAILABLE
    ]


def calculate_verdict(
    statement: Statement,
    user_selections: Optional[list[UserSelection]] = None,
) -> AnalysisResult:
    """
    Fact-based verdict for a curated statement.

    user_selections ride along for display. They do not influence
    the verdict.
    """
    missing = missing_from_facts(statement)
    return AnalysisResult(
        statement=statement,
        user_selections=list(user_selections or []),
        missing_conditions=missing,
        verdict=verdict_for_missing_count(len(missing)),
    )


def _join_readable(criteria: list[Criterion]) -> str:
    return " and ".join(c.readable for c in criteria)


def calculate_verdict_from_user_selections(
    selections: Mapping[Criterion, Optional[ConditionStatus]],
) -> UserVerdict:
    """
    User-based verdict from one status per criterion.

    Rules, in precedence order:
      1. missing >= 3                  -> dishonest
      2. missing == 0 and partial == 0 -> honest
      3. missing == 0 and partial > 0  -> partially valid if partial >= 3, else honest
      4. missing == 1                  -> partially valid
      5. missing == 2                  -> partially valid
    Rule 1 catches every other count, so nothing falls through.

    A criterion with no choice counts as not_available.
    """
    missing: list[Criterion] = []
    partial: list[Criterion] = []
    available: list[Criterion] = []

    for criterion in CRITERIA_ORDER:
        choice = selections.get(criterion)
        if choice is None:
            logger.warning(
                "No selection for criterion, counting as not_available",
                extra={"criterion": criterion.value},
            )
            choice = ConditionStatus.NOT_AVAILABLE
        choice = ConditionStatus(choice)

        if choice is ConditionStatus.NOT_AVAILABLE:
            missing.append(criterion)
        elif choice is ConditionStatus.PARTIALLY_AVAILABLE:
            partial.append(criterion)
        else:
            available.append(criterion)

    missing_count = len(missing)
    partial_count = len(partial)
    score = honesty_score(len(available), partial_count)

    if missing_count >= DISHONEST_MISSING:
        verdict = Verdict.STRUCTURALLY_DISHONEST
        reasoning = (
            f"With {missing_count} out of {TOTAL_CONDITIONS} conditions missing "
            f"({_join_readable(missing)}), this statement places responsibility on a group "
            "without providing the structural support needed."
        )
    elif missing_count == 0 and partial_count == 0:
        verdict = Verdict.STRUCTURALLY_HONEST
        reasoning = (
            f"All {TOTAL_CONDITIONS} conditions are available. The target group has full "
            "structural power to implement this action."
        )
    elif missing_count == 0:
        if partial_count >= PARTIAL_BARRIER:
            verdict = Verdict.PARTIALLY_VALID
            outlook = "This creates significant barriers to action."
        else:
            verdict = Verdict.STRUCTURALLY_HONEST
            outlook = "Minor improvements could make this fully actionable."
        reasoning = (
            f"While no conditions are completely missing, {partial_count} conditions are only "
            f"partially available ({_join_readable(partial)}). {outlook}"
        )
    elif missing_count == 1:
        verdict = Verdict.PARTIALLY_VALID
        reasoning = (
            f"Only 1 condition is missing ({missing[0].readable}), making this statement "
            "partially valid. Addressing this gap would make it structurally honest."
        )
    else:
        verdict = Verdict.PARTIALLY_VALID
        reasoning = (
            f"{missing_count} conditions are missing: {_join_readable(missing)}. "
            "This creates meaningful barriers but is not fully dishonest."
        )

    statistics = Statistics(
        total_conditions=TOTAL_CONDITIONS,
        missing_count=missing_count,
        partial_count=partial_count,
        available_count=len(available),
        honesty_score=score,
    )

    return UserVerdict(
        verdict=verdict,
        missing_conditions=missing,
        partial_conditions=partial,
        available_conditions=available,
        probability=score,
        reasoning=reasoning,
        statistics=statistics,
    )
