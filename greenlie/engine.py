"""
Evaluation Engine — Structural Honesty Verdicts

This module is the boundary the UI and storage collaborators talk to.

The engine combines:
  1. The curated fact table (read-only ground truth)
  2. Target-group power profiles (who holds which levers)
  3. Keyword relevance heuristics (dynamic path only)
  4. The verdict scorer and the suggestion generators

Two evaluation paths:
  - Fact-based:  a curated statement, scored from its own ground truth.
                 User answers drive corrective feedback only.
  - User-based:  a custom statement, scored from the user's own answers.

A third, heuristic path (dynamic evaluation) infers each criterion's
status from the target group's power profile and the statement text.

The engine holds no mutable state. Every call is computable from its
inputs and the static tables. It never touches storage.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from greenlie.config import settings
from greenlie.facts import FactTable
from greenlie.models import (
    CRITERIA_ORDER,
    AnalysisResult,
    ConditionStatus,
    CorrectiveFeedback,
    Criterion,
    DynamicAssessment,
    DynamicEvaluation,
    DynamicVerdict,
    Statement,
    TargetGroupContext,
    UserSelection,
    UserVerdict,
)
from greenlie import power_profiles, relevance, scorer, suggestions

logger = logging.getLogger(__name__)


class EvaluationEngine:
    """
    Stateless evaluation engine over a fixed fact table.

    Instantiated once as a module singleton. Tests may build their
    own instance around a custom FactTable.
    """

    def __init__(self, facts: Optional[FactTable] = None):
        self._facts = facts if facts is not None else FactTable.from_file(settings.FACTS_PATH)

    # --------------------------------------------------------
    # Reference data
    # --------------------------------------------------------

    def lookup_statement(self, statement_id: str) -> Optional[Statement]:
        """Curated statement by id, or None when it does not exist."""
        return self._facts.get(statement_id)

    def list_statements(self) -> list[Statement]:
        return self._facts.all()

    # --------------------------------------------------------
    # Fact-based path
    # --------------------------------------------------------

    def corrective_feedback(
        self,
        statement: Statement,
        criterion: Criterion,
        user_choice: ConditionStatus,
    ) -> CorrectiveFeedback:
        """Compare one answer with the curated status. Strict 3-way equality."""
        assessment = statement.criteria_assessment[Criterion(criterion)]
        return CorrectiveFeedback(
            is_correct=ConditionStatus(user_choice) is assessment.status,
            explanation=assessment.explanation,
            examples=assessment.examples,
        )

    def evaluate_user_selection(
        self,
        statement: Statement,
        criterion: Criterion,
        user_choice: ConditionStatus,
    ) -> UserSelection:
        criterion = Criterion(criterion)
        user_choice = ConditionStatus(user_choice)
        return UserSelection(
            criterion=criterion,
            user_choice=user_choice,
            is_correct=user_choice is statement.status_of(criterion),
        )

    def finalize_selections(
        self,
        selections: Mapping[Criterion, Optional[ConditionStatus]],
        statement: Optional[Statement] = None,
    ) -> list[UserSelection]:
        """
        Turn the questionnaire's answers into one UserSelection per criterion.

        A criterion with no answer counts as not_available and is logged.
        With a curated statement, is_correct compares against ground truth.
        Without one there is nothing to compare to, so every answer is correct.
        """
        result = []
        for criterion in CRITERIA_ORDER:
            choice = selections.get(criterion)
            if choice is None:
                logger.warning(
                    "Questionnaire finished without an answer, using not_available",
                    extra={
                        "criterion": criterion.value,
                        "statement_id": statement.id if statement else None,
                    },
                )
                choice = ConditionStatus.NOT_AVAILABLE

            if statement is not None:
                result.append(self.evaluate_user_selection(statement, criterion, choice))
            else:
                result.append(UserSelection(
                    criterion=criterion,
                    user_choice=ConditionStatus(choice),
                    is_correct=True,
                ))
        return result

    def evaluate_against_facts(
        self,
        statement: Statement,
        user_selections: Optional[list[UserSelection]] = None,
    ) -> AnalysisResult:
        result = scorer.calculate_verdict(statement, user_selections)
        logger.debug(
            "Fact-based verdict",
            extra={
                "statement_id": statement.id,
                "verdict": result.verdict.value,
                "missing_count": len(result.missing_conditions),
            },
        )
        return result

    # --------------------------------------------------------
    # User-based path
    # --------------------------------------------------------

    def evaluate_from_user_selections(
        self,
        selections: Mapping[Criterion, Optional[ConditionStatus]],
    ) -> UserVerdict:
        result = scorer.calculate_verdict_from_user_selections(selections)
        logger.debug(
            "User-based verdict",
            extra={
                "verdict": result.verdict.value,
                "missing_count": result.statistics.missing_count,
                "honesty_score": result.statistics.honesty_score,
            },
        )
        return result

    # --------------------------------------------------------
    # Target-group context
    # --------------------------------------------------------

    def power_profile(self, target_group: str) -> list[Criterion]:
        return power_profiles.power_profile(target_group)

    def typical_power_context(self, target_group: str) -> TargetGroupContext:
        return power_profiles.typical_power_context(target_group)

    # --------------------------------------------------------
    # Suggestions
    # --------------------------------------------------------

    def remediation_suggestions(self, missing_conditions: list[Criterion]) -> dict[Criterion, str]:
        return suggestions.remediation_suggestions(missing_conditions)

    def honest_makeover_suggestions(
        self,
        statement_text: str,
        target_group: str,
        missing_conditions: list[Criterion],
    ) -> list[str]:
        return suggestions.honest_makeover_suggestions(
            statement_text, target_group, missing_conditions,
        )

    # --------------------------------------------------------
    # Dynamic (heuristic) path
    # --------------------------------------------------------

    def dynamic_evaluate(
        self,
        statement_text: str,
        target_group: str,
        source_type: str,
    ) -> DynamicEvaluation:
        """
        Infer each criterion's status from power profile and text.

        Controlled criterion            -> available
        Uncontrolled and relevant       -> not_available (a gap)
        Uncontrolled and not relevant   -> available (not a barrier here)
        """
        controlled = set(self.power_profile(target_group))
        assessment: dict[Criterion, DynamicAssessment] = {}
        missing: list[Criterion] = []

        for criterion in CRITERIA_ORDER:
            if criterion in controlled:
                assessment[criterion] = DynamicAssessment(
                    status=ConditionStatus.AVAILABLE,
                    explanation=f"{target_group} has structural control over {criterion.readable}.",
                )
            elif relevance.is_relevant(statement_text, criterion, source_type):
                assessment[criterion] = DynamicAssessment(
                    status=ConditionStatus.NOT_AVAILABLE,
                    explanation=(
                        f"{target_group} lacks structural control over {criterion.readable}. "
                        "This power typically lies with institutions, not individuals."
                    ),
                )
                missing.append(criterion)
            else:
                assessment[criterion] = DynamicAssessment(
                    status=ConditionStatus.AVAILABLE,
                    explanation="This criterion is not a barrier for this specific statement.",
                )

        return DynamicEvaluation(assessment=assessment, missing_conditions=missing)

    def dynamic_verdict(
        self,
        statement_text: str,
        target_group: str,
        source_type: str,
    ) -> DynamicVerdict:
        evaluation = self.dynamic_evaluate(statement_text, target_group, source_type)
        missing = evaluation.missing_conditions
        verdict = scorer.verdict_for_missing_count(len(missing))

        logger.info(
            f"Dynamic verdict: {verdict.value}",
            extra={
                "verdict": verdict.value,
                "target_group": target_group,
                "source_type": source_type,
                "missing_count": len(missing),
            },
        )

        return DynamicVerdict(
            verdict=verdict,
            missing_conditions=missing,
            assessment=evaluation.assessment,
            suggestions=list(self.remediation_suggestions(missing).values()),
        )


# ============================================================
# SINGLETON: instantiated once, never mutated
# ============================================================

engine = EvaluationEngine()
