"""
Analysis Service — Session Orchestrator

Coordinates the engine and the store for complete sessions:

  - submit a custom statement (input validation lives here)
  - finish a fact-based session on a curated statement
  - finish a user-based session on a custom statement
  - record community votes

The engine stays pure. Everything that reads or writes the store
goes through this module. Lookups that miss return None.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from greenlie.engine import EvaluationEngine, engine as default_engine
from greenlie.models import (
    ConditionStatus,
    Criterion,
    CustomAnalysis,
    CustomVote,
    CustomVoteType,
    StoredAnalysis,
    Vote,
    VoteType,
)
from greenlie.storage import AnalysisStore, new_id, now_ms

logger = logging.getLogger(__name__)

MIN_STATEMENT_LENGTH = 10

Selections = Mapping[Criterion, Optional[ConditionStatus]]


class InvalidStatementError(ValueError):
    """Custom statement input rejected at the boundary."""


class AlreadyAnalyzedError(ValueError):
    """A custom statement can only be analysed once."""


def submit_custom_statement(
    text: str,
    source_type: str,
    target_group: str,
    store: AnalysisStore,
) -> str:
    """Validate and store a new custom statement. Returns its id."""
    text = (text or "").strip()
    if len(text) < MIN_STATEMENT_LENGTH:
        raise InvalidStatementError(
            f"Statement must be at least {MIN_STATEMENT_LENGTH} characters."
        )
    if not (source_type or "").strip():
        raise InvalidStatementError("A source type is required.")
    if not (target_group or "").strip():
        raise InvalidStatementError("A target group is required.")

    return store.save_custom_statement(text, source_type.strip(), target_group.strip())


def complete_fact_analysis(
    statement_id: str,
    selections: Selections,
    store: AnalysisStore,
    engine: Optional[EvaluationEngine] = None,
) -> Optional[dict]:
    """
    Finish a questionnaire on a curated statement.

    The verdict comes from ground truth. The stored record keeps the
    curated verdict label and the user's graded answers.
    """
    engine = engine or default_engine
    statement = engine.lookup_statement(statement_id)
    if statement is None:
        return None

    user_selections = engine.finalize_selections(selections, statement=statement)
    result = engine.evaluate_against_facts(statement, user_selections)

    stored = StoredAnalysis(
        id=new_id("analysis"),
        statement_id=statement.id,
        statement=statement.statement,
        target_group=statement.target_group,
        source_type=statement.source_type,
        user_selections=user_selections,
        missing_conditions=result.missing_conditions,
        verdict=statement.verdict,
        timestamp=now_ms(),
    )
    store.save_analysis(stored)

    correct = sum(1 for s in user_selections if s.is_correct)
    logger.info(
        f"Fact analysis complete: {result.verdict.value} ({correct}/{len(user_selections)} correct)",
        extra={
            "statement_id": statement.id,
            "verdict": result.verdict.value,
            "missing_count": len(result.missing_conditions),
        },
    )

    return {
        **result.to_dict(),
        "analysis_id": stored.id,
        "correct_count": correct,
        "suggestions": {
            c.value: text
            for c, text in engine.remediation_suggestions(result.missing_conditions).items()
        },
    }


def complete_custom_analysis(
    custom_id: str,
    selections: Selections,
    store: AnalysisStore,
    engine: Optional[EvaluationEngine] = None,
) -> Optional[dict]:
    """
    Finish a questionnaire on a custom statement.

    The verdict comes purely from the user's answers. The custom
    statement is marked analysed and a session record is appended.
    """
    engine = engine or default_engine
    record = store.get_custom_statement(custom_id)
    if record is None:
        return None
    if record.analyzed:
        raise AlreadyAnalyzedError(f"Custom statement {custom_id} has already been analysed.")

    user_selections = engine.finalize_selections(selections)
    answers = {s.criterion: s.user_choice for s in user_selections}
    result = engine.evaluate_from_user_selections(answers)
    label = result.verdict.label

    store.update_custom_statement_analysis(
        custom_id,
        CustomAnalysis(
            missing_conditions=result.missing_conditions,
            verdict=label,
            criteria_assessment=answers,
        ),
    )

    stored = StoredAnalysis(
        id=new_id("analysis"),
        statement_id=record.id,
        statement=record.statement,
        target_group=record.target_group,
        source_type=record.source_type,
        user_selections=user_selections,
        missing_conditions=result.missing_conditions,
        verdict=label,
        timestamp=now_ms(),
    )
    store.save_analysis(stored)

    logger.info(
        f"Custom analysis complete: {result.verdict.value} score={result.statistics.honesty_score}",
        extra={
            "statement_id": record.id,
            "verdict": result.verdict.value,
            "honesty_score": result.statistics.honesty_score,
            "target_group": record.target_group,
        },
    )

    return {
        **result.to_dict(),
        "analysis_id": stored.id,
        "statement_id": record.id,
        "statement": record.statement,
        "target_group": record.target_group,
        "source_type": record.source_type,
        "target_context": engine.typical_power_context(record.target_group).to_dict(),
        "makeover_suggestions": engine.honest_makeover_suggestions(
            record.statement, record.target_group, result.missing_conditions,
        ),
        "suggestions": {
            c.value: text
            for c, text in engine.remediation_suggestions(result.missing_conditions).items()
        },
    }


def record_vote(
    statement_id: str,
    criterion: Criterion,
    vote_type: VoteType,
    store: AnalysisStore,
    engine: Optional[EvaluationEngine] = None,
) -> Optional[Vote]:
    """Append a per-criterion vote on a curated statement."""
    engine = engine or default_engine
    if engine.lookup_statement(statement_id) is None:
        return None
    return store.save_vote(statement_id, Criterion(criterion), VoteType(vote_type))


def record_custom_vote(
    custom_id: str,
    vote_type: CustomVoteType,
    store: AnalysisStore,
) -> Optional[CustomVote]:
    """Append a whole-statement vote on a custom statement."""
    if store.get_custom_statement(custom_id) is None:
        return None
    return store.save_custom_vote(custom_id, CustomVoteType(vote_type))
