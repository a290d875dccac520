"""
GreenLie — Structural Honesty Evaluator for Sustainability Statements

Scores whether the group a green statement addresses actually holds
the power (decision authority, alternatives, affordability,
infrastructure, enforcement) needed to act on it.

Public API:
  - engine:                 Stateless evaluation engine (fact, user and dynamic paths)
  - Questionnaire:          Guided five-step assessment flow
  - AnalysisStore:          Append-only local store for analyses, votes, custom statements
  - Criterion, ConditionStatus, Verdict:  The closed vocabularies

Usage:
    from greenlie import engine, Verdict
    result = engine.dynamic_verdict(
        "Youth should recycle more to save the planet", "Youth", "Campaign",
    )
    assert result.verdict is Verdict.STRUCTURALLY_DISHONEST
"""

__version__ = "1.0.0"

from greenlie.models import (
    Criterion,
    ConditionStatus,
    Verdict,
    VerdictFamily,
    CRITERIA_ORDER,
    Statement,
    UserSelection,
)
from greenlie.engine import engine, EvaluationEngine
from greenlie.questionnaire import Questionnaire, IncompleteSelectionError
from greenlie.storage import AnalysisStore, get_store

__all__ = [
    "Criterion",
    "ConditionStatus",
    "Verdict",
    "VerdictFamily",
    "CRITERIA_ORDER",
    "Statement",
    "UserSelection",
    "engine",
    "EvaluationEngine",
    "Questionnaire",
    "IncompleteSelectionError",
    "AnalysisStore",
    "get_store",
]
