"""
API Schemas — Request and Response Models

Pydantic models for the GreenLie API. Request validation here is the
InvalidInput boundary: the engine behind it assumes validated input.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field

from greenlie.models import ConditionStatus, Criterion, CustomVoteType, VoteType


# ============================================================
# QUESTIONNAIRE
# ============================================================

class FeedbackRequest(BaseModel):
    """POST /statements/{id}/feedback request body."""
    criterion: Criterion
    user_choice: ConditionStatus

    model_config = {"json_schema_extra": {"examples": [
        {"criterion": "affordability", "user_choice": "available"},
    ]}}


class SelectionsRequest(BaseModel):
    """One answer per criterion. Unanswered criteria count as not_available."""
    selections: dict[Criterion, Optional[ConditionStatus]] = Field(
        ..., description="Map of criterion to the user's chosen status.",
    )

    model_config = {"json_schema_extra": {"examples": [
        {"selections": {
            "decision_authority": "not_available",
            "access_to_alternatives": "partially_available",
            "affordability": "available",
            "infrastructure_availability": "not_available",
            "enforcement_power": "not_available",
        }},
    ]}}


class ExamplesModel(BaseModel):
    positive: list[str]
    negative: list[str]


class FeedbackResponse(BaseModel):
    is_correct: bool
    explanation: str
    examples: ExamplesModel


# ============================================================
# CUSTOM STATEMENTS
# ============================================================

class CustomStatementRequest(BaseModel):
    """POST /custom request body."""
    statement: str = Field(..., min_length=10, max_length=2_000,
                           description="The sustainability statement (at least 10 characters).")
    source_type: str = Field(..., min_length=1, max_length=100,
                             description="Where the statement comes from, e.g. Campaign.")
    target_group: str = Field(..., min_length=1, max_length=100,
                              description="Who the statement addresses, e.g. Youth.")

    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {"examples": [
            {"statement": "Youth should recycle more to save the planet",
             "source_type": "Campaign", "target_group": "Youth"},
        ]},
    }


class CustomStatementCreated(BaseModel):
    id: str


class StatisticsModel(BaseModel):
    total_conditions: int
    missing_count: int
    partial_count: int
    available_count: int
    honesty_score: int


class TargetContextModel(BaseModel):
    typically_has: list[str]
    typically_lacks: list[str]
    power_level: str
    context_note: str


class UserVerdictResponse(BaseModel):
    """POST /evaluate/selections response body."""
    verdict: str
    verdict_label: str
    missing_conditions: list[str]
    partial_conditions: list[str]
    available_conditions: list[str]
    probability: int
    reasoning: str
    statistics: StatisticsModel


class CustomAnalysisResponse(UserVerdictResponse):
    """POST /custom/{id}/evaluate response body."""
    analysis_id: str
    statement_id: str
    statement: str
    target_group: str
    source_type: str
    target_context: TargetContextModel
    makeover_suggestions: list[str]
    suggestions: dict[str, str]


# ============================================================
# DYNAMIC EVALUATION
# ============================================================

class DynamicRequest(BaseModel):
    """POST /evaluate/dynamic request body."""
    statement: str = Field(..., min_length=10, max_length=2_000)
    target_group: str = Field(..., min_length=1, max_length=100)
    source_type: str = Field(..., min_length=1, max_length=100)

    model_config = {"str_strip_whitespace": True}


class CriterionStatusModel(BaseModel):
    status: str
    explanation: str


class DynamicVerdictResponse(BaseModel):
    verdict: str
    verdict_label: str
    missing_conditions: list[str]
    assessment: dict[str, CriterionStatusModel]
    suggestions: list[str]


class TargetGroupResponse(BaseModel):
    """GET /target-groups/{group} response body."""
    target_group: str
    known: bool
    power_profile: list[str]
    context: TargetContextModel


class SuggestionsRequest(BaseModel):
    """POST /suggestions request body."""
    missing_conditions: list[Criterion]
    statement: Optional[str] = Field(None, max_length=2_000)
    target_group: Optional[str] = Field(None, max_length=100)


class SuggestionsResponse(BaseModel):
    remediation: dict[str, str]
    makeover: list[str]


# ============================================================
# VOTES
# ============================================================

class VoteRequest(BaseModel):
    """POST /statements/{id}/votes request body."""
    criterion: Criterion
    vote_type: VoteType


class CustomVoteRequest(BaseModel):
    """POST /custom/{id}/votes request body."""
    vote_type: CustomVoteType


# ============================================================
# HEALTH
# ============================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    engine_version: str
    statements_loaded: int
    stored_analyses: int
