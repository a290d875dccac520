"""
Domain Model — Criteria, Statuses, Verdicts, Records

The five criteria are a closed, ordered set. Every assessment covers
all five exactly once. Strings appear only at the edges: `to_dict()`
renders the external shape, `from_dict()` reads it back.

The three-way verdict has ONE internal representation (`Verdict`),
ONE display formatter (`Verdict.label`) and ONE parser for legacy
or external labels (`Verdict.parse`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# ============================================================
# ENUMERATIONS
# ============================================================

class Criterion(str, Enum):
    """A structural-power dimension evaluated for every statement."""
    DECISION_AUTHORITY = "decision_authority"
    ACCESS_TO_ALTERNATIVES = "access_to_alternatives"
    AFFORDABILITY = "affordability"
    INFRASTRUCTURE_AVAILABILITY = "infrastructure_availability"
    ENFORCEMENT_POWER = "enforcement_power"

    @property
    def readable(self) -> str:
        """Identifier with underscores replaced by spaces."""
        return self.value.replace("_", " ")

    @property
    def label(self) -> str:
        return CRITERIA_LABELS[self]

    @property
    def question(self) -> str:
        return CRITERIA_QUESTIONS[self]


# Display order. Evaluation never depends on it.
CRITERIA_ORDER: tuple[Criterion, ...] = tuple(Criterion)


class ConditionStatus(str, Enum):
    AVAILABLE = "available"
    PARTIALLY_AVAILABLE = "partially_available"
    NOT_AVAILABLE = "not_available"

    @property
    def rank(self) -> int:
        """Degree of structural power: available > partial > not available."""
        return _STATUS_RANK[self]


_STATUS_RANK = {
    ConditionStatus.AVAILABLE: 2,
    ConditionStatus.PARTIALLY_AVAILABLE: 1,
    ConditionStatus.NOT_AVAILABLE: 0,
}


class Verdict(str, Enum):
    STRUCTURALLY_HONEST = "structurally_honest"
    PARTIALLY_VALID = "partially_valid"
    STRUCTURALLY_DISHONEST = "structurally_dishonest"

    @property
    def label(self) -> str:
        """Human-facing label."""
        return _VERDICT_LABELS[self]

    @classmethod
    def parse(cls, text) -> Optional["Verdict"]:
        """
        Read a verdict from an internal value or an external label.

        Accepts snake_case values ("partially_valid"), display labels
        ("GREEN LIE"), upper-cased enum names ("STRUCTURALLY_DISHONEST")
        and curated labels that mention PARTIALLY or MISLEADING.
        Matching is lenient: case is ignored and underscores read as
        spaces, so "green lie" parses as dishonest. Returns None for
        anything else. Aggregation uses the stricter `verdict_family`.
        """
        if text is None:
            return None
        if isinstance(text, cls):
            return text
        normalized = str(text).strip().upper().replace("_", " ")
        if normalized in ("GREEN LIE", "STRUCTURALLY DISHONEST"):
            return cls.STRUCTURALLY_DISHONEST
        if normalized == "STRUCTURALLY HONEST":
            return cls.STRUCTURALLY_HONEST
        if "PARTIALLY" in normalized or "MISLEADING" in normalized:
            return cls.PARTIALLY_VALID
        return None


_VERDICT_LABELS = {
    Verdict.STRUCTURALLY_HONEST: "STRUCTURALLY HONEST",
    Verdict.PARTIALLY_VALID: "PARTIALLY VALID",
    Verdict.STRUCTURALLY_DISHONEST: "GREEN LIE",
}


class VerdictFamily(str, Enum):
    """Aggregation bucket used by the insights dashboards."""
    GREEN_LIE = "green_lie"
    PARTIALLY_VALID = "partially_valid"
    HONEST = "honest"


def verdict_family(label) -> VerdictFamily:
    """
    Bucket a stored verdict label for aggregate statistics.

    Exact "GREEN LIE" is a green lie. Any label containing PARTIALLY or
    MISLEADING is partially valid. Everything else, including
    "STRUCTURALLY HONEST" and unrecognised labels, counts as honest.
    """
    label = "" if label is None else str(label)
    if label == Verdict.STRUCTURALLY_DISHONEST.label:
        return VerdictFamily.GREEN_LIE
    if "PARTIALLY" in label or "MISLEADING" in label:
        return VerdictFamily.PARTIALLY_VALID
    return VerdictFamily.HONEST


class VoteType(str, Enum):
    """Per-criterion community vote on a curated statement."""
    MISSING = "missing"
    AVAILABLE = "available"


class CustomVoteType(str, Enum):
    """Whole-statement community vote on a custom statement."""
    CONFIRM_MISSING = "confirmMissing"
    CONFIRM_AVAILABLE = "confirmAvailable"


# ============================================================
# DISPLAY TABLES
# ============================================================

CRITERIA_LABELS: dict[Criterion, str] = {
    Criterion.DECISION_AUTHORITY: "Decision Authority",
    Criterion.ACCESS_TO_ALTERNATIVES: "Access to Alternatives",
    Criterion.AFFORDABILITY: "Affordability",
    Criterion.INFRASTRUCTURE_AVAILABILITY: "Infrastructure Availability",
    Criterion.ENFORCEMENT_POWER: "Enforcement Power",
}

CRITERIA_QUESTIONS: dict[Criterion, str] = {
    Criterion.DECISION_AUTHORITY: "Does the target group have the power to make this decision?",
    Criterion.ACCESS_TO_ALTERNATIVES: "Are sustainable alternatives available to the target group?",
    Criterion.AFFORDABILITY: "Can the target group afford to take this action?",
    Criterion.INFRASTRUCTURE_AVAILABILITY: "Does the necessary infrastructure exist?",
    Criterion.ENFORCEMENT_POWER: "Can the target group enforce systemic change?",
}


def _criteria_list(values) -> list[str]:
    return [Criterion(c).value for c in values]


# ============================================================
# CURATED REFERENCE RECORDS
# ============================================================

@dataclass(frozen=True)
class ConditionExamples:
    positive: tuple[str, ...] = ()
    negative: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"positive": list(self.positive), "negative": list(self.negative)}


@dataclass(frozen=True)
class CriterionAssessment:
    """Editor-curated status for one criterion of one statement."""
    status: ConditionStatus
    explanation: str
    examples: ConditionExamples = field(default_factory=ConditionExamples)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "explanation": self.explanation,
            "examples": self.examples.to_dict(),
        }


@dataclass(frozen=True)
class Statement:
    """A predefined statement with editor-curated ground truth."""
    id: str
    statement: str
    target_group: str
    source_type: str
    action: str
    criteria_assessment: dict[Criterion, CriterionAssessment]
    verdict: str            # Curated label, e.g. "GREEN LIE"
    reasoning: str
    actionable_suggestions: tuple[str, ...] = ()

    def status_of(self, criterion: Criterion) -> ConditionStatus:
        return self.criteria_assessment[Criterion(criterion)].status

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "statement": self.statement,
            "target_group": self.target_group,
            "source_type": self.source_type,
            "action": self.action,
            "criteria_assessment": {
                c.value: self.criteria_assessment[c].to_dict()
                for c in CRITERIA_ORDER
            },
            "verdict": self.verdict,
            "reasoning": self.reasoning,
            "actionable_suggestions": list(self.actionable_suggestions),
        }


# ============================================================
# EVALUATION RESULTS
# ============================================================

@dataclass
class UserSelection:
    criterion: Criterion
    user_choice: ConditionStatus
    is_correct: bool

    def to_dict(self) -> dict:
        return {
            "criterion": self.criterion.value,
            "user_choice": self.user_choice.value,
            "is_correct": self.is_correct,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserSelection":
        return cls(
            criterion=Criterion(data["criterion"]),
            user_choice=ConditionStatus(data["user_choice"]),
            is_correct=bool(data["is_correct"]),
        )


@dataclass
class AnalysisResult:
    """Fact-based verdict for a curated statement."""
    statement: Statement
    user_selections: list[UserSelection]
    missing_conditions: list[Criterion]
    verdict: Verdict

    def to_dict(self) -> dict:
        return {
            "statement": self.statement.to_dict(),
            "user_selections": [s.to_dict() for s in self.user_selections],
            "missing_conditions": _criteria_list(self.missing_conditions),
            "verdict": self.verdict.value,
            "verdict_label": self.verdict.label,
        }


@dataclass(frozen=True)
class Statistics:
    total_conditions: int
    missing_count: int
    partial_count: int
    available_count: int
    honesty_score: int

    def to_dict(self) -> dict:
        return {
            "total_conditions": self.total_conditions,
            "missing_count": self.missing_count,
            "partial_count": self.partial_count,
            "available_count": self.available_count,
            "honesty_score": self.honesty_score,
        }


@dataclass
class UserVerdict:
    """User-based verdict for a custom statement."""
    verdict: Verdict
    missing_conditions: list[Criterion]
    partial_conditions: list[Criterion]
    available_conditions: list[Criterion]
    probability: int        # Weighted tally, not a statistical estimate
    reasoning: str
    statistics: Statistics

    def to_dict(self) -> dict:
        return {
            "verdict": self.verdict.value,
            "verdict_label": self.verdict.label,
            "missing_conditions": _criteria_list(self.missing_conditions),
            "partial_conditions": _criteria_list(self.partial_conditions),
            "available_conditions": _criteria_list(self.available_conditions),
            "probability": self.probability,
            "reasoning": self.reasoning,
            "statistics": self.statistics.to_dict(),
        }


@dataclass(frozen=True)
class CorrectiveFeedback:
    is_correct: bool
    explanation: str
    examples: ConditionExamples

    def to_dict(self) -> dict:
        return {
            "is_correct": self.is_correct,
            "explanation": self.explanation,
            "examples": self.examples.to_dict(),
        }


@dataclass(frozen=True)
class TargetGroupContext:
    typically_has: list[Criterion]
    typically_lacks: list[Criterion]
    power_level: str        # "high" | "medium" | "low"
    context_note: str

    def to_dict(self) -> dict:
        return {
            "typically_has": _criteria_list(self.typically_has),
            "typically_lacks": _criteria_list(self.typically_lacks),
            "power_level": self.power_level,
            "context_note": self.context_note,
        }


@dataclass(frozen=True)
class DynamicAssessment:
    status: ConditionStatus
    explanation: str

    def to_dict(self) -> dict:
        return {"status": self.status.value, "explanation": self.explanation}


@dataclass
class DynamicEvaluation:
    """Heuristic per-criterion assessment of free text."""
    assessment: dict[Criterion, DynamicAssessment]
    missing_conditions: list[Criterion]

    def to_dict(self) -> dict:
        return {
            "assessment": {c.value: a.to_dict() for c, a in self.assessment.items()},
            "missing_conditions": _criteria_list(self.missing_conditions),
        }


@dataclass
class DynamicVerdict:
    verdict: Verdict
    missing_conditions: list[Criterion]
    assessment: dict[Criterion, DynamicAssessment]
    suggestions: list[str]

    def to_dict(self) -> dict:
        return {
            "verdict": self.verdict.value,
            "verdict_label": self.verdict.label,
            "missing_conditions": _criteria_list(self.missing_conditions),
            "assessment": {c.value: a.to_dict() for c, a in self.assessment.items()},
            "suggestions": list(self.suggestions),
        }


# ============================================================
# PERSISTED RECORDS
# ============================================================

@dataclass
class CustomAnalysis:
    missing_conditions: list[Criterion]
    verdict: str            # Display label
    criteria_assessment: dict[Criterion, ConditionStatus]

    def to_dict(self) -> dict:
        return {
            "missing_conditions": _criteria_list(self.missing_conditions),
            "verdict": self.verdict,
            "criteria_assessment": {
                Criterion(c).value: ConditionStatus(s).value
                for c, s in self.criteria_assessment.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CustomAnalysis":
        return cls(
            missing_conditions=[Criterion(c) for c in data.get("missing_conditions", [])],
            verdict=data["verdict"],
            criteria_assessment={
                Criterion(c): ConditionStatus(s)
                for c, s in (data.get("criteria_assessment") or {}).items()
            },
        )


@dataclass
class CustomStatement:
    """A user-submitted statement. Analysed at most once."""
    id: str
    statement: str
    source_type: str
    target_group: str
    timestamp: int          # Epoch milliseconds
    analyzed: bool = False
    analysis_result: Optional[CustomAnalysis] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "statement": self.statement,
            "source_type": self.source_type,
            "target_group": self.target_group,
            "timestamp": self.timestamp,
            "analyzed": self.analyzed,
            "analysis_result": (
                self.analysis_result.to_dict() if self.analysis_result else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CustomStatement":
        result = data.get("analysis_result")
        return cls(
            id=data["id"],
            statement=data["statement"],
            source_type=data["source_type"],
            target_group=data["target_group"],
            timestamp=int(data["timestamp"]),
            analyzed=bool(data.get("analyzed", False)),
            analysis_result=CustomAnalysis.from_dict(result) if result else None,
        )


@dataclass
class StoredAnalysis:
    """One completed evaluation session. Append-only."""
    id: str
    statement_id: str
    statement: str
    target_group: str
    source_type: str
    user_selections: list[UserSelection]
    missing_conditions: list[Criterion]
    verdict: str            # Display label (curated or computed)
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "statement_id": self.statement_id,
            "statement": self.statement,
            "target_group": self.target_group,
            "source_type": self.source_type,
            "user_selections": [s.to_dict() for s in self.user_selections],
            "missing_conditions": _criteria_list(self.missing_conditions),
            "verdict": self.verdict,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StoredAnalysis":
        return cls(
            id=data["id"],
            statement_id=data["statement_id"],
            statement=data["statement"],
            target_group=data["target_group"],
            source_type=data["source_type"],
            user_selections=[UserSelection.from_dict(s) for s in data.get("user_selections", [])],
            missing_conditions=[Criterion(c) for c in data.get("missing_conditions", [])],
            verdict=data["verdict"],
            timestamp=int(data["timestamp"]),
        )


@dataclass
class Vote:
    statement_id: str
    criterion: Criterion
    vote_type: VoteType
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "statement_id": self.statement_id,
            "criterion": self.criterion.value,
            "vote_type": self.vote_type.value,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Vote":
        return cls(
            statement_id=data["statement_id"],
            criterion=Criterion(data["criterion"]),
            vote_type=VoteType(data["vote_type"]),
            timestamp=int(data["timestamp"]),
        )


@dataclass
class CustomVote:
    statement_id: str
    vote_type: CustomVoteType
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "statement_id": self.statement_id,
            "vote_type": self.vote_type.value,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CustomVote":
        return cls(
            statement_id=data["statement_id"],
            vote_type=CustomVoteType(data["vote_type"]),
            timestamp=int(data["timestamp"]),
        )
