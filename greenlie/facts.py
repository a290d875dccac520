"""
Reference Facts — Curated Statement Table

Loads the editor-curated statements once at startup and serves them
read-only by id. Reference data is trusted build input: a malformed
record fails loudly at load time instead of being skipped.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from greenlie.models import (
    ConditionExamples,
    ConditionStatus,
    Criterion,
    CriterionAssessment,
    Statement,
)

logger = logging.getLogger(__name__)

ROOT_KEY = "sustainability_statements"


class ReferenceDataError(ValueError):
    """A curated statement record does not have the required shape."""


def _parse_assessment(statement_id: str, key: str, data: dict) -> CriterionAssessment:
    try:
        status = ConditionStatus(data["status"])
    except (KeyError, ValueError) as e:
        raise ReferenceDataError(
            f"{statement_id}: invalid status for '{key}': {data.get('status')!r}"
        ) from e
    examples = data.get("examples") or {}
    return CriterionAssessment(
        status=status,
        explanation=data.get("explanation", ""),
        examples=ConditionExamples(
            positive=tuple(examples.get("positive", [])),
            negative=tuple(examples.get("negative", [])),
        ),
    )


def parse_statement(record: dict) -> Statement:
    """Build a Statement from one reference record, validating criteria keys."""
    statement_id = record.get("id")
    if not statement_id:
        raise ReferenceDataError("Statement record without an id")

    raw = record.get("criteria_assessment") or {}
    expected = {c.value for c in Criterion}
    found = set(raw)
    if found != expected:
        missing = sorted(expected - found)
        extra = sorted(found - expected)
        raise ReferenceDataError(
            f"{statement_id}: criteria_assessment must cover exactly the five criteria "
            f"(missing={missing}, unexpected={extra})"
        )

    assessment = {
        Criterion(key): _parse_assessment(statement_id, key, value)
        for key, value in raw.items()
    }

    try:
        return Statement(
            id=statement_id,
            statement=record["statement"],
            target_group=record["target_group"],
            source_type=record["source_type"],
            action=record.get("action", ""),
            criteria_assessment=assessment,
            verdict=record["verdict"],
            reasoning=record.get("reasoning", ""),
            actionable_suggestions=tuple(record.get("actionable_suggestions", [])),
        )
    except KeyError as e:
        raise ReferenceDataError(f"{statement_id}: missing field {e}") from e


def load_statements(path: str) -> list[Statement]:
    """Read and validate every statement in a reference file."""
    with open(Path(path), "r", encoding="utf-8") as f:
        data = json.load(f)

    records = data.get(ROOT_KEY) if isinstance(data, dict) else None
    if not isinstance(records, list):
        raise ReferenceDataError(f"{path}: expected a '{ROOT_KEY}' list")

    statements = [parse_statement(r) for r in records]

    ids = [s.id for s in statements]
    if len(ids) != len(set(ids)):
        raise ReferenceDataError(f"{path}: duplicate statement ids")

    logger.info(f"Loaded {len(statements)} reference statements from {path}")
    return statements


class FactTable:
    """Immutable, id-indexed view over the curated statements."""

    def __init__(self, statements: list[Statement]):
        self._statements = tuple(statements)
        self._by_id = {s.id: s for s in self._statements}

    @classmethod
    def from_file(cls, path: str) -> "FactTable":
        return cls(load_statements(path))

    def get(self, statement_id: str) -> Optional[Statement]:
        return self._by_id.get(statement_id)

    def all(self) -> list[Statement]:
        return list(self._statements)

    def __len__(self) -> int:
        return len(self._statements)
