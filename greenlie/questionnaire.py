"""
Questionnaire — Guided Five-Step Assessment

Walks the five criteria in display order, one answer per step.

  - Fact mode (a curated statement is attached): every answer returns
    corrective feedback against the curated status.
  - Custom mode (no statement): answers are recorded as given.

The flow will not advance past a step without an answer. Finishing
produces the ordered UserSelection list for the verdict calculators.
"""

from __future__ import annotations

from typing import Optional

from greenlie.engine import EvaluationEngine, engine as default_engine
from greenlie.models import (
    CRITERIA_ORDER,
    ConditionStatus,
    CorrectiveFeedback,
    Criterion,
    Statement,
    UserSelection,
)


class IncompleteSelectionError(Exception):
    """Tried to move past a step that has no answer."""


class Questionnaire:

    def __init__(
        self,
        statement: Optional[Statement] = None,
        engine: Optional[EvaluationEngine] = None,
    ):
        self.statement = statement
        self._engine = engine or default_engine
        self._step = 0
        self._selections: dict[Criterion, Optional[ConditionStatus]] = {
            c: None for c in CRITERIA_ORDER
        }

    @property
    def step(self) -> int:
        return self._step

    @property
    def current_criterion(self) -> Criterion:
        return CRITERIA_ORDER[self._step]

    @property
    def is_last_step(self) -> bool:
        return self._step == len(CRITERIA_ORDER) - 1

    @property
    def progress(self) -> float:
        """Percent through the flow, counting the current step."""
        return (self._step + 1) / len(CRITERIA_ORDER) * 100

    @property
    def selections(self) -> dict[Criterion, Optional[ConditionStatus]]:
        return dict(self._selections)

    @property
    def is_complete(self) -> bool:
        return all(v is not None for v in self._selections.values())

    def answer(self, choice: ConditionStatus) -> Optional[CorrectiveFeedback]:
        """Record an answer for the current step. Fact mode returns feedback."""
        choice = ConditionStatus(choice)
        criterion = self.current_criterion
        self._selections[criterion] = choice
        if self.statement is None:
            return None
        return self._engine.corrective_feedback(self.statement, criterion, choice)

    def next(self) -> bool:
        """
        Advance one step. Returns False when already on the last step.

        Raises IncompleteSelectionError if the current step is unanswered.
        """
        if self._selections[self.current_criterion] is None:
            raise IncompleteSelectionError(
                f"No answer for {self.current_criterion.value}"
            )
        if self.is_last_step:
            return False
        self._step += 1
        return True

    def back(self) -> bool:
        if self._step == 0:
            return False
        self._step -= 1
        return True

    def finish(self) -> list[UserSelection]:
        return self._engine.finalize_selections(self._selections, statement=self.statement)
