"""
Target-Group Power Profiles

Two fixed tables keyed by target-group label:

  1. STRUCTURAL_POWER: the criteria a group structurally controls.
     Drives scoring in the dynamic evaluation path.
  2. TYPICAL_POWER: what a group typically has and typically lacks.
     Advisory only. Never used for scoring.

Institutional actors are classified as holding most or all levers.
Individual actors hold none, except that consumers and citizens keep
access to alternatives. Unknown labels fall back to "General Public".
"""

from __future__ import annotations

from dataclasses import dataclass

from greenlie.models import CRITERIA_ORDER, Criterion, TargetGroupContext

DEFAULT_GROUP = "General Public"

_ALL = tuple(CRITERIA_ORDER)

STRUCTURAL_POWER: dict[str, tuple[Criterion, ...]] = {
    # High structural power
    "Government": _ALL,
    "City Government": _ALL,
    "Corporations": (
        Criterion.DECISION_AUTHORITY,
        Criterion.ACCESS_TO_ALTERNATIVES,
        Criterion.AFFORDABILITY,
        Criterion.INFRASTRUCTURE_AVAILABILITY,
    ),
    "University Administration": (
        Criterion.DECISION_AUTHORITY,
        Criterion.ACCESS_TO_ALTERNATIVES,
        Criterion.AFFORDABILITY,
        Criterion.INFRASTRUCTURE_AVAILABILITY,
    ),
    "Institutions": (
        Criterion.DECISION_AUTHORITY,
        Criterion.ACCESS_TO_ALTERNATIVES,
        Criterion.INFRASTRUCTURE_AVAILABILITY,
    ),
    # Limited structural power
    "Students": (),
    "Youth": (),
    "Consumers": (Criterion.ACCESS_TO_ALTERNATIVES,),  # only where alternatives exist and are affordable
    "General Public": (),
    "Employees": (),
    "Citizens": (),
}


@dataclass(frozen=True)
class TypicalPower:
    has: tuple[Criterion, ...]
    lacks: tuple[Criterion, ...]


TYPICAL_POWER: dict[str, TypicalPower] = {
    "Government": TypicalPower(has=_ALL, lacks=()),
    "City Government": TypicalPower(has=_ALL, lacks=()),
    "Corporations": TypicalPower(
        has=(
            Criterion.DECISION_AUTHORITY,
            Criterion.ACCESS_TO_ALTERNATIVES,
            Criterion.AFFORDABILITY,
            Criterion.INFRASTRUCTURE_AVAILABILITY,
        ),
        lacks=(Criterion.ENFORCEMENT_POWER,),
    ),
    "University Administration": TypicalPower(
        has=(
            Criterion.DECISION_AUTHORITY,
            Criterion.ACCESS_TO_ALTERNATIVES,
            Criterion.AFFORDABILITY,
            Criterion.INFRASTRUCTURE_AVAILABILITY,
        ),
        lacks=(Criterion.ENFORCEMENT_POWER,),
    ),
    "Institutions": TypicalPower(
        has=(
            Criterion.DECISION_AUTHORITY,
            Criterion.ACCESS_TO_ALTERNATIVES,
            Criterion.INFRASTRUCTURE_AVAILABILITY,
        ),
        lacks=(Criterion.ENFORCEMENT_POWER, Criterion.AFFORDABILITY),
    ),
    "Students": TypicalPower(has=(), lacks=_ALL),
    "Youth": TypicalPower(has=(), lacks=_ALL),
    "Consumers": TypicalPower(
        has=(Criterion.ACCESS_TO_ALTERNATIVES,),
        lacks=(
            Criterion.DECISION_AUTHORITY,
            Criterion.AFFORDABILITY,
            Criterion.INFRASTRUCTURE_AVAILABILITY,
            Criterion.ENFORCEMENT_POWER,
        ),
    ),
    "General Public": TypicalPower(
        has=(),
        lacks=(
            Criterion.DECISION_AUTHORITY,
            Criterion.AFFORDABILITY,
            Criterion.INFRASTRUCTURE_AVAILABILITY,
            Criterion.ENFORCEMENT_POWER,
        ),
    ),
    "Employees": TypicalPower(
        has=(),
        lacks=(
            Criterion.DECISION_AUTHORITY,
            Criterion.INFRASTRUCTURE_AVAILABILITY,
            Criterion.ENFORCEMENT_POWER,
        ),
    ),
    "Citizens": TypicalPower(
        has=(Criterion.ACCESS_TO_ALTERNATIVES,),
        lacks=(
            Criterion.DECISION_AUTHORITY,
            Criterion.INFRASTRUCTURE_AVAILABILITY,
            Criterion.ENFORCEMENT_POWER,
        ),
    ),
}


def known_groups() -> list[str]:
    return list(STRUCTURAL_POWER)


def power_profile(target_group: str) -> list[Criterion]:
    """Criteria the group structurally controls, in display order."""
    controlled = STRUCTURAL_POWER.get(target_group, STRUCTURAL_POWER[DEFAULT_GROUP])
    return [c for c in CRITERIA_ORDER if c in controlled]


def power_level(typically_has_count: int) -> str:
    if typically_has_count >= 4:
        return "high"
    if typically_has_count >= 2:
        return "medium"
    return "low"


def typical_power_context(target_group: str) -> TargetGroupContext:
    """Advisory context: what the group typically has, lacks, and a note."""
    data = TYPICAL_POWER.get(target_group, TYPICAL_POWER[DEFAULT_GROUP])
    level = power_level(len(data.has))

    if level == "high":
        note = f"{target_group} typically has high structural power and can implement systemic changes."
    elif level == "medium":
        note = f"{target_group} has moderate structural power but may face some limitations."
    else:
        note = (
            f"{target_group} typically lacks structural power over most conditions. "
            "Statements targeting them often shift blame rather than create change."
        )

    return TargetGroupContext(
        typically_has=list(data.has),
        typically_lacks=list(data.lacks),
        power_level=level,
        context_note=note,
    )
