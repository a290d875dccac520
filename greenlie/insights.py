"""
Insights — Aggregate Statistics

Pure aggregation over curated statements and stored records. Stored
verdicts are display labels; `verdict_family` buckets them by exact
label, so both curated and computed labels land in the same three bins.
"""

from __future__ import annotations

from typing import Iterable

from greenlie.models import (
    CRITERIA_ORDER,
    ConditionStatus,
    Criterion,
    Statement,
    StoredAnalysis,
    VerdictFamily,
    verdict_family,
)


def _empty_frequency() -> dict[Criterion, int]:
    return {c: 0 for c in CRITERIA_ORDER}


def _is_dishonest(label: str) -> bool:
    return verdict_family(label) is VerdictFamily.GREEN_LIE


def _is_dishonest_curated(label: str) -> bool:
    # Curated MISLEADING labels count against their source.
    return _is_dishonest(label) or "MISLEADING" in label


def aggregated_stats(analyses: Iterable[StoredAnalysis]) -> dict:
    """Totals over stored analyses: verdicts, missing conditions, sources."""
    analyses = list(analyses)
    dishonest = sum(1 for a in analyses if _is_dishonest(a.verdict))

    frequency = _empty_frequency()
    for a in analyses:
        for c in a.missing_conditions:
            frequency[Criterion(c)] += 1

    sources: dict[str, dict[str, int]] = {}
    for a in analyses:
        bucket = sources.setdefault(a.source_type, {"total": 0, "dishonest": 0})
        bucket["total"] += 1
        if _is_dishonest(a.verdict):
            bucket["dishonest"] += 1

    return {
        "total_analyses": len(analyses),
        "dishonest_count": dishonest,
        "honest_count": len(analyses) - dishonest,
        "condition_frequency": {c.value: n for c, n in frequency.items()},
        "source_frequency": sources,
    }


def dashboard_stats(
    statements: Iterable[Statement],
    custom_analyzed: Iterable[dict],
    analyses: Iterable[StoredAnalysis],
) -> dict:
    """
    Combined dashboard over curated statements and analysed custom ones.

    custom_analyzed items use the shape returned by
    AnalysisStore.get_all_analyzed_statements().
    """
    statements = list(statements)
    custom_analyzed = list(custom_analyzed)
    analyses = list(analyses)

    families = {f: 0 for f in VerdictFamily}
    for s in statements:
        families[verdict_family(s.verdict)] += 1
    for s in custom_analyzed:
        families[verdict_family(s["verdict"])] += 1

    # Curated: from ground truth. Custom: from the stored missing list.
    frequency = _empty_frequency()
    for s in statements:
        for c in CRITERIA_ORDER:
            if s.status_of(c) is ConditionStatus.NOT_AVAILABLE:
                frequency[c] += 1
    for s in custom_analyzed:
        for c in s.get("missing_conditions") or []:
            frequency[Criterion(c)] += 1

    sources: dict[str, dict[str, int]] = {}

    def _count(source: str, dishonest: bool):
        bucket = sources.setdefault(source, {"total": 0, "dishonest": 0, "honest": 0})
        bucket["total"] += 1
        bucket["dishonest" if dishonest else "honest"] += 1

    for s in statements:
        _count(s.source_type, _is_dishonest_curated(s.verdict))
    for s in custom_analyzed:
        _count(s["source_type"], _is_dishonest(s["verdict"]))

    return {
        "total_statements": len(statements) + len(custom_analyzed),
        "green_lies": families[VerdictFamily.GREEN_LIE],
        "partially_valid": families[VerdictFamily.PARTIALLY_VALID],
        "honest": families[VerdictFamily.HONEST],
        "condition_frequency": {c.value: n for c, n in frequency.items()},
        "source_breakdown": sources,
        "total_analyses": len(analyses) + len(custom_analyzed),
    }
