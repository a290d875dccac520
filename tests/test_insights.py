"""
Tests for aggregate statistics over statements and stored analyses.
"""

from greenlie.engine import engine
from greenlie.insights import aggregated_stats, dashboard_stats
from greenlie.models import Criterion, StoredAnalysis


def _analysis(verdict, source, missing):
    return StoredAnalysis(
        id=f"analysis_{verdict}_{source}",
        statement_id="stmt_x",
        statement="Some statement text",
        target_group="Youth",
        source_type=source,
        user_selections=[],
        missing_conditions=missing,
        verdict=verdict,
        timestamp=1,
    )


class TestAggregatedStats:

    def test_empty(self):
        stats = aggregated_stats([])
        assert stats["total_analyses"] == 0
        assert stats["dishonest_count"] == 0
        assert stats["condition_frequency"] == {c.value: 0 for c in Criterion}
        assert stats["source_frequency"] == {}

    def test_counts(self):
        analyses = [
            _analysis("GREEN LIE", "Campaign", [Criterion.AFFORDABILITY, Criterion.DECISION_AUTHORITY]),
            _analysis("GREEN LIE", "Campaign", [Criterion.AFFORDABILITY]),
            _analysis("PARTIALLY VALID", "Corporate", [Criterion.AFFORDABILITY]),
            _analysis("STRUCTURALLY HONEST", "Corporate", []),
        ]
        stats = aggregated_stats(analyses)
        assert stats["total_analyses"] == 4
        assert stats["dishonest_count"] == 2
        assert stats["honest_count"] == 2
        assert stats["condition_frequency"]["affordability"] == 3
        assert stats["condition_frequency"]["decision_authority"] == 1
        assert stats["source_frequency"] == {
            "Campaign": {"total": 2, "dishonest": 2},
            "Corporate": {"total": 2, "dishonest": 0},
        }


class TestDashboardStats:

    def test_curated_only(self):
        statements = engine.list_statements()
        stats = dashboard_stats(statements, [], [])
        assert stats["total_statements"] == len(statements)
        assert stats["green_lies"] + stats["partially_valid"] + stats["honest"] == len(statements)
        assert stats["green_lies"] == 3
        assert stats["partially_valid"] == 2
        assert stats["honest"] == 1
        assert stats["total_analyses"] == 0

    def test_misleading_counts_against_source(self):
        stats = dashboard_stats(engine.list_statements(), [], [])
        assert stats["source_breakdown"]["Corporate"] == {"total": 2, "dishonest": 1, "honest": 1}

    def test_condition_frequency_from_ground_truth(self):
        stats = dashboard_stats(engine.list_statements(), [], [])
        assert stats["condition_frequency"]["enforcement_power"] == 4
        assert stats["condition_frequency"]["affordability"] == 2

    def test_includes_custom(self):
        custom = [{
            "id": "custom_1",
            "statement": "Youth should recycle more",
            "source_type": "NGO",
            "target_group": "Youth",
            "verdict": "GREEN LIE",
            "missing_conditions": [Criterion.AFFORDABILITY],
            "is_custom": True,
        }]
        analyses = [_analysis("GREEN LIE", "NGO", [])]
        stats = dashboard_stats([], custom, analyses)
        assert stats["total_statements"] == 1
        assert stats["green_lies"] == 1
        assert stats["condition_frequency"]["affordability"] == 1
        assert stats["source_breakdown"]["NGO"] == {"total": 1, "dishonest": 1, "honest": 0}
        assert stats["total_analyses"] == 2
