"""
Tests for the append-only analysis store.

Every test gets its own SQLite file via tmp_path.
"""

import json
import re

import pytest

from greenlie.models import (
    ConditionStatus,
    Criterion,
    CustomAnalysis,
    CustomVoteType,
    StoredAnalysis,
    UserSelection,
    VoteType,
)
from greenlie.storage import (
    ANALYSES_KEY,
    CUSTOM_STATEMENTS_KEY,
    VOTES_KEY,
    AnalysisStore,
    new_id,
)


@pytest.fixture
def store(tmp_path):
    return AnalysisStore(db_path=str(tmp_path / "store.db"))


def _analysis(n: int, verdict: str = "GREEN LIE") -> StoredAnalysis:
    return StoredAnalysis(
        id=f"analysis_{n}",
        statement_id="stmt_001",
        statement="Students should bring reusable bottles",
        target_group="Students",
        source_type="University Campaign",
        user_selections=[
            UserSelection(Criterion.AFFORDABILITY, ConditionStatus.AVAILABLE, True),
        ],
        missing_conditions=[Criterion.DECISION_AUTHORITY],
        verdict=verdict,
        timestamp=1_700_000_000_000 + n,
    )


class TestIds:

    def test_format(self):
        assert re.fullmatch(r"custom_\d+_[a-z0-9]{9}", new_id("custom"))

    def test_unique(self):
        assert len({new_id("analysis") for _ in range(50)}) == 50


class TestAnalyses:

    def test_empty(self, store):
        assert store.get_analyses() == []

    def test_save_then_read_last(self, store):
        store.save_analysis(_analysis(1))
        saved = _analysis(2)
        store.save_analysis(saved)
        assert store.get_analyses()[-1] == saved

    def test_append_order(self, store):
        for n in range(5):
            store.save_analysis(_analysis(n))
        assert [a.id for a in store.get_analyses()] == [f"analysis_{n}" for n in range(5)]

    def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "shared.db")
        AnalysisStore(db_path=path).save_analysis(_analysis(7))
        assert AnalysisStore(db_path=path).get_analyses()[0].id == "analysis_7"

    def test_clear(self, store):
        store.save_analysis(_analysis(1))
        store.clear()
        assert store.get_analyses() == []


class TestMalformedData:
    """Corrupt blobs read as empty collections, never raise."""

    def test_invalid_json(self, store, caplog):
        store.write_raw(ANALYSES_KEY, "{not json")
        assert store.get_analyses() == []
        assert any(getattr(r, "store_key", None) == ANALYSES_KEY for r in caplog.records)

    def test_not_a_list(self, store):
        store.write_raw(VOTES_KEY, json.dumps({"a": 1}))
        assert store.get_votes() == []

    def test_bad_record(self, store):
        store.write_raw(ANALYSES_KEY, json.dumps([{"id": "x"}]))
        assert store.get_analyses() == []

    def test_bad_enum_value(self, store):
        store.write_raw(VOTES_KEY, json.dumps([{
            "statement_id": "stmt_001", "criterion": "nonsense",
            "vote_type": "missing", "timestamp": 1,
        }]))
        assert store.get_votes() == []

    def test_non_record_item(self, store, caplog):
        store.write_raw(CUSTOM_STATEMENTS_KEY, json.dumps(["not a record"]))
        assert store.get_custom_statements() == []
        assert store.get_custom_statement("custom_1") is None
        assert any(getattr(r, "store_key", None) == CUSTOM_STATEMENTS_KEY for r in caplog.records)

    def test_non_record_nested_analysis(self, store):
        store.write_raw(CUSTOM_STATEMENTS_KEY, json.dumps([{
            "id": "custom_1",
            "statement": "Recycle everything now",
            "source_type": "Campaign",
            "target_group": "Youth",
            "timestamp": 1,
            "analyzed": True,
            "analysis_result": "garbage",
        }]))
        assert store.get_custom_statements() == []
        assert store.get_all_analyzed_statements() == []

    def test_non_record_item_in_every_collection(self, store):
        for key in (ANALYSES_KEY, VOTES_KEY, CUSTOM_STATEMENTS_KEY, "green_lie_custom_votes"):
            store.write_raw(key, json.dumps([42, None]))
        assert store.get_analyses() == []
        assert store.get_votes() == []
        assert store.get_custom_statements() == []
        assert store.get_custom_votes() == []

    def test_update_on_corrupted_collection(self, store):
        store.write_raw(CUSTOM_STATEMENTS_KEY, json.dumps(["not a record"]))
        analysis = CustomAnalysis([], "STRUCTURALLY HONEST", {})
        assert store.update_custom_statement_analysis("custom_1", analysis) is False

    def test_append_after_corruption_recovers(self, store):
        store.write_raw(ANALYSES_KEY, "garbage")
        store.save_analysis(_analysis(1))
        assert [a.id for a in store.get_analyses()] == ["analysis_1"]

    def test_collections_are_independent(self, store):
        store.write_raw(ANALYSES_KEY, "garbage")
        store.save_vote("stmt_001", Criterion.AFFORDABILITY, VoteType.MISSING)
        assert len(store.get_votes()) == 1


class TestVotes:

    def test_tallies_per_criterion(self, store):
        store.save_vote("stmt_001", Criterion.AFFORDABILITY, VoteType.MISSING)
        store.save_vote("stmt_001", Criterion.AFFORDABILITY, VoteType.MISSING)
        store.save_vote("stmt_001", Criterion.AFFORDABILITY, VoteType.AVAILABLE)
        store.save_vote("stmt_002", Criterion.AFFORDABILITY, VoteType.MISSING)

        tallies = store.get_votes_for_statement("stmt_001")
        assert tallies[Criterion.AFFORDABILITY] == {"missing": 2, "available": 1}
        assert tallies[Criterion.DECISION_AUTHORITY] == {"missing": 0, "available": 0}
        assert set(tallies) == set(Criterion)

    def test_no_votes(self, store):
        tallies = store.get_votes_for_statement("stmt_001")
        assert all(t == {"missing": 0, "available": 0} for t in tallies.values())

    def test_custom_vote_tallies(self, store):
        store.save_custom_vote("custom_1", CustomVoteType.CONFIRM_MISSING)
        store.save_custom_vote("custom_1", CustomVoteType.CONFIRM_AVAILABLE)
        store.save_custom_vote("custom_1", CustomVoteType.CONFIRM_MISSING)
        store.save_custom_vote("custom_2", CustomVoteType.CONFIRM_MISSING)
        assert store.get_votes_for_custom_statement("custom_1") == {
            "confirmMissing": 2, "confirmAvailable": 1,
        }

    def test_custom_vote_stored_as_camel_case(self, store):
        store.save_custom_vote("custom_1", "confirmAvailable")
        blob = json.loads(store.read_raw("green_lie_custom_votes"))
        assert blob[0]["vote_type"] == "confirmAvailable"


class TestCustomStatements:

    def test_save_returns_id(self, store):
        custom_id = store.save_custom_statement("Recycle everything now", "Campaign", "Youth")
        assert custom_id.startswith("custom_")
        record = store.get_custom_statement(custom_id)
        assert record.statement == "Recycle everything now"
        assert record.analyzed is False
        assert record.analysis_result is None

    def test_unknown_id(self, store):
        assert store.get_custom_statement("custom_missing") is None

    def test_update_analysis(self, store):
        custom_id = store.save_custom_statement("Recycle everything now", "Campaign", "Youth")
        analysis = CustomAnalysis(
            missing_conditions=[Criterion.AFFORDABILITY],
            verdict="PARTIALLY VALID",
            criteria_assessment={c: ConditionStatus.AVAILABLE for c in Criterion},
        )
        assert store.update_custom_statement_analysis(custom_id, analysis) is True

        record = store.get_custom_statement(custom_id)
        assert record.analyzed is True
        assert record.analysis_result == analysis

    def test_update_unknown_id(self, store):
        store.save_custom_statement("Recycle everything now", "Campaign", "Youth")
        analysis = CustomAnalysis([], "STRUCTURALLY HONEST", {})
        assert store.update_custom_statement_analysis("custom_nope", analysis) is False
        assert store.get_all_analyzed_statements() == []

    def test_update_leaves_other_records(self, store):
        first = store.save_custom_statement("Recycle everything now", "Campaign", "Youth")
        second = store.save_custom_statement("Cycle to work every day", "Corporate", "Employees")
        store.update_custom_statement_analysis(first, CustomAnalysis([], "STRUCTURALLY HONEST", {}))
        assert store.get_custom_statement(second).analyzed is False
        assert [r.id for r in store.get_custom_statements()] == [first, second]

    def test_all_analyzed_normalizes_labels(self, store):
        custom_id = store.save_custom_statement("Recycle everything now", "Campaign", "Youth")
        store.save_custom_statement("Not analysed yet at all", "Campaign", "Youth")
        store.update_custom_statement_analysis(
            custom_id,
            CustomAnalysis([Criterion.AFFORDABILITY] * 3, "structurally_dishonest", {}),
        )
        analyzed = store.get_all_analyzed_statements()
        assert len(analyzed) == 1
        assert analyzed[0]["id"] == custom_id
        assert analyzed[0]["verdict"] == "GREEN LIE"
        assert analyzed[0]["is_custom"] is True

    def test_raw_blob_under_namespaced_key(self, store):
        store.save_custom_statement("Recycle everything now", "Campaign", "Youth")
        assert store.read_raw(CUSTOM_STATEMENTS_KEY) is not None
