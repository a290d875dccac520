"""
Tests for the reference fact loader. Bad reference data must fail loudly.
"""

import copy
import json

import pytest

from greenlie.facts import FactTable, ReferenceDataError, load_statements, parse_statement
from greenlie.models import ConditionStatus, Criterion


def _record(statement_id="stmt_x"):
    return {
        "id": statement_id,
        "statement": "Everyone should compost at home",
        "target_group": "General Public",
        "source_type": "Campaign",
        "action": "Compost food waste",
        "criteria_assessment": {
            c.value: {
                "status": "available",
                "explanation": f"{c.readable} is fine",
                "examples": {"positive": ["yes"], "negative": []},
            }
            for c in Criterion
        },
        "verdict": "STRUCTURALLY HONEST",
        "reasoning": "All levers are held.",
        "actionable_suggestions": ["Keep going"],
    }


def _write(tmp_path, records):
    path = tmp_path / "facts.json"
    path.write_text(json.dumps({"sustainability_statements": records}), encoding="utf-8")
    return str(path)


class TestParseStatement:

    def test_valid(self):
        s = parse_statement(_record())
        assert s.id == "stmt_x"
        assert s.status_of(Criterion.AFFORDABILITY) is ConditionStatus.AVAILABLE
        assert s.criteria_assessment[Criterion.AFFORDABILITY].examples.positive == ("yes",)
        assert s.actionable_suggestions == ("Keep going",)

    def test_missing_criterion(self):
        record = _record()
        del record["criteria_assessment"]["enforcement_power"]
        with pytest.raises(ReferenceDataError, match="enforcement_power"):
            parse_statement(record)

    def test_extra_criterion(self):
        record = _record()
        record["criteria_assessment"]["vibes"] = copy.deepcopy(
            record["criteria_assessment"]["affordability"]
        )
        with pytest.raises(ReferenceDataError, match="vibes"):
            parse_statement(record)

    def test_bad_status(self):
        record = _record()
        record["criteria_assessment"]["affordability"]["status"] = "maybe"
        with pytest.raises(ReferenceDataError, match="maybe"):
            parse_statement(record)

    def test_missing_id(self):
        record = _record()
        del record["id"]
        with pytest.raises(ReferenceDataError):
            parse_statement(record)

    def test_missing_required_field(self):
        record = _record()
        del record["verdict"]
        with pytest.raises(ReferenceDataError, match="verdict"):
            parse_statement(record)

    def test_optional_fields_default(self):
        record = _record()
        del record["actionable_suggestions"]
        del record["reasoning"]
        s = parse_statement(record)
        assert s.actionable_suggestions == ()
        assert s.reasoning == ""


class TestLoadStatements:

    def test_loads_file(self, tmp_path):
        path = _write(tmp_path, [_record("a"), _record("b")])
        table = FactTable.from_file(path)
        assert len(table) == 2
        assert table.get("b").id == "b"
        assert table.get("c") is None

    def test_duplicate_ids(self, tmp_path):
        path = _write(tmp_path, [_record("a"), _record("a")])
        with pytest.raises(ReferenceDataError, match="duplicate"):
            load_statements(path)

    def test_wrong_root_key(self, tmp_path):
        path = tmp_path / "facts.json"
        path.write_text(json.dumps({"statements": []}), encoding="utf-8")
        with pytest.raises(ReferenceDataError):
            load_statements(str(path))

    def test_all_returns_copy(self, tmp_path):
        table = FactTable.from_file(_write(tmp_path, [_record("a")]))
        table.all().clear()
        assert len(table.all()) == 1
