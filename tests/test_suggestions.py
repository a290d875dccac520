"""
Tests for remediation and "make it honest" suggestions.
"""

from greenlie.models import Criterion
from greenlie.suggestions import (
    MAKEOVER_PREFIX,
    REMEDIATION_TEMPLATES,
    honest_makeover_suggestions,
    remediation_suggestions,
)

INFRA = Criterion.INFRASTRUCTURE_AVAILABILITY


class TestRemediation:

    def test_empty(self):
        assert remediation_suggestions([]) == {}

    def test_affordability_only(self):
        result = remediation_suggestions([Criterion.AFFORDABILITY])
        assert result == {
            Criterion.AFFORDABILITY: (
                "Provide subsidies, free alternatives, or implement price controls "
                "to eliminate cost barriers for the target group"
            ),
        }

    def test_every_criterion_has_a_template(self):
        result = remediation_suggestions(list(Criterion))
        assert set(result) == set(Criterion)
        assert all(result[c] == REMEDIATION_TEMPLATES[c] for c in Criterion)

    def test_string_input(self):
        assert Criterion.ENFORCEMENT_POWER in remediation_suggestions(["enforcement_power"])


class TestHonestMakeover:

    def test_empty(self):
        assert honest_makeover_suggestions("Anything", "Students", []) == []

    def test_prefix_and_group(self):
        [suggestion] = honest_makeover_suggestions(
            "Students should cut waste", "Students", [Criterion.DECISION_AUTHORITY],
        )
        assert suggestion.startswith(MAKEOVER_PREFIX)
        assert "Students" in suggestion

    def test_refill_dispatch(self):
        [s] = honest_makeover_suggestions("Bring a reusable bottle", "Students", [INFRA])
        assert "water refill stations" in s

    def test_bike_dispatch(self):
        [s] = honest_makeover_suggestions("Bike to campus", "Students", [INFRA])
        assert s.endswith("before asking Students to cycle")

    def test_recycle_matches_cycle_rule_first(self):
        [s] = honest_makeover_suggestions("Recycle your cans", "Youth", [INFRA])
        assert "bike lanes" in s

    def test_generic_infrastructure(self):
        [s] = honest_makeover_suggestions("Use less energy", "Employees", [INFRA])
        assert s == MAKEOVER_PREFIX + "Provide the necessary infrastructure before placing responsibility on Employees"

    def test_order_follows_input(self):
        result = honest_makeover_suggestions(
            "Buy green", "Consumers", [Criterion.ENFORCEMENT_POWER, Criterion.AFFORDABILITY],
        )
        assert "accountable" in result[0]
        assert "Subsidize" in result[1]

    def test_duplicates_kept(self):
        result = honest_makeover_suggestions(
            "Buy green", "Consumers", [Criterion.AFFORDABILITY, Criterion.AFFORDABILITY],
        )
        assert len(result) == 2
        assert result[0] == result[1]
