"""Tests for DR maturity scoring."""

from dataclasses import dataclass

import pytest

from src.catalog import get_dimension
from src.models.asset import Criticality
from src.services.scoring import (
    FormulaSettings,
    ScoreCalculator,
    WeightedScore,
    round_score,
    weighted_dimension_score,
)

INTERNAL_SUPPORT = get_dimension(1)
REDUNDANCY = get_dimension(4)


@dataclass
class FakeAsset:
    id: int
    service_id: int | None = None
    criticality: Criticality | None = Criticality.MEDIUM


class TestRoundScore:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (2.25, 2.3),  # exactly representable: half rounds up
            (1.45, 1.4),  # stored just below 1.45
            (3.5999999999999996, 3.6),
            (0.0, 0.0),
        ],
    )
    def test_one_decimal(self, value, expected):
        assert round_score(value) == expected


class TestWeightedDimensionScore:
    def test_empty(self):
        assert weighted_dimension_score([]) == 0.0

    def test_weighted_sum(self):
        """Test weighted mode sums score x weight%."""
        scores = [WeightedScore(4, 25), WeightedScore(2, 25)]
        assert weighted_dimension_score(scores) == 1.5

    def test_zero_total_weight(self):
        assert weighted_dimension_score([WeightedScore(3, 0)]) == 0.0

    def test_dimension_multiplier(self):
        settings = FormulaSettings(dimension_weightage_multiplier=2)
        assert weighted_dimension_score([WeightedScore(2, 100)], settings) == 4.0

    def test_unweighted_mean(self):
        settings = FormulaSettings(use_dimension_weightage=False)
        scores = [WeightedScore(4, 25), WeightedScore(2, 75)]
        assert weighted_dimension_score(scores, settings) == 3.0

    @pytest.mark.parametrize(
        ("criticality", "expected"),
        [(Criticality.HIGH, 3.6), (Criticality.MEDIUM, 3.0), (Criticality.LOW, 2.4)],
    )
    def test_criticality_multiplier(self, criticality, expected):
        settings = FormulaSettings(use_asset_criticality=True)
        result = weighted_dimension_score([WeightedScore(3, 100)], settings, criticality)
        assert result == expected

    def test_criticality_ignored_when_disabled(self):
        result = weighted_dimension_score([WeightedScore(3, 100)], None, Criticality.HIGH)
        assert result == 3.0


class TestScoreCalculator:
    def test_dimension_score_ignores_unscored_parameters(self):
        asset = FakeAsset(1)
        calculator = ScoreCalculator({(1, 1): 4, (1, 2): 2, (1, 3): None})
        assert calculator.dimension_score(asset, INTERNAL_SUPPORT) == 1.5

    def test_non_scorable_parameters_are_ignored(self):
        """Parameter 23 (primary device) is informational only."""
        asset = FakeAsset(1)
        calculator = ScoreCalculator({(1, 23): 5, (1, 24): 3})
        assert calculator.dimension_score(asset, REDUNDANCY) == 3.0

    def test_asset_score_averages_non_zero_dimensions(self):
        asset = FakeAsset(1)
        calculator = ScoreCalculator({(1, 1): 4, (1, 2): 2, (1, 24): 3})
        assert calculator.asset_score(asset) == 2.25

    def test_asset_score_without_scores(self):
        assert ScoreCalculator({}).asset_score(FakeAsset(1)) == 0.0

    def test_overall_score(self):
        """Per-dimension averages skip unscored assets, then average over dimensions."""
        a, b = FakeAsset(1), FakeAsset(2)
        scores = {(1, 24): 3, (2, 24): 5}
        scores.update({(2, p.id): 4 for p in INTERNAL_SUPPORT.scorable_parameters})
        calculator = ScoreCalculator(scores)

        assert calculator.dimension_score(b, INTERNAL_SUPPORT) == 4.2  # weights sum to 105
        assert calculator.dimension_average([a, b], INTERNAL_SUPPORT) == 4.2
        assert calculator.dimension_average([a, b], REDUNDANCY) == 4.0
        assert calculator.overall_score([a, b]) == pytest.approx(4.1)

    def test_overall_score_without_data(self):
        assert ScoreCalculator({}).overall_score([FakeAsset(1)]) == 0.0
        assert ScoreCalculator({}).overall_score([]) == 0.0

    def test_service_score_counts_unscored_assets(self):
        scored = FakeAsset(1, service_id=7)
        unscored = FakeAsset(2, service_id=7)
        other = FakeAsset(3, service_id=None)
        calculator = ScoreCalculator({(1, 24): 3, (3, 24): 5})

        assert calculator.service_score([scored, unscored, other], 7) == 1.5
        assert calculator.service_score([scored, unscored, other], 99) == 0.0

    def test_dimension_breakdown_lists_every_dimension(self):
        calculator = ScoreCalculator({(1, 24): 3})
        breakdown = calculator.dimension_breakdown([FakeAsset(1)])

        assert len(breakdown) == 9
        assert breakdown[3] == {"dimension_id": 4, "dimension": "Redundancy", "score": 3.0}
        assert breakdown[0]["score"] == 0.0

    def test_dimension_breakdown_divides_by_every_asset(self):
        """Test an unscored asset halves the dimension score of a two-asset scope."""
        scores = {(1, p.id): 4 for p in INTERNAL_SUPPORT.scorable_parameters}
        calculator = ScoreCalculator(scores)
        breakdown = calculator.dimension_breakdown([FakeAsset(1), FakeAsset(2)])

        assert breakdown[0] == {"dimension_id": 1, "dimension": "Internal Support", "score": 2.1}
        # The overall score still averages only scored assets
        assert calculator.overall_score([FakeAsset(1), FakeAsset(2)]) == pytest.approx(4.2)

    def test_dimension_breakdown_empty_scope(self):
        breakdown = ScoreCalculator({(1, 24): 3}).dimension_breakdown([])
        assert all(d["score"] == 0.0 for d in breakdown)

    def test_progress(self):
        calculator = ScoreCalculator({(1, 1): 4, (1, 2): 2})
        progress = calculator.progress([FakeAsset(1)])

        internal = progress["dimensions"][0]
        assert internal["completed_parameters"] == 2
        assert internal["total_parameters"] == 7
        assert sum(d["total_parameters"] for d in progress["dimensions"]) == 31
        assert progress["total_percent"] == 6.5

    def test_progress_normalised_by_asset_count(self):
        calculator = ScoreCalculator({(1, 24): 3})
        progress = calculator.progress([FakeAsset(1), FakeAsset(2)])
        assert progress["dimensions"][3]["completed_parameters"] == 0.5

    def test_criticality_from_settings(self):
        settings = FormulaSettings(use_asset_criticality=True)
        calculator = ScoreCalculator({(1, 24): 3}, settings)
        assert calculator.asset_score(FakeAsset(1, criticality=Criticality.HIGH)) == 3.6


class TestFormulaSettings:
    def test_defaults(self):
        settings = FormulaSettings()
        assert settings.use_dimension_weightage is True
        assert settings.use_asset_criticality is False
        assert settings.criticality_multipliers[Criticality.HIGH] == 1.2

    def test_stored_round_trip(self):
        stored = FormulaSettings(use_asset_criticality=True).model_dump(mode="json")
        assert stored["criticality_multipliers"] == {"High": 1.2, "Medium": 1.0, "Low": 0.8}
        assert FormulaSettings.from_stored(stored).use_asset_criticality is True

    def test_empty_stored_value_means_defaults(self):
        assert FormulaSettings.from_stored({}) == FormulaSettings()
        assert FormulaSettings.from_stored(None) == FormulaSettings()
