"""DR maturity scoring.

Scores are computed, never stored per dimension: an assessment keeps raw
parameter answers and everything else is derived here. The functions are
pure so the API, the dashboard and the tests share one implementation.

Dimension score (weighted mode)::

    (Σ parameter_score × weightage%) × dimension_weightage_multiplier

optionally multiplied by the asset criticality multiplier, rounded to one
decimal. Asset, service and overall scores are averages that ignore
dimensions without any scored parameter.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from pydantic import BaseModel, Field

from src.catalog import DIMENSIONS, Dimension
from src.constants import (
    CRITICALITY_MULTIPLIER_HIGH,
    CRITICALITY_MULTIPLIER_LOW,
    CRITICALITY_MULTIPLIER_MEDIUM,
)
from src.models.asset import Criticality


class FormulaSettings(BaseModel):
    """User-tunable knobs of the dimension score formula."""

    use_dimension_weightage: bool = True
    use_asset_criticality: bool = False
    dimension_weightage_multiplier: float = Field(default=1.0, gt=0)
    criticality_multipliers: dict[Criticality, float] = Field(
        default_factory=lambda: {
            Criticality.HIGH: CRITICALITY_MULTIPLIER_HIGH,
            Criticality.MEDIUM: CRITICALITY_MULTIPLIER_MEDIUM,
            Criticality.LOW: CRITICALITY_MULTIPLIER_LOW,
        }
    )

    @classmethod
    def from_stored(cls, data: Mapping | None) -> "FormulaSettings":
        return cls.model_validate(data) if data else cls()


@dataclass(frozen=True)
class WeightedScore:
    score: float
    weightage: float


class ScorableAsset(Protocol):
    id: int
    service_id: int | None
    criticality: Criticality | None


def round_score(value: float) -> float:
    """Round half-up on the exact binary value, to one decimal."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def weighted_dimension_score(
    scores: Sequence[WeightedScore],
    settings: FormulaSettings | None = None,
    criticality: Criticality | None = None,
) -> float:
    """Combine the scored parameters of one dimension for one asset."""
    if not scores:
        return 0.0

    settings = settings or FormulaSettings()

    if settings.use_dimension_weightage:
        total_weight = sum(s.weightage for s in scores)
        if total_weight == 0:
            return 0.0
        value = sum(s.score * s.weightage / 100 for s in scores)
        value *= settings.dimension_weightage_multiplier
    else:
        value = sum(s.score for s in scores) / len(scores)

    if settings.use_asset_criticality and criticality is not None:
        value *= settings.criticality_multipliers.get(criticality, 1.0)

    return round_score(value)


def _mean(values: Iterable[float]) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


class ScoreCalculator:
    """Derives dimension, asset, service and overall scores from raw answers.

    Args:
        scores: (asset_id, parameter_id) -> score in 1..5 (missing or None = unscored)
        settings: Formula settings; defaults when omitted
    """

    def __init__(
        self,
        scores: Mapping[tuple[int, int], int | None],
        settings: FormulaSettings | None = None,
    ) -> None:
        self.scores = scores
        self.settings = settings or FormulaSettings()

    def dimension_score(self, asset: ScorableAsset, dimension: Dimension) -> float:
        collected = []
        for parameter in dimension.scorable_parameters:
            score = self.scores.get((asset.id, parameter.id))
            if score is not None:
                collected.append(WeightedScore(score=score, weightage=parameter.weightage or 1))
        return weighted_dimension_score(collected, self.settings, asset.criticality)

    def asset_score(self, asset: ScorableAsset) -> float:
        """Mean of the asset's non-zero dimension scores."""
        dimension_scores = (self.dimension_score(asset, d) for d in DIMENSIONS)
        return _mean(s for s in dimension_scores if s > 0)

    def service_score(self, assets: Sequence[ScorableAsset], service_id: int) -> float:
        """Mean asset score over every asset of the service (unscored assets count as 0)."""
        service_assets = [a for a in assets if a.service_id == service_id]
        return _mean(self.asset_score(a) for a in service_assets)

    def dimension_average(self, assets: Sequence[ScorableAsset], dimension: Dimension) -> float:
        """Mean dimension score over assets that have one."""
        scores = (self.dimension_score(a, dimension) for a in assets)
        return _mean(s for s in scores if s > 0)

    def overall_score(self, assets: Sequence[ScorableAsset]) -> float:
        """Mean over dimensions of the per-dimension asset average."""
        averages = (self.dimension_average(assets, d) for d in DIMENSIONS)
        return _mean(a for a in averages if a > 0)

    def dimension_coverage_score(
        self, assets: Sequence[ScorableAsset], dimension: Dimension
    ) -> float:
        """Sum of non-zero dimension scores divided by every asset in scope."""
        if not assets:
            return 0.0
        total = sum(self.dimension_score(a, dimension) for a in assets)
        return total / len(assets)

    def dimension_breakdown(self, assets: Sequence[ScorableAsset]) -> list[dict]:
        """Per-dimension scores; unscored assets pull the dimension down."""
        return [
            {
                "dimension_id": d.id,
                "dimension": d.name,
                "score": round_score(self.dimension_coverage_score(assets, d)),
            }
            for d in DIMENSIONS
        ]

    def progress(self, assets: Sequence[ScorableAsset]) -> dict:
        """Completion per dimension, normalised by asset count."""
        dimensions = []
        for d in DIMENSIONS:
            total = len(d.scorable_parameters)
            completed = sum(
                1
                for a in assets
                for p in d.scorable_parameters
                if self.scores.get((a.id, p.id))
            )
            dimensions.append(
                {
                    "dimension_id": d.id,
                    "dimension": d.name,
                    "completed_parameters": completed / len(assets) if assets else 0.0,
                    "total_parameters": total,
                    "score": round_score(self.dimension_average(assets, d)),
                }
            )

        done = sum(d["completed_parameters"] for d in dimensions)
        total = sum(d["total_parameters"] for d in dimensions)
        return {
            "dimensions": dimensions,
            "total_percent": round(done / total * 100, 1) if total else 0.0,
        }
