"""
Per-Teammate Adjustment

Measures a player's rates in games a teammate missed and expresses them as
relative boosts over the team baseline, using real historical data instead of
generic multipliers.

Boosts are floor-clamped at 0: an absence can help or be neutral, never hurt.
"""

from typing import Optional
import logging

import pandas as pd

from configs.lineup_config import METRIC_TYPES
from wnba_quant.config import settings
from wnba_quant.features.baseline_metrics import calculate_rate_metrics
from wnba_quant.schemas import AdjustmentSource, BaselineMetrics, PerTeammateAdjustment

logger = logging.getLogger(__name__)


def calculate_boost(metric_value: float, baseline_value: float) -> float:
    """max(0, (metric - baseline) / baseline); 0.0 for a non-positive baseline."""
    if baseline_value <= 0:
        return 0.0
    return max(0.0, (metric_value - baseline_value) / baseline_value)


def measured_confidence(games_analyzed: int, full_confidence_games: Optional[int] = None) -> float:
    """Sample-size confidence: min(1, games / FULL_CONFIDENCE_GAMES)."""
    full_confidence_games = full_confidence_games or settings.FULL_CONFIDENCE_GAMES
    return min(1.0, games_analyzed / full_confidence_games)


def calculate_teammate_adjustment(
    teammate: str,
    absence_games: pd.DataFrame,
    baseline: BaselineMetrics
) -> PerTeammateAdjustment:
    """
    Boosts to the subject's rates while one teammate was out.

    Args:
        teammate: Absent teammate
        absence_games: Subject's qualifying rows in the teammate's absence window
            (already checked against MIN_GAMES_FOR_LINEUP_ANALYSIS)
        baseline: Team teammate baseline for the same window

    Returns:
        Measured PerTeammateAdjustment with games_analyzed = window size
    """
    rates = calculate_rate_metrics(absence_games)
    games_analyzed = len(absence_games)

    boosts = {
        metric: calculate_boost(rates.metric(metric), baseline.metric(metric))
        for metric in METRIC_TYPES
    }

    logger.debug(
        f"Efficiency with {teammate} out (n={games_analyzed}): "
        f"shooting {rates.shooting_efficiency:.3f} (base {baseline.shooting_efficiency:.3f}, boost {boosts['shooting']:.1%}), "
        f"rebounding {rates.rebounding_rate_per_40:.3f} (base {baseline.rebounding_rate_per_40:.3f}, boost {boosts['rebounding']:.1%}), "
        f"assists {rates.assist_rate_per_40:.3f} (base {baseline.assist_rate_per_40:.3f}, boost {boosts['assists']:.1%})"
    )

    return PerTeammateAdjustment(
        teammate=teammate,
        shooting_boost=boosts['shooting'],
        rebounding_boost=boosts['rebounding'],
        assist_boost=boosts['assists'],
        games_analyzed=games_analyzed,
        source=AdjustmentSource.MEASURED,
        confidence=measured_confidence(games_analyzed),
    )
