"""
Baseline Metrics - rate-normalized team production.

Per-40-minute normalization removes playing-time confounds, so a teammate
baseline built from every rostered player is comparable to the subject's
rates inside an absence window.

Usage:
    from wnba_quant.features.baseline_metrics import calculate_baseline_metrics

    baseline = calculate_baseline_metrics(team_games, 'Sabrina Ionescu', 'NYL')
"""

from typing import Mapping, Optional
import logging

import pandas as pd

from wnba_quant.config import settings
from wnba_quant.constants import DEFAULT_RATES, STAT_COLUMNS
from wnba_quant.data.game_log_schema import qualifying_games
from wnba_quant.schemas import BaselineMetrics, RateMetrics

logger = logging.getLogger(__name__)


def calculate_rate_metrics(
    games: pd.DataFrame,
    per_minutes: Optional[float] = None
) -> RateMetrics:
    """
    Shooting efficiency and per-40 rebound/assist rates over a set of rows.

    Zero denominators fall back to DEFAULT_RATES instead of NaN.

    Args:
        games: Canonical game-log rows (already filtered to the subset of interest)
        per_minutes: Normalization window (defaults to settings.RATE_NORMALIZATION_MINUTES)

    Returns:
        RateMetrics for the rows
    """
    per_minutes = per_minutes or settings.RATE_NORMALIZATION_MINUTES

    if games.empty:
        return RateMetrics(
            shooting_efficiency=DEFAULT_RATES['shooting'],
            rebounding_rate_per_40=DEFAULT_RATES['rebounding'],
            assist_rate_per_40=DEFAULT_RATES['assists'],
            games=0,
        )

    shots = games[games['field_goals_attempted'] > 0]
    total_fga = shots['field_goals_attempted'].sum()
    total_fgm = shots['field_goals_made'].sum()

    played = games[games['minutes'] > 0]
    total_minutes = played['minutes'].sum()

    if total_fga > 0:
        shooting = float(total_fgm / total_fga)
    else:
        shooting = DEFAULT_RATES['shooting']

    if total_minutes > 0:
        rebounding = float(played['rebounds'].sum() / total_minutes * per_minutes)
        assists = float(played['assists'].sum() / total_minutes * per_minutes)
    else:
        rebounding = DEFAULT_RATES['rebounding']
        assists = DEFAULT_RATES['assists']

    return RateMetrics(
        shooting_efficiency=shooting,
        rebounding_rate_per_40=rebounding,
        assist_rate_per_40=assists,
        games=len(games),
    )


def calculate_baseline_metrics(
    team_games: pd.DataFrame,
    player_name: str,
    team: str,
    min_minutes: Optional[float] = None
) -> BaselineMetrics:
    """
    Team-wide teammate baseline from every qualifying teammate row.

    Args:
        team_games: All game-log rows for the team and window
        player_name: Subject player (excluded from the baseline)
        team: Team abbreviation
        min_minutes: Qualifying threshold (defaults to settings.MIN_QUALIFYING_MINUTES)

    Returns:
        BaselineMetrics with the roster used
    """
    min_minutes = settings.MIN_QUALIFYING_MINUTES if min_minutes is None else min_minutes

    qualifying = qualifying_games(team_games, min_minutes)
    teammate_rows = qualifying[qualifying['player_name'] != player_name]
    teammates = sorted(teammate_rows['player_name'].unique().tolist())

    rates = calculate_rate_metrics(teammate_rows)

    logger.debug(
        f"Baseline for {team} ({len(teammates)} teammates, {rates.games} rows): "
        f"shooting={rates.shooting_efficiency:.3f}, "
        f"rebounding={rates.rebounding_rate_per_40:.3f}, "
        f"assists={rates.assist_rate_per_40:.3f}"
    )

    return BaselineMetrics(
        **rates.model_dump(),
        team=team,
        teammates=teammates,
    )


def calculate_game_usage(game: Mapping, stat_type: str) -> float:
    """
    One game's production of a stat normalized to 40 minutes.

    Missing or zero minutes count as 1 minute.
    """
    stat_value = game.get(STAT_COLUMNS[stat_type], 0) or 0
    minutes = game.get('minutes', 0) or 1
    return float(stat_value) / float(minutes) * settings.RATE_NORMALIZATION_MINUTES


def calculate_usage_per_40(games: pd.DataFrame, stat_type: str) -> float:
    """Mean per-40 usage of a stat across games (0.0 for no games)."""
    if games.empty:
        return 0.0
    usages = [calculate_game_usage(row, stat_type) for row in games.to_dict(orient='records')]
    return float(sum(usages) / len(usages))
