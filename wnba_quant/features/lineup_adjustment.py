"""
Lineup Adjustment Engine

Turns a list of injured teammates into a composite adjustment for one
player's stat projection:

1. One team-wide game-log fetch for the season window
2. Teammate baseline from every qualifying teammate row
3. Per injured teammate: measured boosts from the absence window, or the
   generic fallback when the window has fewer than 3 games
4. Boosts and confidences averaged across resolved teammates and weighted
   by the stat profile into lineup_shift_multiplier

Teammates whose logs cannot be loaded are skipped (unresolved). The engine
holds no per-call state, so one instance can serve concurrent callers.

Usage:
    from wnba_quant.features.lineup_adjustment import LineupAdjustmentEngine

    engine = LineupAdjustmentEngine(store)
    composite = engine.compute_lineup_adjustment(
        'Sabrina Ionescu', 'NYL', 'points', ['Breanna Stewart']
    )
"""

from dataclasses import dataclass
from functools import cache
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union
import logging

import numpy as np
import pandas as pd
import yaml

from configs.lineup_config import (
    METRIC_TYPES,
    STAT_PROFILES,
    StatProfile,
    coerce_metric_table,
    validate_stat_profiles,
)
from wnba_quant.config import settings
from wnba_quant.data.game_log_schema import normalize_game_logs
from wnba_quant.data.game_log_store import GameLogDataError, GameLogStore, create_game_log_store
from wnba_quant.features.absence_windows import (
    AppearanceIndex,
    InsufficientSampleError,
    detect_absence_window,
    require_sufficient_sample,
    subject_qualifying_games,
)
from wnba_quant.features.baseline_metrics import calculate_baseline_metrics, calculate_usage_per_40
from wnba_quant.features.feature_applier import apply_composite_to_features
from wnba_quant.features.generic_fallback import get_generic_adjustment
from wnba_quant.features.teammate_adjustment import calculate_teammate_adjustment
from wnba_quant.schemas import (
    BaselineMetrics,
    CompositeAdjustment,
    PerTeammateAdjustment,
    SeasonWindow,
)

logger = logging.getLogger(__name__)


# =============================================================================
# STAT PROFILE LOADING
# =============================================================================

def load_stat_profiles(config_path: Optional[Union[str, Path]] = None) -> Dict[str, StatProfile]:
    """
    Load stat profiles, optionally overridden from a YAML file.

    The YAML maps stat types to partial tables, e.g.:

        points:
          metric_weights: {shooting: 0.5, rebounding: 0.25, assists: 0.25}
        rebounds:
          fallback_boosts: {rebounding: 0.4}

    Keys not present keep their default values.

    Args:
        config_path: YAML file (None = built-in STAT_PROFILES)

    Returns:
        Stat profile table

    Raises:
        ValueError: If the merged table is invalid
    """
    if not config_path:
        return STAT_PROFILES

    config_path = Path(config_path)
    if not config_path.exists():
        logger.warning(f"Lineup config {config_path} not found. Using defaults.")
        return STAT_PROFILES

    try:
        with open(config_path, "r") as f:
            overrides = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load lineup config {config_path}: {e}. Using defaults.")
        return STAT_PROFILES

    if not isinstance(overrides, dict):
        raise ValueError(f"Lineup config {config_path} must map stat types to tables")

    profiles = dict(STAT_PROFILES)
    for stat_type, table in overrides.items():
        if not isinstance(table, dict):
            raise ValueError(f"Lineup config entry '{stat_type}' must be a mapping")
        base = profiles.get(stat_type, StatProfile(stat_type=stat_type))
        weights = coerce_metric_table(table.get('metric_weights') or {}, f"{stat_type}.metric_weights")
        fallbacks = coerce_metric_table(table.get('fallback_boosts') or {}, f"{stat_type}.fallback_boosts")
        profiles[stat_type] = StatProfile(
            stat_type=stat_type,
            metric_weights={**base.metric_weights, **weights},
            fallback_boosts={**base.fallback_boosts, **fallbacks},
        )

    validate_stat_profiles(profiles)
    logger.info(f"Loaded lineup stat profiles from {config_path}")
    return profiles


# =============================================================================
# AGGREGATION
# =============================================================================

def aggregate_adjustments(
    player_name: str,
    team: str,
    stat_type: str,
    injured_teammates: List[str],
    adjustments: List[PerTeammateAdjustment],
    baseline: BaselineMetrics,
    profile: StatProfile,
    unresolved_teammates: Optional[List[str]] = None,
    dampening: Optional[float] = None
) -> Optional[CompositeAdjustment]:
    """
    Combine per-teammate adjustments into one composite.

    Args:
        player_name: Subject player
        team: Team abbreviation
        stat_type: Projected stat
        injured_teammates: Teammates the caller reported as out
        adjustments: Resolved per-teammate adjustments
        baseline: Team teammate baseline
        profile: Stat profile providing metric weights
        unresolved_teammates: Teammates skipped for missing data
        dampening: Scale on the weighted boost (defaults to settings.LINEUP_SHIFT_DAMPENING)

    Returns:
        CompositeAdjustment, or None when nothing resolved
    """
    if not adjustments:
        return None
    dampening = settings.LINEUP_SHIFT_DAMPENING if dampening is None else dampening

    boosts = np.array([[adj.boost(m) for m in METRIC_TYPES] for adj in adjustments])
    avg_boosts = boosts.mean(axis=0)
    weights = np.array([profile.weight(m) for m in METRIC_TYPES])
    weighted = float(avg_boosts @ weights)
    confidence = float(np.clip(np.mean([adj.confidence for adj in adjustments]), 0.0, 1.0))

    avg = dict(zip(METRIC_TYPES, avg_boosts.tolist()))

    return CompositeAdjustment(
        player_name=player_name,
        team=team,
        stat_type=stat_type,
        injured_teammates=list(injured_teammates),
        adjusted_shooting_efficiency=baseline.shooting_efficiency * (1 + avg['shooting']),
        adjusted_rebounding_rate=baseline.rebounding_rate_per_40 * (1 + avg['rebounding']),
        adjusted_assist_rate=baseline.assist_rate_per_40 * (1 + avg['assists']),
        lineup_shift_multiplier=1 + weighted * dampening,
        confidence=confidence,
        shooting_boost=avg['shooting'],
        rebounding_boost=avg['rebounding'],
        assist_boost=avg['assists'],
        weighted_boost=weighted,
        adjustments=list(adjustments),
        unresolved_teammates=list(unresolved_teammates or []),
    )


# =============================================================================
# ENGINE
# =============================================================================

@dataclass(frozen=True)
class _TeamContext:
    """Everything derived from the single team-wide fetch of one call."""
    player_name: str
    team: str
    window: SeasonWindow
    team_games: pd.DataFrame
    baseline: BaselineMetrics
    subject_games: pd.DataFrame
    appearances: AppearanceIndex


class LineupAdjustmentEngine:
    """
    Teammate-absence impact engine.

    Args:
        store: Game log store (defaults to create_game_log_store())
        profiles: Stat profile table (defaults to STAT_PROFILES or the
            LINEUP_CONFIG_PATH override)
        window: Season window (defaults to the configured season)
        batch_queries: One team-wide query per call (True) or per-teammate
            queries (False); defaults to settings.BATCH_TEAM_QUERIES
    """

    def __init__(
        self,
        store: Optional[GameLogStore] = None,
        profiles: Optional[Dict[str, StatProfile]] = None,
        window: Optional[SeasonWindow] = None,
        batch_queries: Optional[bool] = None
    ):
        self.store = store if store is not None else create_game_log_store()
        self.profiles = profiles if profiles is not None else load_stat_profiles(settings.LINEUP_CONFIG_PATH)
        self.window = window or SeasonWindow()
        self.batch_queries = settings.BATCH_TEAM_QUERIES if batch_queries is None else batch_queries

    def _profile(self, stat_type: str) -> StatProfile:
        if stat_type not in self.profiles:
            raise ValueError(
                f"Unknown stat type '{stat_type}'. Supported: {sorted(self.profiles)}"
            )
        return self.profiles[stat_type]

    def _team_context(self, player_name: str, team: str, window: SeasonWindow) -> _TeamContext:
        """Single team-wide fetch plus the baseline and appearance index built from it."""
        team_games = normalize_game_logs(self.store.query_by_team_and_window(team, window))
        subject_rows = team_games[team_games['player_name'] == player_name]
        return _TeamContext(
            player_name=player_name,
            team=team,
            window=window,
            team_games=team_games,
            baseline=calculate_baseline_metrics(team_games, player_name, team),
            subject_games=subject_qualifying_games(subject_rows),
            appearances=AppearanceIndex.from_game_logs(team_games),
        )

    def _absence_inputs(self, context: _TeamContext, teammate: str) -> Tuple[pd.DataFrame, frozenset]:
        """
        Subject's qualifying games and the teammate's appearance dates.

        Raises:
            GameLogDataError: If the teammate has no rows in the window or a query fails
        """
        if self.batch_queries:
            if not context.appearances.has_player(teammate):
                raise GameLogDataError(f"No game logs for {teammate} ({context.team}) in window")
            return context.subject_games, context.appearances.dates_for(teammate)

        subject_rows = normalize_game_logs(self.store.query_by_player_and_window(
            context.player_name, context.team, context.window
        ))
        teammate_rows = normalize_game_logs(
            self.store.query_by_player_and_window(teammate, context.team, context.window)
        )
        if teammate_rows.empty:
            raise GameLogDataError(f"No game logs for {teammate} ({context.team}) in window")
        return (
            subject_qualifying_games(subject_rows),
            frozenset(teammate_rows['game_date'].astype(str)),
        )

    def resolve_teammate(
        self,
        context: _TeamContext,
        teammate: str,
        stat_type: str
    ) -> Optional[PerTeammateAdjustment]:
        """
        Measured or fallback adjustment for one injured teammate.

        Returns:
            PerTeammateAdjustment, or None if the teammate is unresolved
        """
        if teammate == context.player_name:
            logger.warning(f"Skipping {teammate}: listed as their own injured teammate")
            return None

        try:
            subject_games, teammate_dates = self._absence_inputs(context, teammate)
        except GameLogDataError as e:
            logger.warning(f"Skipping {teammate}: {e}")
            return None

        absence_games = detect_absence_window(subject_games, teammate_dates)
        try:
            require_sufficient_sample(absence_games, teammate)
        except InsufficientSampleError as e:
            logger.warning(f"{e}. Using generic {stat_type} adjustment.")
            return get_generic_adjustment(stat_type, teammate, self.profiles)

        return calculate_teammate_adjustment(teammate, absence_games, context.baseline)

    def compute_lineup_adjustment(
        self,
        player_name: str,
        team: str,
        stat_type: str,
        injured_teammates: List[str],
        window: Optional[SeasonWindow] = None
    ) -> Optional[CompositeAdjustment]:
        """
        Composite adjustment for a player given the teammates ruled out.

        Args:
            player_name: Subject player
            team: Team abbreviation
            stat_type: points, rebounds or assists
            injured_teammates: Teammates out for the game
            window: Season window (defaults to the engine's window)

        Returns:
            CompositeAdjustment, or None if no teammate could be resolved

        Raises:
            ValueError: If stat_type has no profile
        """
        profile = self._profile(stat_type)
        if not injured_teammates:
            return None
        window = window or self.window

        try:
            context = self._team_context(player_name, team, window)
        except GameLogDataError as e:
            logger.warning(f"Team game logs unavailable for {team}: {e}")
            return None

        adjustments: List[PerTeammateAdjustment] = []
        unresolved: List[str] = []
        for teammate in injured_teammates:
            adjustment = self.resolve_teammate(context, teammate, stat_type)
            if adjustment is None:
                unresolved.append(teammate)
            else:
                adjustments.append(adjustment)

        composite = aggregate_adjustments(
            player_name, team, stat_type, injured_teammates,
            adjustments, context.baseline, profile, unresolved,
        )
        if composite is None:
            logger.info(f"No valid lineup adjustments for {player_name} ({team}, {stat_type})")
            return None

        logger.info(
            f"Lineup adjustment for {player_name} ({team}, {stat_type}): "
            f"multiplier={composite.lineup_shift_multiplier:.3f}, "
            f"confidence={composite.confidence:.2f}, "
            f"resolved={composite.resolved_count}/{len(injured_teammates)} "
            f"({composite.fallback_count} fallback)"
        )
        return composite

    def apply_lineup_adjustments(
        self,
        player_name: str,
        team: str,
        stat_type: str,
        injured_teammates: List[str],
        base_features: Mapping[str, float],
        window: Optional[SeasonWindow] = None
    ) -> Mapping[str, float]:
        """
        Apply lineup adjustments to a feature map. Never raises.

        Returns:
            Adjusted copy of base_features, or base_features itself when no
            adjustment applies or anything fails
        """
        if not injured_teammates:
            return base_features

        try:
            composite = self.compute_lineup_adjustment(
                player_name, team, stat_type, injured_teammates, window
            )
            return apply_composite_to_features(base_features, composite)
        except Exception as e:
            logger.error(f"Error applying lineup adjustments for {player_name}: {e}")
            return base_features

    def build_team_absence_profile(
        self,
        player_name: str,
        team: str,
        stat_type: str,
        window: Optional[SeasonWindow] = None
    ) -> pd.DataFrame:
        """
        Evaluate every roster teammate's absence impact on a player.

        Returns:
            DataFrame with one row per teammate: absence_games, resolution
            (measured / insufficient_sample), the three boosts, confidence,
            and the subject's per-40 usage of stat_type in the absence window
            vs overall. Sorted by absence_games descending.

        Raises:
            ValueError: If stat_type has no profile
            GameLogDataError: If the team game logs cannot be loaded
        """
        self._profile(stat_type)
        context = self._team_context(player_name, team, window or self.window)
        usage_overall = calculate_usage_per_40(context.subject_games, stat_type)

        rows = []
        for teammate in context.appearances.players:
            if teammate == player_name:
                continue
            absence_games = detect_absence_window(
                context.subject_games, context.appearances.dates_for(teammate)
            )
            row = {
                'teammate': teammate,
                'absence_games': len(absence_games),
                'resolution': 'insufficient_sample',
                'shooting_boost': np.nan,
                'rebounding_boost': np.nan,
                'assist_boost': np.nan,
                'confidence': 0.0,
                'usage_in_absence_per_40': calculate_usage_per_40(absence_games, stat_type),
                'usage_overall_per_40': usage_overall,
            }
            try:
                require_sufficient_sample(absence_games, teammate)
            except InsufficientSampleError:
                rows.append(row)
                continue

            adjustment = calculate_teammate_adjustment(teammate, absence_games, context.baseline)
            row.update(
                resolution='measured',
                shooting_boost=adjustment.shooting_boost,
                rebounding_boost=adjustment.rebounding_boost,
                assist_boost=adjustment.assist_boost,
                confidence=adjustment.confidence,
            )
            rows.append(row)

        columns = [
            'teammate', 'absence_games', 'resolution', 'shooting_boost',
            'rebounding_boost', 'assist_boost', 'confidence',
            'usage_in_absence_per_40', 'usage_overall_per_40',
        ]
        profile_df = pd.DataFrame(rows, columns=columns)
        if profile_df.empty:
            return profile_df
        return profile_df.sort_values(
            ['absence_games', 'teammate'], ascending=[False, True]
        ).reset_index(drop=True)


# =============================================================================
# DEFAULT ENGINE
# =============================================================================

@cache
def get_lineup_engine() -> LineupAdjustmentEngine:
    """
    Get the default LineupAdjustmentEngine built from settings.

    The first call opens the configured game log store; subsequent calls
    return the cached engine.
    """
    return LineupAdjustmentEngine()


def compute_lineup_adjustment(
    player_name: str,
    team: str,
    stat_type: str,
    injured_teammates: List[str]
) -> Optional[CompositeAdjustment]:
    """Convenience wrapper around the default engine."""
    return get_lineup_engine().compute_lineup_adjustment(
        player_name, team, stat_type, injured_teammates
    )


def apply_lineup_adjustments(
    player_name: str,
    team: str,
    stat_type: str,
    injured_teammates: List[str],
    base_features: Mapping[str, float]
) -> Mapping[str, float]:
    """Convenience wrapper around the default engine. Never raises."""
    if not injured_teammates:
        return base_features
    try:
        engine = get_lineup_engine()
    except Exception as e:
        logger.error(f"Lineup engine unavailable: {e}")
        return base_features
    return engine.apply_lineup_adjustments(
        player_name, team, stat_type, injured_teammates, base_features
    )
