"""
Lineup Adjustment Configuration - Single Source of Truth for Stat Profiles

All per-statistic behavior of the teammate-absence engine is defined here:
- how much each metric (shooting / rebounding / assists) matters to a stat model
- the generic boosts used when a teammate's absence window is too thin

Usage:
    from configs.lineup_config import STAT_PROFILES, get_stat_profile

    profile = get_stat_profile('points')
    profile.metric_weights['shooting']   # 0.6

To retune without a code change, point LINEUP_CONFIG_PATH at a YAML file
(see wnba_quant.features.lineup_adjustment.load_stat_profiles).
"""
from dataclasses import dataclass, field
from typing import Dict, List


# =============================================================================
# STAT / METRIC VOCABULARY
# =============================================================================

STAT_TYPES: List[str] = ['points', 'rebounds', 'assists']

METRIC_TYPES: List[str] = ['shooting', 'rebounding', 'assists']


@dataclass(frozen=True)
class StatProfile:
    """Weights and fallback boosts for one projected statistic."""
    stat_type: str
    metric_weights: Dict[str, float] = field(default_factory=dict)
    fallback_boosts: Dict[str, float] = field(default_factory=dict)

    def weight(self, metric: str) -> float:
        return self.metric_weights.get(metric, 0.0)

    def fallback(self, metric: str) -> float:
        return self.fallback_boosts.get(metric, 0.0)


# =============================================================================
# STAT PROFILES
# =============================================================================
# metric_weights: each row sums to 1.0 and turns averaged boosts into the
#   weighted composite behind lineup_shift_multiplier.
# fallback_boosts: heuristic relative boosts when < MIN_GAMES_FOR_LINEUP_ANALYSIS
#   absence games exist.

STAT_PROFILES: Dict[str, StatProfile] = {
    'points': StatProfile(
        stat_type='points',
        metric_weights={'shooting': 0.6, 'rebounding': 0.2, 'assists': 0.2},
        fallback_boosts={'shooting': 0.20, 'rebounding': 0.10, 'assists': 0.10},  # scorer out
    ),
    'rebounds': StatProfile(
        stat_type='rebounds',
        metric_weights={'shooting': 0.1, 'rebounding': 0.7, 'assists': 0.2},
        fallback_boosts={'shooting': 0.10, 'rebounding': 0.50, 'assists': 0.20},  # big out
    ),
    'assists': StatProfile(
        stat_type='assists',
        metric_weights={'shooting': 0.4, 'rebounding': 0.1, 'assists': 0.5},
        fallback_boosts={'shooting': 0.30, 'rebounding': 0.10, 'assists': 0.40},  # playmaker out
    ),
}


def get_stat_profile(stat_type: str) -> StatProfile:
    """
    Look up the profile for a stat type.

    Raises:
        ValueError: If stat_type is not one of STAT_TYPES
    """
    if stat_type not in STAT_PROFILES:
        raise ValueError(
            f"Unknown stat type '{stat_type}'. Supported: {STAT_TYPES}"
        )
    return STAT_PROFILES[stat_type]


def coerce_metric_table(table: Dict[str, object], label: str) -> Dict[str, float]:
    """
    Convert a metric table's values to floats.

    Raises:
        ValueError: If a value is not numeric
    """
    try:
        return {metric: float(value) for metric, value in table.items()}
    except (AttributeError, TypeError, ValueError) as e:
        raise ValueError(f"{label} must map metrics to numbers: {e}") from e


def validate_stat_profiles(profiles: Dict[str, StatProfile]) -> None:
    """
    Check a profile table covers every stat and metric with sane values.

    Raises:
        ValueError: On a missing stat/metric, a negative value, or weights
            that do not sum to 1.0
    """
    missing = [s for s in STAT_TYPES if s not in profiles]
    if missing:
        raise ValueError(f"Stat profiles missing for: {missing}")

    for stat_type, profile in profiles.items():
        for table_name, table in (('metric_weights', profile.metric_weights),
                                  ('fallback_boosts', profile.fallback_boosts)):
            missing_metrics = [m for m in METRIC_TYPES if m not in table]
            if missing_metrics:
                raise ValueError(f"{stat_type}.{table_name} missing {missing_metrics}")
            values = coerce_metric_table(table, f"{stat_type}.{table_name}")
            negative = {m: v for m, v in values.items() if v < 0}
            if negative:
                raise ValueError(f"{stat_type}.{table_name} has negative values: {negative}")

        total = sum(float(profile.metric_weights[m]) for m in METRIC_TYPES)
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"{stat_type}.metric_weights sum to {total:.3f}, expected 1.0")
