"""Generic lineup adjustments used when a teammate's absence window is too thin."""

from typing import Dict, Optional
import logging

from configs.lineup_config import STAT_PROFILES, StatProfile
from wnba_quant.config import settings
from wnba_quant.schemas import AdjustmentSource, PerTeammateAdjustment

logger = logging.getLogger(__name__)


def get_generic_adjustment(
    stat_type: str,
    teammate: str = "",
    profiles: Optional[Dict[str, StatProfile]] = None
) -> PerTeammateAdjustment:
    """
    Heuristic boosts for a stat type at the fixed fallback confidence.

    Args:
        stat_type: points, rebounds or assists
        teammate: Absent teammate the fallback stands in for
        profiles: Stat profile table (defaults to configs.lineup_config.STAT_PROFILES)

    Returns:
        PerTeammateAdjustment with games_analyzed=0 and source=FALLBACK

    Raises:
        ValueError: If stat_type has no profile
    """
    profiles = profiles or STAT_PROFILES
    if stat_type not in profiles:
        raise ValueError(f"No generic adjustment for stat type '{stat_type}'")
    profile = profiles[stat_type]

    return PerTeammateAdjustment(
        teammate=teammate,
        shooting_boost=profile.fallback('shooting'),
        rebounding_boost=profile.fallback('rebounding'),
        assist_boost=profile.fallback('assists'),
        games_analyzed=0,
        source=AdjustmentSource.FALLBACK,
        confidence=settings.FALLBACK_CONFIDENCE,
    )
