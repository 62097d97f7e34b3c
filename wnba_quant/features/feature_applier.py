"""
Feature Applier - folds a composite lineup adjustment into model features.

Contract with the projection model:
- teammate_* features are overwritten only if the caller already supplied them
- lineup_shift_multiplier is set only when the composite passes the confidence
  gate, and it is the one key added even when the base map lacks it
- no other key is touched or added, and the caller's mapping is never mutated
- below the gate (or with no composite) the base map is returned as-is
"""

from typing import Dict, Mapping, Optional
import logging

from wnba_quant.config import settings
from wnba_quant.constants import LINEUP_SHIFT_FEATURE, METRIC_FEATURES
from wnba_quant.schemas import CompositeAdjustment

logger = logging.getLogger(__name__)


def passes_confidence_gate(
    composite: Optional[CompositeAdjustment],
    threshold: Optional[float] = None
) -> bool:
    """True if the composite exists and confidence >= threshold."""
    threshold = settings.CONFIDENCE_THRESHOLD if threshold is None else threshold
    return composite is not None and composite.confidence >= threshold


def apply_composite_to_features(
    base_features: Mapping[str, float],
    composite: Optional[CompositeAdjustment],
    threshold: Optional[float] = None
) -> Mapping[str, float]:
    """
    Apply a composite adjustment to a feature map.

    Args:
        base_features: Features prepared for the projection model
        composite: Output of compute_lineup_adjustment (None = no adjustment)
        threshold: Confidence gate (defaults to settings.CONFIDENCE_THRESHOLD)

    Returns:
        New dict with adjusted features, or base_features itself when nothing applies
    """
    if composite is None:
        return base_features

    if not passes_confidence_gate(composite, threshold):
        logger.info(
            f"Insufficient data for lineup adjustments for {composite.player_name}: "
            f"confidence {composite.confidence:.2f} below gate"
        )
        return base_features

    adjusted: Dict[str, float] = dict(base_features)
    adjusted_values = {
        'shooting': composite.adjusted_shooting_efficiency,
        'rebounding': composite.adjusted_rebounding_rate,
        'assists': composite.adjusted_assist_rate,
    }
    for metric, key in METRIC_FEATURES.items():
        value = adjusted_values[metric]
        if key in base_features:
            adjusted[key] = value
            logger.debug(f"Adjusted {key}: {base_features[key]:.3f} -> {value:.3f}")

    adjusted[LINEUP_SHIFT_FEATURE] = composite.lineup_shift_multiplier

    logger.info(
        f"[LINEUP] Adjustments applied: {composite.player_name} gets "
        f"{(composite.lineup_shift_multiplier - 1) * 100:+.1f}% overall "
        f"(confidence {composite.confidence:.0%})"
    )
    return adjusted
