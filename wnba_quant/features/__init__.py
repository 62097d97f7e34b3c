"""Lineup feature engineering for WNBA QUANT."""

from wnba_quant.features.absence_windows import (
    AppearanceIndex,
    InsufficientSampleError,
    detect_absence_window,
)
from wnba_quant.features.baseline_metrics import (
    calculate_baseline_metrics,
    calculate_rate_metrics,
)
from wnba_quant.features.feature_applier import (
    apply_composite_to_features,
    passes_confidence_gate,
)
from wnba_quant.features.generic_fallback import get_generic_adjustment
from wnba_quant.features.lineup_adjustment import (
    LineupAdjustmentEngine,
    apply_lineup_adjustments,
    compute_lineup_adjustment,
    get_lineup_engine,
    load_stat_profiles,
)
from wnba_quant.features.teammate_adjustment import calculate_teammate_adjustment

__all__ = [
    'AppearanceIndex',
    'InsufficientSampleError',
    'detect_absence_window',
    'calculate_baseline_metrics',
    'calculate_rate_metrics',
    'apply_composite_to_features',
    'passes_confidence_gate',
    'get_generic_adjustment',
    'LineupAdjustmentEngine',
    'apply_lineup_adjustments',
    'compute_lineup_adjustment',
    'get_lineup_engine',
    'load_stat_profiles',
    'calculate_teammate_adjustment',
]
