"""
WNBA QUANT Configuration Package.

Strategy tables for the lineup adjustment engine are defined in lineup_config.py.
"""
from configs.lineup_config import (
    STAT_TYPES,
    METRIC_TYPES,
    StatProfile,
    STAT_PROFILES,
    coerce_metric_table,
    get_stat_profile,
    validate_stat_profiles,
)

__all__ = [
    'STAT_TYPES',
    'METRIC_TYPES',
    'StatProfile',
    'STAT_PROFILES',
    'coerce_metric_table',
    'get_stat_profile',
    'validate_stat_profiles',
]
