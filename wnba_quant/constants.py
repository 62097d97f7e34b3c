"""
Constants for teammate-absence lineup adjustments.

Feature names are the contract with the downstream projection model: the
engine only ever touches the keys listed here.
"""

# Teammate context features the engine may overwrite (only if already present)
TEAMMATE_SHOOTING_FEATURE = 'teammate_shooting_efficiency'
TEAMMATE_REBOUNDING_FEATURE = 'teammate_rebounding_strength'
TEAMMATE_ASSIST_FEATURE = 'teammate_assist_dependency'

# Set whenever a composite passes the confidence gate
LINEUP_SHIFT_FEATURE = 'lineup_shift_multiplier'

# Metric -> feature key it adjusts
METRIC_FEATURES = {
    'shooting': TEAMMATE_SHOOTING_FEATURE,
    'rebounding': TEAMMATE_REBOUNDING_FEATURE,
    'assists': TEAMMATE_ASSIST_FEATURE,
}

# Neutral priors when a rate has a zero denominator (no attempts / no minutes)
DEFAULT_RATES = {
    'shooting': 0.45,     # FGM / FGA
    'rebounding': 0.35,   # rebounds per 40
    'assists': 0.25,      # assists per 40
}

# Game-log column each stat type reads when computing per-40 usage
STAT_COLUMNS = {
    'points': 'points',
    'rebounds': 'rebounds',
    'assists': 'assists',
}
