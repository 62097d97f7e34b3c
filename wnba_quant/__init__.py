"""WNBA Quantitative Analytics: teammate-absence lineup adjustments.

Measures how a player's shooting, rebounding and assist rates move when
teammates are out and folds the result into projection-model features.
"""

__version__ = "0.1.0"
__author__ = "WNBA Quant Team"

from wnba_quant.data.game_log_store import GameLogStore
from wnba_quant.features.lineup_adjustment import LineupAdjustmentEngine
from wnba_quant.schemas import CompositeAdjustment

__all__ = ["GameLogStore", "LineupAdjustmentEngine", "CompositeAdjustment"]
