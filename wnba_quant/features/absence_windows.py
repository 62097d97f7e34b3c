"""
Absence Window Detection

Identifies the games a player played while a specific teammate did NOT.

Presence is inferred purely from row existence in the game logs: a teammate
with a row on a date (even with 0 minutes) counts as present. A rested or
benched teammate without a row is indistinguishable from an injured one.

Usage:
    from wnba_quant.features.absence_windows import AppearanceIndex, detect_absence_window

    index = AppearanceIndex.from_game_logs(team_games)
    window = detect_absence_window(subject_games, index.dates_for('Breanna Stewart'))
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional
import logging

import pandas as pd

from wnba_quant.config import settings
from wnba_quant.data.game_log_schema import qualifying_games

logger = logging.getLogger(__name__)


class InsufficientSampleError(Exception):
    """Raised when an absence window has too few games to measure."""

    def __init__(self, teammate: str, games: int, required: int):
        self.teammate = teammate
        self.games = games
        self.required = required
        super().__init__(
            f"Insufficient games ({games}) with {teammate} out; need {required}"
        )


@dataclass(frozen=True)
class AppearanceIndex:
    """
    player_name -> set of game dates with a row for that player.

    Built once from a single team-wide query so absence windows for every
    teammate are computed in memory.
    """
    dates_by_player: Dict[str, FrozenSet[str]] = field(default_factory=dict)

    @classmethod
    def from_game_logs(cls, game_logs: pd.DataFrame) -> "AppearanceIndex":
        if game_logs.empty:
            return cls({})
        return cls({
            player: frozenset(dates.astype(str))
            for player, dates in game_logs.groupby('player_name')['game_date']
        })

    def has_player(self, player_name: str) -> bool:
        return player_name in self.dates_by_player

    def dates_for(self, player_name: str) -> FrozenSet[str]:
        return self.dates_by_player.get(player_name, frozenset())

    @property
    def players(self) -> list[str]:
        return sorted(self.dates_by_player)


def subject_qualifying_games(
    subject_games: pd.DataFrame,
    min_minutes: Optional[float] = None
) -> pd.DataFrame:
    """The subject's qualifying rows, ordered by game date."""
    min_minutes = settings.MIN_QUALIFYING_MINUTES if min_minutes is None else min_minutes
    rows = qualifying_games(subject_games, min_minutes)
    return rows.sort_values('game_date', kind='stable').reset_index(drop=True)


def detect_absence_window(
    subject_games: pd.DataFrame,
    teammate_dates: Iterable[str]
) -> pd.DataFrame:
    """
    Subject's qualifying games on dates the teammate has no game-log row.

    Args:
        subject_games: Subject's qualifying rows (see subject_qualifying_games)
        teammate_dates: Every date the teammate appears on, any minutes

    Returns:
        Subset of subject_games (set difference of subject dates minus teammate dates)
    """
    present = {str(d) for d in teammate_dates}
    absent_mask = ~subject_games['game_date'].astype(str).isin(present)
    return subject_games[absent_mask].reset_index(drop=True)


def require_sufficient_sample(
    absence_games: pd.DataFrame,
    teammate: str,
    min_games: Optional[int] = None
) -> pd.DataFrame:
    """
    Pass the absence window through if it is large enough to measure.

    Raises:
        InsufficientSampleError: If fewer than min_games rows
            (default settings.MIN_GAMES_FOR_LINEUP_ANALYSIS)
    """
    min_games = settings.MIN_GAMES_FOR_LINEUP_ANALYSIS if min_games is None else min_games
    if len(absence_games) < min_games:
        raise InsufficientSampleError(teammate, len(absence_games), min_games)
    return absence_games
