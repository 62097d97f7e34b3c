"""
Shared synthetic game logs for lineup engine tests.

Team NYL, 2025 season, 20 game dates (2025-06-01 .. 2025-06-20):

- Sabrina Ionescu (subject): 30 min every date, FG 5/10 on dates 0-4 and
  4/10 otherwise, 6 reb / 3 ast per game; plus a 10-minute game on
  2025-07-05 and a 2024 game, neither of which should count.
- Teammate A: absent on dates 0-4 (5-game absence window)
- Teammate B: absent on dates 5-6 (2-game window -> fallback)
- Teammate C: plays every date
- Teammate D: absent on dates 10-19 (10-game window, full confidence)
- Bench Player: 5-minute rows every date (never qualifying, FG 0/4)

Every qualifying teammate row is FG 9/20, 6 reb, 3 ast in 30 min, so the
baseline is shooting 0.45, rebounding 8.0/40, assists 4.0/40.
"""

import pandas as pd
import pytest

from configs.lineup_config import STAT_PROFILES
from wnba_quant.data.game_log_store import DataFrameGameLogStore
from wnba_quant.features.lineup_adjustment import LineupAdjustmentEngine
from wnba_quant.schemas import SeasonWindow

SUBJECT = 'Sabrina Ionescu'
TEAM = 'NYL'
GAME_DATES = pd.date_range('2025-06-01', periods=20).strftime('%Y-%m-%d').tolist()

ABSENT_DATES = {
    'Teammate A': set(GAME_DATES[0:5]),
    'Teammate B': set(GAME_DATES[5:7]),
    'Teammate C': set(),
    'Teammate D': set(GAME_DATES[10:20]),
}


def make_row(player_name, game_date, team=TEAM, **stats):
    row = {
        'player_name': player_name,
        'team': team,
        'game_date': game_date,
        'minutes': 30.0,
        'points': 0.0,
        'field_goals_made': 0.0,
        'field_goals_attempted': 0.0,
        'rebounds': 0.0,
        'assists': 0.0,
    }
    row.update(stats)
    return row


def build_game_logs() -> pd.DataFrame:
    rows = []
    for i, game_date in enumerate(GAME_DATES):
        fgm = 5.0 if i < 5 else 4.0
        rows.append(make_row(
            SUBJECT, game_date,
            points=2 * fgm, field_goals_made=fgm, field_goals_attempted=10.0,
            rebounds=6.0, assists=3.0,
        ))
        for teammate, absent in ABSENT_DATES.items():
            if game_date in absent:
                continue
            rows.append(make_row(
                teammate, game_date,
                points=18.0, field_goals_made=9.0, field_goals_attempted=20.0,
                rebounds=6.0, assists=3.0,
            ))
        rows.append(make_row(
            'Bench Player', game_date,
            minutes=5.0, field_goals_made=0.0, field_goals_attempted=4.0,
            rebounds=1.0,
        ))

    # Non-qualifying subject game: every teammate "absent", must be ignored
    rows.append(make_row(
        SUBJECT, '2025-07-05', minutes=10.0,
        points=20.0, field_goals_made=10.0, field_goals_attempted=10.0,
    ))
    # Previous season: outside the 2025 window
    rows.append(make_row(
        SUBJECT, '2024-08-01',
        points=20.0, field_goals_made=10.0, field_goals_attempted=10.0,
    ))
    return pd.DataFrame(rows)


@pytest.fixture
def game_logs():
    """Synthetic NYL season of game logs."""
    return build_game_logs()


@pytest.fixture
def store(game_logs):
    """In-memory store over the synthetic season."""
    return DataFrameGameLogStore(game_logs)


@pytest.fixture
def window():
    """2025 season window."""
    return SeasonWindow(season=2025)


@pytest.fixture
def engine(store, window):
    """Batched engine with the built-in stat profiles."""
    return LineupAdjustmentEngine(store=store, profiles=STAT_PROFILES, window=window, batch_queries=True)


@pytest.fixture
def unbatched_engine(store, window):
    """Engine issuing per-teammate queries."""
    return LineupAdjustmentEngine(store=store, profiles=STAT_PROFILES, window=window, batch_queries=False)


@pytest.fixture
def base_features():
    """Feature map as prepared for the projection model."""
    return {
        'teammate_shooting_efficiency': 0.44,
        'teammate_rebounding_strength': 7.5,
        'teammate_assist_dependency': 3.9,
        'usage_rate': 0.27,
        'opponent_pace': 80.1,
    }
