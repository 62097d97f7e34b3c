"""
Canonical Game Log Schema for WNBA Player Stats

Every game log source (Supabase table, parquet export, in-memory frames) is
transformed into this schema before the lineup engine sees it.

Key Design Principles:
1. Source-agnostic: Same columns regardless of data source
2. Zero-filled: Missing counting stats are 0, never NaN
3. Ordered: Rows sorted by game_date so "ordered list" queries hold
"""

from dataclasses import dataclass, fields
from typing import Iterable, Optional
import logging

import pandas as pd

logger = logging.getLogger(__name__)


IDENTIFIER_COLUMNS = [
    "player_name",
    "team",
    "game_date",          # Day-granularity key, ISO YYYY-MM-DD
]

# Counting stats (missing values are treated as 0)
NUMERIC_COLUMNS = [
    "minutes",
    "points",
    "field_goals_made",
    "field_goals_attempted",
    "three_points_made",
    "three_points_attempted",
    "free_throws_made",
    "free_throws_attempted",
    "rebounds",
    "assists",
    "turnovers",
]

CANONICAL_COLUMNS = IDENTIFIER_COLUMNS + NUMERIC_COLUMNS


@dataclass
class GameLogRecord:
    """
    Canonical representation of one player's line in one game.
    """
    player_name: str
    team: str
    game_date: str

    minutes: float = 0.0
    points: float = 0.0
    field_goals_made: float = 0.0
    field_goals_attempted: float = 0.0
    three_points_made: float = 0.0
    three_points_attempted: float = 0.0
    free_throws_made: float = 0.0
    free_throws_attempted: float = 0.0
    rebounds: float = 0.0
    assists: float = 0.0
    turnovers: float = 0.0

    def is_qualifying(self, min_minutes: float = 15.0) -> bool:
        """True when the player logged enough minutes to count for analysis."""
        return self.minutes >= min_minutes

    def to_dict(self) -> dict:
        """Convert to dictionary for DataFrame creation."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def records_to_frame(records: Iterable[GameLogRecord]) -> pd.DataFrame:
    """Build a canonical game-log DataFrame from records."""
    return normalize_game_logs(pd.DataFrame([r.to_dict() for r in records]))


def frame_to_records(df: pd.DataFrame) -> list[GameLogRecord]:
    """Convert a canonical game-log DataFrame back into records (in row order)."""
    df = normalize_game_logs(df)
    return [GameLogRecord(**row) for row in df[CANONICAL_COLUMNS].to_dict(orient="records")]


def normalize_game_logs(df: Optional[pd.DataFrame]) -> pd.DataFrame:
    """
    Coerce raw game-log rows into the canonical schema.

    - adds any missing canonical column
    - numeric columns: coerced to float, NaN/None -> 0
    - game_date: stored as string
    - rows sorted by (game_date, player_name)

    Extra source columns are kept after the canonical ones.

    Args:
        df: Raw rows from any source (None is treated as empty)

    Returns:
        DataFrame in canonical format
    """
    if df is None or df.empty:
        return pd.DataFrame({col: pd.Series(dtype=_column_dtype(col)) for col in CANONICAL_COLUMNS})

    result = df.copy()

    for col in IDENTIFIER_COLUMNS:
        if col not in result.columns:
            raise ValueError(f"Game logs missing required column: {col}")

    for col in NUMERIC_COLUMNS:
        if col not in result.columns:
            result[col] = 0.0
        result[col] = pd.to_numeric(result[col], errors="coerce").fillna(0.0).astype(float)

    result["game_date"] = result["game_date"].astype(str)
    result["player_name"] = result["player_name"].astype(str)
    result["team"] = result["team"].astype(str)

    extra = [c for c in result.columns if c not in CANONICAL_COLUMNS]
    result = result[CANONICAL_COLUMNS + extra]

    return result.sort_values(["game_date", "player_name"], kind="stable").reset_index(drop=True)


def qualifying_games(df: pd.DataFrame, min_minutes: float = 15.0) -> pd.DataFrame:
    """Rows with minutes >= min_minutes (garbage-time rows removed)."""
    if df.empty:
        return df
    return df[df["minutes"] >= min_minutes]


def validate_game_logs(df: pd.DataFrame) -> bool:
    """
    Validate that a DataFrame conforms to the canonical schema.

    Returns:
        True if valid, raises ValueError if invalid
    """
    missing = [c for c in CANONICAL_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing canonical columns: {missing}")

    for col in NUMERIC_COLUMNS:
        if df[col].isna().any():
            raise ValueError(f"Column {col} contains nulls; run normalize_game_logs first")
        if (df[col] < 0).any():
            raise ValueError(f"Column {col} contains negative values")

    return True


def _column_dtype(col: str) -> str:
    return "float64" if col in NUMERIC_COLUMNS else "object"
