"""
Game Log Store - the lineup engine's only data dependency.

All game log sources implement GameLogStore and return DataFrames in the
canonical format from wnba_quant.data.game_log_schema.

Usage:
    from wnba_quant.data.game_log_store import DataFrameGameLogStore

    store = DataFrameGameLogStore(game_logs_df)
    team_games = store.query_by_team_and_window('NYL', SeasonWindow(season=2025))
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional
import logging

import pandas as pd

from wnba_quant.data.game_log_schema import (
    GameLogRecord,
    normalize_game_logs,
    records_to_frame,
    validate_game_logs,
)
from wnba_quant.schemas import SeasonWindow

logger = logging.getLogger(__name__)


class GameLogDataError(Exception):
    """Raised when game logs cannot be loaded from a store."""
    pass


class GameLogStore(ABC):
    """
    Abstract base class for game log sources.

    Queries are read-only and independent, so a store may be shared by
    concurrent callers.
    """

    def __init__(self):
        self.source_name = "unknown"

    @abstractmethod
    def query_by_player_and_window(
        self,
        player_name: str,
        team: str,
        window: SeasonWindow
    ) -> pd.DataFrame:
        """
        Load every game-log row for one player on one team within a window.

        Args:
            player_name: Player display name (exact match)
            team: Team abbreviation
            window: Season window to cover

        Returns:
            Canonical DataFrame ordered by game_date (any minutes, including 0)

        Raises:
            GameLogDataError: If the source cannot be queried
        """
        pass

    @abstractmethod
    def query_by_team_and_window(self, team: str, window: SeasonWindow) -> pd.DataFrame:
        """
        Load every game-log row for all rostered players of a team within a window.

        Args:
            team: Team abbreviation
            window: Season window to cover

        Returns:
            Canonical DataFrame ordered by game_date

        Raises:
            GameLogDataError: If the source cannot be queried
        """
        pass

    def normalize_team_name(self, team: str) -> str:
        """Standardized team abbreviation (uppercase, trimmed)."""
        if team is None or pd.isna(team):
            return "UNK"
        return str(team).strip().upper()


class DataFrameGameLogStore(GameLogStore):
    """
    Store backed by an in-memory DataFrame.

    Used for batch jobs that already hold a season of logs, notebooks and tests.
    """

    def __init__(self, game_logs: Optional[pd.DataFrame] = None):
        super().__init__()
        self.source_name = "dataframe"
        frame = normalize_game_logs(game_logs)
        frame["team"] = frame["team"].map(self.normalize_team_name)
        validate_game_logs(frame)
        self._game_logs = frame

    @classmethod
    def from_records(cls, records: Iterable[GameLogRecord]) -> "DataFrameGameLogStore":
        return cls(records_to_frame(records))

    def query_by_player_and_window(self, player_name, team, window):
        df = self._game_logs
        mask = (
            (df["player_name"] == player_name)
            & (df["team"] == self.normalize_team_name(team))
            & window.mask(df["game_date"])
        )
        return df[mask].reset_index(drop=True)

    def query_by_team_and_window(self, team, window):
        df = self._game_logs
        mask = (df["team"] == self.normalize_team_name(team)) & window.mask(df["game_date"])
        return df[mask].reset_index(drop=True)


class FileGameLogStore(DataFrameGameLogStore):
    """
    Store backed by a parquet export (CSV accepted as a fallback format).

    The file is read once at construction.
    """

    def __init__(self, path: Path):
        path = Path(path)
        frame = self._load(path)
        super().__init__(frame)
        self.source_name = f"file:{path.name}"
        self.path = path
        logger.info(f"Loaded {len(self._game_logs)} game log rows from {path}")

    @staticmethod
    def _load(path: Path) -> pd.DataFrame:
        if not path.exists():
            csv_path = path.with_suffix(".csv")
            if path.suffix == ".parquet" and csv_path.exists():
                logger.warning(f"{path} not found, falling back to {csv_path}")
                path = csv_path
            else:
                raise GameLogDataError(f"Game log file not found: {path}")

        try:
            if path.suffix == ".parquet":
                return pd.read_parquet(path)
            return pd.read_csv(path)
        except (OSError, ValueError) as e:
            raise GameLogDataError(f"Failed to read game logs from {path}: {e}") from e


def create_game_log_store(
    source: Optional[str] = None,
    path: Optional[Path] = None
) -> GameLogStore:
    """
    Build the configured game log store.

    Args:
        source: "file" or "supabase" (defaults to settings.GAME_LOG_SOURCE)
        path: Game log file for the file source (defaults to settings.GAME_LOGS_PATH)

    Returns:
        GameLogStore instance

    Raises:
        ValueError: If source is unknown
        GameLogDataError: If the source cannot be opened
    """
    from wnba_quant.config import settings

    source = (source or settings.GAME_LOG_SOURCE).lower()

    if source == "file":
        return FileGameLogStore(path or settings.GAME_LOGS_PATH)

    if source == "supabase":
        from wnba_quant.data.supabase_store import SupabaseGameLogStore
        return SupabaseGameLogStore(
            supabase_url=settings.SUPABASE_URL,
            supabase_key=settings.SUPABASE_SERVICE_ROLE_KEY,
            table=settings.GAME_LOG_TABLE,
        )

    raise ValueError(f"Unsupported game log source: {source}")
