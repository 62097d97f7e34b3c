"""Game log data access for WNBA QUANT."""

from wnba_quant.data.game_log_schema import (
    CANONICAL_COLUMNS,
    GameLogRecord,
    normalize_game_logs,
    qualifying_games,
)
from wnba_quant.data.game_log_store import (
    DataFrameGameLogStore,
    FileGameLogStore,
    GameLogDataError,
    GameLogStore,
    create_game_log_store,
)

__all__ = [
    'CANONICAL_COLUMNS',
    'GameLogRecord',
    'normalize_game_logs',
    'qualifying_games',
    'DataFrameGameLogStore',
    'FileGameLogStore',
    'GameLogDataError',
    'GameLogStore',
    'create_game_log_store',
]
