"""Tests for the canonical game log schema and local stores."""

import pandas as pd
import pytest

from wnba_quant.data.game_log_schema import (
    CANONICAL_COLUMNS,
    GameLogRecord,
    frame_to_records,
    normalize_game_logs,
    validate_game_logs,
)
from wnba_quant.data.game_log_store import (
    DataFrameGameLogStore,
    FileGameLogStore,
    GameLogDataError,
    create_game_log_store,
)
from wnba_quant.schemas import SeasonWindow


class TestNormalize:
    """Test coercion into the canonical schema."""

    def test_missing_stats_zero_filled(self) -> None:
        """Absent or null counting stats become 0."""
        df = normalize_game_logs(pd.DataFrame([
            {'player_name': 'X', 'team': 'NYL', 'game_date': '2025-06-02', 'minutes': None},
            {'player_name': 'Y', 'team': 'NYL', 'game_date': '2025-06-01', 'points': '12'},
        ]))
        assert list(df.columns[:len(CANONICAL_COLUMNS)]) == CANONICAL_COLUMNS
        assert df['minutes'].tolist() == [0.0, 0.0]
        assert df['points'].tolist() == [12.0, 0.0]
        assert df['game_date'].tolist() == ['2025-06-01', '2025-06-02']
        validate_game_logs(df)

    def test_missing_identifier_raises(self) -> None:
        """Rows without a game date cannot be used."""
        with pytest.raises(ValueError):
            normalize_game_logs(pd.DataFrame([{'player_name': 'X', 'team': 'NYL'}]))

    def test_negative_stats_rejected(self) -> None:
        """validate_game_logs rejects negative counting stats."""
        df = normalize_game_logs(pd.DataFrame([
            {'player_name': 'X', 'team': 'NYL', 'game_date': '2025-06-01', 'rebounds': -1},
        ]))
        with pytest.raises(ValueError):
            validate_game_logs(df)

    def test_records_roundtrip(self) -> None:
        """Records survive conversion to and from a frame."""
        record = GameLogRecord('X', 'NYL', '2025-06-01', minutes=31.0, points=22.0)
        assert frame_to_records(pd.DataFrame([record.to_dict()])) == [record]
        assert record.is_qualifying()
        assert not GameLogRecord('X', 'NYL', '2025-06-01', minutes=14.9).is_qualifying()


class TestDataFrameStore:
    """Test the in-memory store queries."""

    def test_team_query_filters_team_and_season(self, store) -> None:
        """2024 rows are excluded, bench rows are kept."""
        rows = store.query_by_team_and_window('nyl', SeasonWindow(season=2025))
        assert not rows['game_date'].str.startswith('2024').any()
        assert 'Bench Player' in set(rows['player_name'])
        assert set(rows['team']) == {'NYL'}

    def test_player_query_ordered(self, store) -> None:
        """Player rows come back ordered by game date, any minutes."""
        rows = store.query_by_player_and_window('Sabrina Ionescu', 'NYL', SeasonWindow(season=2025))
        assert len(rows) == 21
        assert rows['game_date'].is_monotonic_increasing

    def test_window_bounds(self, store) -> None:
        """Start and end dates are inclusive."""
        window = SeasonWindow(season=2025, start_date='2025-06-05', end_date='2025-06-07')
        rows = store.query_by_player_and_window('Sabrina Ionescu', 'NYL', window)
        assert rows['game_date'].tolist() == ['2025-06-05', '2025-06-06', '2025-06-07']

    def test_from_records(self) -> None:
        """A store can be built from GameLogRecords."""
        store = DataFrameGameLogStore.from_records([
            GameLogRecord('X', 'nyl', '2025-06-01', minutes=30.0),
        ])
        assert len(store.query_by_team_and_window('NYL', SeasonWindow(season=2025))) == 1


class TestFileStore:
    """Test parquet/CSV loading."""

    def test_reads_csv(self, game_logs, tmp_path) -> None:
        """CSV exports load into the canonical schema."""
        path = tmp_path / 'logs.csv'
        game_logs.to_csv(path, index=False)
        store = FileGameLogStore(path)
        rows = store.query_by_team_and_window('NYL', SeasonWindow(season=2025))
        assert len(rows) == len(game_logs) - 1

    def test_parquet_falls_back_to_csv(self, game_logs, tmp_path) -> None:
        """A missing parquet file with a sibling CSV uses the CSV."""
        game_logs.to_csv(tmp_path / 'logs.csv', index=False)
        store = FileGameLogStore(tmp_path / 'logs.parquet')
        assert store.source_name == 'file:logs.parquet'

    def test_missing_file(self, tmp_path) -> None:
        """No file at all raises GameLogDataError."""
        with pytest.raises(GameLogDataError):
            FileGameLogStore(tmp_path / 'nope.parquet')


class TestCreateStore:
    """Test store selection."""

    def test_file_source(self, game_logs, tmp_path) -> None:
        """'file' builds a FileGameLogStore from the given path."""
        path = tmp_path / 'logs.csv'
        game_logs.to_csv(path, index=False)
        assert isinstance(create_game_log_store('file', path), FileGameLogStore)

    def test_supabase_without_credentials(self, monkeypatch) -> None:
        """'supabase' without URL/key raises GameLogDataError."""
        from wnba_quant.config import settings
        monkeypatch.setattr(settings, 'SUPABASE_URL', None)
        with pytest.raises(GameLogDataError):
            create_game_log_store('supabase')

    def test_unknown_source(self) -> None:
        """Unknown sources raise ValueError."""
        with pytest.raises(ValueError):
            create_game_log_store('mongo')
