"""Tests for settings, stat profiles and YAML overrides."""

import dataclasses

import pytest

from configs.lineup_config import STAT_PROFILES, get_stat_profile, validate_stat_profiles
from wnba_quant.config import Settings, settings
from wnba_quant.features.lineup_adjustment import load_stat_profiles


class TestSettings:
    """Test pydantic settings."""

    def test_defaults(self) -> None:
        """Engine thresholds match the documented defaults."""
        fresh = Settings(_env_file=None)
        assert fresh.MIN_QUALIFYING_MINUTES == 15.0
        assert fresh.MIN_GAMES_FOR_LINEUP_ANALYSIS == 3
        assert fresh.CONFIDENCE_THRESHOLD == 0.6
        assert fresh.FALLBACK_CONFIDENCE == 0.3
        assert fresh.LINEUP_SHIFT_DAMPENING == 0.5

    def test_env_override(self, monkeypatch) -> None:
        """Environment variables override defaults (case-insensitive)."""
        monkeypatch.setenv('confidence_threshold', '0.75')
        assert Settings(_env_file=None).CONFIDENCE_THRESHOLD == 0.75

    def test_validate_stat_type(self) -> None:
        """Only points, rebounds and assists are supported."""
        assert settings.validate_stat_type('rebounds') == 'rebounds'
        with pytest.raises(ValueError):
            settings.validate_stat_type('blocks')


class TestStatProfiles:
    """Test the built-in profile table."""

    def test_builtin_profiles_valid(self) -> None:
        """Weights sum to 1 and every metric is covered."""
        validate_stat_profiles(STAT_PROFILES)

    def test_weights_table(self) -> None:
        """Stat-specific metric weights."""
        assert get_stat_profile('points').metric_weights == {'shooting': 0.6, 'rebounding': 0.2, 'assists': 0.2}
        assert get_stat_profile('rebounds').weight('rebounding') == 0.7
        assert get_stat_profile('assists').weight('assists') == 0.5

    def test_unknown_profile(self) -> None:
        """Unknown stats raise ValueError."""
        with pytest.raises(ValueError):
            get_stat_profile('steals')

    def test_weights_must_sum_to_one(self) -> None:
        """A table whose weights do not sum to 1 is rejected."""
        bad = dict(STAT_PROFILES)
        bad['points'] = dataclasses.replace(
            STAT_PROFILES['points'],
            metric_weights={'shooting': 0.9, 'rebounding': 0.2, 'assists': 0.2},
        )
        with pytest.raises(ValueError):
            validate_stat_profiles(bad)

    def test_non_numeric_profile_rejected(self) -> None:
        """validate_stat_profiles reports non-numeric values as ValueError."""
        bad = dict(STAT_PROFILES)
        bad['assists'] = dataclasses.replace(
            STAT_PROFILES['assists'],
            fallback_boosts={'shooting': 'high', 'rebounding': 0.1, 'assists': 0.4},
        )
        with pytest.raises(ValueError):
            validate_stat_profiles(bad)


class TestYamlOverride:
    """Test LINEUP_CONFIG_PATH overrides."""

    def test_no_path_uses_defaults(self) -> None:
        """None -> built-in table."""
        assert load_stat_profiles(None) is STAT_PROFILES

    def test_missing_file_uses_defaults(self, tmp_path) -> None:
        """A missing file logs a warning and keeps the defaults."""
        assert load_stat_profiles(tmp_path / 'missing.yaml') is STAT_PROFILES

    def test_partial_override(self, tmp_path) -> None:
        """Keys in the YAML replace defaults; the rest are kept."""
        path = tmp_path / 'lineup.yaml'
        path.write_text(
            "points:\n"
            "  metric_weights: {shooting: 0.5, rebounding: 0.25, assists: 0.25}\n"
            "rebounds:\n"
            "  fallback_boosts: {rebounding: 0.4}\n"
        )
        profiles = load_stat_profiles(path)
        assert profiles['points'].weight('shooting') == 0.5
        assert profiles['points'].fallback('shooting') == 0.20
        assert profiles['rebounds'].fallback('rebounding') == 0.4
        assert profiles['rebounds'].fallback('assists') == 0.20
        assert STAT_PROFILES['points'].weight('shooting') == 0.6

    def test_unparseable_yaml_uses_defaults(self, tmp_path) -> None:
        """Broken YAML syntax falls back to the defaults."""
        path = tmp_path / 'lineup.yaml'
        path.write_text("points: [unclosed\n")
        assert load_stat_profiles(path) is STAT_PROFILES

    def test_non_numeric_value_raises(self, tmp_path) -> None:
        """A word where a number belongs raises ValueError, not TypeError."""
        path = tmp_path / 'lineup.yaml'
        path.write_text('points:\n  fallback_boosts: {shooting: "high"}\n')
        with pytest.raises(ValueError):
            load_stat_profiles(path)

    def test_numeric_strings_coerced(self, tmp_path) -> None:
        """Quoted numbers are read as floats."""
        path = tmp_path / 'lineup.yaml'
        path.write_text('rebounds:\n  fallback_boosts: {rebounding: "0.45"}\n')
        assert load_stat_profiles(path)['rebounds'].fallback('rebounding') == 0.45

    def test_invalid_table_raises(self, tmp_path) -> None:
        """Parseable YAML with bad weights raises ValueError."""
        path = tmp_path / 'lineup.yaml'
        path.write_text("assists:\n  metric_weights: {shooting: 0.9}\n")
        with pytest.raises(ValueError):
            load_stat_profiles(path)
