"""Configuration and constants for the WNBA Quant lineup engine."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

from configs.lineup_config import STAT_TYPES


class Settings(BaseSettings):
    """Global settings for the lineup adjustment engine."""

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    DATA_DIR: Path = PROJECT_ROOT / "data"

    # Season window (game dates are matched on the season year)
    SEASON: int = 2025

    # Sample gating
    MIN_QUALIFYING_MINUTES: float = 15.0  # Drops garbage-time rows
    MIN_GAMES_FOR_LINEUP_ANALYSIS: int = 3
    FULL_CONFIDENCE_GAMES: int = 10  # Measured confidence = min(1, games / this)
    FALLBACK_CONFIDENCE: float = 0.3
    CONFIDENCE_THRESHOLD: float = 0.6

    # Rate normalization / composite
    RATE_NORMALIZATION_MINUTES: float = 40.0
    LINEUP_SHIFT_DAMPENING: float = 0.5

    # One team-wide fetch per call instead of two queries per teammate
    BATCH_TEAM_QUERIES: bool = True

    # Game log source: "file" or "supabase"
    GAME_LOG_SOURCE: str = "file"
    GAME_LOGS_PATH: Path = DATA_DIR / "wnba_game_logs.parquet"

    # Supabase (PostgREST) configuration
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None
    GAME_LOG_TABLE: str = "wnba_game_logs"
    PAGE_SIZE: int = 1000

    # API Configuration
    REQUEST_TIMEOUT: int = 30
    REQUEST_RETRIES: int = 3
    REQUEST_BACKOFF: float = 1.0

    # Optional YAML override of configs/lineup_config.py STAT_PROFILES
    LINEUP_CONFIG_PATH: Optional[Path] = None

    LOG_LEVEL: str = "INFO"

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False

    def validate_stat_type(self, stat_type: str) -> str:
        """Validate a projected stat type.

        Args:
            stat_type: Stat to validate (points, rebounds or assists)

        Returns:
            Validated stat type

        Raises:
            ValueError: If stat_type is not supported
        """
        if stat_type not in STAT_TYPES:
            raise ValueError(
                f"Stat type '{stat_type}' not supported. Only {STAT_TYPES} supported."
            )
        return stat_type


# Global settings instance
settings = Settings()
