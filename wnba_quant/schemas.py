"""Pydantic schemas for strict data contracts across the lineup engine."""

from enum import Enum
from typing import Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator

from wnba_quant.config import settings


class SeasonWindow(BaseModel):
    """Range of games a query covers.

    A game date belongs to the window when its string form contains the season
    year and it falls inside the optional inclusive date bounds. Dates are
    compared as ISO strings (YYYY-MM-DD), so any day-granularity key sorts
    correctly.
    """

    season: int = Field(default_factory=lambda: settings.SEASON)
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        """Accept date/datetime/Timestamp bounds and keep the day part."""
        if v is None:
            return None
        return str(v)[:10]

    def contains(self, game_date) -> bool:
        key = str(game_date)
        if str(self.season) not in key:
            return False
        day = key[:10]
        if self.start_date is not None and day < self.start_date:
            return False
        if self.end_date is not None and day > self.end_date:
            return False
        return True

    def mask(self, game_dates: pd.Series) -> pd.Series:
        """Vectorized contains() over a Series of game dates."""
        keys = game_dates.astype(str)
        result = keys.str.contains(str(self.season), regex=False)
        days = keys.str[:10]
        if self.start_date is not None:
            result &= days >= self.start_date
        if self.end_date is not None:
            result &= days <= self.end_date
        return result


class RateMetrics(BaseModel):
    """Rate-normalized production over a set of game-log rows."""

    shooting_efficiency: float  # FGM / FGA
    rebounding_rate_per_40: float
    assist_rate_per_40: float
    games: int = 0

    def metric(self, metric: str) -> float:
        """Rate for a metric name ('shooting', 'rebounding', 'assists')."""
        return {
            'shooting': self.shooting_efficiency,
            'rebounding': self.rebounding_rate_per_40,
            'assists': self.assist_rate_per_40,
        }[metric]


class BaselineMetrics(RateMetrics):
    """Team-wide teammate baseline for one team and window."""

    team: str
    teammates: list[str] = Field(default_factory=list)


class AdjustmentSource(str, Enum):
    """Where a per-teammate adjustment came from."""
    MEASURED = "measured"    # Absence window with enough games
    FALLBACK = "fallback"    # Generic heuristic boosts


class PerTeammateAdjustment(BaseModel):
    """Relative boosts to the subject's rates while one teammate is out."""

    teammate: str
    shooting_boost: float = Field(ge=0.0)
    rebounding_boost: float = Field(ge=0.0)
    assist_boost: float = Field(ge=0.0)
    games_analyzed: int = Field(default=0, ge=0)
    source: AdjustmentSource = AdjustmentSource.MEASURED
    confidence: float = Field(ge=0.0, le=1.0)

    def boost(self, metric: str) -> float:
        """Boost for a metric name ('shooting', 'rebounding', 'assists')."""
        return {
            'shooting': self.shooting_boost,
            'rebounding': self.rebounding_boost,
            'assists': self.assist_boost,
        }[metric]


class CompositeAdjustment(BaseModel):
    """Combined effect of every resolved teammate absence on one projection."""

    player_name: str
    team: str
    stat_type: str
    injured_teammates: list[str]

    adjusted_shooting_efficiency: float
    adjusted_rebounding_rate: float
    adjusted_assist_rate: float
    lineup_shift_multiplier: float
    confidence: float = Field(ge=0.0, le=1.0)

    # Diagnostics
    shooting_boost: float = Field(default=0.0, ge=0.0)
    rebounding_boost: float = Field(default=0.0, ge=0.0)
    assist_boost: float = Field(default=0.0, ge=0.0)
    weighted_boost: float = 0.0
    adjustments: list[PerTeammateAdjustment] = Field(default_factory=list)
    unresolved_teammates: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def resolved_count(self) -> int:
        return len(self.adjustments)

    @property
    def fallback_count(self) -> int:
        return sum(1 for a in self.adjustments if a.source == AdjustmentSource.FALLBACK)
