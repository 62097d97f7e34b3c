"""Command-line interface for the WNBA Quant lineup engine."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from wnba_quant.config import settings
from wnba_quant.data.game_log_store import create_game_log_store
from wnba_quant.features.lineup_adjustment import LineupAdjustmentEngine
from wnba_quant.schemas import SeasonWindow

app = typer.Typer(help="WNBA teammate-absence lineup adjustments")

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@app.callback()
def main(
    ctx: typer.Context,
    source: Optional[str] = typer.Option(None, help="Game log source: file or supabase"),
    game_logs: Optional[Path] = typer.Option(None, help="Game log parquet/CSV (file source)"),
    season: Optional[int] = typer.Option(None, help="Season year (defaults to settings.SEASON)"),
) -> None:
    """Options shared by every command."""
    ctx.obj = {"source": source, "game_logs": game_logs, "season": season}


def _build_engine(ctx: typer.Context) -> LineupAdjustmentEngine:
    options = ctx.obj or {}
    store = create_game_log_store(options.get("source"), options.get("game_logs"))
    window = SeasonWindow(season=options.get("season") or settings.SEASON)
    return LineupAdjustmentEngine(store=store, window=window)


@app.command()
def adjust(
    ctx: typer.Context,
    player: str = typer.Argument(..., help="Player name"),
    team: str = typer.Option(..., help="Team abbreviation"),
    stat: str = typer.Option("points", help="Stat type: points, rebounds or assists"),
    injured: List[str] = typer.Option(..., help="Injured teammate (repeatable)"),
) -> None:
    """Compute the composite lineup adjustment for a player.

    Examples:
        wnba-quant adjust "Sabrina Ionescu" --team NYL --stat points --injured "Breanna Stewart"
    """
    try:
        settings.validate_stat_type(stat)
        engine = _build_engine(ctx)
        composite = engine.compute_lineup_adjustment(player, team, stat, injured)
    except Exception as e:
        logger.error(f"Lineup adjustment failed: {e}")
        raise typer.Exit(code=1)

    if composite is None:
        typer.echo(f"No lineup adjustment for {player} ({team}, {stat})")
        return
    typer.echo(composite.model_dump_json(indent=2))


@app.command()
def apply(
    ctx: typer.Context,
    player: str = typer.Argument(..., help="Player name"),
    team: str = typer.Option(..., help="Team abbreviation"),
    stat: str = typer.Option("points", help="Stat type: points, rebounds or assists"),
    injured: List[str] = typer.Option([], help="Injured teammate (repeatable)"),
    features: Path = typer.Option(..., help="JSON file with the base feature map"),
    output: Optional[Path] = typer.Option(None, help="Write adjusted features here instead of stdout"),
) -> None:
    """Apply lineup adjustments to a feature map.

    Examples:
        wnba-quant apply "A'ja Wilson" --team LVA --stat rebounds \\
            --injured "Kiah Stokes" --features features.json --output adjusted.json
    """
    try:
        with open(features, "r") as f:
            base_features = json.load(f)
        if not isinstance(base_features, dict):
            raise ValueError(f"{features} must contain a JSON object")
        engine = _build_engine(ctx)
    except Exception as e:
        logger.error(f"Could not prepare lineup adjustments: {e}")
        raise typer.Exit(code=1)

    adjusted = engine.apply_lineup_adjustments(player, team, stat, injured, base_features)
    payload = json.dumps(dict(adjusted), indent=2)

    if output is None:
        typer.echo(payload)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload)
    typer.echo(f"✅ Adjusted features saved to {output}")


@app.command()
def profile(
    ctx: typer.Context,
    player: str = typer.Argument(..., help="Player name"),
    team: str = typer.Option(..., help="Team abbreviation"),
    stat: str = typer.Option("points", help="Stat type: points, rebounds or assists"),
) -> None:
    """Show how each teammate's absences have affected a player.

    Examples:
        wnba-quant profile "Caitlin Clark" --team IND --stat assists
    """
    try:
        settings.validate_stat_type(stat)
        engine = _build_engine(ctx)
        profile_df = engine.build_team_absence_profile(player, team, stat)
    except Exception as e:
        logger.error(f"Team absence profile failed: {e}")
        raise typer.Exit(code=1)

    if profile_df.empty:
        typer.echo(f"No teammates found for {player} ({team})")
        return
    typer.echo(profile_df.to_string(index=False, float_format=lambda v: f"{v:.3f}"))


if __name__ == "__main__":
    app()
