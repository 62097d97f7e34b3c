"""
Supabase game log store.

Reads the `wnba_game_logs` table through PostgREST with plain requests
(apikey + Bearer auth headers), retrying transient failures and paging
through results PAGE_SIZE rows at a time.
"""

import logging
import time
from typing import Any, Optional

import pandas as pd
import requests

from wnba_quant.config import settings
from wnba_quant.data.game_log_schema import CANONICAL_COLUMNS, normalize_game_logs
from wnba_quant.data.game_log_store import GameLogDataError, GameLogStore
from wnba_quant.schemas import SeasonWindow

logger = logging.getLogger(__name__)

Params = list[tuple[str, str]]


class SupabaseGameLogStore(GameLogStore):
    """Game log store backed by a Supabase (PostgREST) table."""

    def __init__(
        self,
        supabase_url: Optional[str],
        supabase_key: Optional[str],
        table: str = "wnba_game_logs",
        page_size: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize store with connection details.

        Raises:
            GameLogDataError: If URL or key is missing
        """
        super().__init__()
        if not supabase_url or not supabase_key:
            raise GameLogDataError(
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for the supabase source"
            )
        self.source_name = "supabase"
        self.rest_url = f"{supabase_url.rstrip('/')}/rest/v1/{table}"
        self.table = table
        self.page_size = page_size or settings.PAGE_SIZE
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": supabase_key,
            "Authorization": f"Bearer {supabase_key}",
            "Accept": "application/json",
        })

    def query_by_player_and_window(self, player_name, team, window):
        params = [
            ("player_name", f"eq.{player_name}"),
            ("team", f"eq.{self.normalize_team_name(team)}"),
        ] + self._window_filters(window)
        return self._select(params)

    def query_by_team_and_window(self, team, window):
        params = [("team", f"eq.{self.normalize_team_name(team)}")] + self._window_filters(window)
        return self._select(params)

    @staticmethod
    def _window_filters(window: SeasonWindow) -> Params:
        filters = [("game_date", f"like.*{window.season}*")]
        if window.start_date is not None:
            filters.append(("game_date", f"gte.{window.start_date}"))
        if window.end_date is not None:
            filters.append(("game_date", f"lte.{window.end_date}"))
        return filters

    def _select(self, filters: Params) -> pd.DataFrame:
        """Fetch all pages matching filters into a canonical DataFrame."""
        base = [
            ("select", ",".join(CANONICAL_COLUMNS)),
            ("order", "game_date.asc,player_name.asc"),
        ] + filters

        rows: list[dict] = []
        offset = 0
        while True:
            page = self._fetch_with_retries(
                base + [("limit", str(self.page_size)), ("offset", str(offset))],
                max_retries=settings.REQUEST_RETRIES,
                backoff=settings.REQUEST_BACKOFF,
            )
            rows.extend(page)
            if len(page) < self.page_size:
                break
            offset += self.page_size

        logger.debug(f"Fetched {len(rows)} rows from {self.table} ({filters})")
        return normalize_game_logs(pd.DataFrame(rows))

    def _fetch_with_retries(
        self, params: Params, max_retries: int = 3, backoff: float = 1.0
    ) -> list[dict[str, Any]]:
        """Fetch one page with retry logic.

        Args:
            params: Query string parameters
            max_retries: Maximum retry attempts
            backoff: Backoff multiplier

        Returns:
            Parsed JSON rows

        Raises:
            GameLogDataError: After max_retries failed attempts or on a non-list payload
        """
        for attempt in range(max_retries):
            try:
                resp = self.session.get(self.rest_url, params=params, timeout=settings.REQUEST_TIMEOUT)
                resp.raise_for_status()
                payload = resp.json() if resp.text else []
                break
            except (requests.exceptions.RequestException, ValueError) as e:
                if attempt < max_retries - 1:
                    wait_time = backoff ** attempt
                    logger.warning(
                        f"Game log query failed (attempt {attempt + 1}/{max_retries}): {e}. "
                        f"Retrying in {wait_time}s..."
                    )
                    time.sleep(wait_time)
                else:
                    logger.error(f"Game log query failed after {max_retries} attempts: {self.table}")
                    raise GameLogDataError(f"Supabase select failed ({self.table}): {e}") from e
        else:
            raise GameLogDataError(f"Supabase select not attempted ({self.table}): max_retries={max_retries}")

        if not isinstance(payload, list):
            raise GameLogDataError(f"Unexpected payload from {self.table}: {type(payload).__name__}")
        return payload
