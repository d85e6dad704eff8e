"""Live exchange-rate client used once at start-up."""

from __future__ import annotations

import http.client
import json
from typing import Any
from urllib import request

import structlog

from .core import RateTable, RateTableError

DEFAULT_RATES_ENDPOINT = "https://open.er-api.com/v6/latest/USD"


class HTTPRateClient:
    """Fetch USD-quoted rates and rebase them onto the base currency."""

    def __init__(
        self,
        endpoint: str = DEFAULT_RATES_ENDPOINT,
        *,
        base_currency: str = "UGX",
        quote_currency: str = "USD",
        timeout: float = 10.0,
    ):
        self._endpoint = endpoint
        self._base_currency = base_currency
        self._quote_currency = quote_currency
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    def fetch(self) -> RateTable | None:
        """Return a fresh rate table, or None when the feed is unusable."""
        payload = self._get()
        if payload is None:
            return None
        if payload.get("result") != "success" or not isinstance(payload.get("rates"), dict):
            self._logger.warning("rates.invalid_payload", endpoint=self._endpoint)
            return None
        try:
            return RateTable.from_quotes(
                payload["rates"],
                quote_currency=self._quote_currency,
                base_currency=self._base_currency,
            )
        except RateTableError as exc:
            self._logger.warning("rates.invalid_payload", endpoint=self._endpoint, error=str(exc))
            return None

    def _get(self) -> dict[str, Any] | None:
        req = request.Request(self._endpoint, headers={"Accept": "application/json"}, method="GET")
        try:
            with request.urlopen(req, timeout=self._timeout) as resp:
                body = resp.read()
        except (OSError, http.client.HTTPException) as exc:
            self._logger.warning("rates.request_failed", endpoint=self._endpoint, error=str(exc))
            return None
        try:
            data = json.loads(body.decode("utf-8")) if body else {}
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            self._logger.warning("rates.invalid_payload", endpoint=self._endpoint, error=str(exc))
            return None
        return data if isinstance(data, dict) else {}
