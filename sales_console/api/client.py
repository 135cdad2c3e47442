"""HTTP client for the sales listing and export endpoints."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import requests

from sales_console.core.models import SalesPage

logger = logging.getLogger(__name__)

SALES_PATH = "/api/sales"
EXPORT_PATH = "/api/sales/export"


class SalesApiError(RuntimeError):
    """Raised when the sales backend cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SalesApiClient:
    """Thin wrapper around ``requests`` exposing awaitable listing and export calls.

    ``requests`` is blocking, so each call is moved onto a worker thread with
    :func:`asyncio.to_thread`; the event loop keeps running timers while a
    request is in flight.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    async def list_sales(self, params: Mapping[str, str] | None = None) -> SalesPage:
        """Fetch the filtered sales listing and its statistics."""

        return await asyncio.to_thread(self.list_sales_sync, params)

    async def export_sales(self, params: Mapping[str, str] | None = None) -> bytes:
        """Fetch the CSV export for the same filters as the listing."""

        return await asyncio.to_thread(self.export_sales_sync, params)

    def list_sales_sync(self, params: Mapping[str, str] | None = None) -> SalesPage:
        response = self._get(SALES_PATH, params)
        if not response.ok:
            raise SalesApiError(
                f"Failed to fetch sales data: {response.reason or response.status_code}",
                status_code=response.status_code,
            )
        try:
            payload: Dict[str, Any] = response.json()
        except ValueError as exc:
            raise SalesApiError("Sales API returned malformed JSON") from exc
        if not isinstance(payload, dict):
            raise SalesApiError("Sales API returned an unexpected payload")
        return SalesPage.from_dict(payload)

    def export_sales_sync(self, params: Mapping[str, str] | None = None) -> bytes:
        response = self._get(EXPORT_PATH, params)
        if not response.ok:
            raise SalesApiError("Export failed", status_code=response.status_code)
        return response.content

    def _get(self, path: str, params: Mapping[str, str] | None) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, dict(params or {}))
        try:
            return self.session.get(url, params=dict(params or {}), timeout=self.timeout)
        except requests.RequestException as exc:
            raise SalesApiError(f"Could not reach sales API: {exc}") from exc

    def close(self) -> None:
        self.session.close()
