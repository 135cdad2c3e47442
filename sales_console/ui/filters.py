"""Filter controls that forward every edit to the console that owns the filter state."""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Awaitable, Callable, Optional

from sales_console.core.models import CUSTOM_RANGE, FilterState

logger = logging.getLogger(__name__)

SEARCH_PLACEHOLDER = "Search sales by order ID, customer, or product..."


class FilterController:
    """Controlled search, status, and date-range inputs plus the export trigger.

    Displayed values always come from ``get_filters``; the only state kept
    here is whether the custom date-range panel is open.
    """

    def __init__(
        self,
        get_filters: Callable[[], FilterState],
        on_change: Callable[..., None],
        on_export: Optional[Callable[[], Awaitable[Any]]] = None,
        is_busy: Callable[[], bool] = lambda: False,
    ) -> None:
        self._get_filters = get_filters
        self._on_change = on_change
        self._on_export = on_export
        self._is_busy = is_busy
        self.custom_range_open = False

    @property
    def search(self) -> str:
        return self._get_filters().search

    @property
    def status(self) -> str:
        return self._get_filters().status

    @property
    def date_range(self) -> str:
        return self._get_filters().date_range

    @property
    def export_disabled(self) -> bool:
        return self._is_busy()

    def change_search(self, text: str) -> None:
        self._on_change(search=text)

    def change_status(self, value: str) -> None:
        self._on_change(status=value)

    def change_date_range(self, value: str) -> None:
        """Forward a preset range; ``custom`` only opens the range panel."""

        if value == CUSTOM_RANGE:
            self.custom_range_open = True
            return
        self.custom_range_open = False
        self._on_change(date_range=value)

    def apply_custom_range(self, start: Optional[date], end: Optional[date]) -> None:
        """Send the chosen bounds upward as a single edit and close the panel."""

        if start and end and start > end:
            start, end = end, start
        self.custom_range_open = False
        self._on_change(date_range=CUSTOM_RANGE, start_date=start, end_date=end)

    def close_custom_range(self) -> None:
        self.custom_range_open = False

    async def export(self) -> Any:
        """Run the export handler and hand back its result, or ``None`` on failure."""

        if self._on_export is None:
            logger.warning("Export requested but no export handler is configured")
            return None
        try:
            return await self._on_export()
        except Exception:
            logger.exception("Export failed")
            return None
