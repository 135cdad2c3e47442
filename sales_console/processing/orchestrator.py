"""Sales console orchestration: filter state, debounced and polled fetches, export.

The console is the single owner of the filters, the latest sales snapshot,
and the loading/error state. Two independent producers call
:meth:`SalesConsole.fetch_sales`: a debounce timer re-armed by every filter
edit, and a fixed-interval poll. Each fetch takes a sequence number and only
the most recently issued one may update state, so a slow older response can
never overwrite a newer snapshot.
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, List, Optional

from sales_console.api.client import SalesApiClient
from sales_console.core.config import ConsoleSettings
from sales_console.core.models import DisplayStats, FilterState, Sale, SalesPage, SalesStats
from sales_console.core.scheduler import Scheduler, TimerHandle
from sales_console.processing.filters import build_query_params
from sales_console.reporting.invoice import Invoice, build_invoice
from sales_console.reporting.sinks import write_export
from sales_console.ui.filters import FilterController
from sales_console.ui.table import RecordTable

logger = logging.getLogger(__name__)

FETCH_ERROR_FALLBACK = "Failed to load sales data"


async def load_sales(client: SalesApiClient, filters: FilterState | None = None) -> SalesPage:
    """One-shot fetch for callers that do not need debouncing or polling."""

    return await client.list_sales(build_query_params(filters or FilterState()))


class SalesConsole:
    """Coordinates filters, fetched data, the record table, and exports."""

    def __init__(
        self,
        client: SalesApiClient,
        scheduler: Scheduler,
        settings: ConsoleSettings | None = None,
        on_data_load: Optional[Callable[[SalesPage], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        on_selection_change: Optional[Callable[[List[str]], None]] = None,
        on_view_details: Optional[Callable[[Invoice], None]] = None,
        on_more_actions: Optional[Callable[[Sale], None]] = None,
        filters: FilterState | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.client = client
        self.scheduler = scheduler
        self.settings = settings or ConsoleSettings()
        self.on_data_load = on_data_load
        self.on_error = on_error
        self.on_selection_change = on_selection_change
        self.on_view_details = on_view_details
        self.on_more_actions = on_more_actions
        self.clock = clock

        self.filters = filters or FilterState()
        self.sales: List[Sale] = []
        self.stats: Optional[SalesStats] = None
        self.loading = True
        self.error: Optional[str] = None
        self.export_loading = False
        self.last_updated: Optional[datetime] = None

        self._request_seq = 0
        self._stopped = False
        self._debounce: Optional[TimerHandle] = None
        self._poll: Optional[TimerHandle] = None
        self._stats_source: Optional[SalesStats] = None
        self._display_stats: Optional[DisplayStats] = None

        self.table = RecordTable(
            on_select=self._selection_changed,
            on_view_details=self.view_details,
            on_more_actions=self.more_actions,
            clock=clock,
        )
        self.table.update(filters=self.filters, loading=self.loading)
        self.controller = FilterController(
            get_filters=lambda: self.filters,
            on_change=self.set_filters,
            on_export=self.export_sales,
            is_busy=lambda: self.export_loading,
        )

    # Filters

    def set_filter(self, field_name: str, value: Any) -> None:
        """Update one filter field; the fetch happens after the debounce delay."""

        self.set_filters(**{field_name: value})

    def set_filters(self, **changes: Any) -> None:
        self.filters = self.filters.update(**changes)
        self.table.update(filters=self.filters)
        self._arm_debounce()

    def _arm_debounce(self) -> None:
        if self._debounce:
            self._debounce.cancel()
        self._debounce = self.scheduler.call_later(
            self.settings.debounce_ms / 1000, self._debounce_fired
        )

    def _debounce_fired(self) -> None:
        self._debounce = None
        logger.debug("Filters settled; fetching with %s", build_query_params(self.filters))
        self.scheduler.spawn(self.fetch_sales)

    # Fetching

    async def fetch_sales(self) -> Optional[SalesPage]:
        """Fetch the listing for the current filters and replace the snapshot.

        Returns the page when it was applied, ``None`` on failure or when a
        newer request superseded this one.
        """

        self._request_seq += 1
        seq = self._request_seq
        params = build_query_params(self.filters)

        self.loading = True
        self.error = None
        self.table.update(loading=True, error=None)

        try:
            page = await self.client.list_sales(params)
        except Exception as exc:
            if not self._is_latest(seq):
                logger.debug("Discarding failure of superseded request #%d: %s", seq, exc)
                return None
            logger.exception("Sales data fetch error")
            self.error = str(exc) or FETCH_ERROR_FALLBACK
            self.loading = False
            self.table.update(loading=False, error=self.error)
            if self.on_error:
                self.on_error(exc)
            return None

        if not self._is_latest(seq):
            logger.debug("Discarding response of superseded request #%d", seq)
            return None

        self.sales = list(page.sales)
        self.stats = page.stats
        self.last_updated = self.clock()
        self.loading = False
        self.table.update(sales=self.sales, loading=False, error=None)
        logger.info("Loaded %d sales (request #%d)", len(self.sales), seq)
        if self.on_data_load:
            self.on_data_load(page)
        return page

    def _is_latest(self, seq: int) -> bool:
        return seq == self._request_seq and not self._stopped

    def dismiss_error(self) -> None:
        """Hide the error banner; the next scheduled fetch is the only retry."""

        self.error = None
        self.table.update(error=None)

    @property
    def display_stats(self) -> DisplayStats:
        """Zero-defaulted stats, recomputed only when the snapshot object changes."""

        if self._display_stats is None or self._stats_source is not self.stats:
            self._stats_source = self.stats
            self._display_stats = DisplayStats.from_stats(self.stats)
        return self._display_stats

    # Export

    async def export_sales(self, output_dir: Path | None = None) -> Optional[Path]:
        """Download the CSV export for the current filters.

        Failures are logged and reported as ``None``; they never touch the
        fetch error banner or the listing's loading flag.
        """

        params = build_query_params(self.filters)
        self.export_loading = True
        try:
            payload = await self.client.export_sales(params)
            target = write_export(
                payload, Path(output_dir or self.settings.export_dir), self.clock().date()
            )
            logger.info("Exported %d bytes of sales data to %s", len(payload), target)
            return target
        except Exception:
            logger.exception("Export error")
            return None
        finally:
            self.export_loading = False

    # Lifecycle

    def start(self) -> None:
        """Issue the initial fetch and start polling when auto-refresh is on."""

        self._stopped = False
        self.scheduler.spawn(self.fetch_sales)
        self._restart_polling()

    def stop(self) -> None:
        """Cancel the pending debounce and the poll; late responses are ignored."""

        self._stopped = True
        if self._debounce:
            self._debounce.cancel()
            self._debounce = None
        self._cancel_polling()

    def set_refresh_interval(self, interval_ms: int) -> None:
        self.settings.refresh_interval_ms = interval_ms
        if not self._stopped:
            self._restart_polling()

    def set_auto_refresh(self, enabled: bool) -> None:
        self.settings.auto_refresh = enabled
        if not self._stopped:
            self._restart_polling()

    @property
    def polling(self) -> bool:
        return self._poll is not None and not self._poll.cancelled

    def _restart_polling(self) -> None:
        self._cancel_polling()
        if not self.settings.auto_refresh:
            return
        self._poll = self.scheduler.call_every(
            self.settings.refresh_interval_ms / 1000, self._poll_fired
        )

    def _cancel_polling(self) -> None:
        if self._poll:
            self._poll.cancel()
            self._poll = None

    def _poll_fired(self) -> None:
        logger.debug("Auto-refresh tick")
        self.scheduler.spawn(self.fetch_sales)

    # Row intents

    def _selection_changed(self, selected: List[str]) -> None:
        logger.debug("Selected sales: %s", selected)
        if self.on_selection_change:
            self.on_selection_change(selected)

    def view_details(self, sale: Sale) -> Invoice:
        invoice = build_invoice(sale, self.settings.tax_rate)
        if self.on_view_details:
            self.on_view_details(invoice)
        return invoice

    def more_actions(self, sale: Sale) -> None:
        if self.on_more_actions:
            self.on_more_actions(sale)
