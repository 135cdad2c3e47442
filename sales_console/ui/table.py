"""Record table: view state, client-side filter pass, and multi-row selection."""
from __future__ import annotations

import enum
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from sales_console.core.models import FilterState, Sale
from sales_console.processing.filters import filter_sales
from sales_console.reporting.templates import records_to_rows

logger = logging.getLogger(__name__)

SelectionCallback = Callable[[List[str]], None]
SaleCallback = Callable[[Sale], None]

_UNSET = object()


class TableState(enum.Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    POPULATED = "populated"


class RecordTable:
    """Holds the rows the console displays and the ids the user has checked.

    Selection is reset whenever a new record list arrives (a new list object,
    typically from a fetch) so it never refers to rows from an older snapshot.
    Changing only the filters keeps the selection, even for rows that drop
    out of the filtered view.
    """

    def __init__(
        self,
        on_select: Optional[SelectionCallback] = None,
        on_view_details: Optional[SaleCallback] = None,
        on_more_actions: Optional[SaleCallback] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.on_select = on_select
        self.on_view_details = on_view_details
        self.on_more_actions = on_more_actions
        self._clock = clock
        self.sales: Sequence[Sale] = []
        self.filters = FilterState()
        self.loading = False
        self.error: Optional[str] = None
        self.selected: List[str] = []
        self._filtered: Optional[List[Sale]] = None

    def update(
        self,
        sales: Sequence[Sale] | None = None,
        filters: FilterState | None = None,
        loading: bool | None = None,
        error: Any = _UNSET,
    ) -> None:
        """Feed new inputs; arguments left out keep their previous value."""

        if sales is not None and sales is not self.sales:
            self.sales = sales
            self._filtered = None
            if self.selected:
                logger.debug("Record list replaced; clearing %d selected sales", len(self.selected))
                self._set_selection([])
        if filters is not None and filters != self.filters:
            self.filters = filters
            self._filtered = None
        if loading is not None:
            self.loading = loading
        if error is not _UNSET:
            self.error = error

    @property
    def filtered(self) -> List[Sale]:
        if self._filtered is None:
            now = self._clock() if self._clock else None
            self._filtered = filter_sales(self.sales, self.filters, now) if self.sales else []
        return self._filtered

    @property
    def view_state(self) -> TableState:
        if self.loading:
            return TableState.LOADING
        if self.error:
            return TableState.ERROR
        if not self.filtered:
            return TableState.EMPTY
        return TableState.POPULATED

    def is_selected(self, sale_id: str) -> bool:
        return sale_id in self.selected

    @property
    def is_all_selected(self) -> bool:
        return bool(self.filtered) and len(self.selected) == len(self.filtered)

    @property
    def is_partially_selected(self) -> bool:
        return 0 < len(self.selected) < len(self.filtered)

    @property
    def header_label(self) -> str:
        count = len(self.selected)
        if count:
            return f"{count} {'sale' if count == 1 else 'sales'} selected"
        total = len(self.filtered)
        return f"{total} {'sale' if total == 1 else 'sales'}"

    def toggle(self, sale_id: str) -> List[str]:
        """Check or uncheck one row and return the full selection."""

        if sale_id in self.selected:
            updated = [item for item in self.selected if item != sale_id]
        else:
            updated = [*self.selected, sale_id]
        return self._set_selection(updated)

    def toggle_all(self) -> List[str]:
        """Switch between nothing selected and every row of the filtered view."""

        if len(self.selected) == len(self.filtered):
            updated: List[str] = []
        else:
            updated = [sale.id for sale in self.filtered]
        return self._set_selection(updated)

    def clear_selection(self) -> List[str]:
        return self._set_selection([])

    def selected_sales(self) -> List[Sale]:
        """Selected sales still present in the current record list."""

        chosen = set(self.selected)
        return [sale for sale in self.sales if sale.id in chosen]

    def view_details(self, sale: Sale) -> None:
        if self.on_view_details:
            self.on_view_details(sale)

    def more_actions(self, sale: Sale) -> None:
        if self.on_more_actions:
            self.on_more_actions(sale)

    def rows(self) -> List[Dict[str, Any]]:
        """Display rows for the filtered view with a ``Selected`` flag per row."""

        rows = records_to_rows(self.filtered)
        for sale, row in zip(self.filtered, rows):
            row["Selected"] = self.is_selected(sale.id)
        return rows

    def _set_selection(self, updated: List[str]) -> List[str]:
        self.selected = updated
        if self.on_select:
            self.on_select(list(updated))
        return list(updated)
