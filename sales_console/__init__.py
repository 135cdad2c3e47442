"""Sales console: debounced, polled sales listing with filters, selection, and export."""
from sales_console.api import SalesApiClient, SalesApiError
from sales_console.core import (
    AsyncioScheduler,
    ConsoleSettings,
    DisplayStats,
    FilterState,
    ManualScheduler,
    ProductLine,
    Sale,
    SalesPage,
    SalesStats,
    configure_logging,
)
from sales_console.processing import build_query_params, filter_sales
from sales_console.processing.orchestrator import SalesConsole, load_sales
from sales_console.reporting import build_invoice, records_to_rows, write_excel, write_export
from sales_console.ui import FilterController, RecordTable, TableState

__all__ = [
    "AsyncioScheduler",
    "ConsoleSettings",
    "DisplayStats",
    "FilterController",
    "FilterState",
    "ManualScheduler",
    "ProductLine",
    "RecordTable",
    "Sale",
    "SalesApiClient",
    "SalesApiError",
    "SalesConsole",
    "SalesPage",
    "SalesStats",
    "TableState",
    "build_invoice",
    "build_query_params",
    "configure_logging",
    "filter_sales",
    "load_sales",
    "records_to_rows",
    "write_excel",
    "write_export",
]
