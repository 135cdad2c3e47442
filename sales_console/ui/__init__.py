"""Interactive pieces of the console: filter controls, record table, dashboard."""
from sales_console.ui.filters import FilterController
from sales_console.ui.table import RecordTable, TableState

__all__ = ["FilterController", "RecordTable", "TableState"]
