"""Filter semantics and console orchestration.

Only the filter helpers are re-exported here; import
``sales_console.processing.orchestrator`` directly for :class:`SalesConsole`.
"""
from sales_console.processing.filters import build_query_params, filter_sales, sale_matches

__all__ = ["build_query_params", "filter_sales", "sale_matches"]
