"""Core building blocks for the sales console package."""
from sales_console.core.config import ConsoleSettings, get_config_value, load_env_file
from sales_console.core.logging import configure_logging
from sales_console.core.models import (
    DATE_RANGE_OPTIONS,
    STATUS_OPTIONS,
    DisplayStats,
    FilterState,
    ProductLine,
    Sale,
    SalesPage,
    SalesStats,
    SaleStatus,
)
from sales_console.core.scheduler import AsyncioScheduler, ManualScheduler, Scheduler, TimerHandle

__all__ = [
    "AsyncioScheduler",
    "ConsoleSettings",
    "DATE_RANGE_OPTIONS",
    "DisplayStats",
    "FilterState",
    "ManualScheduler",
    "ProductLine",
    "STATUS_OPTIONS",
    "Sale",
    "SaleStatus",
    "SalesPage",
    "SalesStats",
    "Scheduler",
    "TimerHandle",
    "configure_logging",
    "get_config_value",
    "load_env_file",
]
