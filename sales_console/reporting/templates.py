"""Mapping utilities that turn sales into display and export rows."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List

from sales_console.core.models import Sale, SaleStatus


TABLE_HEADERS = [
    "Order",
    "Customer",
    "Email",
    "Items",
    "Total",
    "Payment",
    "Date",
    "Status",
]

STATUS_LABELS = {
    SaleStatus.COMPLETED: "Completed",
    SaleStatus.PENDING: "Pending",
    SaleStatus.REFUNDED: "Refunded",
    SaleStatus.CANCELLED: "Cancelled",
}


def format_currency(amount: float | None, decimals: int = 2) -> str:
    """Format an amount as US dollars, e.g. ``$1,234.50``."""

    value = float(amount or 0)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"


def format_count(value: int | None) -> str:
    return f"{int(value or 0):,}"


def status_label(status: str) -> str:
    # Unknown statuses render like cancelled ones.
    return STATUS_LABELS.get(status, STATUS_LABELS[SaleStatus.CANCELLED])


def format_timestamp(sale: Sale) -> str:
    moment = sale.timestamp
    if moment is None:
        return sale.date
    return f"{moment:%Y-%m-%d} at {moment:%H:%M}"


def _pluralize(count: int, singular: str) -> str:
    return f"{count} {singular if count == 1 else singular + 's'}"


def sale_to_row(sale: Sale) -> Dict[str, Any]:
    """Map a sale onto the table's column headers."""

    return {
        "Order": sale.id,
        "Customer": " ".join(sale.customer.split()),
        "Email": sale.customer_email,
        "Items": _pluralize(sale.items, "item"),
        "Total": format_currency(sale.total),
        "Payment": sale.payment_method,
        "Date": format_timestamp(sale),
        "Status": status_label(sale.status),
    }


def records_to_rows(sales: Iterable[Sale]) -> List[Dict[str, Any]]:
    """Convert sales to dictionaries for tabular rendering or spreadsheet export."""

    return [sale_to_row(sale) for sale in sales]
