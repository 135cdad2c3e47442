"""Invoice totals and plain-text invoices for a single sale."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sales_console.core.config import DEFAULT_TAX_RATE
from sales_console.core.models import Sale
from sales_console.reporting.sinks import ensure_output_dir
from sales_console.reporting.templates import format_currency


@dataclass(frozen=True)
class Invoice:
    sale: Sale
    tax_rate: float
    subtotal: float
    tax: float
    total: float


def build_invoice(sale: Sale, tax_rate: float = DEFAULT_TAX_RATE) -> Invoice:
    """Compute subtotal from the product lines, then tax and grand total."""

    subtotal = sum(product.line_total for product in sale.products)
    tax = subtotal * tax_rate
    return Invoice(sale=sale, tax_rate=tax_rate, subtotal=subtotal, tax=tax, total=subtotal + tax)


def invoice_text(invoice: Invoice) -> str:
    sale = invoice.sale
    moment = sale.timestamp
    lines = [
        f"INVOICE - {sale.id}",
        f"Date: {moment:%Y-%m-%d %H:%M:%S}" if moment else f"Date: {sale.date}",
        f"Customer: {sale.customer}",
        f"Email: {sale.customer_email}",
        f"Status: {sale.status}",
        f"Payment Method: {sale.payment_method}",
        "",
        "ITEMS:",
    ]
    for product in sale.products:
        lines.append(
            f"{product.name} x{product.quantity} - {format_currency(product.price)} each"
            f" = {format_currency(product.line_total)}"
        )
    lines.extend(
        [
            "",
            f"SUBTOTAL: {format_currency(invoice.subtotal)}",
            f"TAX ({invoice.tax_rate * 100:.1f}%): {format_currency(invoice.tax)}",
            f"TOTAL: {format_currency(invoice.total)}",
        ]
    )
    return "\n".join(lines)


def write_invoice(invoice: Invoice, output_dir: Path) -> Path:
    """Write ``invoice-<id>.txt`` under ``output_dir`` and return its path."""

    target = output_dir / f"invoice-{invoice.sale.id}.txt"
    ensure_output_dir(target)
    target.write_text(invoice_text(invoice) + "\n", encoding="utf-8")
    return target
