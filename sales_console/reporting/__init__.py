"""Row templates, file sinks, and invoices for the sales console."""
from sales_console.reporting.invoice import Invoice, build_invoice, invoice_text, write_invoice
from sales_console.reporting.sinks import export_filename, write_csv, write_excel, write_export
from sales_console.reporting.templates import TABLE_HEADERS, format_currency, records_to_rows, sale_to_row

__all__ = [
    "Invoice",
    "TABLE_HEADERS",
    "build_invoice",
    "export_filename",
    "format_currency",
    "invoice_text",
    "records_to_rows",
    "sale_to_row",
    "write_csv",
    "write_excel",
    "write_export",
    "write_invoice",
]
