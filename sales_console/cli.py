"""Command-line access to the sales console: list, export, watch, and invoice."""
import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from sales_console.api.client import SalesApiClient, SalesApiError
from sales_console.core.config import ConsoleSettings
from sales_console.core.logging import configure_logging
from sales_console.core.models import DATE_RANGE_OPTIONS, STATUS_OPTIONS, FilterState
from sales_console.core.scheduler import AsyncioScheduler
from sales_console.processing.orchestrator import SalesConsole, load_sales
from sales_console.reporting.invoice import build_invoice, write_invoice
from sales_console.reporting.sinks import write_csv, write_excel
from sales_console.reporting.templates import TABLE_HEADERS, format_currency, records_to_rows

logger = logging.getLogger(__name__)


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", default="", help="Match order ID, customer, email, or product")
    parser.add_argument(
        "--status",
        choices=[value for value, _ in STATUS_OPTIONS],
        default="all",
        help="Only include sales with this status",
    )
    parser.add_argument(
        "--date-range",
        choices=[value for value, _ in DATE_RANGE_OPTIONS],
        default="all",
        help="Restrict sales to a date range",
    )
    parser.add_argument("--start-date", type=date.fromisoformat, help="First day of a custom range")
    parser.add_argument("--end-date", type=date.fromisoformat, help="Last day of a custom range")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``sales-console`` entry point."""

    parser = argparse.ArgumentParser(description="Browse and export sales from the POS backend")
    parser.add_argument("--base-url", help="Sales API base URL (overrides SALES_API_BASE_URL)")
    parser.add_argument("--log-level", help="Logging level (overrides LOG_LEVEL)")
    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", help="Fetch sales once and print them")
    _add_filter_arguments(list_parser)
    list_parser.add_argument("--csv", type=Path, help="Also write the listed rows to this CSV file")
    list_parser.add_argument("--excel", type=Path, help="Also write the listed rows to this Excel file")

    export_parser = commands.add_parser("export", help="Download the backend CSV export")
    _add_filter_arguments(export_parser)
    export_parser.add_argument("--output-dir", type=Path, help="Directory for the export file")

    watch_parser = commands.add_parser("watch", help="Keep the console running with auto-refresh")
    _add_filter_arguments(watch_parser)
    watch_parser.add_argument("--duration", type=float, default=60.0, help="Seconds to keep watching")
    watch_parser.add_argument("--interval-ms", type=int, help="Refresh interval in milliseconds")

    invoice_parser = commands.add_parser("invoice", help="Write a text invoice for one sale")
    invoice_parser.add_argument("sale_id", help="Order ID of the sale")
    invoice_parser.add_argument("--output-dir", type=Path, help="Directory for the invoice file")
    invoice_parser.add_argument("--tax-rate", type=float, help="Tax rate, e.g. 0.08 for 8%%")
    return parser


def _filters_from_args(args: argparse.Namespace) -> FilterState:
    return FilterState(
        search=args.search,
        status=args.status,
        date_range=args.date_range,
        start_date=args.start_date,
        end_date=args.end_date,
    )


def _print_rows(rows: List[dict]) -> None:
    print("\t".join(TABLE_HEADERS))
    for row in rows:
        print("\t".join(str(row.get(header, "")) for header in TABLE_HEADERS))


def _run_list(args: argparse.Namespace, client: SalesApiClient) -> int:
    page = asyncio.run(load_sales(client, _filters_from_args(args)))
    rows = records_to_rows(page.sales)
    _print_rows(rows)
    print(
        f"{len(rows)} sales | revenue {format_currency(page.stats.total_revenue, decimals=0)}"
        f" | orders {page.stats.total_orders or 0}"
    )
    if args.csv:
        write_csv(rows, args.csv)
        logger.info("Wrote CSV output to %s", args.csv)
    if args.excel:
        write_excel(rows, args.excel)
        logger.info("Wrote Excel output to %s", args.excel)
    return 0


def _run_export(args: argparse.Namespace, client: SalesApiClient, settings: ConsoleSettings) -> int:
    console = SalesConsole(client, AsyncioScheduler(), settings, filters=_filters_from_args(args))
    target = asyncio.run(console.export_sales(args.output_dir))
    if target is None:
        print("Export failed; see log for details", file=sys.stderr)
        return 1
    print(f"Wrote {target}")
    return 0


async def _watch(console: SalesConsole, scheduler: AsyncioScheduler, duration: float) -> None:
    console.start()
    try:
        await asyncio.sleep(duration)
    finally:
        console.stop()
        await scheduler.wait_idle()


def _run_watch(args: argparse.Namespace, client: SalesApiClient, settings: ConsoleSettings) -> int:
    if args.interval_ms:
        settings.refresh_interval_ms = args.interval_ms
    settings.auto_refresh = True

    def _report(page) -> None:
        print(f"{len(page.sales)} sales | revenue {format_currency(page.stats.total_revenue, decimals=0)}")

    scheduler = AsyncioScheduler()
    console = SalesConsole(
        client, scheduler, settings, on_data_load=_report, filters=_filters_from_args(args)
    )
    asyncio.run(_watch(console, scheduler, args.duration))
    return 1 if console.error else 0


def _run_invoice(args: argparse.Namespace, client: SalesApiClient, settings: ConsoleSettings) -> int:
    page = asyncio.run(load_sales(client, FilterState(search=args.sale_id)))
    sale = next((item for item in page.sales if item.id == args.sale_id), None)
    if sale is None:
        print(f"Sale {args.sale_id} not found", file=sys.stderr)
        return 1
    tax_rate = args.tax_rate if args.tax_rate is not None else settings.tax_rate
    target = write_invoice(build_invoice(sale, tax_rate), args.output_dir or settings.export_dir)
    print(f"Wrote {target}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for running the console from the command line."""

    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    settings = ConsoleSettings.from_env()
    if args.base_url:
        settings.base_url = args.base_url.rstrip("/")

    client = SalesApiClient(settings.base_url, timeout=settings.request_timeout)
    try:
        if args.command == "list":
            return _run_list(args, client)
        if args.command == "export":
            return _run_export(args, client, settings)
        if args.command == "watch":
            return _run_watch(args, client, settings)
        return _run_invoice(args, client, settings)
    except SalesApiError as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
