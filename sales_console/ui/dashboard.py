"""Streamlit dashboard for browsing, selecting, and exporting sales."""
import asyncio
import time
from pathlib import Path

import streamlit as st

# Allow running via "streamlit run sales_console/ui/dashboard.py" without installing the package
# by ensuring the repository root is on ``sys.path``.
if __package__ in {None, ""}:
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[2]))

from sales_console.api.client import SalesApiClient
from sales_console.core.config import ConsoleSettings
from sales_console.core.logging import configure_logging
from sales_console.core.models import CUSTOM_RANGE, DATE_RANGE_OPTIONS, STATUS_OPTIONS
from sales_console.core.scheduler import ManualScheduler
from sales_console.processing.orchestrator import SalesConsole
from sales_console.reporting.invoice import invoice_text
from sales_console.reporting.templates import format_count, format_currency
from sales_console.ui.table import TableState

STATUS_LABELS = dict(STATUS_OPTIONS)
DATE_RANGE_LABELS = dict(DATE_RANGE_OPTIONS)


def _session_console() -> tuple[SalesConsole, ManualScheduler]:
    """Create the console once per browser session and start its refresh cycle."""

    if "console" not in st.session_state:
        settings = ConsoleSettings.from_env()
        scheduler = ManualScheduler(start=time.monotonic(), clock=time.monotonic)
        client = SalesApiClient(settings.base_url, timeout=settings.request_timeout)
        console = SalesConsole(client, scheduler, settings)
        console.start()
        st.session_state.console = console
        st.session_state.scheduler = scheduler
    return st.session_state.console, st.session_state.scheduler


def _pump(scheduler: ManualScheduler) -> None:
    """Fire timers that came due since the last rerun and run the fetches they spawned."""

    scheduler.advance_to(time.monotonic())
    if scheduler.pending_tasks:
        asyncio.run(scheduler.run_pending())


def _render_header(console: SalesConsole) -> None:
    title_col, revenue_col = st.columns([3, 1])
    with title_col:
        st.title("Sales Management")
        st.caption("Manage and track all your sales transactions")
    with revenue_col:
        revenue = "..." if console.loading else format_currency(console.display_stats.total_revenue, 0)
        st.metric("Total Revenue", revenue)
    if console.last_updated:
        st.caption(f"Last updated: {console.last_updated:%H:%M:%S}")


def _render_error(console: SalesConsole) -> None:
    if not console.error:
        return
    message_col, dismiss_col = st.columns([6, 1])
    with message_col:
        st.error(f"Error: {console.error}")
    with dismiss_col:
        st.button("Dismiss", key="dismiss_error", on_click=console.dismiss_error)


def _render_stats(console: SalesConsole) -> None:
    stats = console.display_stats
    cols = st.columns(4)
    cols[0].metric("Today's Sales", format_currency(stats.today_sales, 0))
    cols[1].metric("Total Orders", format_count(stats.total_orders))
    cols[2].metric("Avg. Order", format_currency(stats.average_order, 0))
    cols[3].metric("Returns", format_count(stats.returns))


def _render_filters(console: SalesConsole) -> None:
    controller = console.controller
    st.session_state.setdefault("search_input", controller.search)
    st.session_state.setdefault("status_input", controller.status)
    st.session_state.setdefault("date_range_input", controller.date_range)

    def _on_date_range() -> None:
        controller.change_date_range(st.session_state.date_range_input)
        # "custom" only opens the panel; the selector keeps showing the applied range.
        st.session_state.date_range_input = controller.date_range

    search_col, status_col, range_col, export_col = st.columns([3, 1.3, 1.3, 1])
    with search_col:
        st.text_input(
            "Search",
            key="search_input",
            placeholder="Search sales by order ID, customer, or product...",
            on_change=lambda: controller.change_search(st.session_state.search_input),
        )
    with status_col:
        st.selectbox(
            "Status",
            options=list(STATUS_LABELS),
            format_func=STATUS_LABELS.get,
            key="status_input",
            on_change=lambda: controller.change_status(st.session_state.status_input),
        )
    with range_col:
        st.selectbox(
            "Date range",
            options=list(DATE_RANGE_LABELS),
            format_func=DATE_RANGE_LABELS.get,
            key="date_range_input",
            on_change=_on_date_range,
        )
    with export_col:
        label = "Exporting..." if console.export_loading else "Export"
        if st.button(label, disabled=controller.export_disabled, type="secondary"):
            target = asyncio.run(controller.export())
            if target is not None:
                st.download_button(
                    "Download export",
                    data=target.read_bytes(),
                    file_name=target.name,
                    mime="text/csv",
                )

    if controller.custom_range_open:
        with st.container(border=True):
            start_col, end_col, apply_col = st.columns([2, 2, 1])
            start = start_col.date_input("Start Date", value=None, key="custom_start")
            end = end_col.date_input("End Date", value=None, key="custom_end")
            with apply_col:
                if st.button("Apply", type="primary"):
                    controller.apply_custom_range(start, end)
                    st.session_state.date_range_input = CUSTOM_RANGE


def _render_table(console: SalesConsole) -> None:
    table = console.table
    state = table.view_state

    header_col, select_col = st.columns([4, 1])
    header_col.caption(table.header_label)
    select_label = "Deselect all" if table.is_all_selected else "Select all"
    select_col.button(select_label, on_click=table.toggle_all, disabled=state is not TableState.POPULATED)

    if state is TableState.LOADING:
        st.info("Loading sales data...")
        return
    if state is TableState.ERROR:
        st.error(f"Failed to load sales data: {table.error}")
        return
    if state is TableState.EMPTY:
        st.info("No sales found. Try adjusting your search or filters.")
        return

    rows = table.rows()
    edited_rows = st.data_editor(
        rows,
        hide_index=True,
        num_rows="fixed",
        use_container_width=True,
        key=f"sales_table_{id(table.sales)}_{len(table.selected)}",
        column_config={"Selected": st.column_config.CheckboxColumn("Selected")},
        column_order=["Selected", "Order", "Customer", "Email", "Items", "Total", "Payment", "Date", "Status"],
        disabled=[column for column in rows[0] if column != "Selected"],
    )
    for before, after in zip(rows, edited_rows):
        if bool(before["Selected"]) != bool(after["Selected"]):
            table.toggle(before["Order"])

    with st.expander("Order details", expanded=False):
        sale_ids = [sale.id for sale in table.filtered]
        chosen = st.selectbox("Order", options=sale_ids, key="details_sale")
        sale = next((item for item in table.filtered if item.id == chosen), None)
        if sale is not None:
            invoice = console.view_details(sale)
            text = invoice_text(invoice)
            st.code(text, language=None)
            st.download_button(
                "Download invoice",
                data=text,
                file_name=f"invoice-{sale.id}.txt",
                mime="text/plain",
            )


@st.fragment(run_every=1)
def _live_view() -> None:
    console, scheduler = _session_console()
    _pump(scheduler)
    _render_header(console)
    _render_error(console)
    _render_stats(console)
    _render_table(console)


def main() -> None:
    """Render the sales console page."""

    configure_logging()
    st.set_page_config(page_title="Sales Management", layout="wide")
    console, _ = _session_console()
    _render_filters(console)
    _live_view()


if __name__ == "__main__":
    main()
