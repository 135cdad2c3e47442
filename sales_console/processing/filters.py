"""Filter pass shared by the query builder and the record table.

The same predicates decide what the backend is asked for and what the table
shows, so re-applying them to an already filtered listing changes nothing.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from sales_console.core.models import ALL, CUSTOM_RANGE, FilterState, Sale


def build_query_params(filters: FilterState) -> Dict[str, str]:
    """Serialize filters into query parameters, omitting empty and ``all`` values."""

    params: Dict[str, str] = {}
    if filters.search:
        params["search"] = filters.search
    if filters.status != ALL:
        params["status"] = filters.status
    if filters.date_range != ALL:
        params["dateRange"] = filters.date_range
        if filters.date_range == CUSTOM_RANGE:
            if filters.start_date:
                params["startDate"] = filters.start_date.isoformat()
            if filters.end_date:
                params["endDate"] = filters.end_date.isoformat()
    return params


def matches_search(sale: Sale, text: str) -> bool:
    if not text:
        return True
    needle = text.lower()
    haystacks = [sale.id, sale.customer, sale.customer_email]
    haystacks.extend(product.name for product in sale.products)
    return any(needle in (value or "").lower() for value in haystacks)


def matches_status(sale: Sale, status: str) -> bool:
    return status == ALL or sale.status == status


def _local_date(moment: datetime, now: datetime) -> date:
    # Compare aware timestamps in the reference clock's timezone.
    if moment.tzinfo is not None and now.tzinfo is not None:
        moment = moment.astimezone(now.tzinfo)
    return moment.date()


def matches_date_range(sale: Sale, filters: FilterState, now: Optional[datetime] = None) -> bool:
    """Check a sale's timestamp against the selected date range.

    ``week`` starts on Monday of the current ISO week. ``custom`` bounds are
    inclusive and either may be left open. Sales without a parseable
    timestamp only match ``all``.
    """

    selected = filters.date_range
    if selected == ALL:
        return True

    moment = sale.timestamp
    if moment is None:
        return False

    now = now or datetime.now(moment.tzinfo)
    day = _local_date(moment, now)
    today = now.date()

    if selected == "today":
        return day == today
    if selected == "yesterday":
        return day == today - timedelta(days=1)
    if selected == "week":
        week_start = today - timedelta(days=today.weekday())
        return week_start <= day <= today
    if selected == "month":
        return (day.year, day.month) == (today.year, today.month)
    if selected == CUSTOM_RANGE:
        if filters.start_date and day < filters.start_date:
            return False
        if filters.end_date and day > filters.end_date:
            return False
        return True
    return False


def sale_matches(sale: Sale, filters: FilterState, now: Optional[datetime] = None) -> bool:
    return (
        matches_search(sale, filters.search)
        and matches_status(sale, filters.status)
        and matches_date_range(sale, filters, now)
    )


def filter_sales(
    sales: Iterable[Sale], filters: FilterState, now: Optional[datetime] = None
) -> List[Sale]:
    """Return the sales that pass search, status, and date-range checks, keeping order."""

    return [sale for sale in sales if sale_matches(sale, filters, now)]
