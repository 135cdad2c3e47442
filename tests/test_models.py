"""Tests for sale, stats, and filter-state models."""
from datetime import date, timezone

import pytest

from sales_console.core.models import DisplayStats, FilterState, Sale, SalesPage, SalesStats

from conftest import SAMPLE_SALES


def test_sale_from_dict_reads_camel_case_fields():
    sale = Sale.from_dict(SAMPLE_SALES[0])

    assert sale.customer_email == "john@example.com"
    assert sale.payment_method == "Credit Card"
    assert [product.name for product in sale.products] == ["Wireless Mouse", "USB-C Cable"]
    assert sale.products[1].line_total == pytest.approx(127.0)
    assert sale.to_dict()["customerEmail"] == "john@example.com"


def test_sale_timestamp_accepts_zulu_suffix():
    sale = Sale(id="ORD-9", date="2024-05-15T10:30:00Z")

    assert sale.timestamp.tzinfo == timezone.utc
    assert sale.timestamp.hour == 10


def test_sale_timestamp_is_none_when_unparseable():
    assert Sale(id="ORD-9", date="yesterday-ish").timestamp is None


def test_sales_stats_keeps_missing_fields_as_none():
    stats = SalesStats.from_dict({"totalRevenue": 1200, "totalOrders": 10})

    assert stats.total_revenue == 1200
    assert stats.today_sales is None
    assert stats.returns is None


def test_display_stats_default_to_zero_without_snapshot():
    display = DisplayStats.from_stats(None)

    assert display == DisplayStats(0, 0, 0, 0, 0)
    assert all(value == 0 for value in vars(display).values())


def test_display_stats_fill_missing_fields_with_zero():
    display = DisplayStats.from_stats(SalesStats.from_dict({"averageOrder": 42.5}))

    assert display.average_order == 42.5
    assert display.total_revenue == 0
    assert display.returns == 0


def test_sales_page_tolerates_missing_keys():
    page = SalesPage.from_dict({})

    assert page.sales == []
    assert page.stats == SalesStats()


def test_filter_state_replace_returns_new_state():
    state = FilterState()
    updated = state.replace("status", "pending")

    assert state.status == "all"
    assert updated.status == "pending"
    assert updated.update(date_range="custom", start_date=date(2024, 5, 1)).start_date == date(2024, 5, 1)


def test_filter_state_rejects_unknown_fields():
    with pytest.raises(ValueError):
        FilterState().replace("colour", "red")
