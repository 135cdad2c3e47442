"""Tests for the controlled filter inputs and export trigger."""
from datetime import date

from sales_console.core.models import FilterState
from sales_console.ui.filters import FilterController

from conftest import run


class Owner:
    """Minimal filter owner that records every forwarded change."""

    def __init__(self):
        self.filters = FilterState()
        self.changes = []
        self.busy = False

    def apply(self, **changes):
        self.changes.append(changes)
        self.filters = self.filters.update(**changes)


def _controller(owner, on_export=None):
    return FilterController(
        get_filters=lambda: owner.filters,
        on_change=owner.apply,
        on_export=on_export,
        is_busy=lambda: owner.busy,
    )


def test_displayed_values_come_from_owner():
    owner = Owner()
    controller = _controller(owner)
    owner.filters = FilterState(search="abc", status="refunded", date_range="month")

    assert (controller.search, controller.status, controller.date_range) == ("abc", "refunded", "month")


def test_changes_are_forwarded_unchanged():
    owner = Owner()
    controller = _controller(owner)

    controller.change_search("  Wei ")
    controller.change_status("pending")
    controller.change_date_range("today")

    assert owner.changes == [{"search": "  Wei "}, {"status": "pending"}, {"date_range": "today"}]


def test_custom_range_opens_panel_without_forwarding():
    owner = Owner()
    controller = _controller(owner)

    controller.change_date_range("custom")

    assert controller.custom_range_open
    assert owner.changes == []
    assert controller.date_range == "all"


def test_preset_range_closes_custom_panel():
    owner = Owner()
    controller = _controller(owner)
    controller.change_date_range("custom")

    controller.change_date_range("week")

    assert not controller.custom_range_open
    assert owner.filters.date_range == "week"


def test_apply_custom_range_forwards_ordered_bounds():
    owner = Owner()
    controller = _controller(owner)
    controller.change_date_range("custom")

    controller.apply_custom_range(date(2024, 5, 9), date(2024, 5, 2))

    assert not controller.custom_range_open
    assert owner.changes == [
        {"date_range": "custom", "start_date": date(2024, 5, 2), "end_date": date(2024, 5, 9)}
    ]


def test_close_custom_range_discards_panel():
    owner = Owner()
    controller = _controller(owner)
    controller.change_date_range("custom")

    controller.close_custom_range()

    assert not controller.custom_range_open
    assert owner.changes == []


def test_export_calls_handler():
    calls = []

    async def handler():
        calls.append("export")

    run(_controller(Owner(), on_export=handler).export())

    assert calls == ["export"]


def test_export_errors_are_logged_not_raised(caplog):
    async def handler():
        raise RuntimeError("disk full")

    caplog.set_level("ERROR")
    run(_controller(Owner(), on_export=handler).export())

    assert "Export failed" in caplog.text
    assert "disk full" in caplog.text


def test_export_without_handler_warns(caplog):
    caplog.set_level("WARNING")

    run(_controller(Owner()).export())

    assert "no export handler" in caplog.text


def test_export_disabled_follows_owner():
    owner = Owner()
    controller = _controller(owner)
    assert not controller.export_disabled

    owner.busy = True
    assert controller.export_disabled


def test_export_returns_handler_result():
    async def handler():
        return "sales-export-2024-05-15.csv"

    assert run(_controller(Owner(), on_export=handler).export()) == "sales-export-2024-05-15.csv"


def test_failed_export_returns_none():
    async def handler():
        raise RuntimeError("disk full")

    assert run(_controller(Owner(), on_export=handler).export()) is None
