"""Pytest configuration to make the local package importable without installation."""
import asyncio
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sales_console.core.config import ConsoleSettings
from sales_console.core.models import Sale, SalesPage, SalesStats
from sales_console.core.scheduler import ManualScheduler
from sales_console.processing.orchestrator import SalesConsole

FIXED_NOW = datetime(2024, 5, 15, 12, 0, 0)  # a Wednesday

SAMPLE_SALES = [
    {
        "id": "ORD-001",
        "customer": "John Smith",
        "customerEmail": "john@example.com",
        "items": 3,
        "total": 156.5,
        "paymentMethod": "Credit Card",
        "status": "completed",
        "date": "2024-05-15T10:30:00",
        "products": [
            {"name": "Wireless Mouse", "quantity": 1, "price": 29.5},
            {"name": "USB-C Cable", "quantity": 2, "price": 63.5},
        ],
    },
    {
        "id": "ORD-002",
        "customer": "Maria Garcia",
        "customerEmail": "maria@example.com",
        "items": 1,
        "total": 89.99,
        "paymentMethod": "Cash",
        "status": "pending",
        "date": "2024-05-14T16:05:00",
        "products": [{"name": "Desk Lamp", "quantity": 1, "price": 89.99}],
    },
    {
        "id": "ORD-003",
        "customer": "Wei Chen",
        "customerEmail": "wei@example.com",
        "items": 2,
        "total": 240.0,
        "paymentMethod": "Mobile Pay",
        "status": "refunded",
        "date": "2024-05-02T09:00:00",
        "products": [{"name": "Mechanical Keyboard", "quantity": 2, "price": 120.0}],
    },
    {
        "id": "ORD-004",
        "customer": "Ana Souza",
        "customerEmail": "ana@example.com",
        "items": 1,
        "total": 15.0,
        "paymentMethod": "Cash",
        "status": "pending",
        "date": "2024-04-28T11:45:00",
        "products": [{"name": "Notebook", "quantity": 1, "price": 15.0}],
    },
]

SAMPLE_STATS = {
    "totalRevenue": 501.49,
    "todaySales": 156.5,
    "totalOrders": 4,
    "averageOrder": 125.37,
    "returns": 1,
}


def make_page(sales=None, stats=None) -> SalesPage:
    """Build a listing page from backend-shaped dictionaries."""

    return SalesPage.from_dict(
        {"sales": SAMPLE_SALES if sales is None else sales, "stats": SAMPLE_STATS if stats is None else stats}
    )


class FakeSalesClient:
    """In-memory stand-in for ``SalesApiClient`` that records every call.

    Queued ``responses`` may be pages or exceptions; queued ``gates`` are
    ``asyncio.Event`` objects a call waits on before answering, which lets
    tests decide the order in which concurrent requests complete.
    """

    def __init__(self, responses=None, export_payload=b"id,total\nORD-001,156.50\n"):
        self.responses = list(responses or [])
        self.gates = []
        self.export_gates = []
        self.default_page = make_page()
        self.export_payload = export_payload
        self.list_calls = []
        self.export_calls = []

    async def list_sales(self, params=None):
        self.list_calls.append(dict(params or {}))
        result = self.responses.pop(0) if self.responses else self.default_page
        gate = self.gates.pop(0) if self.gates else None
        if gate is not None:
            await gate.wait()
        if isinstance(result, Exception):
            raise result
        return result

    async def export_sales(self, params=None):
        self.export_calls.append(dict(params or {}))
        gate = self.export_gates.pop(0) if self.export_gates else None
        if gate is not None:
            await gate.wait()
        if isinstance(self.export_payload, Exception):
            raise self.export_payload
        return self.export_payload

    def close(self):
        pass


def run(coro):
    """Run a coroutine to completion on a fresh event loop."""

    return asyncio.run(coro)


@pytest.fixture
def sample_sales() -> list[Sale]:
    return [Sale.from_dict(item) for item in SAMPLE_SALES]


@pytest.fixture
def sample_stats() -> SalesStats:
    return SalesStats.from_dict(SAMPLE_STATS)


@pytest.fixture
def fake_client() -> FakeSalesClient:
    return FakeSalesClient()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def settings(tmp_path: Path) -> ConsoleSettings:
    return ConsoleSettings(base_url="http://sales.test", export_dir=tmp_path / "exports")


@pytest.fixture
def console(fake_client, scheduler, settings) -> SalesConsole:
    """A console wired to the fake client and the manual scheduler."""

    return SalesConsole(fake_client, scheduler, settings, clock=lambda: FIXED_NOW)
