"""Data models for sales snapshots, aggregate statistics, and filter state."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional


class SaleStatus:
    COMPLETED = "completed"
    PENDING = "pending"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


ALL = "all"
CUSTOM_RANGE = "custom"

STATUS_OPTIONS = [
    (ALL, "All Status"),
    (SaleStatus.COMPLETED, "Completed"),
    (SaleStatus.PENDING, "Pending"),
    (SaleStatus.REFUNDED, "Refunded"),
    (SaleStatus.CANCELLED, "Cancelled"),
]

DATE_RANGE_OPTIONS = [
    (ALL, "All Time"),
    ("today", "Today"),
    ("yesterday", "Yesterday"),
    ("week", "This Week"),
    ("month", "This Month"),
    (CUSTOM_RANGE, "Custom Range"),
]


def parse_timestamp(raw: str | None) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp as sent by the backend, or return ``None``."""

    if not raw:
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


@dataclass(frozen=True)
class ProductLine:
    """One product on a sale with its quantity and unit price."""

    name: str
    quantity: int = 1
    price: float = 0.0

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ProductLine":
        return cls(
            name=str(payload.get("name", "")),
            quantity=int(payload.get("quantity") or 0),
            price=float(payload.get("price") or 0.0),
        )


@dataclass(frozen=True)
class Sale:
    """Immutable snapshot of one transaction as returned by the sales API."""

    id: str
    customer: str = ""
    customer_email: str = ""
    items: int = 0
    total: float = 0.0
    payment_method: str = ""
    status: str = SaleStatus.PENDING
    date: str = ""
    products: tuple[ProductLine, ...] = ()

    @property
    def timestamp(self) -> Optional[datetime]:
        return parse_timestamp(self.date)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Sale":
        """Build a sale from the backend's camelCase JSON object."""

        return cls(
            id=str(payload["id"]),
            customer=payload.get("customer") or "",
            customer_email=payload.get("customerEmail") or "",
            items=int(payload.get("items") or 0),
            total=float(payload.get("total") or 0.0),
            payment_method=payload.get("paymentMethod") or "",
            status=payload.get("status") or SaleStatus.PENDING,
            date=payload.get("date") or "",
            products=tuple(ProductLine.from_dict(item) for item in payload.get("products") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the backend JSON shape, mostly useful for fixtures and exports."""

        return {
            "id": self.id,
            "customer": self.customer,
            "customerEmail": self.customer_email,
            "items": self.items,
            "total": self.total,
            "paymentMethod": self.payment_method,
            "status": self.status,
            "date": self.date,
            "products": [asdict(product) for product in self.products],
        }


_STATS_KEYS = {
    "total_revenue": "totalRevenue",
    "today_sales": "todaySales",
    "total_orders": "totalOrders",
    "average_order": "averageOrder",
    "returns": "returns",
    "pending_orders": "pendingOrders",
    "completed_orders": "completedOrders",
}


@dataclass(frozen=True)
class SalesStats:
    """Server-computed aggregates; the console displays them but never recomputes them."""

    total_revenue: Optional[float] = None
    today_sales: Optional[float] = None
    total_orders: Optional[int] = None
    average_order: Optional[float] = None
    returns: Optional[int] = None
    pending_orders: Optional[int] = None
    completed_orders: Optional[int] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any] | None) -> "SalesStats":
        payload = payload or {}
        return cls(**{attr: payload.get(key) for attr, key in _STATS_KEYS.items()})


@dataclass(frozen=True)
class DisplayStats:
    """Zero-defaulted projection of :class:`SalesStats` used for rendering."""

    total_revenue: float = 0
    today_sales: float = 0
    total_orders: int = 0
    average_order: float = 0
    returns: int = 0

    @classmethod
    def from_stats(cls, stats: SalesStats | None) -> "DisplayStats":
        if stats is None:
            return cls()
        return cls(
            total_revenue=stats.total_revenue or 0,
            today_sales=stats.today_sales or 0,
            total_orders=stats.total_orders or 0,
            average_order=stats.average_order or 0,
            returns=stats.returns or 0,
        )


@dataclass(frozen=True)
class SalesPage:
    """One listing response: the sales snapshot and its aggregate statistics."""

    sales: List[Sale] = field(default_factory=list)
    stats: SalesStats = field(default_factory=SalesStats)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "SalesPage":
        return cls(
            sales=[Sale.from_dict(item) for item in payload.get("sales") or []],
            stats=SalesStats.from_dict(payload.get("stats")),
        )


@dataclass(frozen=True)
class FilterState:
    """Search text, status selector, and date-range selector driving the listing."""

    search: str = ""
    status: str = ALL
    date_range: str = ALL
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def replace(self, field_name: str, value: Any) -> "FilterState":
        """Return a copy with one field changed."""

        return self.update(**{field_name: value})

    def update(self, **changes: Any) -> "FilterState":
        """Return a copy with several fields changed at once."""

        known = {item.name for item in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValueError(f"Unknown filter field(s): {', '.join(unknown)}")
        return replace(self, **changes)
