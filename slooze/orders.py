"""
Read-only order book with the filtering used by the orders view.
"""

from dataclasses import fields
from typing import Iterable, List, Optional

from slooze.models import Order, ORDER_STATUSES

UNKNOWN_PRODUCT = "Unknown Product"
ORDER_SORT_FIELDS = tuple(f.name for f in fields(Order))

MOCK_ORDERS = (
    Order(
        id="1", product_id="1", quantity=50, status="pending",
        created_by="Sarah Keeper",
        created_at="2025-04-10T14:30:00Z", updated_at="2025-04-10T14:30:00Z",
        notes="Urgent order for upcoming shortage",
    ),
    Order(
        id="2", product_id="2", quantity=100, status="approved",
        created_by="Mike Handler",
        created_at="2025-04-09T10:15:00Z", updated_at="2025-04-09T11:30:00Z",
        notes="Standard restock order",
    ),
    Order(
        id="3", product_id="3", quantity=25, status="completed",
        created_by="Emma Thompson",
        created_at="2025-04-08T09:45:00Z", updated_at="2025-04-08T16:20:00Z",
    ),
    Order(
        id="4", product_id="4", quantity=75, status="rejected",
        created_by="Sarah Keeper",
        created_at="2025-04-07T13:20:00Z", updated_at="2025-04-07T14:45:00Z",
        notes="Budget constraints",
    ),
)


class OrderBook:
    def __init__(self, orders: Optional[Iterable[Order]] = None):
        self._orders: List[Order] = list(MOCK_ORDERS if orders is None else orders)

    def list(self) -> List[Order]:
        return list(self._orders)

    def product_name(self, catalog, order: Order) -> str:
        product = catalog.get(order.product_id)
        return product.name if product else UNKNOWN_PRODUCT

    def filter_orders(self, catalog, search: str = "", status: str = "",
                      sort_field: str = "created_at", direction: str = "desc") -> List[Order]:
        """Match *search* against product name, creator and notes; newest first by default."""
        if sort_field not in ORDER_SORT_FIELDS:
            raise ValueError(f"Cannot sort orders by '{sort_field}'.")
        if status and status not in ORDER_STATUSES:
            raise ValueError(f"Unknown order status '{status}'.")
        if direction not in ("asc", "desc"):
            raise ValueError(f"Unknown sort direction '{direction}'.")

        needle = search.lower()
        matches = []
        for order in self._orders:
            if status and order.status != status:
                continue
            haystacks = (
                self.product_name(catalog, order).lower(),
                order.created_by.lower(),
                (order.notes or "").lower(),
            )
            if any(needle in h for h in haystacks):
                matches.append(order)

        def sort_key(order):
            value = getattr(order, sort_field)
            if value is None:
                return ""
            return value.lower() if isinstance(value, str) else value

        return sorted(matches, key=sort_key, reverse=(direction == "desc"))
