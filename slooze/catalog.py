"""
In-memory product catalog – CRUD plus the search/sort used by the products view.
"""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from slooze.config import PRODUCT_SORT_FIELDS
from slooze.models import Product, ProductDraft


class ProductNotFound(LookupError):
    """Raised when an update targets an id the catalog does not hold."""


INITIAL_PRODUCTS = (
    Product(
        id="1", name="Organic Wheat", category="Grains", price=28.50, stock=150,
        description="Premium organic wheat from sustainable farms",
        last_updated="2025-04-10T14:30:00Z",
    ),
    Product(
        id="2", name="Crude Oil", category="Energy", price=75.20, stock=200,
        description="Barrel of crude oil, standard grade",
        last_updated="2025-04-09T10:15:00Z",
    ),
    Product(
        id="3", name="Gold", category="Metals", price=1850.75, stock=50,
        description="Gold bullion, 99.9% purity",
        last_updated="2025-04-11T09:45:00Z",
    ),
    Product(
        id="4", name="Coffee Beans", category="Agricultural", price=4.25, stock=500,
        description="Arabica coffee beans, premium quality",
        last_updated="2025-04-08T16:20:00Z",
    ),
    Product(
        id="5", name="Natural Gas", category="Energy", price=3.15, stock=1000,
        description="Natural gas, measured in MMBtu",
        last_updated="2025-04-10T11:30:00Z",
    ),
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render an aware datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CatalogStore:
    """Ordered, in-memory collection of products.

    Input is assumed to be validated already (see ``slooze.validation``);
    the store never coerces or repairs values.
    """

    def __init__(self, products: Optional[Iterable[Product]] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        if products is None:
            products = INITIAL_PRODUCTS
        self._products: List[Product] = [replace(p) for p in products]
        self._clock = clock or utc_now
        self._last_id = max((int(p.id) for p in self._products if p.id.isdigit()), default=0)

    # ── Queries ──────────────────────────────────────────────────────

    def list(self) -> List[Product]:
        """All products in insertion order."""
        return list(self._products)

    def get(self, product_id: str) -> Optional[Product]:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def categories(self) -> List[str]:
        seen = []
        for product in self._products:
            if product.category not in seen:
                seen.append(product.category)
        return seen

    def search(self, term: str = "", category: str = "",
               sort_field: str = "name", direction: str = "asc") -> List[Product]:
        """Filter by name substring and exact category, then sort."""
        if sort_field not in PRODUCT_SORT_FIELDS:
            raise ValueError(f"Cannot sort products by '{sort_field}'.")
        if direction not in ("asc", "desc"):
            raise ValueError(f"Unknown sort direction '{direction}'.")

        needle = term.lower()
        matches = [
            p for p in self._products
            if needle in p.name.lower() and (not category or p.category == category)
        ]

        def sort_key(product):
            value = getattr(product, sort_field)
            return value.lower() if isinstance(value, str) else value

        return sorted(matches, key=sort_key, reverse=(direction == "desc"))

    # ── Mutations ────────────────────────────────────────────────────

    def create(self, draft: ProductDraft) -> Product:
        now = self._clock()
        product = Product(
            id=self._next_id(now),
            name=draft.name,
            category=draft.category,
            price=draft.price,
            stock=draft.stock,
            description=draft.description,
            last_updated=format_timestamp(now),
        )
        self._products.append(product)
        return product

    def update(self, product: Product) -> Product:
        for index, existing in enumerate(self._products):
            if existing.id == product.id:
                updated = replace(product, last_updated=format_timestamp(self._clock()))
                self._products[index] = updated
                return updated
        raise ProductNotFound(f"No product with id '{product.id}'.")

    def delete(self, product_id: str) -> None:
        """Remove a product; unknown ids are ignored."""
        self._products = [p for p in self._products if p.id != product_id]

    def _next_id(self, now: datetime) -> str:
        # Millisecond timestamps, bumped so ids only ever increase.
        candidate = max(int(now.timestamp() * 1000), self._last_id + 1)
        while self.get(str(candidate)) is not None:
            candidate += 1
        self._last_id = candidate
        return str(candidate)
