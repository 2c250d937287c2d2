"""
Inventory analytics for the manager dashboard – totals, low stock and category value.
"""

from typing import Dict, Iterable, List

import pandas as pd

from slooze.config import LOW_STOCK_THRESHOLD
from slooze.models import Product


def products_frame(products: Iterable[Product]) -> pd.DataFrame:
    """Tabulate products with a derived ``value`` column (price × stock)."""
    rows = [p.to_dict() for p in products]
    df = pd.DataFrame(rows, columns=["id", "name", "category", "price", "stock", "description", "lastUpdated"])
    df["value"] = df["price"].astype(float) * df["stock"].astype(float)
    return df


# ── Headline numbers ─────────────────────────────────────────────────

def compute_inventory_stats(products: Iterable[Product]) -> Dict[str, float]:
    df = products_frame(products)
    if df.empty:
        return {"total_products": 0, "total_stock": 0, "total_value": 0.0, "low_stock": 0}
    return {
        "total_products": int(len(df)),
        "total_stock": int(df["stock"].sum()),
        "total_value": round(float(df["value"].sum()), 2),
        "low_stock": int((df["stock"] < LOW_STOCK_THRESHOLD).sum()),
    }


def low_stock_products(products: Iterable[Product]) -> List[Product]:
    return [p for p in products if p.stock < LOW_STOCK_THRESHOLD]


# ── Category breakdown ───────────────────────────────────────────────

def category_values(products: Iterable[Product]) -> pd.DataFrame:
    """Inventory value per category, largest first."""
    df = products_frame(products)
    if df.empty:
        return pd.DataFrame(columns=["category", "value"])
    grouped = df.groupby("category", sort=False)["value"].sum().reset_index()
    return grouped.sort_values("value", ascending=False, kind="stable").reset_index(drop=True)


def format_dashboard(products: Iterable[Product]) -> str:
    """Plain-text dashboard: headline numbers plus the category table."""
    products = list(products)
    stats = compute_inventory_stats(products)
    lines = [
        f"Total products: {stats['total_products']}",
        f"Total stock: {stats['total_stock']}",
        f"Total value: ${stats['total_value']:,.2f}",
        f"Low stock items (< {LOW_STOCK_THRESHOLD}): {stats['low_stock']}",
    ]
    by_category = category_values(products)
    if by_category.empty:
        lines.append("(no categories – catalog is empty)")
    else:
        lines.append("")
        lines.append("Value by category:")
        lines.append(by_category.to_markdown(index=False, floatfmt=",.2f"))
    return "\n".join(lines)
