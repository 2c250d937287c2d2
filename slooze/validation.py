"""
Product form validation – the boundary that keeps invalid data out of the catalog.
"""

import math
from typing import Any, Dict, Mapping

from slooze.config import PRODUCT_CATEGORIES
from slooze.models import ProductDraft


class FormValidationError(ValueError):
    """Carries the per-field messages of a rejected form."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


def _to_float(value: Any):
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def validate_product_form(data: Mapping[str, Any]) -> Dict[str, str]:
    """Return ``{field: message}`` for every rule the submitted form breaks."""
    errors: Dict[str, str] = {}

    if not str(data.get("name") or "").strip():
        errors["name"] = "Name is required"

    category = str(data.get("category") or "").strip()
    if not category:
        errors["category"] = "Category is required"
    elif category not in PRODUCT_CATEGORIES:
        errors["category"] = f"Category must be one of: {', '.join(PRODUCT_CATEGORIES)}"

    price = _to_float(data.get("price"))
    if price is None or not math.isfinite(price) or price <= 0:
        errors["price"] = "Price must be greater than 0"

    stock = _to_float(data.get("stock"))
    if stock is None or stock < 0 or not stock.is_integer():
        errors["stock"] = "Stock must be a non-negative integer"

    return errors


def parse_product_form(data: Mapping[str, Any]) -> ProductDraft:
    """Validate *data* and build a ProductDraft, or raise FormValidationError."""
    errors = validate_product_form(data)
    if errors:
        raise FormValidationError(errors)
    return ProductDraft(
        name=str(data["name"]).strip(),
        category=str(data["category"]).strip(),
        price=float(data["price"]),
        stock=int(float(data["stock"])),
        description=str(data.get("description") or "").strip(),
    )
