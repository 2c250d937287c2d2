"""
Domain dataclasses used across the application.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

MANAGER = "manager"
STOREKEEPER = "storekeeper"
ROLES = (MANAGER, STOREKEEPER)

ORDER_STATUSES = ("pending", "approved", "rejected", "completed")


@dataclass(frozen=True)
class Identity:
    """An authenticated user's public profile (never holds credentials)."""
    id: str
    email: str
    name: str
    role: str                  # "manager" or "storekeeper"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Identity":
        role = str(data["role"])
        if role not in ROLES:
            raise ValueError(f"Unsupported role '{role}'.")
        return cls(
            id=str(data["id"]),
            email=str(data["email"]),
            name=str(data["name"]),
            role=role,
        )


@dataclass(frozen=True)
class CredentialRecord:
    """Authenticator-internal row pairing a login with the identity it yields."""
    email: str
    password: str
    identity: Identity


@dataclass
class ProductDraft:
    """Product fields supplied by a caller before an id is assigned."""
    name: str
    category: str
    price: float
    stock: int
    description: str = ""


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    category: str
    price: float
    stock: int
    description: str
    last_updated: str          # UTC ISO-8601, e.g. "2025-04-10T14:30:00Z"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "price": self.price,
            "stock": self.stock,
            "description": self.description,
            "lastUpdated": self.last_updated,
        }


@dataclass(frozen=True)
class Order:
    id: str
    product_id: str
    quantity: int
    status: str                # one of ORDER_STATUSES
    created_by: str
    created_at: str
    updated_at: str
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "productId": self.product_id,
            "quantity": self.quantity,
            "status": self.status,
            "createdBy": self.created_by,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "notes": self.notes,
        }
