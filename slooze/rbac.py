"""
Role-Based Access Control – the authorization gate and the route policy table.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from slooze.models import Identity, MANAGER

LOGIN_PATH = "/login"
HOME_PATH = "/"
DEFAULT_PATH = "/products"

# path -> required role (None means any signed-in user)
ROUTE_POLICY: Dict[str, Optional[str]] = {
    "/dashboard": MANAGER,
    "/users": MANAGER,
    "/orders": MANAGER,
    "/products": None,
    "/settings": None,
}


@dataclass
class RouteDecision:
    """Outcome of gating a navigation request."""
    allowed: bool
    redirect: Optional[str] = None
    not_found: bool = False


def is_allowed(identity: Optional[Identity], required_role: Optional[str] = None) -> bool:
    """Return True when *identity* may access something guarded by *required_role*.

    Roles are flat: a manager does not inherit anything from a storekeeper
    and vice versa.
    """
    if identity is None:
        return False
    if required_role is None:
        return True
    return identity.role == required_role


def require_role(identity: Optional[Identity], required_role: Optional[str] = None) -> Identity:
    """Like :func:`is_allowed` but raises ``PermissionError`` on refusal."""
    if identity is None:
        raise PermissionError("Not signed in.")
    if not is_allowed(identity, required_role):
        raise PermissionError(f"Requires the {required_role} role.")
    return identity


def resolve_route(identity: Optional[Identity], path: str) -> RouteDecision:
    """Decide what happens when *identity* navigates to *path*."""
    if path == LOGIN_PATH:
        return RouteDecision(allowed=True)

    if path != HOME_PATH and path not in ROUTE_POLICY:
        return RouteDecision(allowed=False, not_found=True)

    if not is_allowed(identity):
        return RouteDecision(allowed=False, redirect=LOGIN_PATH)

    if path == HOME_PATH:
        return RouteDecision(allowed=False, redirect=DEFAULT_PATH)

    required_role = ROUTE_POLICY[path]
    if not is_allowed(identity, required_role):
        return RouteDecision(allowed=False, redirect=HOME_PATH)

    return RouteDecision(allowed=True)
