"""
JWT authentication helpers and middleware for the Flask API.
"""

import secrets
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Dict, Optional

import jwt
from flask import current_app, jsonify, request

from slooze.config import SECRET_KEY, TOKEN_EXPIRY_HOURS
from slooze.models import Identity
from slooze.rbac import is_allowed

REVOKED_TOKENS_KEY = "slooze.revoked_tokens"


def _secret() -> str:
    return current_app.config.get("SECRET_KEY") or SECRET_KEY


def generate_token(identity: Identity) -> str:
    """Generate a JWT token for an authenticated user."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": identity.id,
        "email": identity.email,
        "name": identity.name,
        "role": identity.role,
        "jti": secrets.token_hex(8),
        "iat": now,
        "exp": now + timedelta(hours=TOKEN_EXPIRY_HOURS),
    }
    return jwt.encode(payload, _secret(), algorithm="HS256")


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify a JWT token and return the decoded payload (or None)."""
    try:
        return jwt.decode(token, _secret(), algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def revoke_token(payload: Dict[str, Any]) -> None:
    """Remember a logged-out token until it would have expired anyway."""
    revoked = current_app.extensions[REVOKED_TOKENS_KEY]
    cleanup_revoked_tokens(revoked)
    revoked[payload["jti"]] = payload["exp"]


def cleanup_revoked_tokens(revoked: Dict[str, int]) -> None:
    """Drop revocations whose tokens have expired (jwt.decode rejects those already)."""
    now = datetime.now(timezone.utc).timestamp()
    expired = [jti for jti, exp in revoked.items() if exp <= now]
    for jti in expired:
        del revoked[jti]
    if expired:
        print(f"[cleanup] Removed {len(expired)} expired revocations")


def token_required(f):
    """Decorator that protects endpoints with JWT authentication."""
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get("Authorization", "")
        if not auth_header:
            return jsonify({"error": "Authentication token is missing"}), 401

        parts = auth_header.split(" ")
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return jsonify({"error": "Invalid authorization header format"}), 401

        payload = verify_token(parts[1])
        if not payload:
            return jsonify({"error": "Invalid or expired token"}), 401

        if payload.get("jti") in current_app.extensions[REVOKED_TOKENS_KEY]:
            return jsonify({"error": "Session ended. Please login again."}), 401

        try:
            request.identity = Identity.from_dict({
                "id": payload["sub"],
                "email": payload["email"],
                "name": payload["name"],
                "role": payload["role"],
            })
        except (KeyError, ValueError):
            return jsonify({"error": "Invalid or expired token"}), 401
        request.token_payload = payload

        return f(*args, **kwargs)

    return decorated


def role_required(role: str):
    """Decorator (applied under ``token_required``) limiting an endpoint to *role*."""
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            if not is_allowed(request.identity, role):
                return jsonify({"error": f"This action requires the {role} role"}), 403
            return f(*args, **kwargs)
        return decorated
    return decorator
