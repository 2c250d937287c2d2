"""
Flask application factory and server entry-point.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from flask import Flask
from flask_cors import CORS

from slooze.auth import Authenticator
from slooze.catalog import CatalogStore
from slooze.config import SECRET_KEY, TOKEN_EXPIRY_HOURS, get_env
from slooze.orders import OrderBook
from slooze.api.auth import REVOKED_TOKENS_KEY
from slooze.api.routes import register_routes


@dataclass
class Services:
    """Stores handed to the route layer."""
    authenticator: Authenticator = field(default_factory=Authenticator)
    catalog: CatalogStore = field(default_factory=CatalogStore)
    order_book: OrderBook = field(default_factory=OrderBook)


def create_app(services: Optional[Services] = None, secret_key: Optional[str] = None):
    """Build and return a fully configured Flask application."""
    app = Flask(__name__)
    app.config["SECRET_KEY"] = secret_key or SECRET_KEY
    CORS(app)

    services = services or Services()
    app.extensions[REVOKED_TOKENS_KEY] = {}

    register_routes(app, services)
    print(f"[init] ✓ API ready with {len(services.catalog.list())} products")
    return app


def main():
    """Run the development server."""
    print("=" * 60)
    print("Slooze Commodities – REST API Server")
    print("=" * 60)

    debug = os.getenv("FLASK_ENV") == "development"
    secret_key = SECRET_KEY if debug else get_env("JWT_SECRET_KEY")
    app = create_app(secret_key=secret_key)

    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))

    print(f"\n[server] Starting Flask API on {host}:{port}")
    print(f"[server] Debug mode: {debug}")
    print(f"[server] Token expiry: {TOKEN_EXPIRY_HOURS} hours")
    print("\nAPI Endpoints:")
    print(f"  - POST   http://{host}:{port}/api/auth/login")
    print(f"  - POST   http://{host}:{port}/api/auth/logout")
    print(f"  - GET    http://{host}:{port}/api/products")
    print(f"  - POST   http://{host}:{port}/api/products")
    print(f"  - PUT    http://{host}:{port}/api/products/<id>")
    print(f"  - DELETE http://{host}:{port}/api/products/<id>")
    print(f"  - GET    http://{host}:{port}/api/orders")
    print(f"  - GET    http://{host}:{port}/api/users")
    print(f"  - GET    http://{host}:{port}/api/dashboard")
    print(f"  - GET    http://{host}:{port}/health")
    print("\n" + "=" * 60)

    app.run(host=host, port=port, debug=debug, threaded=True)


if __name__ == "__main__":
    main()
