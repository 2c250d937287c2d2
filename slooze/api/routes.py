"""
Flask route handlers for the REST API.
"""

import asyncio
import sys
import traceback
from datetime import datetime, timedelta, timezone

from flask import jsonify, request

from slooze.analysis import category_values, compute_inventory_stats
from slooze.auth import InvalidCredentials
from slooze.catalog import ProductNotFound
from slooze.config import TOKEN_EXPIRY_HOURS
from slooze.models import MANAGER, Product
from slooze.users import search_users
from slooze.validation import FormValidationError, parse_product_form
from slooze.api.auth import (
    REVOKED_TOKENS_KEY,
    generate_token,
    revoke_token,
    role_required,
    token_required,
)


def register_routes(app, services):
    """Register all API routes on the Flask *app*, bound to *services*."""

    authenticator = services.authenticator
    catalog = services.catalog
    order_book = services.order_book

    # ── Health / info ────────────────────────────────────────────────

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({
            "service": "Slooze Commodities API",
            "version": "1.0.0",
            "status": "running",
            "endpoints": {
                "auth": "/api/auth/login",
                "logout": "/api/auth/logout",
                "profile": "/api/user/profile",
                "products": "/api/products",
                "orders": "/api/orders",
                "users": "/api/users",
                "dashboard": "/api/dashboard",
                "health": "/health",
            },
        })

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({
            "status": "healthy",
            "products": len(catalog.list()),
            "revoked_tokens": len(app.extensions[REVOKED_TOKENS_KEY]),
        }), 200

    # ── Auth ─────────────────────────────────────────────────────────

    @app.route("/api/auth/login", methods=["POST"])
    def login():
        if not request.is_json:
            return jsonify({"error": "Content-Type must be application/json"}), 400

        data = request.json
        if not isinstance(data, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400
        email = str(data.get("email", ""))
        password = str(data.get("password", ""))
        if not email or not password:
            return jsonify({"error": "email and password are required"}), 400

        try:
            identity = asyncio.run(authenticator.login(email, password))
        except InvalidCredentials as e:
            print(f"[auth] Failed login for {email}", file=sys.stderr)
            return jsonify({"error": str(e)}), 401
        except Exception as e:
            print(f"[ERROR] Login error: {e}", file=sys.stderr)
            traceback.print_exc()
            return jsonify({"error": "Internal server error during login"}), 500

        print(f"[auth] {identity.name} logged in (role={identity.role})")
        expires_at = datetime.now(timezone.utc) + timedelta(hours=TOKEN_EXPIRY_HOURS)
        return jsonify({
            "success": True,
            "token": generate_token(identity),
            "user": identity.to_dict(),
            "expires_at": expires_at.isoformat(),
        }), 200

    @app.route("/api/auth/logout", methods=["POST"])
    @token_required
    def logout():
        revoke_token(request.token_payload)
        return jsonify({"success": True, "message": "Logged out successfully"}), 200

    @app.route("/api/user/profile", methods=["GET"])
    @token_required
    def get_profile():
        return jsonify({"success": True, "user": request.identity.to_dict()}), 200

    # ── Products ─────────────────────────────────────────────────────

    @app.route("/api/products", methods=["GET"])
    @token_required
    def list_products():
        try:
            products = catalog.search(
                term=request.args.get("search", ""),
                category=request.args.get("category", ""),
                sort_field=request.args.get("sort", "name"),
                direction=request.args.get("direction", "asc"),
            )
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({
            "success": True,
            "products": [p.to_dict() for p in products],
            "categories": catalog.categories(),
            "can_edit": request.identity.role == MANAGER,
        }), 200

    @app.route("/api/products/<product_id>", methods=["GET"])
    @token_required
    def get_product(product_id):
        product = catalog.get(product_id)
        if product is None:
            return jsonify({"error": f"No product with id '{product_id}'"}), 404
        return jsonify({"success": True, "product": product.to_dict()}), 200

    @app.route("/api/products", methods=["POST"])
    @token_required
    @role_required(MANAGER)
    def create_product():
        if not request.is_json:
            return jsonify({"error": "Content-Type must be application/json"}), 400
        if not isinstance(request.json, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400
        try:
            draft = parse_product_form(request.json)
        except FormValidationError as e:
            return jsonify({"error": "Invalid product", "fields": e.errors}), 400

        product = catalog.create(draft)
        print(f"[catalog] {request.identity.name} added product {product.id} ({product.name})")
        return jsonify({"success": True, "product": product.to_dict()}), 201

    @app.route("/api/products/<product_id>", methods=["PUT"])
    @token_required
    @role_required(MANAGER)
    def update_product(product_id):
        if not request.is_json:
            return jsonify({"error": "Content-Type must be application/json"}), 400
        if not isinstance(request.json, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400
        try:
            draft = parse_product_form(request.json)
        except FormValidationError as e:
            return jsonify({"error": "Invalid product", "fields": e.errors}), 400

        try:
            product = catalog.update(Product(
                id=product_id,
                name=draft.name,
                category=draft.category,
                price=draft.price,
                stock=draft.stock,
                description=draft.description,
                last_updated="",
            ))
        except ProductNotFound as e:
            return jsonify({"error": str(e)}), 404

        print(f"[catalog] {request.identity.name} updated product {product.id}")
        return jsonify({"success": True, "product": product.to_dict()}), 200

    @app.route("/api/products/<product_id>", methods=["DELETE"])
    @token_required
    @role_required(MANAGER)
    def delete_product(product_id):
        catalog.delete(product_id)
        print(f"[catalog] {request.identity.name} deleted product {product_id}")
        return jsonify({"success": True}), 200

    # ── Manager views ────────────────────────────────────────────────

    @app.route("/api/orders", methods=["GET"])
    @token_required
    @role_required(MANAGER)
    def list_orders():
        try:
            orders = order_book.filter_orders(
                catalog,
                search=request.args.get("search", ""),
                status=request.args.get("status", ""),
                sort_field=request.args.get("sort", "created_at"),
                direction=request.args.get("direction", "desc"),
            )
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({
            "success": True,
            "orders": [
                dict(o.to_dict(), productName=order_book.product_name(catalog, o))
                for o in orders
            ],
        }), 200

    @app.route("/api/users", methods=["GET"])
    @token_required
    @role_required(MANAGER)
    def list_users():
        users = search_users(request.args.get("search", ""))
        return jsonify({"success": True, "users": [u.to_dict() for u in users]}), 200

    @app.route("/api/dashboard", methods=["GET"])
    @token_required
    @role_required(MANAGER)
    def dashboard():
        products = catalog.list()
        return jsonify({
            "success": True,
            "stats": compute_inventory_stats(products),
            "categories": category_values(products).to_dict(orient="records"),
        }), 200

    # ── Error handlers ───────────────────────────────────────────────

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Endpoint not found", "message": str(e)}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed", "message": str(e)}), 405

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({"error": "Internal server error", "message": str(e)}), 500
