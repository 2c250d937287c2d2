"""
Interactive CLI for the Slooze commodities inventory.
Restores the saved session, or asks for credentials, then runs a command loop.
"""

import asyncio

import pandas as pd

from slooze.analysis import format_dashboard, products_frame
from slooze.auth import Authenticator, InvalidCredentials
from slooze.catalog import CatalogStore, ProductNotFound
from slooze.models import MANAGER, Product
from slooze.orders import OrderBook
from slooze.rbac import require_role, resolve_route
from slooze.session import SessionStore
from slooze.storage import KeyValueStorage, init_engine
from slooze.users import search_users
from slooze.validation import FormValidationError, parse_product_form

HELP = """Commands:
  products [search]   list products (any role)
  show <id>           product details
  add                 add a product (manager)
  edit <id>           edit a product (manager)
  delete <id>         delete a product (manager)
  orders [search]     list orders (manager)
  users [search]      list users (manager)
  dashboard           inventory summary (manager)
  whoami | logout | help | quit"""

# command -> view path used for gating
COMMAND_ROUTES = {
    "products": "/products",
    "show": "/products",
    "add": "/products",
    "edit": "/products",
    "delete": "/products",
    "orders": "/orders",
    "users": "/users",
    "dashboard": "/dashboard",
}


def login_prompt(session: SessionStore, authenticator: Authenticator) -> bool:
    """Ask for credentials until login succeeds; False when the user gives up."""
    while True:
        try:
            email = input("Email (or 'quit'): ")
            if not email.strip() or email.strip().lower() in {"quit", "exit"}:
                return False
            password = input("Password: ")
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            return False

        print("[auth] Signing in...")
        try:
            identity = asyncio.run(authenticator.login(email, password))
        except InvalidCredentials as e:
            print(f"[auth] {e}")
            continue

        session.set(identity)
        print(f"[auth] Logged in as: {identity.name} (role={identity.role})")
        return True


def _ask(label: str, default=None) -> str:
    suffix = f" [{default}]" if default not in (None, "") else ""
    value = input(f"{label}{suffix}: ").strip()
    return value if value else ("" if default is None else str(default))


def prompt_product_form(existing: Product = None) -> dict:
    """Collect product fields; blank answers keep *existing* values."""
    return {
        name: _ask(name.capitalize(), getattr(existing, name, None))
        for name in ("name", "category", "price", "stock", "description")
    }


def print_products(products) -> None:
    if not products:
        print("(no products found)")
        return
    df = products_frame(products)[["id", "name", "category", "price", "stock"]]
    print(df.to_markdown(index=False))


def run_command(command: str, arg: str, session: SessionStore,
                catalog: CatalogStore, order_book: OrderBook) -> None:
    """Execute one gated command for the signed-in user."""
    identity = session.current
    decision = resolve_route(identity, COMMAND_ROUTES[command])
    if not decision.allowed:
        print(f"[rbac] Access denied: '{command}' is not available to your role.")
        return

    if command == "products":
        print_products(catalog.search(term=arg))

    elif command == "show":
        product = catalog.get(arg)
        if product is None:
            print(f"No product with id '{arg}'.")
        else:
            for key, value in product.to_dict().items():
                print(f"  {key}: {value}")

    elif command == "add":
        require_role(identity, MANAGER)
        draft = parse_product_form(prompt_product_form())
        product = catalog.create(draft)
        print(f"Added product {product.id} ({product.name}).")

    elif command == "edit":
        require_role(identity, MANAGER)
        existing = catalog.get(arg)
        if existing is None:
            raise ProductNotFound(f"No product with id '{arg}'.")
        draft = parse_product_form(prompt_product_form(existing))
        catalog.update(Product(id=existing.id, last_updated=existing.last_updated, **vars(draft)))
        print(f"Updated product {existing.id}.")

    elif command == "delete":
        require_role(identity, MANAGER)
        catalog.delete(arg)
        print(f"Deleted product {arg}.")

    elif command == "orders":
        orders = order_book.filter_orders(catalog, search=arg)
        if not orders:
            print("(no orders found)")
            return
        df = pd.DataFrame([
            {
                "id": o.id,
                "product": order_book.product_name(catalog, o),
                "quantity": o.quantity,
                "status": o.status,
                "created by": o.created_by,
                "created at": o.created_at,
            }
            for o in orders
        ])
        print(df.to_markdown(index=False))

    elif command == "users":
        users = search_users(arg)
        if not users:
            print("(no users found)")
            return
        print(pd.DataFrame([u.to_dict() for u in users]).to_markdown(index=False))

    elif command == "dashboard":
        print(format_dashboard(catalog.list()))


def main(storage_uri: str = None):
    print("=== Slooze Commodities: Inventory Console ===\n")

    engine = init_engine(storage_uri)
    session = SessionStore(KeyValueStorage(engine))
    authenticator = Authenticator()
    catalog = CatalogStore()
    order_book = OrderBook()

    # ── Login ────────────────────────────────────────────────────────
    identity = session.restore()
    if identity is not None:
        print(f"[auth] Restored session for {identity.name} (role={identity.role})")
    elif not login_prompt(session, authenticator):
        print("Goodbye.")
        return

    print(HELP)

    # ── REPL ─────────────────────────────────────────────────────────
    while True:
        try:
            line = input("\nslooze> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break

        if not line:
            continue
        command, _, arg = line.partition(" ")
        command = command.lower()
        arg = arg.strip()

        if command in {"quit", "exit"}:
            print("Goodbye.")
            break
        if command == "help":
            print(HELP)
            continue
        if command == "whoami":
            me = session.current
            print(f"{me.name} <{me.email}> role={me.role}")
            continue
        if command == "logout":
            session.clear()
            print("[auth] Logged out.")
            if not login_prompt(session, authenticator):
                print("Goodbye.")
                break
            continue
        if command not in COMMAND_ROUTES:
            print(f"Unknown command '{command}'. Type 'help'.")
            continue

        try:
            run_command(command, arg, session, catalog, order_book)
        except FormValidationError as e:
            print("[ERROR] Product not saved:")
            for name, message in e.errors.items():
                print(f"  - {name}: {message}")
        except (PermissionError, ProductNotFound) as e:
            print(f"[ERROR] {e}")
        except (EOFError, KeyboardInterrupt):
            print("\nCancelled.")


if __name__ == "__main__":
    main()
