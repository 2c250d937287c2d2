"""
Durable key-value slots (the client's "local storage") backed by SQLAlchemy.
"""

import sys
from typing import Optional

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, delete, insert, select, text

from slooze.config import STORAGE_URI

metadata = MetaData()

kv_store = Table(
    "kv_store",
    metadata,
    Column("key", String(255), primary_key=True),
    Column("value", Text, nullable=False),
)


def init_engine(uri: Optional[str] = None):
    """Create a SQLAlchemy engine, verify the connection and ensure the slot table exists."""
    uri = uri or STORAGE_URI
    engine = create_engine(uri, echo=False, future=True)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        print("ERROR: could not open storage:", e, file=sys.stderr)
        sys.exit(1)
    metadata.create_all(engine)
    print(f"[init] Storage ready at {engine.url.render_as_string(hide_password=True)}")
    return engine


class KeyValueStorage:
    """Named string slots; each key holds at most one value."""

    def __init__(self, engine):
        self.engine = engine

    def get_item(self, key: str) -> Optional[str]:
        with self.engine.connect() as conn:
            row = conn.execute(
                select(kv_store.c.value).where(kv_store.c.key == key)
            ).first()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self.engine.begin() as conn:
            conn.execute(delete(kv_store).where(kv_store.c.key == key))
            conn.execute(insert(kv_store).values(key=key, value=value))

    def remove_item(self, key: str) -> None:
        with self.engine.begin() as conn:
            conn.execute(delete(kv_store).where(kv_store.c.key == key))
