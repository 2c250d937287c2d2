"""
Client session – the currently authenticated Identity and its durable slot.
"""

import json
import sys
from typing import Optional

from slooze.config import SESSION_STORAGE_KEY
from slooze.models import Identity


class SessionStore:
    """Holds at most one Identity and mirrors it into a storage slot.

    The session has no expiry: it lasts until ``clear()`` is called.
    """

    def __init__(self, storage, key: str = SESSION_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._identity: Optional[Identity] = None

    @property
    def current(self) -> Optional[Identity]:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    def restore(self) -> Optional[Identity]:
        """Load a previously persisted Identity, if any."""
        raw = self.storage.get_item(self.key)
        if raw is None:
            self._identity = None
            return None
        try:
            self._identity = Identity.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            print(f"[WARN] Discarding unreadable saved session: {e}", file=sys.stderr)
            self.storage.remove_item(self.key)
            self._identity = None
        return self._identity

    def set(self, identity: Identity) -> None:
        self.storage.set_item(self.key, json.dumps(identity.to_dict()))
        self._identity = identity

    def clear(self) -> None:
        self._identity = None
        self.storage.remove_item(self.key)
