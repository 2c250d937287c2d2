"""
Read-only user directory shown to managers.
"""

from typing import List

from slooze.models import Identity, MANAGER, STOREKEEPER

USER_DIRECTORY = (
    Identity(id="1", email="manager@slooze.com", name="John Manager", role=MANAGER),
    Identity(id="2", email="storekeeper@slooze.com", name="Sarah Keeper", role=STOREKEEPER),
    Identity(id="3", email="mike@slooze.com", name="Mike Handler", role=STOREKEEPER),
    Identity(id="4", email="emma@slooze.com", name="Emma Thompson", role=STOREKEEPER),
)


def search_users(term: str = "", users=USER_DIRECTORY) -> List[Identity]:
    """Case-insensitive match on name or email."""
    needle = term.lower()
    return [u for u in users if needle in u.name.lower() or needle in u.email.lower()]
