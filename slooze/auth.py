"""
Credential checking – identity repository and the asynchronous login flow.
"""

import asyncio
from typing import Dict, Iterable, Optional

from slooze.config import LOGIN_DELAY_SECONDS
from slooze.models import CredentialRecord, Identity, MANAGER, STOREKEEPER


class InvalidCredentials(ValueError):
    """No credential record matches the supplied email and password."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


# Demo accounts; swap the repository for a real identity provider in production.
DEFAULT_CREDENTIALS = (
    CredentialRecord(
        email="manager@slooze.com",
        password="manager123",
        identity=Identity(id="1", email="manager@slooze.com", name="John Manager", role=MANAGER),
    ),
    CredentialRecord(
        email="storekeeper@slooze.com",
        password="store123",
        identity=Identity(id="2", email="storekeeper@slooze.com", name="Sarah Keeper", role=STOREKEEPER),
    ),
)


class InMemoryIdentityRepository:
    """Static credential table keyed by exact (case-sensitive) email."""

    def __init__(self, records: Optional[Iterable[CredentialRecord]] = None):
        if records is None:
            records = DEFAULT_CREDENTIALS
        self._records: Dict[str, CredentialRecord] = {r.email: r for r in records}

    def find_by_email(self, email: str) -> Optional[CredentialRecord]:
        return self._records.get(email)


class Authenticator:
    """Validates credentials against an identity repository.

    Any object exposing ``find_by_email(email)`` works as the repository.
    """

    def __init__(self, repository=None, delay: float = LOGIN_DELAY_SECONDS):
        self.repository = repository if repository is not None else InMemoryIdentityRepository()
        self.delay = delay

    async def login(self, email: str, password: str) -> Identity:
        # Every attempt waits the same amount of time before it is decided.
        await asyncio.sleep(self.delay)

        record = self.repository.find_by_email(email)
        if record is None or record.password != password:
            raise InvalidCredentials()
        return record.identity
