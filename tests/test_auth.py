"""
Unit tests for the authenticator and its identity repository.
"""

import asyncio
import time

import pytest

from slooze.auth import (
    DEFAULT_CREDENTIALS,
    Authenticator,
    InMemoryIdentityRepository,
    InvalidCredentials,
)
from slooze.models import CredentialRecord, Identity, MANAGER, STOREKEEPER


# ── Helpers / Fakes ──────────────────────────────────────────────────

class FakeRepository:
    """Records lookups and serves a single account."""
    def __init__(self, record=None):
        self._record = record
        self.lookups = []

    def find_by_email(self, email):
        self.lookups.append(email)
        if self._record and self._record.email == email:
            return self._record
        return None


def login(authenticator, email, password):
    return asyncio.run(authenticator.login(email, password))


# ── Tests: repository ────────────────────────────────────────────────

def test_default_repository_finds_demo_accounts():
    repo = InMemoryIdentityRepository()
    record = repo.find_by_email("manager@slooze.com")
    assert record.identity.role == MANAGER
    assert repo.find_by_email("nobody@slooze.com") is None


def test_repository_lookup_is_case_sensitive():
    repo = InMemoryIdentityRepository()
    assert repo.find_by_email("Manager@Slooze.com") is None


# ── Tests: login ─────────────────────────────────────────────────────

@pytest.mark.parametrize("record", DEFAULT_CREDENTIALS, ids=lambda r: r.email)
def test_login_succeeds_for_every_known_account(record):
    identity = login(Authenticator(delay=0), record.email, record.password)
    assert identity == record.identity
    assert not hasattr(identity, "password")


def test_login_manager_scenario():
    identity = login(Authenticator(delay=0), "manager@slooze.com", "manager123")
    assert identity.role == MANAGER
    assert identity.name == "John Manager"
    assert identity.id == "1"


@pytest.mark.parametrize("email,password", [
    ("manager@slooze.com", "wrong"),
    ("manager@slooze.com", "store123"),
    ("storekeeper@slooze.com", "manager123"),
    ("MANAGER@slooze.com", "manager123"),
    ("manager@slooze.com", "Manager123"),
    ("", ""),
    ("ghost@slooze.com", "manager123"),
])
def test_login_rejects_other_pairs(email, password):
    with pytest.raises(InvalidCredentials, match="Invalid email or password"):
        login(Authenticator(delay=0), email, password)


def test_invalid_credentials_is_a_value_error():
    assert issubclass(InvalidCredentials, ValueError)


def test_login_uses_injected_repository():
    keeper = Identity(id="9", email="k@x.io", name="K", role=STOREKEEPER)
    repo = FakeRepository(CredentialRecord(email="k@x.io", password="pw", identity=keeper))
    auth = Authenticator(repository=repo, delay=0)

    assert login(auth, "k@x.io", "pw") == keeper
    assert repo.lookups == ["k@x.io"]


def test_login_waits_the_delay_even_on_failure():
    auth = Authenticator(delay=0.05)
    start = time.monotonic()
    with pytest.raises(InvalidCredentials):
        login(auth, "manager@slooze.com", "wrong")
    assert time.monotonic() - start >= 0.04


def test_login_is_a_coroutine():
    coro = Authenticator(delay=0).login("manager@slooze.com", "manager123")
    assert asyncio.iscoroutine(coro)
    assert asyncio.run(coro).role == MANAGER
