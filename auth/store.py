"""
auth/store.py -- Credential lookup and the login check.

Pattern: Repository. CredentialStore is the interface route code depends on;
StaticCredentialStore is the only implementation, backed by the single fixed
DEMO_USER record. A database-backed store only needs find_by_username() to
slot in -- the token layer never sees the store.

Security:
  [C1] authenticate_user() compares in constant time and always runs the
       comparison, even for unknown usernames, so response time does not
       reveal whether a username exists.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import hmac
from typing import Protocol

from auth.models import Credential, UserRecord

DEMO_USER = UserRecord(
    id=1,
    username="admin",
    email="admin@example.com",
    password="password123",  # nosec B106 -- fixed demo credential
)

# Compared against when the username is unknown [C1].
_DUMMY_PASSWORD = "tokengate_timing_dummy"


class CredentialStore(Protocol):
    """Lookup interface for identity records."""

    def find_by_username(self, username: str) -> UserRecord | None: ...


class StaticCredentialStore:
    """Read-only store holding a fixed set of records, keyed by username."""

    def __init__(self, *records: UserRecord) -> None:
        self._records = {record.username: record for record in (records or (DEMO_USER,))}

    def find_by_username(self, username: str) -> UserRecord | None:
        return self._records.get(username)


def _secure_equals(left: str, right: str) -> bool:
    # hmac.compare_digest only accepts ASCII str, so compare the UTF-8 bytes.
    return hmac.compare_digest(left.encode("utf-8"), right.encode("utf-8"))


def authenticate_user(store: CredentialStore, credential: Credential) -> UserRecord | None:
    """Return the matching record when username and password are exactly equal.

    Returns None on any mismatch. Never raises for bad input.
    """
    user = store.find_by_username(credential.username)
    if user is None:
        _secure_equals(credential.password, _DUMMY_PASSWORD)  # [C1]
        return None
    if not _secure_equals(credential.password, user.password):
        return None
    return user
