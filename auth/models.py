"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, almost no logic). Stores, the token
layer and routes do the work.

All three are frozen: identities are immutable for the process lifetime and
claims are safe to share between concurrent requests.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Credential:
    """A username/password pair as submitted to the login route."""

    username: str
    password: str


@dataclass(frozen=True)
class IdentityClaims:
    """The authenticated principal carried inside every issued token.

    subject_id travels on the wire as the "id" claim.
    """

    subject_id: int
    username: str
    email: str


@dataclass(frozen=True)
class UserRecord:
    """The identity record a credential belongs to.

    password is compared as plain text. Hashing is deliberately absent: the
    only record is a fixed demo identity shipped with the service.
    """

    id: int
    username: str
    email: str
    password: str

    def to_claims(self) -> IdentityClaims:
        return IdentityClaims(subject_id=self.id, username=self.username, email=self.email)
