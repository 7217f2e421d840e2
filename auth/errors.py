"""
auth/errors.py -- Classified authentication failures.

Every failure the request gate can produce maps to exactly one AuthFailure.
The exception classes carry their AuthFailure as a class attribute so the gate
can turn any AuthError into a Deny without a lookup table.

  AuthError
    CarrierError            -- problem with the Authorization header itself
      NoTokenProvidedError
      MalformedCarrierError
    TokenError              -- problem with the token the header carried
      InvalidTokenError
      TokenExpiredError

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from enum import Enum


class AuthFailure(str, Enum):
    """Reason a protected request was denied. The value is the API error code."""

    NO_TOKEN = "no_token"
    MALFORMED_CARRIER = "malformed_carrier"
    TOKEN_EXPIRED = "token_expired"
    INVALID_TOKEN = "invalid_token"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    AuthFailure.NO_TOKEN: "No token provided",
    AuthFailure.MALFORMED_CARRIER: "Invalid token format. Use Bearer <token>",
    AuthFailure.TOKEN_EXPIRED: "Token has expired",
    AuthFailure.INVALID_TOKEN: "Invalid token",
}


class AuthError(Exception):
    """Base class for every authentication failure."""

    reason: AuthFailure = AuthFailure.INVALID_TOKEN

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.reason.message)
        self.detail = detail


class CarrierError(AuthError):
    pass


class NoTokenProvidedError(CarrierError):
    reason = AuthFailure.NO_TOKEN


class MalformedCarrierError(CarrierError):
    reason = AuthFailure.MALFORMED_CARRIER


class TokenError(AuthError):
    pass


class InvalidTokenError(TokenError):
    """Signature mismatch, wrong algorithm, bad structure, or bad claims."""

    reason = AuthFailure.INVALID_TOKEN


class TokenExpiredError(TokenError):
    """Signature is valid but the token is at or past its exp claim."""

    reason = AuthFailure.TOKEN_EXPIRED
