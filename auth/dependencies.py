"""
auth/dependencies.py -- The request gate for protected routes.

Two layers:
  authorize() is a pure decision function: Authorization header value in,
      Allow(claims) or Deny(reason) out. No request object, no shared state,
      safe to call from any number of concurrent requests.

  require_claims() is the FastAPI Depends() wrapper. It feeds the request's
      Authorization header to authorize(), attaches the claims to
      request.state on Allow, and raises HTTP 401 on Deny.

Only the Bearer scheme is accepted:
  Authorization: Bearer <token>

Layer rule: auth/dependencies.py may import from fastapi (for
HTTPException/Request) because this module is part of the FastAPI dependency
injection system. No imports from api/.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from fastapi import HTTPException, Request

from auth.errors import AuthError, AuthFailure, MalformedCarrierError, NoTokenProvidedError
from auth.models import IdentityClaims
from auth.tokens import decode_access_token

logger = logging.getLogger("tokengate.auth")

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Allow:
    claims: IdentityClaims


@dataclass(frozen=True)
class Deny:
    reason: AuthFailure


GateDecision = Union[Allow, Deny]


def extract_bearer(carrier: str | None) -> str:
    """Return the token carried by an Authorization header value.

    Raises NoTokenProvidedError when the header is absent or empty, and
    MalformedCarrierError when it is not "Bearer <token>". The prefix match is
    exact and case-sensitive.
    """
    if not carrier:
        raise NoTokenProvidedError()
    if not carrier.startswith(BEARER_PREFIX):
        raise MalformedCarrierError()
    token = carrier[len(BEARER_PREFIX) :]
    if not token:
        raise MalformedCarrierError()
    return token


def authorize(
    carrier: str | None,
    *,
    secret: str | None = None,
    now: datetime | None = None,
) -> GateDecision:
    """Decide whether a request carrying this Authorization header may proceed."""
    try:
        token = extract_bearer(carrier)
        return Allow(decode_access_token(token, secret=secret, now=now))
    except AuthError as exc:
        return Deny(exc.reason)


def require_claims(request: Request) -> IdentityClaims:
    """Require a valid Bearer token. Raises HTTP 401 if the gate denies the request.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(claims: IdentityClaims = Depends(require_claims)): ...
    """
    decision = authorize(request.headers.get("Authorization"))
    if isinstance(decision, Deny):
        logger.info("Denied %s %s: %s", request.method, request.url.path, decision.reason.value)
        raise HTTPException(
            status_code=401,
            detail={"code": decision.reason.value, "message": decision.reason.message},
            headers={"WWW-Authenticate": "Bearer"},
        )
    request.state.claims = decision.claims
    return decision.claims
