"""
auth/tokens.py -- JWT issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with JWT_SECRET and carry
       id, username, email, iat and exp. No server-side session state -- all
       state needed for verification travels inside the token.

  Verification order: signature first, expiry second. An expired token whose
       signature does not check out is InvalidTokenError, never
       TokenExpiredError, so callers cannot learn anything about forged tokens.

  Expiry is checked here rather than by python-jose so `now` can be injected:
       a token is expired when now >= exp (python-jose only rejects now > exp).

  Signature segment must be canonical base64url. The decoder ignores the
       spare low bits of the final character, so without this check two
       different strings could carry the same signature [T1].

  JWT_SECRET: sourced from core.config.get_settings(). Every function takes an
       optional `secret` override so a token signed under one secret can be
       checked against another.

Layer rule: no imports from api/. Import from core/ is allowed -- core/ is the
kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode

from auth.errors import InvalidTokenError, TokenExpiredError
from auth.models import IdentityClaims
from core.config import get_settings

logger = logging.getLogger("tokengate.auth")

ALGORITHM = "HS256"


def _resolve_now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def _resolve_secret(secret: str | None) -> str:
    return secret if secret is not None else get_settings().jwt_secret


# ---------------------------------------------------------------------------
# Issue
# ---------------------------------------------------------------------------


def create_access_token(
    claims: IdentityClaims,
    *,
    secret: str | None = None,
    expire_seconds: int = 0,
    now: datetime | None = None,
) -> str:
    """Encode a signed JWT for the given identity.

    Args:
        claims:         The authenticated principal. Not validated here -- the
                        credential check happens before this is called.
        secret:         Signing key. Defaults to Settings.jwt_secret.
        expire_seconds: Validity window. If 0 (default), uses
                        Settings.token_expire_seconds (1 hour).
        now:            Issuance instant. Defaults to the current UTC time.
    """
    duration = expire_seconds if expire_seconds > 0 else get_settings().token_expire_seconds
    issued_at = int(_resolve_now(now).timestamp())
    payload = {
        "id": claims.subject_id,
        "username": claims.username,
        "email": claims.email,
        "iat": issued_at,
        "exp": issued_at + duration,
    }
    return jwt.encode(payload, _resolve_secret(secret), algorithm=ALGORITHM)


# ---------------------------------------------------------------------------
# Verify
# ---------------------------------------------------------------------------


def decode_access_token(
    token: str,
    *,
    secret: str | None = None,
    now: datetime | None = None,
) -> IdentityClaims:
    """Verify a JWT and return the identity it carries.

    Raises:
        InvalidTokenError: bad structure, non-canonical or mismatched
            signature, disallowed algorithm, or missing/mistyped claims.
        TokenExpiredError: signature valid but now >= exp.
    """
    _check_signature_encoding(token)
    try:
        payload = jwt.decode(
            token,
            _resolve_secret(secret),
            algorithms=[ALGORITHM],
            options={"verify_exp": False},
        )
    except JWTError as exc:
        logger.debug("JWT rejected: %s", exc)
        raise InvalidTokenError(str(exc)) from exc

    claims = _claims_from_payload(payload)
    exp = payload.get("exp")
    if not _is_number(exp):
        raise InvalidTokenError("Token has no usable exp claim.")
    if _resolve_now(now).timestamp() >= exp:
        raise TokenExpiredError()
    return claims


def _check_signature_encoding(token: str) -> None:
    """Reject tokens whose signature segment is not canonical base64url [T1]."""
    parts = token.split(".")
    if len(parts) != 3:
        raise InvalidTokenError("Token must have three dot-separated segments.")
    signature = parts[2]
    try:
        raw = base64url_decode(signature.encode("ascii"))
    except ValueError as exc:
        # binascii.Error and UnicodeEncodeError are both ValueError subclasses
        raise InvalidTokenError("Signature segment is not base64url.") from exc
    if not raw or base64url_encode(raw).decode("ascii") != signature:
        raise InvalidTokenError("Signature segment is not canonical base64url.")


def _claims_from_payload(payload: dict[str, Any]) -> IdentityClaims:
    subject_id = payload.get("id")
    username = payload.get("username")
    email = payload.get("email")
    if not isinstance(subject_id, int) or isinstance(subject_id, bool):
        raise InvalidTokenError("Token id claim must be an integer.")
    if not isinstance(username, str) or not isinstance(email, str):
        raise InvalidTokenError("Token username and email claims must be strings.")
    return IdentityClaims(subject_id=subject_id, username=username, email=email)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
