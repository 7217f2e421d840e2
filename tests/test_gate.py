"""
tests/test_gate.py -- Unit tests for the request gate.

authorize() is pure, so most of these tests need no app, no client, and no
request object: an Authorization header value goes in, Allow or Deny comes
out. require_claims() is exercised on a bare Starlette Request built from an
ASGI scope.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from auth.dependencies import Allow, Deny, authorize, extract_bearer, require_claims
from auth.errors import AuthFailure, MalformedCarrierError, NoTokenProvidedError
from auth.models import IdentityClaims
from auth.tokens import create_access_token

NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
SECRET = "gate-test-secret-0123456789abcdef0123"


def _request(authorization: str | None = None) -> Request:
    headers = [] if authorization is None else [(b"authorization", authorization.encode("latin-1"))]
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/api/profile",
            "query_string": b"",
            "headers": headers,
        }
    )


class TestExtractBearer:
    """Pulling the token out of the Authorization header value."""

    @pytest.mark.parametrize("carrier", [None, ""])
    def test_absent_header(self, carrier) -> None:
        """A missing or empty header means no token was provided."""
        with pytest.raises(NoTokenProvidedError):
            extract_bearer(carrier)

    @pytest.mark.parametrize("carrier", ["Basic YWRtaW46cGFzcw==", "bearer abc", "Bearer", "Bearer ", "Token abc"])
    def test_wrong_scheme_or_shape(self, carrier: str) -> None:
        """Anything but the exact "Bearer " prefix followed by a token is malformed."""
        with pytest.raises(MalformedCarrierError):
            extract_bearer(carrier)

    def test_returns_text_after_prefix(self) -> None:
        """The token is everything after "Bearer "."""
        assert extract_bearer("Bearer abc.def.ghi") == "abc.def.ghi"


class TestAuthorize:
    """The pure Allow/Deny decision."""

    def test_valid_token_is_allowed(self, demo_claims: IdentityClaims) -> None:
        """A valid unexpired token is allowed with its claims."""
        token = create_access_token(demo_claims, secret=SECRET, now=NOW)
        decision = authorize(f"Bearer {token}", secret=SECRET, now=NOW + timedelta(minutes=30))
        assert decision == Allow(demo_claims)

    def test_missing_header_is_denied(self) -> None:
        """No header is denied with NO_TOKEN."""
        assert authorize(None, secret=SECRET, now=NOW) == Deny(AuthFailure.NO_TOKEN)

    def test_malformed_header_is_denied(self) -> None:
        """A non-Bearer header is denied with MALFORMED_CARRIER."""
        assert authorize("Token abc", secret=SECRET, now=NOW) == Deny(AuthFailure.MALFORMED_CARRIER)

    def test_garbage_token_is_denied(self) -> None:
        """A Bearer value that is not a JWT is denied with INVALID_TOKEN."""
        assert authorize("Bearer not-a-real-token", secret=SECRET, now=NOW) == Deny(AuthFailure.INVALID_TOKEN)

    def test_expired_token_is_denied(self, demo_claims: IdentityClaims) -> None:
        """A token past its expiry is denied with TOKEN_EXPIRED."""
        token = create_access_token(demo_claims, secret=SECRET, now=NOW)
        decision = authorize(f"Bearer {token}", secret=SECRET, now=NOW + timedelta(hours=2))
        assert decision == Deny(AuthFailure.TOKEN_EXPIRED)

    def test_cross_secret_token_is_denied(self, demo_claims: IdentityClaims) -> None:
        """A token signed under another secret is denied with INVALID_TOKEN."""
        token = create_access_token(demo_claims, secret="some-completely-different-secret-value", now=NOW)
        assert authorize(f"Bearer {token}", secret=SECRET, now=NOW) == Deny(AuthFailure.INVALID_TOKEN)

    def test_repeated_calls_agree(self, demo_claims: IdentityClaims) -> None:
        """The same header always yields the same decision."""
        carrier = f"Bearer {create_access_token(demo_claims, secret=SECRET, now=NOW)}"
        decisions = {authorize(carrier, secret=SECRET, now=NOW) for _ in range(5)}
        assert decisions == {Allow(demo_claims)}


class TestRequireClaims:
    """The FastAPI dependency wrapped around authorize()."""

    def test_attaches_claims_to_request_state(self, demo_claims: IdentityClaims) -> None:
        """On Allow the claims are returned and stored on request.state.claims."""
        request = _request(f"Bearer {create_access_token(demo_claims)}")
        claims = require_claims(request)
        assert claims == demo_claims
        assert request.state.claims == demo_claims

    def test_denial_raises_401_and_leaves_state_empty(self) -> None:
        """On Deny a 401 is raised with code, message and a Bearer challenge."""
        request = _request("Bearer not-a-real-token")
        with pytest.raises(HTTPException) as excinfo:
            require_claims(request)
        assert excinfo.value.status_code == 401
        assert excinfo.value.detail == {"code": "invalid_token", "message": "Invalid token"}
        assert excinfo.value.headers == {"WWW-Authenticate": "Bearer"}
        assert not hasattr(request.state, "claims")


class TestFailureMessages:
    @pytest.mark.parametrize(
        ("failure", "message"),
        [
            (AuthFailure.NO_TOKEN, "No token provided"),
            (AuthFailure.MALFORMED_CARRIER, "Invalid token format. Use Bearer <token>"),
            (AuthFailure.TOKEN_EXPIRED, "Token has expired"),
            (AuthFailure.INVALID_TOKEN, "Invalid token"),
        ],
    )
    def test_message(self, failure: AuthFailure, message: str) -> None:
        """Each failure carries the message shown to API clients."""
        assert failure.message == message
