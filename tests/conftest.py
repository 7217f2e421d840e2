"""
tests/conftest.py -- Shared test fixtures for TokenGate.

This module provides:
  - client: TestClient running the real app (real lifespan, real routes)
  - demo_claims: the identity the fixed demo credential maps to
  - auth_headers: Authorization header carrying a fresh valid token

JWT_SECRET must be set before any auth/core import so get_settings() picks
up the test key rather than falling back to the insecure default.
"""

from __future__ import annotations

import os
from collections.abc import Generator

# CRITICAL: Set before any auth/core import so the cached Settings sees them.
os.environ["JWT_SECRET"] = "tokengate-test-secret-0123456789abcdef"
os.environ["ENVIRONMENT"] = "development"

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import IdentityClaims
from auth.store import DEMO_USER
from auth.tokens import create_access_token


@pytest.fixture(scope="module")
def client() -> Generator[TestClient, None, None]:
    """Yield a TestClient for the real app.

    Used as a context manager so the lifespan runs and app.state carries the
    credential store, exactly as in production.
    """
    with TestClient(app, raise_server_exceptions=True) as test_client:
        yield test_client


@pytest.fixture
def demo_claims() -> IdentityClaims:
    return DEMO_USER.to_claims()


@pytest.fixture
def auth_headers(demo_claims: IdentityClaims) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(demo_claims)}"}
