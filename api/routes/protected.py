"""
api/routes/protected.py -- Routes behind the Bearer token gate.

Routes:
  GET /api/profile   -- identity reconstructed from the token
  GET /api/user-data -- protected per-user data

Both routes depend on require_claims(), which answers 401 before the handler
runs when the Authorization header is missing, malformed, invalid or expired.
The handlers never touch the token themselves.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from api.models import ProfileResponse, ProfileUser, UserData, UserDataResponse
from auth.dependencies import require_claims
from auth.models import IdentityClaims

router = APIRouter()


def _iso_now() -> str:
    # Millisecond precision with a Z suffix, e.g. 2026-10-18T09:30:00.123Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/profile", response_model=ProfileResponse)
async def profile(claims: IdentityClaims = Depends(require_claims)) -> ProfileResponse:
    """Return the identity carried by the caller's token."""
    return ProfileResponse(message="User profile data", user=ProfileUser.from_claims(claims))


@router.get("/user-data", response_model=UserDataResponse)
async def user_data(claims: IdentityClaims = Depends(require_claims)) -> UserDataResponse:
    """Return protected data for the caller. Every token holder is an admin."""
    return UserDataResponse(
        message="This is protected user data",
        data=UserData(user_id=claims.subject_id, access_level="admin", last_accessed=_iso_now()),
    )
