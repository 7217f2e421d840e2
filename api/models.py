"""
API request and response models for TokenGate REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Separation of concerns: auth/ models = domain truth; api/ models = API contract.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from auth.models import IdentityClaims

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /api/login.

    Both fields are optional at the schema level so the route can answer a
    missing or empty field with 400 "Username and password are required"
    instead of a generic validation error.
    """

    username: Optional[str] = None
    password: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class RootResponse(BaseModel):
    message: str
    version: str
    endpoints: list[str]


class LoginResponse(BaseModel):
    message: str
    token: str


class ProfileUser(BaseModel):
    """Public view of the authenticated identity. Wire name for subject_id is "id"."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    email: str

    @classmethod
    def from_claims(cls, claims: IdentityClaims) -> "ProfileUser":
        return cls(id=claims.subject_id, username=claims.username, email=claims.email)


class ProfileResponse(BaseModel):
    message: str
    user: ProfileUser


class UserData(BaseModel):
    """Serialized with camelCase keys (userId, accessLevel, lastAccessed)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: int
    access_level: str
    last_accessed: str


class UserDataResponse(BaseModel):
    message: str
    data: UserData


class InfoDetail(BaseModel):
    name: str
    description: str
    documentation: str


class InfoResponse(BaseModel):
    message: str
    info: InfoDetail


# ---------------------------------------------------------------------------
# Error envelopes
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Uniform error body. `error` carries exception detail in development only."""

    code: str
    message: str
    error: Optional[str] = None


class NotFoundResponse(BaseModel):
    message: str
    path: str
    method: str
