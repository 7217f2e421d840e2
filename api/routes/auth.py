"""
api/routes/auth.py -- Login endpoint.

Routes:
  POST /api/login -- username/password login; returns a signed JWT

Security:
  [C1] authenticate_user() provides timing equalization -- use it, never inline.
  [M5] Cache-Control: no-store on every login response.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.models import ErrorResponse, LoginRequest, LoginResponse
from auth.models import Credential
from auth.store import CredentialStore, authenticate_user
from auth.tokens import create_access_token

logger = logging.getLogger("tokengate.api")

router = APIRouter()


def _no_store(resp: JSONResponse) -> JSONResponse:
    resp.headers["Cache-Control"] = "no-store"  # [M5]
    return resp


@router.post("/login", response_model=LoginResponse)
def login(request: Request, body: Optional[LoginRequest] = None) -> JSONResponse:
    """Check the submitted credential and issue a token on an exact match.

    A missing body, a missing field, and an empty string are all answered with
    400. Wrong username and wrong password share one 401 so the response does
    not reveal which field was wrong.
    """
    body = body or LoginRequest()
    if not body.username or not body.password:
        return _no_store(
            JSONResponse(
                status_code=400,
                content=ErrorResponse(
                    code="missing_login_fields",
                    message="Username and password are required",
                ).model_dump(exclude_none=True),
            )
        )

    store: CredentialStore = request.app.state.credential_store
    user = authenticate_user(store, Credential(username=body.username, password=body.password))
    if user is None:
        logger.info("Failed login for username=%r", body.username)
        return _no_store(
            JSONResponse(
                status_code=401,
                content=ErrorResponse(
                    code="invalid_credentials",
                    message="Invalid credentials",
                ).model_dump(exclude_none=True),
            )
        )

    token = create_access_token(user.to_claims())
    logger.info("Issued token for user_id=%d", user.id)
    return _no_store(
        JSONResponse(
            status_code=200,
            content=LoginResponse(message="Login successful", token=token).model_dump(),
        )
    )
