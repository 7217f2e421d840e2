"""
api/routes/public.py -- Unauthenticated informational endpoints.

Routes:
  GET /api/info -- static description of the service
"""

from __future__ import annotations

from fastapi import APIRouter

from api.models import InfoDetail, InfoResponse

router = APIRouter()


@router.get("/info", response_model=InfoResponse)
async def info() -> InfoResponse:
    return InfoResponse(
        message="Public information endpoint",
        info=InfoDetail(
            name="TokenGate",
            description="A demonstration of JWT-based authentication",
            documentation="Check README.md for full documentation",
        ),
    )
