"""
api/routes/system.py -- Liveness and auth smoke-test endpoints.

Routes:
  GET /api/health   -- liveness probe (public)
  GET /api/public   -- public ping (public)
  GET /api/private  -- echoes the resolved identity (requires auth)

/api/private is the quickest way to check a token: it answers with the user the
token resolves to, or with the Unauthorized error body.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.models import MessageResponse, UserMessageResponse, UserRecord
from auth.dependencies import get_current_user
from auth.models import User

# Auth policy:
# - GET /api/health:   public -- load balancers and monitors must reach it
# - GET /api/public:   public
# - GET /api/private:  requires auth (get_current_user)
router = APIRouter()


@router.get("/health", response_model=MessageResponse, tags=["Health"])
async def health() -> MessageResponse:
    """Return a fixed message while the server is up."""
    return MessageResponse(message="Server is healthy")


@router.get("/public", response_model=MessageResponse)
async def public() -> MessageResponse:
    return MessageResponse(message="This is a public endpoint")


@router.get("/private", response_model=UserMessageResponse)
def private(current_user: User = Depends(get_current_user)) -> UserMessageResponse:
    return UserMessageResponse(
        message="This is a private route, please log in",
        user=UserRecord.from_user(current_user),
    )
