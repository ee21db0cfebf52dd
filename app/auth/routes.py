# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Sign-up and login happen client-side against Supabase Auth. This route
# only lets a client check that its stored token is still accepted.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, VerifyResponse

router = APIRouter()


@router.get("/verify", response_model=VerifyResponse)
async def verify_token(user: AuthUser = Depends(get_current_user)) -> VerifyResponse:
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return VerifyResponse(valid=True, user_id=str(user.id), email=user.email)
