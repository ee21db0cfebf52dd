# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# JWT-based authentication against Supabase Auth.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
# =============================================================================

from app.auth.dependencies import decode_access_token, get_current_user
from app.auth.models import AuthUser, VerifyResponse

__all__ = [
    "decode_access_token",
    "get_current_user",
    "AuthUser",
    "VerifyResponse",
]
