"""
Authentication Routes

Endpoints:
- POST /auth/google - Exchange Google id_token for session
- POST /auth/logout - Clear session
- GET /auth/me - Get current user profile

Auth Flow:
1. Frontend performs Google OAuth flow and receives an id_token
2. Frontend POSTs id_token to /auth/google
3. Backend verifies id_token with Google's public keys
4. Backend upserts user + auth_identity
5. Backend returns JWT (in cookie and response body)

The JWT subject is the user id, which owns every journal row.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Response, status
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token
from sqlalchemy import select

from app.api.deps import CurrentUser, DbSession, create_access_token
from app.config import get_settings
from app.db.models import AuthIdentity, User
from app.errors import UnauthenticatedError
from app.schemas.auth import GoogleAuthRequest, TokenResponse
from app.schemas.user import UserRead
from app.services import notifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()

_GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


def verify_google_token(token: str) -> dict:
    """
    Verify a Google id_token and return its claims.

    Checks signature, expiry, audience and issuer. Raises ValueError when
    any check fails.
    """
    idinfo = google_id_token.verify_oauth2_token(
        token,
        google_requests.Request(),
        settings.google_client_id,
    )
    if idinfo.get("iss") not in _GOOGLE_ISSUERS:
        raise ValueError("Invalid issuer")
    return idinfo


@router.post("/google", response_model=TokenResponse)
async def google_login(
    request: GoogleAuthRequest,
    response: Response,
    db: DbSession,
) -> TokenResponse:
    """
    Exchange Google id_token for a session JWT.

    Flow:
    1. Verify id_token with Google's public keys
    2. Find or create auth_identity by (provider='google', provider_user_id=sub)
    3. Find or create user, link to auth_identity
    4. Return JWT
    """
    try:
        idinfo = verify_google_token(request.id_token)
    except ValueError as e:
        raise UnauthenticatedError(f"Invalid Google id_token: {e}")

    provider_user_id = idinfo["sub"]
    email = idinfo.get("email")
    name = idinfo.get("name", email or "Unknown User")

    # Only trust verified emails for account linking
    if email and not idinfo.get("email_verified", False):
        email = None

    now = datetime.now(timezone.utc)
    is_new_user = False

    result = await db.execute(
        select(AuthIdentity).where(
            AuthIdentity.provider == "google",
            AuthIdentity.provider_user_id == provider_user_id,
        )
    )
    auth_identity = result.scalar_one_or_none()

    if auth_identity:
        auth_identity.last_login_at = now
        if email:
            auth_identity.email = email
        user = await db.get(User, auth_identity.user_id)
    else:
        user = None
        if email:
            result = await db.execute(select(User).where(User.email == email.lower()))
            user = result.scalar_one_or_none()

        if user is None:
            user = User(
                email=email.lower() if email else None,
                name=name,
                created_at=now,
                updated_at=now,
            )
            db.add(user)
            await db.flush()  # Get user.id
            is_new_user = True

        db.add(
            AuthIdentity(
                user_id=user.id,
                provider="google",
                provider_user_id=provider_user_id,
                email=email,
                created_at=now,
                last_login_at=now,
            )
        )

    await db.commit()

    if is_new_user:
        logger.info("Registered user %s", user.id)
        notifier.welcome(notifier.address_of(user), user.name)

    access_token = create_access_token(user.id)
    expires_in = settings.jwt_expire_minutes * 60

    # For cross-domain deployments, use samesite="none" + secure=True
    response.set_cookie(
        key="access_token",
        value=access_token,
        httponly=True,
        secure=settings.cookie_cross_domain or settings.environment != "development",
        samesite="none" if settings.cookie_cross_domain else "lax",
        max_age=expires_in,
    )

    return TokenResponse(
        access_token=access_token,
        expires_in=expires_in,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response) -> None:
    """
    Clear the authentication session.

    This only clears the cookie. A JWT stored elsewhere stays valid until expiry.
    """
    response.delete_cookie(
        key="access_token",
        httponly=True,
        secure=settings.cookie_cross_domain or settings.environment != "development",
        samesite="none" if settings.cookie_cross_domain else "lax",
    )


@router.get("/me", response_model=UserRead)
async def get_me(current_user: CurrentUser) -> UserRead:
    """Get the current authenticated user's profile."""
    return UserRead.model_validate(current_user)
