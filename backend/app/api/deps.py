"""
FastAPI Dependencies for Authentication and Authorization.

Key patterns:
1. get_current_user: Extracts and validates JWT, returns User object
2. Owner-scoped queries: every service function takes owner_id explicitly
3. No global "current user" state - always pass the owner explicitly

Security model:
- JWT stored in HttpOnly cookie (recommended) or Authorization header
- Listing and generation are scoped by user_id at the SQL level
- Fetch-by-id checks existence first (404), then ownership (403)
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated, TypeVar
from uuid import UUID

from fastapi import Cookie, Depends, Header, Query
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db.models import User
from app.db.session import get_db
from app.errors import AccessDeniedError, NotFoundError, UnauthenticatedError
from app.schemas.pagination import PageParams

settings = get_settings()

ModelT = TypeVar("ModelT")


# =============================================================================
# JWT UTILITIES
# =============================================================================


def create_access_token(user_id: UUID) -> str:
    """
    Create a JWT access token for a user.

    Token payload contains:
    - sub: user_id as string (standard JWT subject claim)
    - exp: expiration timestamp

    We do NOT store sensitive data in the JWT (email, name, etc.).
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {
        "sub": str(user_id),
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID | None:
    """
    Decode and validate a JWT access token.

    Returns user_id if valid, None if invalid/expired.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        user_id_str = payload.get("sub")
        if user_id_str is None:
            return None
        return UUID(user_id_str)
    except (JWTError, ValueError):
        return None


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


async def get_token_from_request(
    authorization: Annotated[str | None, Header()] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> str:
    """
    Extract JWT token from request.

    Supports two methods (in order of preference):
    1. HttpOnly cookie named 'access_token'
    2. Authorization header: 'Bearer <token>'
    """
    if access_token:
        return access_token

    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    raise UnauthenticatedError("Not authenticated.")


async def get_current_user(
    token: Annotated[str, Depends(get_token_from_request)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Resolve the request's credentials to the owning user.

    This is the primary authentication dependency. Use it in route handlers:

        @router.get("/entries")
        async def list_entries(current_user: CurrentUser, ...):
            ...

    Raises 401 if:
    - Token is missing, invalid, or expired
    - User no longer exists in database
    """
    user_id = decode_access_token(token)
    if user_id is None:
        raise UnauthenticatedError()

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise UnauthenticatedError()

    return user


# OFFSET is a signed 64-bit integer in both Postgres and SQLite
MAX_PAGE = (2**63 - 1) // settings.max_page_size


def get_page_params(
    page: Annotated[int, Query(ge=0, le=MAX_PAGE, description="Zero-based page index.")] = 0,
    size: Annotated[int | None, Query(ge=1, description="Page size.")] = None,
) -> PageParams:
    """Pagination query parameters, capped at the configured maximum."""
    if size is None:
        size = settings.default_page_size
    return PageParams(page=page, size=min(size, settings.max_page_size))


# Type aliases for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
Pagination = Annotated[PageParams, Depends(get_page_params)]


# =============================================================================
# AUTHORIZATION HELPERS
# =============================================================================


def require_owner(resource_user_id: UUID, owner_id: UUID) -> None:
    """
    Verify the requesting owner owns the resource.

        entry = await db.get(DailyEntry, entry_id)
        if entry is None:
            raise NotFoundError(...)
        require_owner(entry.user_id, owner_id)  # Raises 403 if not owner

    We return 403 (not 404) when the resource belongs to someone else.
    This reveals resource existence but is clearer for clients.
    """
    if resource_user_id != owner_id:
        raise AccessDeniedError()


async def get_owned_resource(
    db: AsyncSession,
    model: type[ModelT],
    resource_id: UUID,
    owner_id: UUID,
    *,
    resource_name: str,
) -> ModelT:
    """
    Fetch a resource by ID, then check ownership.

    Order matters: a missing id is 404 regardless of owner, an existing
    resource owned by someone else is 403. No field is read or written
    before both checks pass.
    """
    resource = await db.get(model, resource_id)
    if resource is None:
        raise NotFoundError(resource_name, resource_id)
    require_owner(resource.user_id, owner_id)
    return resource
