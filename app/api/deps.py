# app/api/deps.py

from typing import AsyncGenerator
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import decode_token
from app.core.database import get_session
from app.core.storage import storage
from app.models.enums import UserRole
from app.repositories.base import Repositories
from app.repositories.sql import sql_repositories
from app.schemas.auth import CurrentIdentity


# ------------------------------------------------------------
# HTTP Bearer Authentication
# ------------------------------------------------------------
bearer_scheme = HTTPBearer(auto_error=True)


# ------------------------------------------------------------
# DB Session
# ------------------------------------------------------------
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


# ------------------------------------------------------------
# Repositories (database, or the in-memory fallback when degraded)
# ------------------------------------------------------------
async def get_repositories(
    session: AsyncSession = Depends(get_db_session),
) -> Repositories:
    if storage.degraded:
        return storage.memory.repositories()
    return sql_repositories(session)


# ------------------------------------------------------------
# Current identity from JWT
# ------------------------------------------------------------
async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentIdentity:

    try:
        payload = decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Session expired. Please log in again.")
    except jwt.InvalidTokenError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Could not validate credentials")

    subject = payload.get("sub")
    role = payload.get("role")
    if not subject or role not in {r.value for r in UserRole}:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token payload")

    return CurrentIdentity(
        role=UserRole(role),
        subject_id=subject,
        name=payload.get("name") or subject,
        department=payload.get("department"),
    )


# ------------------------------------------------------------
# Role-based access control (exact roles, no bypass)
# ------------------------------------------------------------
def role_required(*allowed_roles: UserRole):
    """
    Enforces that the current identity has one of the allowed roles.
    """
    allowed = set(allowed_roles)

    async def checker(identity: CurrentIdentity = Depends(get_current_identity)):
        if identity.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied for role '{identity.role.value}'"
            )
        return identity

    return checker


# ------------------------------------------------------------
# Exposed dependencies for routers
# ------------------------------------------------------------
require_admin = role_required(UserRole.Admin)
require_student = role_required(UserRole.Student)
