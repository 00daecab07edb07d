# app/core/rbac.py

from fastapi import Depends, HTTPException, status
from app.api.deps import get_current_identity
from app.models.enums import UserRole
from app.schemas.auth import CurrentIdentity


def AllowRoles(*allowed_roles: UserRole):
    """
    Role gate for routers shared by several roles.
    Admins are institution-wide and always pass; every other role must be
    listed. Roles are the closed UserRole enum, so a typo fails at import.
    """
    allowed = {UserRole(r) for r in allowed_roles}

    async def role_checker(identity: CurrentIdentity = Depends(get_current_identity)) -> CurrentIdentity:
        if identity.role == UserRole.Admin or identity.role in allowed:
            return identity

        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied for role '{identity.role.value}'"
        )

    return role_checker
