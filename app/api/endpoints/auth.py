# app/api/endpoints/auth.py

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_current_identity, get_repositories
from app.core.exceptions import InvalidCredentialsError, ValidationError
from app.repositories.base import Repositories
from app.schemas.auth import CurrentIdentity, LoginRequest, TokenWithIdentity
from app.services.identity_service import (
    create_login_response,
    dashboard_for,
    resolve_credentials,
)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# -------------------------------------------------------------------
# LOGIN (students, officials and admins share one form)
# -------------------------------------------------------------------
@router.post("/login", response_model=TokenWithIdentity)
async def login(
    payload: LoginRequest,
    repos: Repositories = Depends(get_repositories),
):
    try:
        identity = await resolve_credentials(repos.identity, payload.username, payload.password)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    return create_login_response(identity)


# -------------------------------------------------------------------
# WHO AM I
# -------------------------------------------------------------------
@router.get("/me")
async def me(identity: CurrentIdentity = Depends(get_current_identity)):
    return {
        "identity": identity,
        "dashboard": dashboard_for(identity.role),
    }


# -------------------------------------------------------------------
# LOGOUT (tokens are stateless; the client drops its copy)
# -------------------------------------------------------------------
@router.post("/logout")
async def logout(_: CurrentIdentity = Depends(get_current_identity)):
    return {"detail": "Logged out"}
