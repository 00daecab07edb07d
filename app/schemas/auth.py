from pydantic import BaseModel
from typing import Any, Dict, Optional

from app.models.enums import UserRole


# -------------------------------------------------------------------
# LOGIN REQUEST
# -------------------------------------------------------------------
class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


# -------------------------------------------------------------------
# RESOLVED IDENTITY
# -------------------------------------------------------------------
class IdentityResult(BaseModel):
    role: UserRole
    subject_id: str
    name: str
    department: Optional[str] = None
    profile: Dict[str, Any] = {}


# -------------------------------------------------------------------
# TOKEN + IDENTITY (login response)
# -------------------------------------------------------------------
class TokenWithIdentity(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    identity: IdentityResult
    dashboard: str


class CurrentIdentity(BaseModel):
    """Claims carried by the bearer token."""
    role: UserRole
    subject_id: str
    name: str
    department: Optional[str] = None
