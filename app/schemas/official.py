from typing import Optional
from uuid import UUID
from pydantic import BaseModel

from app.models.enums import OfficialRole


# ---------------------------------------------------------
# BASE
# ---------------------------------------------------------
class OfficialBase(BaseModel):
    official_id: str = ""
    first_name: str = ""
    last_name: str = ""
    role: OfficialRole = OfficialRole.DepartmentOfficial
    department: Optional[str] = ""
    profession: Optional[str] = ""
    education: Optional[str] = ""
    email: Optional[str] = ""
    phone: Optional[str] = ""
    username: str = ""


# ---------------------------------------------------------
# CREATE / UPDATE (Admin form)
# ---------------------------------------------------------
class OfficialCreate(OfficialBase):
    password: str = ""


class OfficialUpdate(OfficialBase):
    role: Optional[OfficialRole] = None
    # Blank keeps the current password
    password: Optional[str] = None


# ---------------------------------------------------------
# READ (response, never carries the hash)
# ---------------------------------------------------------
class OfficialRead(OfficialBase):
    id: UUID

    class Config:
        from_attributes = True


class AdminSummary(BaseModel):
    total_officials: int
    students_at_risk: int
    risk_entries: int
    storage_mode: str
