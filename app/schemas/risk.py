from pydantic import BaseModel
from typing import Optional
from uuid import UUID
from datetime import datetime


# ============================================================
# CREATE / UPDATE (official or admin form)
# ============================================================
class RiskCreate(BaseModel):
    student_id: str = ""
    student_name: Optional[str] = None
    department: str = ""
    case_description: str = ""
    status: Optional[str] = "atRisk"


class RiskUpdate(RiskCreate):
    pass


# "Select existing student" flow: the student record supplies id and name
class RiskFromStudent(BaseModel):
    student_id: str
    department: str = ""
    case_description: str = ""


# ============================================================
# READ
# ============================================================
class RiskRead(BaseModel):
    id: UUID
    student_id: str
    student_name: Optional[str] = None
    department: str
    case_description: str
    added_by: Optional[str] = None
    added_by_name: Optional[str] = None
    added_on: datetime
    status: Optional[str] = None
    is_blocking: bool

    class Config:
        from_attributes = True
