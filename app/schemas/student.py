# app/schemas/student.py
from pydantic import BaseModel
from typing import Optional
from uuid import UUID


# ------------------------------------------------------------
# STUDENT READ RESPONSE (no credentials)
# ------------------------------------------------------------
class StudentRead(BaseModel):
    id: UUID
    student_id: str
    student_name: str
    father_name: Optional[str] = None
    grandfather_name: Optional[str] = None
    sex: Optional[str] = None
    department: Optional[str] = None
    enrollment_year: Optional[int] = None
    year_of_study: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True
