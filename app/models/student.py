from sqlmodel import SQLModel, Field, Column
from sqlalchemy import String
from datetime import datetime, timezone
from typing import Optional
import uuid


class Student(SQLModel, table=True):
    __tablename__ = "students"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # University registration number, e.g. STU001 or BDU/CS/001/16
    student_id: str = Field(
        sa_column=Column(String, nullable=False, unique=True, index=True)
    )

    username: str = Field(
        sa_column=Column(String, nullable=False, index=True)
    )
    password_hash: str = Field(
        sa_column=Column(String, nullable=False)
    )

    student_name: str = Field(
        sa_column=Column(String, nullable=False)
    )
    father_name: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    grandfather_name: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    sex: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    department: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )

    # Enrollment metadata
    enrollment_year: Optional[int] = Field(default=None)
    year_of_study: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    email: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
