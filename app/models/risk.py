# app/models/risk.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import String, Text, DateTime
from datetime import datetime, timezone
from typing import Optional
import uuid

from app.models.enums import RiskStatus


class RiskEntry(SQLModel, table=True):
    __tablename__ = "risk_entries"

    # Stable identifier: updates and deletes are keyed by this, never by position
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Not unique: the store tolerates several entries per student
    student_id: str = Field(
        sa_column=Column(String, nullable=False, index=True)
    )
    student_name: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    department: str = Field(
        sa_column=Column(String, nullable=False)
    )
    case_description: str = Field(
        sa_column=Column(Text, nullable=False)
    )

    added_by: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    added_by_name: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    added_on: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    # None means a legacy record without a status; those still block clearance
    status: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )

    @property
    def is_blocking(self) -> bool:
        return self.status is None or self.status == RiskStatus.AtRisk.value
