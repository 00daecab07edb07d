# app/models/official.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import String, DateTime
from sqlalchemy import Enum as SAEnum
from datetime import datetime, timezone
from typing import Optional
import uuid

from app.models.enums import OfficialRole


class Official(SQLModel, table=True):
    __tablename__ = "officials"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    official_id: str = Field(
        sa_column=Column(String, nullable=False, unique=True, index=True)
    )

    first_name: str = Field(sa_column=Column(String, nullable=False))
    last_name: str = Field(sa_column=Column(String, nullable=False))

    # department_official or admin
    role: OfficialRole = Field(
        default=OfficialRole.DepartmentOfficial,
        sa_column=Column(
            SAEnum(OfficialRole, name="official_role", values_callable=lambda e: [m.value for m in e]),
            nullable=False,
        )
    )

    department: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    profession: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    education: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    email: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))
    phone: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    username: str = Field(sa_column=Column(String, nullable=False, unique=True, index=True))
    password_hash: str = Field(sa_column=Column(String, nullable=False))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
