from sqlmodel import SQLModel, Field, Column
from sqlalchemy import String
from typing import Optional
import uuid


class Admin(SQLModel, table=True):
    __tablename__ = "admins"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    admin_id: str = Field(sa_column=Column(String, nullable=False, unique=True))
    name: str = Field(sa_column=Column(String, nullable=False))
    email: Optional[str] = Field(default=None, sa_column=Column(String, nullable=True))

    username: str = Field(sa_column=Column(String, nullable=False, unique=True, index=True))
    password_hash: str = Field(sa_column=Column(String, nullable=False))
