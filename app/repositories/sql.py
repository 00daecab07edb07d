# app/repositories/sql.py

from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.exceptions import DuplicateRecordError
from app.models.admin import Admin
from app.models.official import Official
from app.models.risk import RiskEntry
from app.models.student import Student
from app.repositories.base import (
    IdentityDirectory,
    OfficialDirectory,
    Repositories,
    RiskRegistry,
    normalize_key,
)


def sql_repositories(session: AsyncSession) -> Repositories:
    return Repositories(
        identity=SqlIdentityDirectory(session),
        risks=SqlRiskRegistry(session),
        officials=SqlOfficialDirectory(session),
    )


# ============================================================================
# IDENTITY DIRECTORY
# ============================================================================
class SqlIdentityDirectory(IdentityDirectory):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_students(self) -> List[Student]:
        result = await self.session.execute(select(Student).order_by(Student.student_id))
        return list(result.scalars().all())

    async def get_student(self, student_id: str) -> Optional[Student]:
        key = normalize_key(student_id)
        if not key:
            return None
        result = await self.session.execute(
            select(Student).where(func.lower(func.trim(Student.student_id)) == key)
        )
        return result.scalars().first()

    async def find_student_by_username(self, username: str) -> Optional[Student]:
        result = await self.session.execute(select(Student).where(Student.username == username))
        return result.scalars().first()

    async def find_official_by_username(self, username: str) -> Optional[Official]:
        result = await self.session.execute(select(Official).where(Official.username == username))
        return result.scalar_one_or_none()

    async def find_admin_by_username(self, username: str) -> Optional[Admin]:
        result = await self.session.execute(select(Admin).where(Admin.username == username))
        return result.scalar_one_or_none()


# ============================================================================
# RISK REGISTRY
# ============================================================================
class SqlRiskRegistry(RiskRegistry):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_risks(self) -> List[RiskEntry]:
        result = await self.session.execute(select(RiskEntry).order_by(RiskEntry.added_on))
        return list(result.scalars().all())

    async def get_risk(self, entry_id: UUID) -> Optional[RiskEntry]:
        return await self.session.get(RiskEntry, entry_id)

    async def find_all_by_student_id(self, student_id: str) -> List[RiskEntry]:
        key = normalize_key(student_id)
        result = await self.session.execute(
            select(RiskEntry)
            .where(func.lower(func.trim(RiskEntry.student_id)) == key)
            .order_by(RiskEntry.added_on)
        )
        return list(result.scalars().all())

    async def add_risk(self, entry: RiskEntry) -> RiskEntry:
        self.session.add(entry)
        await self.session.commit()
        await self.session.refresh(entry)
        return entry

    async def update_risk(self, entry_id: UUID, changes: dict) -> Optional[RiskEntry]:
        entry = await self.get_risk(entry_id)
        if entry is None:
            return None
        for field, value in changes.items():
            setattr(entry, field, value)
        self.session.add(entry)
        await self.session.commit()
        await self.session.refresh(entry)
        return entry

    async def remove_risk(self, entry_id: UUID) -> bool:
        entry = await self.get_risk(entry_id)
        if entry is None:
            return False
        await self.session.delete(entry)
        await self.session.commit()
        return True


# ============================================================================
# OFFICIALS
# ============================================================================
class SqlOfficialDirectory(OfficialDirectory):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_officials(self) -> List[Official]:
        result = await self.session.execute(select(Official).order_by(Official.official_id))
        return list(result.scalars().all())

    async def get_official(self, official_id: str) -> Optional[Official]:
        key = normalize_key(official_id)
        result = await self.session.execute(
            select(Official).where(func.lower(func.trim(Official.official_id)) == key)
        )
        return result.scalars().first()

    async def find_by_username(self, username: str) -> Optional[Official]:
        result = await self.session.execute(select(Official).where(Official.username == username))
        return result.scalar_one_or_none()

    async def add_official(self, official: Official) -> Official:
        self.session.add(official)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateRecordError("Official ID or username already exists")
        await self.session.refresh(official)
        return official

    async def update_official(self, official_id: str, changes: dict) -> Optional[Official]:
        official = await self.get_official(official_id)
        if official is None:
            return None
        for field, value in changes.items():
            setattr(official, field, value)
        self.session.add(official)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateRecordError("Official ID or username already exists")
        await self.session.refresh(official)
        return official

    async def remove_official(self, official_id: str) -> bool:
        official = await self.get_official(official_id)
        if official is None:
            return False
        await self.session.delete(official)
        await self.session.commit()
        return True
