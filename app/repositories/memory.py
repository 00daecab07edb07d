# app/repositories/memory.py

from typing import List, Optional
from uuid import UUID

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


class MemoryStore:
    """Plain lists shared by the in-memory repositories of one process."""

    def __init__(self):
        self.students: List[Student] = []
        self.officials: List[Official] = []
        self.admins: List[Admin] = []
        self.risks: List[RiskEntry] = []

    def repositories(self) -> Repositories:
        return Repositories(
            identity=InMemoryIdentityDirectory(self),
            risks=InMemoryRiskRegistry(self),
            officials=InMemoryOfficialDirectory(self),
        )


class InMemoryIdentityDirectory(IdentityDirectory):
    def __init__(self, store: MemoryStore):
        self._store = store

    async def list_students(self) -> List[Student]:
        return list(self._store.students)

    async def get_student(self, student_id: str) -> Optional[Student]:
        key = normalize_key(student_id)
        if not key:
            return None
        return next((s for s in self._store.students if normalize_key(s.student_id) == key), None)

    async def find_student_by_username(self, username: str) -> Optional[Student]:
        return next((s for s in self._store.students if s.username == username), None)

    async def find_official_by_username(self, username: str) -> Optional[Official]:
        return next((o for o in self._store.officials if o.username == username), None)

    async def find_admin_by_username(self, username: str) -> Optional[Admin]:
        return next((a for a in self._store.admins if a.username == username), None)


class InMemoryRiskRegistry(RiskRegistry):
    def __init__(self, store: MemoryStore):
        self._store = store

    async def list_risks(self) -> List[RiskEntry]:
        return list(self._store.risks)

    async def get_risk(self, entry_id: UUID) -> Optional[RiskEntry]:
        return next((r for r in self._store.risks if r.id == entry_id), None)

    async def find_all_by_student_id(self, student_id: str) -> List[RiskEntry]:
        key = normalize_key(student_id)
        return [r for r in self._store.risks if normalize_key(r.student_id) == key]

    async def add_risk(self, entry: RiskEntry) -> RiskEntry:
        self._store.risks.append(entry)
        return entry

    async def update_risk(self, entry_id: UUID, changes: dict) -> Optional[RiskEntry]:
        entry = await self.get_risk(entry_id)
        if entry is None:
            return None
        for field, value in changes.items():
            setattr(entry, field, value)
        return entry

    async def remove_risk(self, entry_id: UUID) -> bool:
        entry = await self.get_risk(entry_id)
        if entry is None:
            return False
        self._store.risks = [r for r in self._store.risks if r is not entry]
        return True


class InMemoryOfficialDirectory(OfficialDirectory):
    def __init__(self, store: MemoryStore):
        self._store = store

    async def list_officials(self) -> List[Official]:
        return list(self._store.officials)

    async def get_official(self, official_id: str) -> Optional[Official]:
        key = normalize_key(official_id)
        return next((o for o in self._store.officials if normalize_key(o.official_id) == key), None)

    async def find_by_username(self, username: str) -> Optional[Official]:
        return next((o for o in self._store.officials if o.username == username), None)

    async def add_official(self, official: Official) -> Official:
        self._store.officials.append(official)
        return official

    async def update_official(self, official_id: str, changes: dict) -> Optional[Official]:
        official = await self.get_official(official_id)
        if official is None:
            return None
        for field, value in changes.items():
            setattr(official, field, value)
        return official

    async def remove_official(self, official_id: str) -> bool:
        official = await self.get_official(official_id)
        if official is None:
            return False
        self._store.officials = [o for o in self._store.officials if o is not official]
        return True
