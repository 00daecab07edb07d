# app/repositories/base.py

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from app.models.admin import Admin
from app.models.official import Official
from app.models.risk import RiskEntry
from app.models.student import Student


def normalize_key(value: Optional[str]) -> str:
    """Student ids and usernames compare trimmed and case-insensitive."""
    return (value or "").strip().lower()


class IdentityDirectory(ABC):
    """Read-only view over the three account collections."""

    @abstractmethod
    async def list_students(self) -> List[Student]: ...

    @abstractmethod
    async def get_student(self, student_id: str) -> Optional[Student]: ...

    @abstractmethod
    async def find_student_by_username(self, username: str) -> Optional[Student]: ...

    @abstractmethod
    async def find_official_by_username(self, username: str) -> Optional[Official]: ...

    @abstractmethod
    async def find_admin_by_username(self, username: str) -> Optional[Admin]: ...


class RiskRegistry(ABC):

    @abstractmethod
    async def list_risks(self) -> List[RiskEntry]: ...

    @abstractmethod
    async def get_risk(self, entry_id: UUID) -> Optional[RiskEntry]: ...

    @abstractmethod
    async def find_all_by_student_id(self, student_id: str) -> List[RiskEntry]:
        """Every entry for the student, blocking or not, in insertion order."""

    @abstractmethod
    async def add_risk(self, entry: RiskEntry) -> RiskEntry: ...

    @abstractmethod
    async def update_risk(self, entry_id: UUID, changes: dict) -> Optional[RiskEntry]: ...

    @abstractmethod
    async def remove_risk(self, entry_id: UUID) -> bool: ...

    async def find_blocking(self, student_id: str) -> List[RiskEntry]:
        entries = await self.find_all_by_student_id(student_id)
        return [e for e in entries if e.is_blocking]

    async def find_by_student_id(self, student_id: str) -> Optional[RiskEntry]:
        blocking = await self.find_blocking(student_id)
        return blocking[0] if blocking else None


class OfficialDirectory(ABC):

    @abstractmethod
    async def list_officials(self) -> List[Official]: ...

    @abstractmethod
    async def get_official(self, official_id: str) -> Optional[Official]: ...

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[Official]: ...

    @abstractmethod
    async def add_official(self, official: Official) -> Official: ...

    @abstractmethod
    async def update_official(self, official_id: str, changes: dict) -> Optional[Official]: ...

    @abstractmethod
    async def remove_official(self, official_id: str) -> bool: ...


class Repositories:
    """The three repositories handed to services for one request."""

    def __init__(self, identity: IdentityDirectory, risks: RiskRegistry, officials: OfficialDirectory):
        self.identity = identity
        self.risks = risks
        self.officials = officials
