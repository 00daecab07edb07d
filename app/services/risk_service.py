# app/services/risk_service.py

from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import UUID

from loguru import logger

from app.core.exceptions import (
    ConfirmationRequiredError,
    DuplicateRecordError,
    RiskEntryNotFoundError,
    StudentNotFoundError,
    ValidationError,
)
from app.core.normalizers import normalize_risk_record
from app.models.enums import RiskStatus
from app.models.risk import RiskEntry
from app.models.student import Student
from app.repositories.base import IdentityDirectory, RiskRegistry
from app.schemas.auth import CurrentIdentity

REQUIRED_RISK_FIELDS = {
    "student_id": "Student ID is required.",
    "department": "Department is required.",
    "case_description": "Risk case is required.",
}

# Fields an edit may change; provenance (added_by, added_on) stays as recorded
EDITABLE_RISK_FIELDS = {"student_id", "student_name", "department", "case_description", "status"}


def validate_risk_fields(fields: Dict) -> None:
    errors = {
        name: message
        for name, message in REQUIRED_RISK_FIELDS.items()
        if not (fields.get(name) or "").strip()
    }
    if errors:
        raise ValidationError("Please fill in all required fields.", errors)


def risk_to_row(entry: RiskEntry) -> Dict:
    return {
        "id": str(entry.id),
        "student_id": entry.student_id,
        "student_name": entry.student_name,
        "department": entry.department,
        "case_description": entry.case_description,
        "added_by": entry.added_by,
        "added_by_name": entry.added_by_name,
        "added_on": entry.added_on.isoformat() if entry.added_on else None,
        "status": entry.status,
    }


# ------------------------------------------------------------
# QUERIES
# ------------------------------------------------------------
async def list_risks(registry: RiskRegistry) -> List[RiskEntry]:
    return await registry.list_risks()


async def find_blocking(registry: RiskRegistry, student_id: str) -> List[RiskEntry]:
    return await registry.find_blocking(student_id)


async def eligible_students(directory: IdentityDirectory, registry: RiskRegistry) -> List[Student]:
    """Students that can be picked in the "add existing student" flow."""
    students = await directory.list_students()
    eligible = []
    for student in students:
        if not await registry.find_blocking(student.student_id):
            eligible.append(student)
    return eligible


# ------------------------------------------------------------
# MUTATIONS
# ------------------------------------------------------------
async def add_risk(registry: RiskRegistry, payload: Dict, actor: Optional[CurrentIdentity] = None) -> RiskEntry:
    fields = normalize_risk_record(payload)
    validate_risk_fields({k: v or "" for k, v in fields.items() if k in REQUIRED_RISK_FIELDS})

    entry = RiskEntry(
        student_id=fields["student_id"],
        student_name=fields["student_name"],
        department=fields["department"],
        case_description=fields["case_description"],
        status=fields["status"] or RiskStatus.AtRisk.value,
        added_by=actor.subject_id if actor else fields["added_by"],
        added_by_name=actor.name if actor else fields["added_by_name"],
        added_on=fields["added_on"] or datetime.now(timezone.utc),
    )
    entry = await registry.add_risk(entry)
    logger.info(f"Risk entry {entry.id} added for {entry.student_id} by {entry.added_by}")
    return entry


async def add_risk_for_student(
    directory: IdentityDirectory,
    registry: RiskRegistry,
    payload: Dict,
    actor: Optional[CurrentIdentity] = None,
) -> RiskEntry:
    """Add flow driven by picking an existing student; refuses already-blocked students."""
    student = await directory.get_student(payload.get("student_id") or "")
    if student is None:
        raise StudentNotFoundError(payload.get("student_id") or "")

    if await registry.find_blocking(student.student_id):
        raise DuplicateRecordError(f"Student {student.student_id} already has an active risk entry")

    merged = dict(payload)
    merged["student_id"] = student.student_id
    merged["student_name"] = student.student_name
    return await add_risk(registry, merged, actor)


async def update_risk(registry: RiskRegistry, entry_id: UUID, payload: Dict) -> RiskEntry:
    # No duplicate check here: only the add-from-student flow enforces one active entry
    fields = normalize_risk_record(payload)
    validate_risk_fields({k: v or "" for k, v in fields.items() if k in REQUIRED_RISK_FIELDS})

    changes = {k: v for k, v in fields.items() if k in EDITABLE_RISK_FIELDS and v is not None}
    entry = await registry.update_risk(entry_id, changes)
    if entry is None:
        raise RiskEntryNotFoundError("Risk entry not found")

    logger.info(f"Risk entry {entry_id} updated")
    return entry


async def remove_risk(registry: RiskRegistry, entry_id: UUID, confirm: bool = False) -> None:
    if not confirm:
        raise ConfirmationRequiredError("Are you sure you want to remove this student from risk? Pass confirm=true.")

    removed = await registry.remove_risk(entry_id)
    if not removed:
        raise RiskEntryNotFoundError("Risk entry not found")

    logger.info(f"Risk entry {entry_id} removed")
