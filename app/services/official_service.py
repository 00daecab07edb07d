# app/services/official_service.py

from typing import Dict, List, Optional

from loguru import logger

from app.core.config import settings
from app.core.exceptions import (
    ConfirmationRequiredError,
    DuplicateRecordError,
    OfficialNotFoundError,
    ValidationError,
)
from app.core.normalizers import normalize_official_record
from app.core.security import hash_password
from app.models.official import Official
from app.repositories.base import OfficialDirectory, RiskRegistry


def _label(field: str) -> str:
    return field.replace("_", " ").capitalize()


def validate_official_fields(payload: Dict, required: Optional[List[str]] = None) -> None:
    required = settings.OFFICIAL_REQUIRED_FIELDS if required is None else required
    errors = {}
    for field in required:
        value = payload.get(field)
        if value is None or not str(value).strip():
            errors[field] = f"{_label(field)} is required."
    if errors:
        raise ValidationError("Please fill in all required fields.", errors)


def official_to_row(official: Official) -> Dict:
    return {
        "official_id": official.official_id,
        "first_name": official.first_name,
        "last_name": official.last_name,
        "role": official.role.value if hasattr(official.role, "value") else official.role,
        "department": official.department,
        "profession": official.profession,
        "education": official.education,
        "email": official.email,
        "phone": official.phone,
        "username": official.username,
    }


# ============================================================================
# READ
# ============================================================================
async def list_officials(directory: OfficialDirectory) -> List[Official]:
    return await directory.list_officials()


async def get_official(directory: OfficialDirectory, official_id: str) -> Official:
    official = await directory.get_official(official_id)
    if official is None:
        raise OfficialNotFoundError("Official not found")
    return official


# ============================================================================
# CREATE
# ============================================================================
async def create_official(directory: OfficialDirectory, payload: Dict) -> Official:
    validate_official_fields(payload)
    fields = normalize_official_record(payload)

    if await directory.get_official(fields["official_id"]):
        raise DuplicateRecordError(f"Official ID '{fields['official_id']}' already exists")
    if await directory.find_by_username(fields["username"]):
        raise DuplicateRecordError(f"Username '{fields['username']}' is already taken")

    official = Official(**fields, password_hash=hash_password(payload["password"]))
    official = await directory.add_official(official)
    logger.success(f"Official {official.official_id} created")
    return official


# ============================================================================
# UPDATE
# ============================================================================
async def update_official(directory: OfficialDirectory, official_id: str, payload: Dict) -> Official:
    required = [f for f in settings.OFFICIAL_REQUIRED_FIELDS if f != "password"]
    validate_official_fields(payload, required)

    current = await directory.get_official(official_id)
    if current is None:
        raise OfficialNotFoundError("Official not found")

    fields = normalize_official_record(payload)

    other = await directory.get_official(fields["official_id"]) if fields["official_id"] else None
    if other is not None and other.id != current.id:
        raise DuplicateRecordError(f"Official ID '{fields['official_id']}' already exists")
    other = await directory.find_by_username(fields["username"]) if fields["username"] else None
    if other is not None and other.id != current.id:
        raise DuplicateRecordError(f"Username '{fields['username']}' is already taken")

    changes = {k: v for k, v in fields.items() if v is not None}
    # The edit form has no role input; keep the current role unless one is sent
    if payload.get("role") is None:
        changes.pop("role", None)
    password = (payload.get("password") or "").strip()
    if password:
        changes["password_hash"] = hash_password(password)

    official = await directory.update_official(official_id, changes)
    logger.info(f"Official {official_id} updated")
    return official


# ============================================================================
# DELETE
# ============================================================================
async def delete_official(directory: OfficialDirectory, official_id: str, confirm: bool = False) -> None:
    if not confirm:
        raise ConfirmationRequiredError("Are you sure you want to delete this official? Pass confirm=true.")

    removed = await directory.remove_official(official_id)
    if not removed:
        raise OfficialNotFoundError("Official not found")
    logger.info(f"Official {official_id} deleted")


# ============================================================================
# DASHBOARD COUNTERS
# ============================================================================
async def admin_summary(directory: OfficialDirectory, registry: RiskRegistry) -> Dict:
    officials = await directory.list_officials()
    risks = await registry.list_risks()
    blocked = {r.student_id.strip().lower() for r in risks if r.is_blocking}
    return {
        "total_officials": len(officials),
        "students_at_risk": len(blocked),
        "risk_entries": len(risks),
    }
