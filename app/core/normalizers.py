# app/core/normalizers.py
#
# Record shapes drifted across versions of the seed data and the admin forms
# (camelCase vs snake_case, "riskCase" vs "case", status present or not).
# Everything entering a directory goes through one of these first.

from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from app.models.enums import OfficialRole, RiskStatus


def pick(raw: Dict[str, Any], *keys: str) -> Any:
    """First non-None value among the given aliases."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_status(value: Any) -> Optional[str]:
    text = clean(value)
    if text is None:
        return None

    aliases = {
        "atrisk": RiskStatus.AtRisk.value,
        "at_risk": RiskStatus.AtRisk.value,
        "at risk": RiskStatus.AtRisk.value,
        "active": RiskStatus.AtRisk.value,
        "resolved": RiskStatus.Resolved.value,
        "cleared": RiskStatus.Resolved.value,
    }
    # Unknown statuses are kept verbatim; they simply do not block
    return aliases.get(text.lower(), text)


def normalize_date(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    for fmt in ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored timezone-aware; naive values are taken as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def normalize_official_role(value: Any) -> OfficialRole:
    if isinstance(value, OfficialRole):
        return value
    text = (clean(value) or "").lower().replace(" ", "_")
    if text == OfficialRole.Admin.value:
        return OfficialRole.Admin
    return OfficialRole.DepartmentOfficial


def normalize_risk_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "student_id": clean(pick(raw, "student_id", "studentId")),
        "student_name": clean(pick(raw, "student_name", "studentName", "name")),
        "department": clean(raw.get("department")),
        "case_description": clean(pick(raw, "case_description", "caseDescription", "riskCase", "risk_case", "case")),
        "added_by": clean(pick(raw, "added_by", "addedBy", "addedByOfficialId")),
        "added_by_name": clean(pick(raw, "added_by_name", "addedByName")),
        "added_on": as_utc(normalize_date(pick(raw, "added_on", "addedOn", "addedOnDate"))),
        "status": normalize_status(raw.get("status")),
    }


def normalize_student_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    year = pick(raw, "enrollment_year", "enrollmentYear")
    return {
        "student_id": clean(pick(raw, "student_id", "studentId")),
        "username": clean(raw.get("username")),
        "student_name": clean(pick(raw, "student_name", "studentName", "name")),
        "father_name": clean(pick(raw, "father_name", "fatherName")),
        "grandfather_name": clean(pick(raw, "grandfather_name", "grandFatherName", "grandfatherName")),
        "sex": clean(pick(raw, "sex", "gender")),
        "department": clean(raw.get("department")),
        "enrollment_year": int(year) if year not in (None, "") else None,
        "year_of_study": clean(pick(raw, "year_of_study", "yearOfStudy")),
        "email": clean(raw.get("email")),
    }


def normalize_official_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "official_id": clean(pick(raw, "official_id", "officialId")),
        "first_name": clean(pick(raw, "first_name", "firstName")),
        "last_name": clean(pick(raw, "last_name", "lastName")),
        "role": normalize_official_role(raw.get("role")),
        "department": clean(raw.get("department")),
        "profession": clean(raw.get("profession")),
        "education": clean(raw.get("education")),
        "email": clean(raw.get("email")),
        "phone": clean(raw.get("phone")),
        "username": clean(raw.get("username")),
    }


def normalize_admin_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "admin_id": clean(pick(raw, "admin_id", "adminId")),
        "name": clean(raw.get("name")),
        "email": clean(raw.get("email")),
        "username": clean(raw.get("username")),
    }
