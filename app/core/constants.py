# app/core/constants.py

from app.models.enums import UserRole

# ==========================================================
# DASHBOARD PER ROLE
# ==========================================================
DASHBOARD_BY_ROLE = {
    UserRole.Student: "/clearance-dashboard",
    UserRole.DepartmentOfficial: "/department-admin",
    UserRole.Admin: "/main-admin",
}

# Adding a role without a dashboard fails at import time
_missing = set(UserRole) - set(DASHBOARD_BY_ROLE)
if _missing:
    raise RuntimeError(f"No dashboard configured for roles: {sorted(r.value for r in _missing)}")

# ==========================================================
# CLEARANCE MESSAGES
# ==========================================================
APPROVED_MESSAGE = "You are cleared! You can preview and download your clearance certificate."
REJECTED_MESSAGE = "Please correct the highlighted fields before submitting."
DENIED_TEMPLATE = "Clearance denied: {case}. Please contact the registrar."

# Export columns for the admin tables (password hashes never leave the service)
OFFICIAL_EXPORT_COLUMNS = [
    "official_id", "first_name", "last_name", "role", "department",
    "profession", "education", "email", "phone", "username",
]
RISK_EXPORT_COLUMNS = [
    "id", "student_id", "student_name", "department", "case_description",
    "added_by", "added_by_name", "added_on", "status",
]
