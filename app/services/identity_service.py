# app/services/identity_service.py

from loguru import logger

from app.core.config import settings
from app.core.constants import DASHBOARD_BY_ROLE
from app.core.exceptions import InvalidCredentialsError, ValidationError
from app.core.security import create_access_token, verify_password
from app.models.admin import Admin
from app.models.enums import OfficialRole, UserRole
from app.models.official import Official
from app.models.student import Student
from app.repositories.base import IdentityDirectory
from app.schemas.auth import IdentityResult, TokenWithIdentity


# ============================================================================
# PROFILE -> IDENTITY
# ============================================================================
def _student_identity(student: Student) -> IdentityResult:
    return IdentityResult(
        role=UserRole.Student,
        subject_id=student.student_id,
        name=student.student_name,
        department=student.department,
        profile={
            "student_id": student.student_id,
            "student_name": student.student_name,
            "father_name": student.father_name,
            "grandfather_name": student.grandfather_name,
            "sex": student.sex,
            "department": student.department,
            "year_of_study": student.year_of_study,
            "email": student.email,
        },
    )


def _official_identity(official: Official) -> IdentityResult:
    role = UserRole.Admin if official.role == OfficialRole.Admin else UserRole.DepartmentOfficial
    return IdentityResult(
        role=role,
        subject_id=official.official_id,
        name=official.full_name,
        department=official.department,
        profile={
            "official_id": official.official_id,
            "first_name": official.first_name,
            "last_name": official.last_name,
            "department": official.department,
            "profession": official.profession,
            "email": official.email,
            "phone": official.phone,
        },
    )


def _admin_identity(admin: Admin) -> IdentityResult:
    return IdentityResult(
        role=UserRole.Admin,
        subject_id=admin.admin_id,
        name=admin.name,
        profile={"admin_id": admin.admin_id, "name": admin.name, "email": admin.email},
    )


# ============================================================================
# RESOLVE CREDENTIALS
# ============================================================================
async def resolve_credentials(directory: IdentityDirectory, username: str, password: str) -> IdentityResult:
    """
    Looks the username up in students, then officials, then admins.
    Each collection is matched on username and password together, and the
    first match wins: a username shared by a student and an official with
    the same password always resolves to the student.
    """
    if not (username or "").strip():
        raise ValidationError("Username is required", {"username": "Username is required"})
    if not (password or "").strip():
        raise ValidationError("Password is required", {"password": "Password is required"})

    lookups = (
        (directory.find_student_by_username, _student_identity),
        (directory.find_official_by_username, _official_identity),
        (directory.find_admin_by_username, _admin_identity),
    )
    for find, to_identity in lookups:
        record = await find(username)
        if record is not None and verify_password(password, record.password_hash):
            identity = to_identity(record)
            logger.info(f"Login: {identity.subject_id} as {identity.role.value}")
            return identity

    logger.info("Login failed: invalid credentials")
    raise InvalidCredentialsError()


# ============================================================================
# CREATE LOGIN RESPONSE
# ============================================================================
def dashboard_for(role: UserRole) -> str:
    return DASHBOARD_BY_ROLE[role]


def create_login_response(identity: IdentityResult) -> TokenWithIdentity:
    token = create_access_token(
        subject=identity.subject_id,
        data={
            "role": identity.role.value,
            "name": identity.name,
            "department": identity.department,
        },
    )

    return TokenWithIdentity(
        access_token=token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        identity=identity,
        dashboard=dashboard_for(identity.role),
    )
