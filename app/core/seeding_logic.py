from datetime import datetime, timezone

from loguru import logger
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.normalizers import (
    normalize_admin_record,
    normalize_official_record,
    normalize_risk_record,
    normalize_student_record,
)
from app.core.security import hash_password
from app.models.admin import Admin
from app.models.official import Official
from app.models.risk import RiskEntry
from app.models.student import Student
from app.repositories.memory import MemoryStore

# ----------------------------------------------------------------
# 1. DEFINE STATIC DATA
# Kept in the shape the front-end mock files used; normalised on load.
# ----------------------------------------------------------------

STUDENTS_DATA = [
    {
        "studentId": "STU001", "username": "abebe", "password": "abebe123",
        "studentName": "Abebe Kebede", "fatherName": "Kebede Alemu", "grandFatherName": "Alemu Tesfaye",
        "sex": "Male", "department": "Computer Science", "enrollmentYear": 2021, "yearOfStudy": "IV",
        "email": "abebe.kebede@students.bdu.edu.et",
    },
    {
        "studentId": "STU002", "username": "selam", "password": "selam123",
        "studentName": "Selam Tadesse", "fatherName": "Tadesse Bekele", "grandFatherName": "Bekele Worku",
        "sex": "Female", "department": "Information Systems", "enrollmentYear": 2022, "yearOfStudy": "III",
        "email": "selam.tadesse@students.bdu.edu.et",
    },
    {
        "studentId": "STU003", "username": "dawit", "password": "dawit123",
        "studentName": "Dawit Mengistu", "fatherName": "Mengistu Haile", "grandFatherName": "Haile Gebre",
        "sex": "Male", "department": "Civil Engineering", "enrollmentYear": 2020, "yearOfStudy": "IV",
    },
    {
        "studentId": "STU004", "username": "hana", "password": "hana123",
        "studentName": "Hana Girma", "fatherName": "Girma Ayele", "grandFatherName": "Ayele Desta",
        "sex": "Female", "department": "Biology", "enrollmentYear": 2023, "yearOfStudy": "II",
    },
    {
        "studentId": "BDU/CS/001/16", "username": "yonas", "password": "yonas123",
        "studentName": "Yonas Fikru", "fatherName": "Fikru Lemma", "grandFatherName": "Lemma Asfaw",
        "sex": "Male", "department": "Computer Science", "enrollmentYear": 2024, "yearOfStudy": "I",
    },
]

OFFICIALS_DATA = [
    {
        "officialId": "OFF001", "firstName": "Meron", "lastName": "Assefa", "role": "department_official",
        "department": "Library", "profession": "Librarian", "education": "MSc Library Science",
        "email": "meron.assefa@bdu.edu.et", "phone": "0911000001", "username": "library", "password": "library123",
    },
    {
        "officialId": "OFF002", "firstName": "Tesfaye", "lastName": "Wolde", "role": "department_official",
        "department": "Laboratories", "profession": "Lab Coordinator", "education": "BSc Chemistry",
        "email": "tesfaye.wolde@bdu.edu.et", "phone": "0911000002", "username": "labs", "password": "labs123",
    },
    {
        "officialId": "OFF003", "firstName": "Almaz", "lastName": "Bekele", "role": "admin",
        "department": "Registrar", "profession": "Registrar Officer", "education": "MA Public Administration",
        "email": "almaz.bekele@bdu.edu.et", "phone": "0911000003", "username": "registrar", "password": "registrar123",
    },
]

ADMINS_DATA = [
    {"adminId": "ADM001", "name": "Main Administrator", "email": "admin@bdu.edu.et",
     "username": "admin", "password": "admin123"},
]

RISKS_DATA = [
    {"studentId": "STU002", "name": "Selam Tadesse", "department": "Library",
     "case": "Unpaid library fine", "addedBy": "OFF001", "addedOn": "2025-05-12", "status": "atRisk"},
    # Legacy shape: "riskCase" and no status; still blocks
    {"studentId": "STU004", "name": "Hana Girma", "department": "Laboratories",
     "riskCase": "Unreturned laboratory equipment", "addedBy": "OFF002", "addedOn": "2025-06-02"},
    {"studentId": "STU003", "name": "Dawit Mengistu", "department": "Library",
     "case": "Overdue book returned", "addedBy": "OFF001", "addedOn": "2025-03-20", "status": "resolved"},
]


# ----------------------------------------------------------------
# 2. BUILD RECORDS
# ----------------------------------------------------------------
def build_students():
    students = []
    for raw in STUDENTS_DATA:
        fields = normalize_student_record(raw)
        students.append(Student(**fields, password_hash=hash_password(raw["password"])))
    return students


def build_officials():
    officials = []
    for raw in OFFICIALS_DATA:
        fields = normalize_official_record(raw)
        officials.append(Official(**fields, password_hash=hash_password(raw["password"])))
    return officials


def build_admins():
    admins = []
    for raw in ADMINS_DATA:
        fields = normalize_admin_record(raw)
        admins.append(Admin(**fields, password_hash=hash_password(raw["password"])))
    return admins


def build_risks():
    risks = []
    for raw in RISKS_DATA:
        fields = normalize_risk_record(raw)
        fields["added_on"] = fields["added_on"] or datetime.now(timezone.utc)
        risks.append(RiskEntry(**fields))
    return risks


def build_seeded_store() -> MemoryStore:
    """Fresh in-memory store holding the bundled data."""
    store = MemoryStore()
    store.students = build_students()
    store.officials = build_officials()
    store.admins = build_admins()
    store.risks = build_risks()
    return store


# ----------------------------------------------------------------
# 3. SEED DATABASE (only empty tables)
# ----------------------------------------------------------------
async def _is_empty(session: AsyncSession, model) -> bool:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one() == 0


async def seed_database(session: AsyncSession):
    seeded = []
    for name, model, builder in (
        ("students", Student, build_students),
        ("officials", Official, build_officials),
        ("admins", Admin, build_admins),
        ("risk_entries", RiskEntry, build_risks),
    ):
        if await _is_empty(session, model):
            session.add_all(builder())
            seeded.append(name)

    if not seeded:
        logger.info("Seed data already present. Skipping.")
        return

    await session.commit()
    logger.success(f"Seeded tables: {', '.join(seeded)}")
