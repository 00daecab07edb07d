import uuid

import pytest

from app.core.exceptions import (
    ConfirmationRequiredError,
    DuplicateRecordError,
    RiskEntryNotFoundError,
    StudentNotFoundError,
    ValidationError,
)
from app.core.normalizers import normalize_risk_record
from app.schemas.auth import CurrentIdentity
from app.models.enums import UserRole
from app.services import risk_service

OFFICIAL = CurrentIdentity(
    role=UserRole.DepartmentOfficial, subject_id="OFF001", name="Meron Assefa", department="Library"
)


@pytest.mark.asyncio
async def test_add_then_find_returns_entry(repos):
    entry = await risk_service.add_risk(
        repos.risks,
        {"student_id": "STU001", "department": "Library", "case_description": "Lost book"},
        actor=OFFICIAL,
    )

    found = await repos.risks.find_by_student_id("  stu001 ")
    assert found is not None
    assert found.id == entry.id
    assert found.added_by == "OFF001"
    assert found.added_by_name == "Meron Assefa"
    assert found.status == "atRisk"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["student_id", "department", "case_description"])
async def test_add_requires_fields_and_leaves_registry_unchanged(repos, store, field):
    payload = {"student_id": "STU001", "department": "Library", "case_description": "Lost book"}
    payload[field] = "   "
    before = list(store.risks)

    with pytest.raises(ValidationError) as exc:
        await risk_service.add_risk(repos.risks, payload, actor=OFFICIAL)

    assert field in exc.value.errors
    assert store.risks == before


@pytest.mark.asyncio
async def test_delete_by_id_removes_exactly_that_entry(repos, store):
    first, second, third = list(store.risks)

    await risk_service.remove_risk(repos.risks, first.id, confirm=True)
    await risk_service.remove_risk(repos.risks, third.id, confirm=True)

    assert [r.id for r in store.risks] == [second.id]

    # Deleting the same id again does not touch anything else
    with pytest.raises(RiskEntryNotFoundError):
        await risk_service.remove_risk(repos.risks, first.id, confirm=True)
    assert [r.id for r in store.risks] == [second.id]


@pytest.mark.asyncio
async def test_delete_requires_confirmation(repos, store):
    entry = store.risks[0]

    with pytest.raises(ConfirmationRequiredError):
        await risk_service.remove_risk(repos.risks, entry.id)

    assert entry in store.risks


@pytest.mark.asyncio
async def test_update_keeps_provenance_and_skips_duplicate_check(repos, store):
    entry = store.risks[0]
    original_added_on = entry.added_on

    updated = await risk_service.update_risk(
        repos.risks,
        entry.id,
        {"student_id": "STU004", "department": "Library", "case_description": "Fine paid late", "status": "atRisk"},
    )

    assert updated.student_id == "STU004"
    assert updated.added_by == "OFF001"
    assert updated.added_on == original_added_on
    assert len(await repos.risks.find_blocking("STU004")) == 2


@pytest.mark.asyncio
async def test_update_unknown_entry(repos):
    with pytest.raises(RiskEntryNotFoundError):
        await risk_service.update_risk(
            repos.risks, uuid.uuid4(), {"student_id": "STU001", "department": "X", "case_description": "Y"}
        )


@pytest.mark.asyncio
async def test_add_from_student_refuses_blocked_student(repos, store):
    with pytest.raises(DuplicateRecordError):
        await risk_service.add_risk_for_student(
            repos.identity, repos.risks,
            {"student_id": "STU002", "department": "Finance", "case_description": "Tuition"},
            actor=OFFICIAL,
        )
    assert len(store.risks) == 3


@pytest.mark.asyncio
async def test_add_from_student_fills_name(repos):
    entry = await risk_service.add_risk_for_student(
        repos.identity, repos.risks,
        {"student_id": "stu001", "department": "Finance", "case_description": "Tuition"},
        actor=OFFICIAL,
    )
    assert entry.student_id == "STU001"
    assert entry.student_name == "Abebe Kebede"


@pytest.mark.asyncio
async def test_add_from_student_unknown_student(repos):
    with pytest.raises(StudentNotFoundError):
        await risk_service.add_risk_for_student(
            repos.identity, repos.risks,
            {"student_id": "STU999", "department": "Finance", "case_description": "Tuition"},
        )


@pytest.mark.asyncio
async def test_eligible_students_excludes_blocked(repos):
    eligible = {s.student_id for s in await risk_service.eligible_students(repos.identity, repos.risks)}

    assert "STU002" not in eligible
    assert "STU004" not in eligible
    # resolved entry does not block
    assert {"STU001", "STU003", "BDU/CS/001/16"} <= eligible


def test_legacy_record_is_normalized():
    fields = normalize_risk_record({
        "studentId": " STU010 ", "department": "Library", "riskCase": "Damaged book",
        "addedBy": "OFF001", "addedOn": "2024-11-03",
    })

    assert fields["student_id"] == "STU010"
    assert fields["case_description"] == "Damaged book"
    assert fields["status"] is None
    assert fields["added_on"].year == 2024


def test_status_aliases():
    assert normalize_risk_record({"status": "At Risk"})["status"] == "atRisk"
    assert normalize_risk_record({"status": "cleared"})["status"] == "resolved"


@pytest.mark.asyncio
async def test_timestamps_are_timezone_aware(repos, store):
    entry = await risk_service.add_risk(
        repos.risks,
        {"student_id": "STU001", "department": "Library", "case_description": "Lost book"},
    )

    assert entry.added_on.tzinfo is not None
    assert all(r.added_on.tzinfo is not None for r in store.risks)
    assert all(s.created_at.tzinfo is not None for s in store.students)
    assert all(o.created_at.tzinfo is not None for o in store.officials)


@pytest.mark.asyncio
async def test_explicit_status_is_kept(repos):
    entry = await risk_service.add_risk(
        repos.risks,
        {"student_id": "STU001", "department": "Library", "case_description": "Paid", "status": "resolved"},
    )
    assert entry.status == "resolved"
    assert not entry.is_blocking
