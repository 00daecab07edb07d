import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from app.core.exceptions import DuplicateRecordError
from app.core.seeding_logic import seed_database
from app.models import admin, official, risk, student  # noqa: F401
from app.models.official import Official
from app.models.risk import RiskEntry
from app.models.enums import DecisionOutcome
from app.repositories.sql import sql_repositories
from app.services.clearance_service import ClearanceWorkflow


async def no_delay(student_id):
    return None


@pytest_asyncio.fixture
async def session(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ccms.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    SessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with SessionLocal() as s:
        await seed_database(s)
        yield s

    await engine.dispose()


@pytest.mark.asyncio
async def test_seeding_is_idempotent(session):
    repos = sql_repositories(session)
    before = len(await repos.risks.list_risks())

    await seed_database(session)

    assert before == 3
    assert len(await repos.risks.list_risks()) == 3
    assert len(await repos.identity.list_students()) == 5


@pytest.mark.asyncio
async def test_student_lookup_is_case_insensitive(session):
    repos = sql_repositories(session)

    found = await repos.identity.get_student("  stu001 ")
    assert found is not None
    assert found.student_name == "Abebe Kebede"
    assert await repos.identity.get_student("") is None


@pytest.mark.asyncio
async def test_risk_read_after_write_and_delete(session):
    repos = sql_repositories(session)

    entry = await repos.risks.add_risk(
        RiskEntry(student_id="STU001", department="Finance", case_description="Tuition", status="atRisk")
    )
    assert (await repos.risks.find_by_student_id("stu001")).id == entry.id

    assert await repos.risks.remove_risk(entry.id) is True
    assert await repos.risks.find_by_student_id("STU001") is None
    assert await repos.risks.remove_risk(entry.id) is False


@pytest.mark.asyncio
async def test_legacy_entry_blocks_in_database(session):
    repos = sql_repositories(session)

    blocking = await repos.risks.find_blocking("STU004")
    assert len(blocking) == 1
    assert blocking[0].status is None


@pytest.mark.asyncio
async def test_workflow_over_database(session):
    repos = sql_repositories(session)
    workflow = ClearanceWorkflow(repos.identity, repos.risks, eligibility_check=no_delay)

    stu = await repos.identity.get_student("STU002")
    request = ClearanceWorkflow.draft(stu).model_copy(
        update={"academic_year": "2024/2025", "semester": "1st", "reason": "Graduation"}
    )

    decision = await workflow.submit(request)
    assert decision.outcome == DecisionOutcome.Denied
    assert "Unpaid library fine" in decision.message


@pytest.mark.asyncio
async def test_duplicate_official_username_is_rejected(session):
    repos = sql_repositories(session)

    with pytest.raises(DuplicateRecordError):
        await repos.officials.add_official(Official(
            official_id="OFF777", first_name="Dup", last_name="User", username="library", password_hash="x",
        ))

    assert len(await repos.officials.list_officials()) == 3
