# app/api/endpoints/risks.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_repositories
from app.core.constants import RISK_EXPORT_COLUMNS
from app.core.exceptions import (
    ConfirmationRequiredError,
    DuplicateRecordError,
    RiskEntryNotFoundError,
    StudentNotFoundError,
    ValidationError,
)
from app.core.rbac import AllowRoles
from app.models.enums import UserRole
from app.repositories.base import Repositories
from app.schemas.auth import CurrentIdentity
from app.schemas.risk import RiskCreate, RiskFromStudent, RiskRead, RiskUpdate
from app.schemas.student import StudentRead
from app.services import risk_service
from app.services.export_service import export_rows, filter_rows

router = APIRouter(
    prefix="/api/risks",
    tags=["Risk Registry"]
)

# Officials manage the registry; admins pass through the RBAC bypass
allow_officials = AllowRoles(UserRole.DepartmentOfficial)


def _validation_error(e: ValidationError):
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"message": e.message, "errors": e.errors},
    )


# ------------------------------------------------------------
# LIST (with free-text search)
# ------------------------------------------------------------
@router.get("/", response_model=List[RiskRead])
async def list_risks(
    q: Optional[str] = Query(None, description="Search in any column"),
    _: CurrentIdentity = Depends(allow_officials),
    repos: Repositories = Depends(get_repositories),
):
    entries = await risk_service.list_risks(repos.risks)
    if not q:
        return entries
    matching = {row["id"] for row in filter_rows([risk_service.risk_to_row(e) for e in entries], q)}
    return [e for e in entries if str(e.id) in matching]


# ------------------------------------------------------------
# STUDENTS THAT CAN STILL BE FLAGGED
# ------------------------------------------------------------
@router.get("/eligible-students", response_model=List[StudentRead])
async def list_eligible_students(
    _: CurrentIdentity = Depends(allow_officials),
    repos: Repositories = Depends(get_repositories),
):
    return await risk_service.eligible_students(repos.identity, repos.risks)


# ------------------------------------------------------------
# EXPORT (CSV / XLSX)
# ------------------------------------------------------------
@router.get("/export")
async def export_risks(
    format: str = Query("csv"),
    q: Optional[str] = Query(None),
    _: CurrentIdentity = Depends(allow_officials),
    repos: Repositories = Depends(get_repositories),
):
    entries = await risk_service.list_risks(repos.risks)
    rows = filter_rows([risk_service.risk_to_row(e) for e in entries], q)
    try:
        content, media_type, filename = export_rows(rows, RISK_EXPORT_COLUMNS, format, "students_at_risk")
    except ValidationError as e:
        raise _validation_error(e)

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


# ------------------------------------------------------------
# CREATE
# ------------------------------------------------------------
@router.post("/", response_model=RiskRead, status_code=status.HTTP_201_CREATED)
async def create_risk(
    payload: RiskCreate,
    identity: CurrentIdentity = Depends(allow_officials),
    repos: Repositories = Depends(get_repositories),
):
    try:
        return await risk_service.add_risk(repos.risks, payload.model_dump(), actor=identity)
    except ValidationError as e:
        raise _validation_error(e)


@router.post("/from-student", response_model=RiskRead, status_code=status.HTTP_201_CREATED)
async def create_risk_for_student(
    payload: RiskFromStudent,
    identity: CurrentIdentity = Depends(allow_officials),
    repos: Repositories = Depends(get_repositories),
):
    try:
        return await risk_service.add_risk_for_student(
            repos.identity, repos.risks, payload.model_dump(), actor=identity
        )
    except ValidationError as e:
        raise _validation_error(e)
    except StudentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateRecordError as e:
        raise HTTPException(status_code=409, detail=str(e))


# ------------------------------------------------------------
# UPDATE
# ------------------------------------------------------------
@router.put("/{entry_id}", response_model=RiskRead)
async def update_risk(
    entry_id: UUID,
    payload: RiskUpdate,
    _: CurrentIdentity = Depends(allow_officials),
    repos: Repositories = Depends(get_repositories),
):
    try:
        return await risk_service.update_risk(repos.risks, entry_id, payload.model_dump())
    except ValidationError as e:
        raise _validation_error(e)
    except RiskEntryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ------------------------------------------------------------
# DELETE (needs ?confirm=true)
# ------------------------------------------------------------
@router.delete("/{entry_id}")
async def delete_risk(
    entry_id: UUID,
    confirm: bool = Query(False),
    _: CurrentIdentity = Depends(allow_officials),
    repos: Repositories = Depends(get_repositories),
):
    try:
        await risk_service.remove_risk(repos.risks, entry_id, confirm=confirm)
    except ConfirmationRequiredError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except RiskEntryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"detail": "Student removed from risk list"}
