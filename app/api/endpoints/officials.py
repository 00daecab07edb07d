# app/api/endpoints/officials.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_repositories, require_admin
from app.core.constants import OFFICIAL_EXPORT_COLUMNS
from app.core.exceptions import (
    ConfirmationRequiredError,
    DuplicateRecordError,
    OfficialNotFoundError,
    ValidationError,
)
from app.repositories.base import Repositories
from app.schemas.auth import CurrentIdentity
from app.schemas.official import OfficialCreate, OfficialRead, OfficialUpdate
from app.services import official_service
from app.services.export_service import export_rows, filter_rows

router = APIRouter(
    prefix="/api/officials",
    tags=["Admin: Officials"]
)


def _validation_error(e: ValidationError):
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"message": e.message, "errors": e.errors},
    )


# ----------------------------------------------------------------
# LIST / SEARCH
# ----------------------------------------------------------------
@router.get("/", response_model=List[OfficialRead])
async def list_officials(
    q: Optional[str] = Query(None, description="Search in any column"),
    _: CurrentIdentity = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
):
    officials = await official_service.list_officials(repos.officials)
    if not q:
        return officials
    matching = {
        row["official_id"]
        for row in filter_rows([official_service.official_to_row(o) for o in officials], q)
    }
    return [o for o in officials if o.official_id in matching]


# ----------------------------------------------------------------
# EXPORT (CSV / XLSX)
# ----------------------------------------------------------------
@router.get("/export")
async def export_officials(
    format: str = Query("csv"),
    q: Optional[str] = Query(None),
    _: CurrentIdentity = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
):
    officials = await official_service.list_officials(repos.officials)
    rows = filter_rows([official_service.official_to_row(o) for o in officials], q)
    try:
        content, media_type, filename = export_rows(rows, OFFICIAL_EXPORT_COLUMNS, format, "department_officials")
    except ValidationError as e:
        raise _validation_error(e)

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


# ----------------------------------------------------------------
# GET ONE
# ----------------------------------------------------------------
@router.get("/{official_id}", response_model=OfficialRead)
async def get_official(
    official_id: str,
    _: CurrentIdentity = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
):
    try:
        return await official_service.get_official(repos.officials, official_id)
    except OfficialNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ----------------------------------------------------------------
# CREATE
# ----------------------------------------------------------------
@router.post("/", response_model=OfficialRead, status_code=status.HTTP_201_CREATED)
async def create_official(
    payload: OfficialCreate,
    _: CurrentIdentity = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
):
    try:
        return await official_service.create_official(repos.officials, payload.model_dump())
    except ValidationError as e:
        raise _validation_error(e)
    except DuplicateRecordError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


# ----------------------------------------------------------------
# UPDATE
# ----------------------------------------------------------------
@router.put("/{official_id}", response_model=OfficialRead)
async def update_official(
    official_id: str,
    payload: OfficialUpdate,
    _: CurrentIdentity = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
):
    try:
        return await official_service.update_official(repos.officials, official_id, payload.model_dump())
    except ValidationError as e:
        raise _validation_error(e)
    except OfficialNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateRecordError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


# ----------------------------------------------------------------
# DELETE (needs ?confirm=true)
# ----------------------------------------------------------------
@router.delete("/{official_id}")
async def delete_official(
    official_id: str,
    confirm: bool = Query(False),
    _: CurrentIdentity = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
):
    try:
        await official_service.delete_official(repos.officials, official_id, confirm=confirm)
    except ConfirmationRequiredError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except OfficialNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"detail": "Official deleted successfully"}
