from fastapi import APIRouter, Depends

from app.api.deps import get_repositories, require_admin
from app.core.storage import storage
from app.repositories.base import Repositories
from app.schemas.auth import CurrentIdentity
from app.schemas.official import AdminSummary
from app.services.official_service import admin_summary

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/summary", response_model=AdminSummary)
async def get_summary(
    _: CurrentIdentity = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
):
    counts = await admin_summary(repos.officials, repos.risks)
    return AdminSummary(**counts, storage_mode=storage.mode)
