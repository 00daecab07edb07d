from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_repositories, require_student
from app.repositories.base import Repositories
from app.schemas.auth import CurrentIdentity
from app.schemas.student import StudentRead

router = APIRouter(prefix="/api/students", tags=["Students"])


@router.get("/me", response_model=StudentRead)
async def get_my_profile(
    identity: CurrentIdentity = Depends(require_student),
    repos: Repositories = Depends(get_repositories),
):
    student = await repos.identity.get_student(identity.subject_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student profile not found")
    return StudentRead.model_validate(student)
