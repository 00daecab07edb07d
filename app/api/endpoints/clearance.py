from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import HTMLResponse
from loguru import logger

from app.api.deps import get_current_identity, get_repositories, require_student
from app.core.config import settings
from app.core.exceptions import EligibilityCheckTimeoutError, StudentNotFoundError
from app.models.enums import SEMESTERS, YEARS_OF_STUDY, DecisionOutcome
from app.repositories.base import Repositories
from app.schemas.auth import CurrentIdentity
from app.schemas.clearance import (
    ClearanceDecisionRead,
    ClearanceDraft,
    ClearanceOptions,
    ClearanceSubmission,
)
from app.services.certificate_service import certificate_cache, render_certificate
from app.services.clearance_service import REASONS, ClearanceWorkflow

router = APIRouter(
    prefix="/api/clearance",
    tags=["Clearance"]
)


async def get_workflow(repos: Repositories = Depends(get_repositories)) -> ClearanceWorkflow:
    return ClearanceWorkflow(repos.identity, repos.risks)


async def _load_profile(repos: Repositories, identity: CurrentIdentity):
    student = await repos.identity.get_student(identity.subject_id)
    if not student:
        raise HTTPException(status_code=404, detail=str(StudentNotFoundError(identity.subject_id)))
    return student


# ------------------------------------------------------------
# FORM OPTIONS
# ------------------------------------------------------------
@router.get("/reasons", response_model=ClearanceOptions)
async def clearance_options(_: CurrentIdentity = Depends(get_current_identity)):
    return ClearanceOptions(
        reasons=REASONS,
        semesters=list(SEMESTERS),
        years_of_study=list(YEARS_OF_STUDY),
    )


# ------------------------------------------------------------
# DRAFT (identity fields filled in and locked)
# ------------------------------------------------------------
@router.get("/form", response_model=ClearanceDraft)
async def get_clearance_form(
    identity: CurrentIdentity = Depends(require_student),
    repos: Repositories = Depends(get_repositories),
):
    student = await _load_profile(repos, identity)
    return ClearanceDraft(request=ClearanceWorkflow.draft(student))


# ------------------------------------------------------------
# SUBMIT
# ------------------------------------------------------------
@router.post("/submit", response_model=ClearanceDecisionRead)
async def submit_clearance(
    payload: ClearanceSubmission,
    identity: CurrentIdentity = Depends(require_student),
    repos: Repositories = Depends(get_repositories),
    workflow: ClearanceWorkflow = Depends(get_workflow),
):
    student = await _load_profile(repos, identity)

    # Only editable fields come from the body; identity stays as drafted
    request = ClearanceWorkflow.draft(student).model_copy(update=payload.model_dump())

    try:
        decision = await workflow.submit(request)
    except StudentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except EligibilityCheckTimeoutError as e:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(e))

    response = ClearanceDecisionRead(**decision.model_dump())

    if decision.outcome == DecisionOutcome.Approved:
        artifact = render_certificate(request, decision)
        response.certificate_token = certificate_cache.put(artifact)
    elif decision.outcome == DecisionOutcome.Denied:
        response.registrar_contact = settings.REGISTRAR_CONTACT

    return response


# ------------------------------------------------------------
# CERTIFICATE: PREVIEW / DOWNLOAD
# ------------------------------------------------------------
def _cached_artifact(token: str, identity: CurrentIdentity):
    artifact = certificate_cache.get(token, identity.subject_id)
    if artifact is None:
        raise HTTPException(
            status_code=404,
            detail="Certificate not found or expired. Please submit the clearance form again."
        )
    return artifact


def _pdf_bytes(artifact) -> bytes:
    try:
        return artifact.to_pdf()
    except ValueError as e:
        logger.error(f"Certificate Error: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error generating certificate")


@router.get("/certificates/{token}/preview")
async def preview_certificate(
    token: str,
    format: str = Query("pdf", pattern="^(pdf|html)$"),
    identity: CurrentIdentity = Depends(require_student),
):
    artifact = _cached_artifact(token, identity)
    if format == "html":
        return HTMLResponse(content=artifact.html)

    return Response(
        content=_pdf_bytes(artifact),
        media_type="application/pdf",
        headers={"Content-Disposition": f"inline; filename={artifact.filename}"}
    )


@router.get("/certificates/{token}/download", response_class=Response)
async def download_certificate(
    token: str,
    identity: CurrentIdentity = Depends(require_student),
):
    artifact = _cached_artifact(token, identity)
    return Response(
        content=_pdf_bytes(artifact),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={artifact.filename}"}
    )
