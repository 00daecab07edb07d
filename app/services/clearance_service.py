# app/services/clearance_service.py

import asyncio
from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional

from loguru import logger

from app.core.config import settings
from app.core.constants import APPROVED_MESSAGE, DENIED_TEMPLATE, REJECTED_MESSAGE
from app.core.exceptions import EligibilityCheckTimeoutError, StudentNotFoundError
from app.core.normalizers import normalize_date
from app.models.enums import (
    SEMESTERS,
    YEARS_OF_STUDY,
    ClearanceReason,
    DecisionOutcome,
    WorkflowState,
)
from app.models.student import Student
from app.repositories.base import IdentityDirectory, RiskRegistry
from app.schemas.clearance import BlockingCase, ClearanceDecision, ClearanceRequest

REASONS = [r.value for r in ClearanceReason]

REQUIRED_MESSAGES = {
    "academic_year": "Academic Year is required.",
    "semester": "Semester selection is required.",
    "year_of_study": "Year of Study is required.",
    "reason": "Reason for Clearance is required.",
    "date": "Date of Application is required.",
}


class SimulatedEligibilityCheck:
    """
    Stand-in for an external eligibility service: waits, then lets the
    registry lookup proceed. A real remote check can replace it as long as it
    is an awaitable taking the student id.
    """

    def __init__(self, delay: Optional[float] = None):
        self.delay = settings.CLEARANCE_CHECK_DELAY_SECONDS if delay is None else delay

    async def __call__(self, student_id: str) -> None:
        if self.delay > 0:
            await asyncio.sleep(self.delay)


def validate_request(request: ClearanceRequest) -> Dict[str, str]:
    """Field-keyed error messages; empty when the request may be checked."""
    errors = {}

    for field, message in REQUIRED_MESSAGES.items():
        if not (getattr(request, field) or "").strip():
            errors[field] = message

    semester = (request.semester or "").strip()
    if semester and semester not in SEMESTERS:
        errors["semester"] = f"Semester must be one of: {', '.join(SEMESTERS)}."

    year = (request.year_of_study or "").strip()
    if year and year not in YEARS_OF_STUDY:
        errors["year_of_study"] = f"Year of Study must be one of: {', '.join(YEARS_OF_STUDY)}."

    reason = (request.reason or "").strip()
    if reason and reason not in REASONS:
        errors["reason"] = "Please choose one of the listed reasons."
    if reason == ClearanceReason.Other.value and not (request.other_reason or "").strip():
        errors["other_reason"] = "Please specify the reason."

    date_text = (request.date or "").strip()
    if date_text and normalize_date(date_text) is None:
        errors["date"] = "Date of Application must be a valid date and time."

    return errors


class ClearanceWorkflow:
    """
    Draft -> Validating -> {Rejected | Checking} -> {Denied | Approved}

    Holds no state of its own: each submit reads the directory and the
    registry as they are at call time and returns a fresh decision.
    """

    def __init__(
        self,
        directory: IdentityDirectory,
        registry: RiskRegistry,
        eligibility_check: Optional[Callable[[str], Awaitable[None]]] = None,
        timeout: Optional[float] = None,
    ):
        self.directory = directory
        self.registry = registry
        self.eligibility_check = eligibility_check or SimulatedEligibilityCheck()
        self.timeout = settings.CLEARANCE_CHECK_TIMEOUT_SECONDS if timeout is None else timeout

    @staticmethod
    def draft(student: Student, now: Optional[datetime] = None) -> ClearanceRequest:
        now = now or datetime.now()
        return ClearanceRequest(
            student_id=student.student_id,
            student_name=student.student_name,
            father_name=student.father_name,
            grandfather_name=student.grandfather_name,
            sex=student.sex,
            department=student.department,
            year_of_study=student.year_of_study,
            date=now.strftime("%Y-%m-%dT%H:%M"),
        )

    async def _check_eligibility(self, student_id: str):
        try:
            await asyncio.wait_for(self.eligibility_check(student_id), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Eligibility check for {student_id} timed out after {self.timeout}s")
            raise EligibilityCheckTimeoutError("The clearance check took too long. Please try again.")

    async def submit(self, request: ClearanceRequest) -> ClearanceDecision:
        trail = [WorkflowState.Draft, WorkflowState.Validating]

        errors = validate_request(request)
        if errors:
            trail.append(WorkflowState.Rejected)
            logger.info(f"Clearance request for {request.student_id} rejected: {sorted(errors)}")
            return ClearanceDecision(
                outcome=DecisionOutcome.Rejected,
                student_id=request.student_id,
                message=REJECTED_MESSAGE,
                errors=errors,
                trail=trail,
            )

        trail.append(WorkflowState.Checking)

        # Re-check against the authoritative list, not the session
        student = await self.directory.get_student(request.student_id)
        if student is None:
            logger.info(f"Clearance request for unknown student {request.student_id!r}")
            raise StudentNotFoundError(request.student_id)

        await self._check_eligibility(student.student_id)

        blocking = await self.registry.find_blocking(student.student_id)
        if blocking:
            trail.append(WorkflowState.Denied)
            cases = [
                BlockingCase(
                    entry_id=str(entry.id),
                    department=entry.department,
                    case_description=entry.case_description,
                )
                for entry in blocking
            ]
            logger.info(f"Clearance denied for {student.student_id}: {len(cases)} blocking case(s)")
            return ClearanceDecision(
                outcome=DecisionOutcome.Denied,
                student_id=request.student_id,
                message=DENIED_TEMPLATE.format(case=blocking[0].case_description),
                blocking_entries=cases,
                trail=trail,
            )

        trail.append(WorkflowState.Approved)
        logger.info(f"Clearance approved for {student.student_id}")
        return ClearanceDecision(
            outcome=DecisionOutcome.Approved,
            student_id=request.student_id,
            message=APPROVED_MESSAGE,
            trail=trail,
        )
