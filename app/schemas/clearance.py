# app/schemas/clearance.py

from pydantic import BaseModel
from typing import Dict, List, Optional

from app.core.exceptions import ClearanceDeniedError, ValidationError
from app.models.enums import ClearanceReason, DecisionOutcome, WorkflowState


# ============================================================
# STUDENT -> fields they may fill in
# ============================================================
class ClearanceSubmission(BaseModel):
    academic_year: Optional[str] = None
    semester: Optional[str] = None
    year_of_study: Optional[str] = None
    reason: Optional[str] = None
    other_reason: Optional[str] = None
    date: Optional[str] = None


# ============================================================
# FULL REQUEST (identity fields are filled from the directory)
# ============================================================
class ClearanceRequest(ClearanceSubmission):
    student_id: str
    student_name: Optional[str] = None
    father_name: Optional[str] = None
    grandfather_name: Optional[str] = None
    sex: Optional[str] = None
    department: Optional[str] = None

    @property
    def resolved_reason(self) -> str:
        if self.reason == ClearanceReason.Other.value:
            return (self.other_reason or "").strip()
        return self.reason or ""


LOCKED_FIELDS = ["student_id", "student_name", "father_name", "grandfather_name", "sex", "department"]
EDITABLE_FIELDS = ["academic_year", "semester", "year_of_study", "reason", "other_reason", "date"]


class ClearanceDraft(BaseModel):
    state: WorkflowState = WorkflowState.Draft
    request: ClearanceRequest
    locked_fields: List[str] = LOCKED_FIELDS
    editable_fields: List[str] = EDITABLE_FIELDS


# ============================================================
# DECISION
# ============================================================
class BlockingCase(BaseModel):
    entry_id: str
    department: str
    case_description: str


class ClearanceDecision(BaseModel):
    outcome: DecisionOutcome
    student_id: str
    message: str
    errors: Dict[str, str] = {}
    blocking_entries: List[BlockingCase] = []
    trail: List[WorkflowState] = []

    @property
    def approved(self) -> bool:
        return self.outcome == DecisionOutcome.Approved

    def raise_for_outcome(self):
        """For callers that prefer exceptions over inspecting the outcome."""
        if self.outcome == DecisionOutcome.Denied:
            raise ClearanceDeniedError(self.message, [c.case_description for c in self.blocking_entries])
        if self.outcome == DecisionOutcome.Rejected:
            raise ValidationError(self.message, self.errors)
        return self


class ClearanceDecisionRead(ClearanceDecision):
    certificate_token: Optional[str] = None
    registrar_contact: Optional[str] = None


class ClearanceOptions(BaseModel):
    reasons: List[str]
    semesters: List[str]
    years_of_study: List[str]
