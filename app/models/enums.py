from enum import Enum


class UserRole(str, Enum):
    Student = "student"
    DepartmentOfficial = "department_official"
    Admin = "admin"


class OfficialRole(str, Enum):
    DepartmentOfficial = "department_official"
    Admin = "admin"


class RiskStatus(str, Enum):
    AtRisk = "atRisk"
    Resolved = "resolved"


class ClearanceReason(str, Enum):
    EndOfAcademicYear = "End of Academic Year"
    Graduation = "Graduation"
    AcademicDismissal = "Academic Dismissal"
    Withdrawing = "Withdrawing for Health/Family Reasons"
    DisciplinaryCase = "Disciplinary Case"
    Other = "Other"


class WorkflowState(str, Enum):
    Draft = "Draft"
    Validating = "Validating"
    Rejected = "Rejected"
    Checking = "Checking"
    Denied = "Denied"
    Approved = "Approved"


class DecisionOutcome(str, Enum):
    Approved = "Approved"
    Denied = "Denied"
    Rejected = "Rejected"


SEMESTERS = ("1st", "2nd")
YEARS_OF_STUDY = ("I", "II", "III", "IV")
