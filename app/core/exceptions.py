# app/core/exceptions.py

from typing import Dict, Optional


class ValidationError(ValueError):
    """A required field is missing or malformed. Nothing was changed."""

    def __init__(self, message: str = "Please fill in all required fields.",
                 errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


class InvalidCredentialsError(ValueError):
    # Same message for unknown user and wrong password
    def __init__(self):
        super().__init__("Invalid username or password")


class DuplicateRecordError(ValueError):
    pass


class ConfirmationRequiredError(ValueError):
    def __init__(self, message: str = "Deletion must be confirmed."):
        super().__init__(message)


class ClearanceDeniedError(ValueError):
    def __init__(self, message: str, cases=None):
        super().__init__(message)
        self.message = message
        self.cases = list(cases or [])


class StudentNotFoundError(LookupError):
    def __init__(self, student_id: str = ""):
        super().__init__("Student ID not found. Please check and try again.")
        self.student_id = student_id


class RiskEntryNotFoundError(LookupError):
    pass


class OfficialNotFoundError(LookupError):
    pass


class EligibilityCheckTimeoutError(TimeoutError):
    pass


class CertificatePreconditionError(RuntimeError):
    """Rendering was asked for a request that never reached Approved."""


class StorageUnavailableError(RuntimeError):
    pass
