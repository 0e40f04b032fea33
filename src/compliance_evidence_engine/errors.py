"""Error types raised by the compliance evidence engine services.

Pure scoring and mapping functions do not raise for expected inputs. These
errors are raised by the service layer at persistence and review boundaries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from compliance_evidence_engine.forms.submission_schemas import FieldError


class EvidenceEngineError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(EvidenceEngineError):
    """Raised when a resource does not exist within the caller's organization."""

    def __init__(self, resource: str, resource_id: str) -> None:
        super().__init__(f"{resource} '{resource_id}' not found")
        self.resource = resource
        self.resource_id = resource_id


class ValidationError(EvidenceEngineError):
    """Raised when an operation is not allowed for the current state of a resource."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class SubmissionValidationError(EvidenceEngineError):
    """Raised when a submission payload fails its form-type schema.

    Carries every field error so the caller can render all of them at once.
    """

    def __init__(self, form_type: str, errors: list[FieldError]) -> None:
        super().__init__(f"Submission for '{form_type}' failed validation with {len(errors)} error(s)")
        self.form_type = form_type
        self.errors = errors
