"""Domain records for the evidence submission lifecycle.

EvidenceSubmission is created when a user submits a form and changes only
through review: a pending submission is approved or rejected exactly once,
which records the reviewer and review time.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any

from compliance_evidence_engine.errors import ValidationError
from compliance_evidence_engine.forms.type_map import PersistedFormType


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


REVIEW_ACTIONS = frozenset({SubmissionStatus.APPROVED, SubmissionStatus.REJECTED})


@dataclass(frozen=True)
class EvidenceSubmission:
    """A persisted evidence form submission.

    Attributes:
        submission_id: Unique identifier.
        organization_id: Owning organization.
        form_type: Persisted form type.
        data: Normalized submission payload.
        submitted_at: When the submission was made.
        submitted_by_id: Submitting user.
        status: pending | approved | rejected.
        reviewed_by_id: Reviewing user, set by review.
        reviewed_at: Review time, set by review.
        review_reason: Reviewer note; required for rejections.
    """

    submission_id: str
    organization_id: str
    form_type: PersistedFormType
    data: dict[str, Any]
    submitted_at: datetime
    submitted_by_id: str | None = None
    status: SubmissionStatus = SubmissionStatus.PENDING
    reviewed_by_id: str | None = None
    reviewed_at: datetime | None = None
    review_reason: str | None = None


def apply_review(
    submission: EvidenceSubmission,
    action: SubmissionStatus | str,
    reviewer_id: str,
    now: datetime,
    reason: str | None = None,
) -> EvidenceSubmission:
    """Return the reviewed copy of a pending submission.

    Args:
        submission: The submission to review.
        action: "approved" or "rejected".
        reviewer_id: Reviewing user.
        now: Review time.
        reason: Reviewer note; required when rejecting.

    Returns:
        A new EvidenceSubmission with the terminal status applied.

    Raises:
        ValidationError: If the action is unknown, the submission is not
            pending, or a rejection has no reason.
    """
    if action not in REVIEW_ACTIONS:
        raise ValidationError(
            message=f"Unknown review action '{action}'. Expected approved or rejected.",
            field="action",
        )
    review_status = SubmissionStatus(action)
    if submission.status != SubmissionStatus.PENDING:
        raise ValidationError(
            message=f"Cannot review submission in status '{SubmissionStatus(submission.status).value}'. Expected pending.",
            field="status",
        )
    cleaned_reason = reason.strip() if reason else None
    if review_status is SubmissionStatus.REJECTED and not cleaned_reason:
        raise ValidationError(message="A reason is required when rejecting a submission.", field="reason")

    return replace(
        submission,
        status=review_status,
        reviewed_by_id=reviewer_id,
        reviewed_at=now,
        review_reason=cleaned_reason,
    )
