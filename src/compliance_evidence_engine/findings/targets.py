"""Findings and their targets.

A finding is an auditor-raised observation attached to exactly one target:
- TaskTarget: a compliance task
- SubmissionTarget: one evidence submission (with its form type)
- FormTypeTarget: a document as a whole (a form type with no submission)

Targets are distinct types, so a finding cannot point at two things at once.
Storage rows carry three nullable references; finding_target_from_references()
converts them and rejects rows where the "exactly one" rule is broken.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from compliance_evidence_engine.forms.registry import EvidenceFormType
from compliance_evidence_engine.forms.type_map import PersistedFormType, coerce_external_form_type


class FindingStatus(str, Enum):
    OPEN = "open"
    NEEDS_REVISION = "needs_revision"
    READY_FOR_REVIEW = "ready_for_review"
    CLOSED = "closed"


# Display order: what needs attention first
FINDING_STATUS_ORDER: dict[FindingStatus, int] = {
    FindingStatus.OPEN: 0,
    FindingStatus.NEEDS_REVISION: 1,
    FindingStatus.READY_FOR_REVIEW: 2,
    FindingStatus.CLOSED: 3,
}


@dataclass(frozen=True)
class TaskTarget:
    task_id: str


@dataclass(frozen=True)
class SubmissionTarget:
    submission_id: str
    form_type: EvidenceFormType


@dataclass(frozen=True)
class FormTypeTarget:
    form_type: EvidenceFormType


FindingTarget = TaskTarget | SubmissionTarget | FormTypeTarget


@dataclass(frozen=True)
class Finding:
    """An audit finding.

    Attributes:
        finding_id: Unique identifier.
        organization_id: Owning organization.
        target: What the finding is raised against; fixed at creation.
        status: Review status.
        content: Finding text written by the auditor.
        finding_type: Framework the finding belongs to (e.g., "soc2", "iso27001").
        created_at: Creation time.
    """

    finding_id: str
    organization_id: str
    target: FindingTarget
    status: FindingStatus = FindingStatus.OPEN
    content: str = ""
    finding_type: str | None = None
    created_at: datetime | None = None


def finding_target_from_references(
    task_id: str | None = None,
    evidence_submission_id: str | None = None,
    form_type: EvidenceFormType | PersistedFormType | str | None = None,
) -> FindingTarget:
    """Build a target from the nullable references stored on a finding row.

    A submission reference travels with its form type; every other
    combination must set exactly one reference.

    Args:
        task_id: Referenced task, if any.
        evidence_submission_id: Referenced submission, if any.
        form_type: External or persisted form type, if any.

    Returns:
        The matching FindingTarget.

    Raises:
        ValueError: If zero or several target kinds are set, a submission has
            no form type, or the form type is unknown.
    """
    if task_id:
        if evidence_submission_id or form_type:
            raise ValueError("A finding must target exactly one of task, submission, or form type")
        return TaskTarget(task_id=task_id)

    if evidence_submission_id:
        if not form_type:
            raise ValueError("A submission-targeted finding requires the submission's form type")
        return SubmissionTarget(
            submission_id=evidence_submission_id,
            form_type=coerce_external_form_type(form_type),
        )

    if form_type:
        return FormTypeTarget(form_type=coerce_external_form_type(form_type))

    raise ValueError("A finding must target exactly one of task, submission, or form type")


def target_form_type(target: FindingTarget) -> EvidenceFormType | None:
    if isinstance(target, (SubmissionTarget, FormTypeTarget)):
        return target.form_type
    return None


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Order findings by status (open first), newest first within a status."""

    def _key(finding: Finding) -> tuple[int, float]:
        created = finding.created_at.timestamp() if finding.created_at else 0.0
        return (FINDING_STATUS_ORDER[finding.status], -created)

    return sorted(findings, key=_key)
