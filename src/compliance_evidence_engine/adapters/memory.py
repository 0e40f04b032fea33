"""In-memory repositories for evidence submissions and tasks.

Every read and write is keyed by organization_id so that one organization's
records are never visible to another. Suitable for tests and local
development; a database-backed adapter implements the same protocols.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from compliance_evidence_engine.core.models import EvidenceSubmission, SubmissionStatus
from compliance_evidence_engine.forms.type_map import PersistedFormType
from compliance_evidence_engine.scoring.documents import SubmissionAggregate
from compliance_evidence_engine.scoring.tasks import Task


class InMemoryEvidenceSubmissionRepository:
    """Evidence submission store implementing IEvidenceSubmissionRepository."""

    def __init__(self) -> None:
        # { organization_id: { submission_id: EvidenceSubmission } }
        self._store: dict[str, dict[str, EvidenceSubmission]] = {}

    async def create(self, submission: EvidenceSubmission) -> EvidenceSubmission:
        records = self._store.setdefault(submission.organization_id, {})
        if submission.submission_id in records:
            raise ValueError(f"Submission '{submission.submission_id}' already exists")
        records[submission.submission_id] = submission
        return submission

    async def get_by_id(self, organization_id: str, submission_id: str) -> EvidenceSubmission | None:
        return self._store.get(organization_id, {}).get(submission_id)

    async def update_review(
        self,
        reviewed: EvidenceSubmission,
        expected_status: str,
    ) -> EvidenceSubmission | None:
        """Replace the stored submission when its status still matches.

        Only the review columns are taken from ``reviewed``; the payload and
        submission metadata of the stored row are kept.
        """
        records = self._store.get(reviewed.organization_id, {})
        current = records.get(reviewed.submission_id)
        if current is None or current.status != expected_status:
            return None
        updated = replace(
            current,
            status=SubmissionStatus(reviewed.status),
            reviewed_by_id=reviewed.reviewed_by_id,
            reviewed_at=reviewed.reviewed_at,
            review_reason=reviewed.review_reason,
        )
        records[reviewed.submission_id] = updated
        return updated

    async def latest_submission_per_form_type(self, organization_id: str) -> list[SubmissionAggregate]:
        latest: dict[PersistedFormType, datetime] = {}
        for submission in self._store.get(organization_id, {}).values():
            current = latest.get(submission.form_type)
            if current is None or submission.submitted_at > current:
                latest[submission.form_type] = submission.submitted_at
        return [
            SubmissionAggregate(form_type=form_type, max_submitted_at=submitted_at)
            for form_type, submitted_at in latest.items()
        ]

    async def list_for_form_type(
        self,
        organization_id: str,
        form_type: PersistedFormType,
    ) -> list[EvidenceSubmission]:
        """List an organization's submissions of one form type, newest first."""
        records = [
            submission
            for submission in self._store.get(organization_id, {}).values()
            if submission.form_type is form_type
        ]
        return sorted(records, key=lambda s: s.submitted_at, reverse=True)


class InMemoryTaskRepository:
    """Task store implementing ITaskRepository."""

    def __init__(self) -> None:
        self._tasks: dict[str, list[Task]] = {}

    async def add(self, organization_id: str, task: Task) -> None:
        self._tasks.setdefault(organization_id, []).append(task)

    async def list_with_latest_runs(self, organization_id: str) -> list[Task]:
        return list(self._tasks.get(organization_id, []))
