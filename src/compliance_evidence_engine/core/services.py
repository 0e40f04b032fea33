"""Core business logic services for the compliance evidence engine.

Two service classes:
- EvidenceFormService: Evidence form submission, review, and document status
- ComplianceScoreService: Organization compliance overview

Services are async-first. They accept injected repositories through their
constructors and contain no framework code. The current time is always
passed in by the caller.
"""

import uuid
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from compliance_evidence_engine.core.interfaces import (
    IEvidenceSubmissionRepository,
    ITaskRepository,
)
from compliance_evidence_engine.core.models import (
    EvidenceSubmission,
    SubmissionStatus,
    apply_review,
)
from compliance_evidence_engine.errors import (
    NotFoundError,
    SubmissionValidationError,
    ValidationError,
)
from compliance_evidence_engine.forms.registry import EvidenceFormType
from compliance_evidence_engine.forms.submission_schemas import (
    prepare_submission_payload,
    validate_submission,
)
from compliance_evidence_engine.forms.type_map import (
    to_external_form_type,
    to_persisted_form_type,
)
from compliance_evidence_engine.observability import get_logger
from compliance_evidence_engine.scoring.documents import (
    DocumentsProgress,
    build_document_form_statuses,
    compute_documents_progress,
)
from compliance_evidence_engine.scoring.overall import ComplianceOverview, build_compliance_overview
from compliance_evidence_engine.scoring.tasks import summarize_tasks
from compliance_evidence_engine.settings import get_settings

logger = get_logger(__name__)


class EvidenceFormService:
    """Evidence form submission and review.

    Args:
        submission_repo: Repository for EvidenceSubmission persistence.
    """

    def __init__(self, submission_repo: IEvidenceSubmissionRepository) -> None:
        self._submission_repo = submission_repo

    async def submit(
        self,
        organization_id: str,
        form_type: EvidenceFormType | str,
        payload: Mapping[str, Any],
        submitted_by_id: str | None,
        now: datetime,
    ) -> EvidenceSubmission:
        """Validate and persist a new evidence submission.

        Args:
            organization_id: Owning organization.
            form_type: External form type the payload is submitted for.
            payload: Raw form payload.
            submitted_by_id: Submitting user.
            now: Submission time; also stamped into auto-dated forms.

        Returns:
            The stored EvidenceSubmission in pending status.

        Raises:
            SubmissionValidationError: If the payload fails its form schema.
        """
        form_type = EvidenceFormType(form_type)
        prepared = prepare_submission_payload(form_type, payload, now)
        result = validate_submission(form_type, prepared)
        if not result.is_valid or result.data is None:
            logger.info(
                "Evidence submission rejected",
                organization_id=organization_id,
                form_type=form_type.value,
                error_count=len(result.errors),
            )
            raise SubmissionValidationError(form_type=form_type.value, errors=result.errors)

        submission = await self._submission_repo.create(
            EvidenceSubmission(
                submission_id=str(uuid.uuid4()),
                organization_id=organization_id,
                form_type=to_persisted_form_type(form_type),
                data=result.data,
                submitted_at=now,
                submitted_by_id=submitted_by_id,
            )
        )

        logger.info(
            "Evidence submitted",
            submission_id=submission.submission_id,
            organization_id=organization_id,
            form_type=form_type.value,
        )
        return submission

    async def review(
        self,
        organization_id: str,
        form_type: EvidenceFormType | str,
        submission_id: str,
        action: SubmissionStatus | str,
        reviewer_id: str,
        now: datetime,
        reason: str | None = None,
    ) -> EvidenceSubmission:
        """Approve or reject a pending submission.

        Args:
            organization_id: Owning organization.
            form_type: External form type from the request path.
            submission_id: Submission to review.
            action: "approved" or "rejected".
            reviewer_id: Reviewing user.
            now: Review time.
            reason: Reviewer note; required when rejecting.

        Returns:
            The reviewed EvidenceSubmission.

        Raises:
            NotFoundError: If the submission does not exist in this organization
                or belongs to another form type.
            ValidationError: If the review is not allowed, including when
                another reviewer finished first.
        """
        form_type = EvidenceFormType(form_type)
        submission = await self._submission_repo.get_by_id(organization_id, submission_id)
        if submission is None or to_external_form_type(submission.form_type) != form_type:
            raise NotFoundError(resource="EvidenceSubmission", resource_id=submission_id)

        reviewed = apply_review(submission, action, reviewer_id, now, reason)
        stored = await self._submission_repo.update_review(
            reviewed, expected_status=SubmissionStatus.PENDING
        )
        if stored is None:
            raise ValidationError(
                message=f"Submission '{submission_id}' was already reviewed.",
                field="status",
            )

        logger.info(
            "Evidence submission reviewed",
            submission_id=submission_id,
            organization_id=organization_id,
            form_type=form_type.value,
            status=stored.status.value,
            reviewer_id=reviewer_id,
        )
        return stored

    async def get_document_statuses(self, organization_id: str) -> dict[EvidenceFormType, datetime | None]:
        """Return the latest submission time for every form type.

        Args:
            organization_id: Owning organization.

        Returns:
            Mapping of every EvidenceFormType to its latest submission time,
            None when never submitted.
        """
        aggregates = await self._submission_repo.latest_submission_per_form_type(organization_id)
        return build_document_form_statuses(aggregates)


class ComplianceScoreService:
    """Organization compliance overview.

    Tasks and document statuses come from repositories. Policy and people
    counts are owned by other systems and passed in by the caller.

    Args:
        submission_repo: Repository for evidence submissions.
        task_repo: Repository for tasks with their latest automation runs.
        window: Document staleness window; defaults to the configured
            document_staleness_days.
    """

    def __init__(
        self,
        submission_repo: IEvidenceSubmissionRepository,
        task_repo: ITaskRepository,
        window: timedelta | None = None,
    ) -> None:
        self._forms = EvidenceFormService(submission_repo)
        self._task_repo = task_repo
        self._window = window if window is not None else timedelta(days=get_settings().document_staleness_days)

    async def get_documents_progress(self, organization_id: str, now: datetime) -> DocumentsProgress:
        statuses = await self._forms.get_document_statuses(organization_id)
        return compute_documents_progress(statuses, now, self._window)

    async def get_overview(
        self,
        organization_id: str,
        now: datetime,
        published_policies: int = 0,
        total_policies: int = 0,
        completed_members: int = 0,
        total_members: int = 0,
    ) -> ComplianceOverview:
        """Assemble the compliance overview for an organization.

        Args:
            organization_id: Owning organization.
            now: Current time for document freshness.
            published_policies: Policies in published state.
            total_policies: All policies.
            completed_members: People who completed their obligations.
            total_members: People tracked.

        Returns:
            ComplianceOverview with the four category scores and overall score.
        """
        tasks = await self._task_repo.list_with_latest_runs(organization_id)
        task_summary = summarize_tasks(tasks)
        documents = await self.get_documents_progress(organization_id, now)

        overview = build_compliance_overview(
            published_policies=published_policies,
            total_policies=total_policies,
            done_tasks=task_summary.done_tasks,
            total_tasks=task_summary.total_tasks,
            completed_documents=documents.completed_documents,
            total_documents=documents.total_documents,
            completed_members=completed_members,
            total_members=total_members,
        )

        logger.info(
            "Compliance overview computed",
            organization_id=organization_id,
            overall_score=overview.overall_score,
            outstanding_documents=documents.outstanding_documents,
            incomplete_tasks=len(task_summary.incomplete_tasks),
        )
        return overview
