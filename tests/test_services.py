"""Tests for core services: EvidenceFormService and ComplianceScoreService.

Services run against the in-memory repositories; the current time is fixed
through the ``now`` fixture.
"""

from datetime import datetime, timedelta

import pytest

from compliance_evidence_engine.adapters.memory import (
    InMemoryEvidenceSubmissionRepository,
    InMemoryTaskRepository,
)
from compliance_evidence_engine.core.models import (
    EvidenceSubmission,
    SubmissionStatus,
    apply_review,
)
from compliance_evidence_engine.core.services import (
    ComplianceScoreService,
    EvidenceFormService,
)
from compliance_evidence_engine.errors import (
    NotFoundError,
    SubmissionValidationError,
    ValidationError,
)
from compliance_evidence_engine.forms.registry import MEETING_SUB_TYPE_VALUES, EvidenceFormType
from compliance_evidence_engine.forms.type_map import PersistedFormType, to_persisted_form_type
from compliance_evidence_engine.scoring.overall import CATEGORY_DOCUMENTS, CATEGORY_TASKS
from compliance_evidence_engine.scoring.tasks import TASK_STATUS_IN_PROGRESS
from tests.conftest import (
    make_access_request_payload,
    make_meeting_payload,
    make_rbac_row,
    make_submission,
    make_task,
)


# ---------------------------------------------------------------------------
# apply_review
# ---------------------------------------------------------------------------


class TestApplyReview:
    def _pending(self, now: datetime) -> EvidenceSubmission:
        return make_submission("org_123", PersistedFormType.RBAC_MATRIX, now - timedelta(days=1))

    def test_approve(self, now: datetime) -> None:
        reviewed = apply_review(self._pending(now), "approved", "usr_reviewer", now)

        assert reviewed.status is SubmissionStatus.APPROVED
        assert reviewed.reviewed_by_id == "usr_reviewer"
        assert reviewed.reviewed_at == now

    def test_reject_requires_reason(self, now: datetime) -> None:
        with pytest.raises(ValidationError) as exc_info:
            apply_review(self._pending(now), SubmissionStatus.REJECTED, "usr_reviewer", now, "  ")
        assert exc_info.value.field == "reason"

    def test_reject_with_reason(self, now: datetime) -> None:
        reviewed = apply_review(
            self._pending(now), "rejected", "usr_reviewer", now, " Missing approver "
        )
        assert reviewed.status is SubmissionStatus.REJECTED
        assert reviewed.review_reason == "Missing approver"

    def test_only_pending_can_be_reviewed(self, now: datetime) -> None:
        approved = apply_review(self._pending(now), "approved", "usr_reviewer", now)

        with pytest.raises(ValidationError) as exc_info:
            apply_review(approved, "rejected", "usr_other", now, "late")
        assert exc_info.value.field == "status"

    def test_unknown_action(self, now: datetime) -> None:
        with pytest.raises(ValidationError) as exc_info:
            apply_review(self._pending(now), "pending", "usr_reviewer", now)
        assert exc_info.value.field == "action"


# ---------------------------------------------------------------------------
# EvidenceFormService
# ---------------------------------------------------------------------------


class TestEvidenceFormService:
    """Tests for submission, review, and document statuses."""

    @pytest.mark.asyncio()
    async def test_submit_persists_with_persisted_form_type(
        self,
        submission_repo: InMemoryEvidenceSubmissionRepository,
        organization_id: str,
        now: datetime,
    ) -> None:
        service = EvidenceFormService(submission_repo)

        submission = await service.submit(
            organization_id=organization_id,
            form_type=EvidenceFormType.ACCESS_REQUEST,
            payload=make_access_request_payload(),
            submitted_by_id="usr_submitter",
            now=now,
        )

        assert submission.form_type is PersistedFormType.ACCESS_REQUEST
        assert submission.status is SubmissionStatus.PENDING
        assert submission.data["submissionDate"] == now.isoformat()
        stored = await submission_repo.get_by_id(organization_id, submission.submission_id)
        assert stored == submission

    @pytest.mark.asyncio()
    async def test_submit_invalid_payload_raises_with_all_errors(
        self,
        submission_repo: InMemoryEvidenceSubmissionRepository,
        organization_id: str,
        now: datetime,
    ) -> None:
        service = EvidenceFormService(submission_repo)
        payload = {"matrixRows": [make_rbac_row(approvedBy=""), make_rbac_row(system="")]}

        with pytest.raises(SubmissionValidationError) as exc_info:
            await service.submit(organization_id, EvidenceFormType.RBAC_MATRIX, payload, None, now)

        assert [e.path for e in exc_info.value.errors] == [
            ("matrixRows", 0, "approvedBy"),
            ("matrixRows", 1, "system"),
        ]
        assert await submission_repo.latest_submission_per_form_type(organization_id) == []

    @pytest.mark.asyncio()
    async def test_review_approves_pending_submission(
        self,
        submission_repo: InMemoryEvidenceSubmissionRepository,
        organization_id: str,
        now: datetime,
    ) -> None:
        service = EvidenceFormService(submission_repo)
        submission = await service.submit(
            organization_id, EvidenceFormType.BOARD_MEETING, make_meeting_payload(), "usr_1", now
        )

        reviewed = await service.review(
            organization_id=organization_id,
            form_type=EvidenceFormType.BOARD_MEETING,
            submission_id=submission.submission_id,
            action="approved",
            reviewer_id="usr_reviewer",
            now=now,
        )

        assert reviewed.status is SubmissionStatus.APPROVED
        assert reviewed.data == submission.data

    @pytest.mark.asyncio()
    async def test_string_form_type_on_submit_and_review(
        self,
        submission_repo: InMemoryEvidenceSubmissionRepository,
        organization_id: str,
        now: datetime,
    ) -> None:
        service = EvidenceFormService(submission_repo)
        submission = await service.submit(
            organization_id, "board-meeting", make_meeting_payload(), "usr_1", now
        )

        reviewed = await service.review(
            organization_id, "board-meeting", submission.submission_id, "approved", "usr_reviewer", now
        )

        assert submission.form_type is PersistedFormType.BOARD_MEETING
        assert reviewed.status is SubmissionStatus.APPROVED
        with pytest.raises(SubmissionValidationError) as exc_info:
            await service.submit(organization_id, "rbac-matrix", {}, "usr_1", now)
        assert exc_info.value.form_type == "rbac-matrix"

    @pytest.mark.asyncio()
    async def test_second_review_is_rejected(
        self,
        submission_repo: InMemoryEvidenceSubmissionRepository,
        organization_id: str,
        now: datetime,
    ) -> None:
        service = EvidenceFormService(submission_repo)
        submission = await service.submit(
            organization_id, EvidenceFormType.BOARD_MEETING, make_meeting_payload(), "usr_1", now
        )
        await service.review(
            organization_id,
            EvidenceFormType.BOARD_MEETING,
            submission.submission_id,
            "approved",
            "usr_reviewer",
            now,
        )

        with pytest.raises(ValidationError):
            await service.review(
                organization_id,
                EvidenceFormType.BOARD_MEETING,
                submission.submission_id,
                "rejected",
                "usr_other",
                now,
                reason="Too late",
            )

    @pytest.mark.asyncio()
    async def test_review_with_mismatched_form_type_is_not_found(
        self,
        submission_repo: InMemoryEvidenceSubmissionRepository,
        organization_id: str,
        now: datetime,
    ) -> None:
        service = EvidenceFormService(submission_repo)
        submission = await service.submit(
            organization_id, EvidenceFormType.BOARD_MEETING, make_meeting_payload(), "usr_1", now
        )

        with pytest.raises(NotFoundError):
            await service.review(
                organization_id,
                EvidenceFormType.RISK_COMMITTEE_MEETING,
                submission.submission_id,
                "approved",
                "usr_reviewer",
                now,
            )

    @pytest.mark.asyncio()
    async def test_review_in_other_organization_is_not_found(
        self,
        submission_repo: InMemoryEvidenceSubmissionRepository,
        organization_id: str,
        other_organization_id: str,
        now: datetime,
    ) -> None:
        service = EvidenceFormService(submission_repo)
        submission = await service.submit(
            organization_id, EvidenceFormType.BOARD_MEETING, make_meeting_payload(), "usr_1", now
        )

        with pytest.raises(NotFoundError):
            await service.review(
                other_organization_id,
                EvidenceFormType.BOARD_MEETING,
                submission.submission_id,
                "approved",
                "usr_reviewer",
                now,
            )

    @pytest.mark.asyncio()
    async def test_get_document_statuses(
        self,
        submission_repo: InMemoryEvidenceSubmissionRepository,
        organization_id: str,
        now: datetime,
    ) -> None:
        older = now - timedelta(days=40)
        await submission_repo.create(
            make_submission(organization_id, PersistedFormType.RBAC_MATRIX, older, "sub_1")
        )
        await submission_repo.create(
            make_submission(organization_id, PersistedFormType.RBAC_MATRIX, now, "sub_2")
        )
        service = EvidenceFormService(submission_repo)

        statuses = await service.get_document_statuses(organization_id)

        assert set(statuses) == set(EvidenceFormType)
        assert statuses[EvidenceFormType.RBAC_MATRIX] == now
        assert statuses[EvidenceFormType.ACCESS_REQUEST] is None


# ---------------------------------------------------------------------------
# ComplianceScoreService
# ---------------------------------------------------------------------------


class TestComplianceScoreService:
    @pytest.mark.asyncio()
    async def test_get_overview(
        self,
        submission_repo: InMemoryEvidenceSubmissionRepository,
        task_repo: InMemoryTaskRepository,
        organization_id: str,
        now: datetime,
    ) -> None:
        await task_repo.add(organization_id, make_task(task_id="tsk_1"))
        await task_repo.add(organization_id, make_task(status=TASK_STATUS_IN_PROGRESS, task_id="tsk_2"))
        await submission_repo.create(
            make_submission(
                organization_id,
                PersistedFormType.IT_LEADERSHIP_MEETING,
                now - timedelta(days=20),
            )
        )
        service = ComplianceScoreService(submission_repo, task_repo, window=timedelta(days=180))

        overview = await service.get_overview(
            organization_id,
            now,
            published_policies=4,
            total_policies=4,
            completed_members=0,
            total_members=0,
        )

        tasks = overview.get_category(CATEGORY_TASKS)
        documents = overview.get_category(CATEGORY_DOCUMENTS)
        assert tasks is not None
        assert (tasks.done, tasks.total) == (1, 2)
        assert documents is not None
        assert documents.done == 1
        assert documents.total == 8
        # policies 100, tasks 50, documents 13 -> 163 / 3 = 54.33
        assert overview.overall_score == 54

    @pytest.mark.asyncio()
    async def test_stale_meeting_sub_types_leave_meeting_outstanding(
        self,
        submission_repo: InMemoryEvidenceSubmissionRepository,
        task_repo: InMemoryTaskRepository,
        organization_id: str,
        now: datetime,
    ) -> None:
        for index, sub_type in enumerate(MEETING_SUB_TYPE_VALUES):
            await submission_repo.create(
                make_submission(
                    organization_id,
                    to_persisted_form_type(sub_type),
                    now - timedelta(days=200),
                    submission_id=f"sub_{index}",
                )
            )
        service = ComplianceScoreService(submission_repo, task_repo)

        progress = await service.get_documents_progress(organization_id, now)

        assert progress.completed_documents == 0
        assert EvidenceFormType.MEETING in progress.outstanding_form_types

    @pytest.mark.asyncio()
    async def test_empty_organization_scores_zero(
        self,
        submission_repo: InMemoryEvidenceSubmissionRepository,
        task_repo: InMemoryTaskRepository,
        other_organization_id: str,
        now: datetime,
    ) -> None:
        service = ComplianceScoreService(submission_repo, task_repo)

        overview = await service.get_overview(other_organization_id, now)

        documents = overview.get_category(CATEGORY_DOCUMENTS)
        assert documents is not None
        assert documents.done == 0
        # Documents always have a denominator, so they still contribute 0%.
        assert overview.overall_score == 0
