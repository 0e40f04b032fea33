"""Abstract interfaces (Protocol classes) for the compliance evidence engine.

Defines the contracts between the service layer and the adapter layer using
typing.Protocol. Services depend on these protocols, never on concrete
adapters, so they can be tested with in-memory or mock adapters.

Protocols defined:
- IEvidenceSubmissionRepository
- ITaskRepository
- INotificationDispatcher
"""

from typing import Any, Protocol

from compliance_evidence_engine.core.models import EvidenceSubmission
from compliance_evidence_engine.scoring.documents import SubmissionAggregate
from compliance_evidence_engine.scoring.tasks import Task


class IEvidenceSubmissionRepository(Protocol):
    """Repository contract for evidence submission persistence."""

    async def create(self, submission: EvidenceSubmission) -> EvidenceSubmission:
        """Persist a new submission.

        Args:
            submission: The submission to store.

        Returns:
            The stored submission.
        """
        ...

    async def get_by_id(self, organization_id: str, submission_id: str) -> EvidenceSubmission | None:
        """Load a submission scoped to an organization.

        Args:
            organization_id: Owning organization.
            submission_id: Submission identifier.

        Returns:
            The submission, or None if it does not exist in this organization.
        """
        ...

    async def update_review(
        self,
        reviewed: EvidenceSubmission,
        expected_status: str,
    ) -> EvidenceSubmission | None:
        """Store a review transition if the stored status still matches.

        Args:
            reviewed: Submission carrying the new status and reviewer fields.
            expected_status: Status the stored row must have for the update to apply.

        Returns:
            The updated submission, or None when the guard did not match
            (another reviewer got there first).
        """
        ...

    async def latest_submission_per_form_type(self, organization_id: str) -> list[SubmissionAggregate]:
        """Group an organization's submissions by form type.

        Args:
            organization_id: Owning organization.

        Returns:
            One row per persisted form type with at least one submission,
            carrying the max submitted_at of the group.
        """
        ...


class ITaskRepository(Protocol):
    """Repository contract for reading tasks with their evidence automations."""

    async def list_with_latest_runs(self, organization_id: str) -> list[Task]:
        """List an organization's tasks.

        Each automation carries only its single most recent run.

        Args:
            organization_id: Owning organization.

        Returns:
            List of Task values.
        """
        ...


class INotificationDispatcher(Protocol):
    """Contract for delivering notification payloads (email, push)."""

    async def dispatch(self, workflow: str, recipient_ids: list[str], payload: dict[str, Any]) -> None:
        """Deliver a notification.

        Args:
            workflow: Notification workflow identifier.
            recipient_ids: Users to notify.
            payload: Template payload.
        """
        ...
