"""FindingNotifier — builds finding notification payloads and hands them off.

Delivery (email, push) belongs to an injected dispatcher. Notification
failures are logged and never propagate into the operation that raised the
finding.

Workflows:
- finding-created: a new finding was raised
- finding-status-changed: a finding moved to a new status
"""

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field

from compliance_evidence_engine.core.interfaces import INotificationDispatcher
from compliance_evidence_engine.findings.targets import Finding, FindingStatus, target_form_type
from compliance_evidence_engine.findings.urls import build_finding_url
from compliance_evidence_engine.forms.registry import get_form_definition
from compliance_evidence_engine.observability import get_logger
from compliance_evidence_engine.settings import get_settings

logger = get_logger(__name__)

WORKFLOW_FINDING_CREATED = "finding-created"
WORKFLOW_FINDING_STATUS_CHANGED = "finding-status-changed"


@dataclass(frozen=True)
class FindingNotification:
    """Template payload for a finding notification."""

    workflow: str
    organization_id: str
    finding_id: str
    finding_url: str
    finding_content: str
    finding_type: str | None
    actor_user_id: str
    actor_name: str
    target_title: str | None = None
    organization_name: str | None = None
    old_status: str | None = None
    new_status: str | None = None
    recipient_user_ids: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        payload = asdict(self)
        payload.pop("workflow")
        payload.pop("recipient_user_ids")
        return payload


class FindingNotifier:
    """Builds and dispatches finding notifications.

    Args:
        dispatcher: Delivery adapter.
        base_url: Application base URL; defaults to the configured app_base_url.
    """

    def __init__(self, dispatcher: INotificationDispatcher, base_url: str | None = None) -> None:
        self._dispatcher = dispatcher
        self._base_url = base_url if base_url is not None else get_settings().app_base_url

    async def notify_finding_created(
        self,
        finding: Finding,
        actor_user_id: str,
        actor_name: str,
        recipient_user_ids: Sequence[str],
        target_title: str | None = None,
        organization_name: str | None = None,
    ) -> FindingNotification | None:
        """Notify recipients that a finding was raised.

        The actor is never notified about their own finding.

        Args:
            finding: The new finding.
            actor_user_id: User who raised it.
            actor_name: Display name of that user.
            recipient_user_ids: Candidate recipients (task assignee, submitter, admins).
            target_title: Task title or document title; derived from the form
                definition for document targets when not given.
            organization_name: Display name of the organization.

        Returns:
            The dispatched notification, or None when there was nobody to notify.
        """
        return await self._send(
            workflow=WORKFLOW_FINDING_CREATED,
            finding=finding,
            actor_user_id=actor_user_id,
            actor_name=actor_name,
            recipient_user_ids=recipient_user_ids,
            target_title=target_title,
            organization_name=organization_name,
        )

    async def notify_status_changed(
        self,
        finding: Finding,
        old_status: FindingStatus,
        actor_user_id: str,
        actor_name: str,
        recipient_user_ids: Sequence[str],
        target_title: str | None = None,
        organization_name: str | None = None,
    ) -> FindingNotification | None:
        """Notify recipients that a finding changed status.

        Args:
            finding: The finding carrying its new status.
            old_status: Status before the change.
            actor_user_id: User who changed the status.
            actor_name: Display name of that user.
            recipient_user_ids: Candidate recipients.
            target_title: Task or document title.
            organization_name: Display name of the organization.

        Returns:
            The dispatched notification, or None when nothing was sent.
        """
        if old_status == finding.status:
            return None
        return await self._send(
            workflow=WORKFLOW_FINDING_STATUS_CHANGED,
            finding=finding,
            actor_user_id=actor_user_id,
            actor_name=actor_name,
            recipient_user_ids=recipient_user_ids,
            target_title=target_title,
            organization_name=organization_name,
            old_status=old_status.value,
            new_status=finding.status.value,
        )

    async def _send(
        self,
        workflow: str,
        finding: Finding,
        actor_user_id: str,
        actor_name: str,
        recipient_user_ids: Sequence[str],
        target_title: str | None,
        organization_name: str | None,
        old_status: str | None = None,
        new_status: str | None = None,
    ) -> FindingNotification | None:
        recipients = list(dict.fromkeys(r for r in recipient_user_ids if r and r != actor_user_id))
        if not recipients:
            logger.info(
                "No recipients for finding notification",
                workflow=workflow,
                finding_id=finding.finding_id,
            )
            return None

        if target_title is None:
            form_type = target_form_type(finding.target)
            if form_type is not None:
                target_title = get_form_definition(form_type).title

        notification = FindingNotification(
            workflow=workflow,
            organization_id=finding.organization_id,
            finding_id=finding.finding_id,
            finding_url=build_finding_url(self._base_url, finding.organization_id, finding),
            finding_content=finding.content,
            finding_type=finding.finding_type,
            actor_user_id=actor_user_id,
            actor_name=actor_name,
            target_title=target_title,
            organization_name=organization_name,
            old_status=old_status,
            new_status=new_status,
            recipient_user_ids=recipients,
        )

        try:
            await self._dispatcher.dispatch(workflow, recipients, notification.to_payload())
        except Exception as exc:
            logger.error(
                "Failed to dispatch finding notification",
                workflow=workflow,
                finding_id=finding.finding_id,
                error=str(exc),
            )
            return None

        logger.info(
            "Finding notification dispatched",
            workflow=workflow,
            finding_id=finding.finding_id,
            recipient_count=len(recipients),
        )
        return notification
