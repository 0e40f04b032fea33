"""Test fixtures for compliance-evidence-engine.

Provides:
- now: A fixed, timezone-aware current time
- organization_id / other_organization_id: Deterministic organization ids
- submission_repo / task_repo: Fresh in-memory repositories
- mock_dispatcher: An AsyncMock notification dispatcher that captures calls
- Factory helpers for valid form payloads, tasks, and submissions
"""

from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock

import pytest

from compliance_evidence_engine.adapters.memory import (
    InMemoryEvidenceSubmissionRepository,
    InMemoryTaskRepository,
)
from compliance_evidence_engine.core.models import EvidenceSubmission
from compliance_evidence_engine.forms.type_map import PersistedFormType
from compliance_evidence_engine.scoring.tasks import (
    RUN_STATUS_COMPLETED,
    TASK_STATUS_DONE,
    AutomationRun,
    EvidenceAutomation,
    Task,
)


@pytest.fixture()
def now() -> datetime:
    """Return a fixed current time for freshness and review assertions.

    Returns:
        2025-06-01 12:00 UTC.
    """
    return datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def organization_id() -> str:
    return "org_123"


@pytest.fixture()
def other_organization_id() -> str:
    return "org_456"


@pytest.fixture()
def submission_repo() -> InMemoryEvidenceSubmissionRepository:
    return InMemoryEvidenceSubmissionRepository()


@pytest.fixture()
def task_repo() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture()
def mock_dispatcher() -> AsyncMock:
    """Create a mock notification dispatcher.

    Returns:
        AsyncMock whose dispatch() returns None.
    """
    dispatcher = AsyncMock()
    dispatcher.dispatch.return_value = None
    return dispatcher


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


def make_meeting_payload(**overrides: Any) -> dict[str, Any]:
    """Build a valid meeting minutes payload."""
    payload: dict[str, Any] = {
        "submissionDate": "2025-05-30",
        "attendees": "Alice, Bob",
        "date": "2025-05-28",
        "meetingMinutes": "Reviewed the risk register.",
        "meetingMinutesApprovedBy": "Carol",
        "approvedDate": "2025-05-29",
    }
    payload.update(overrides)
    return payload


def make_access_request_payload(**overrides: Any) -> dict[str, Any]:
    """Build a valid access request payload."""
    payload: dict[str, Any] = {
        "userName": "dana",
        "accountsNeeded": "AWS production",
        "permissionsNeeded": "read",
        "reasonForRequest": "On-call rotation",
        "accessGrantedBy": "Erin",
        "dateAccessGranted": "2025-05-20",
    }
    payload.update(overrides)
    return payload


def make_rbac_row(**overrides: Any) -> dict[str, Any]:
    """Build a complete RBAC matrix row."""
    row: dict[str, Any] = {
        "system": "GitHub",
        "roleName": "Maintainer",
        "permissionsScope": "Merge to main",
        "approvedBy": "CTO",
        "lastReviewed": "2025-05-01",
    }
    row.update(overrides)
    return row


def make_file(**overrides: Any) -> dict[str, Any]:
    """Build an uploaded evidence file reference."""
    evidence_file: dict[str, Any] = {
        "fileName": "diagram.pdf",
        "fileKey": "org_123/diagram.pdf",
        "mimeType": "application/pdf",
        "fileSize": 2048,
    }
    evidence_file.update(overrides)
    return evidence_file


def make_passing_run(**overrides: Any) -> AutomationRun:
    """Build an automation run that passed."""
    values: dict[str, Any] = {
        "status": RUN_STATUS_COMPLETED,
        "success": True,
        "evaluation_status": "pass",
    }
    values.update(overrides)
    return AutomationRun(**values)


def make_task(
    status: str = TASK_STATUS_DONE,
    automations: tuple[EvidenceAutomation, ...] = (),
    task_id: str = "tsk_1",
) -> Task:
    """Build a task with the given status and automations."""
    return Task(status=status, evidence_automations=automations, task_id=task_id)


def make_submission(
    organization_id: str,
    form_type: PersistedFormType,
    submitted_at: datetime,
    submission_id: str = "sub_1",
    data: dict[str, Any] | None = None,
) -> EvidenceSubmission:
    """Build a pending EvidenceSubmission."""
    return EvidenceSubmission(
        submission_id=submission_id,
        organization_id=organization_id,
        form_type=form_type,
        data=data or {},
        submitted_at=submitted_at,
        submitted_by_id="usr_submitter",
    )
