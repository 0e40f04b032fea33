"""Task completion — whether a task counts as done for compliance scoring.

A task is strictly complete when its status is terminal (done or not
relevant) and every enabled evidence automation attached to it passed on its
most recent run. Disabled automations are ignored. A missing run counts as a
failure.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

TASK_STATUS_TODO = "todo"
TASK_STATUS_IN_PROGRESS = "in_progress"
TASK_STATUS_DONE = "done"
TASK_STATUS_NOT_RELEVANT = "not_relevant"
TASK_STATUS_FAILED = "failed"

COMPLETE_TASK_STATUSES = frozenset({TASK_STATUS_DONE, TASK_STATUS_NOT_RELEVANT})

RUN_STATUS_COMPLETED = "completed"
EVALUATION_STATUS_FAIL = "fail"


@dataclass(frozen=True)
class AutomationRun:
    """The most recent execution of an evidence automation.

    Attributes:
        status: Execution status (e.g., "pending", "running", "completed", "failed").
        success: Whether the run itself succeeded; None when unknown.
        evaluation_status: Outcome of the evidence evaluation ("pass", "fail") or None.
        created_at: When the run started.
    """

    status: str
    success: bool | None
    evaluation_status: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class EvidenceAutomation:
    """An automated evidence check attached to a task."""

    is_enabled: bool
    latest_run: AutomationRun | None = None
    automation_id: str | None = None


@dataclass(frozen=True)
class Task:
    """An organization-scoped unit of compliance work."""

    status: str
    evidence_automations: tuple[EvidenceAutomation, ...] = ()
    task_id: str | None = None
    title: str | None = None


@dataclass(frozen=True)
class TaskCompletionSummary:
    """Strict completion counts for an organization's tasks."""

    total_tasks: int
    done_tasks: int
    incomplete_tasks: list[Task] = field(default_factory=list)


def is_successful_automation_run(run: AutomationRun | None) -> bool:
    if run is None:
        return False
    return (
        run.status == RUN_STATUS_COMPLETED
        and run.success is True
        and run.evaluation_status != EVALUATION_STATUS_FAIL
    )


def is_task_evidence_complete(task: Task) -> bool:
    """Return whether every enabled automation on a task passed its latest run.

    Args:
        task: The task to check.

    Returns:
        True when there are no enabled automations or all of them passed.
    """
    enabled = [automation for automation in task.evidence_automations if automation.is_enabled]
    return all(is_successful_automation_run(automation.latest_run) for automation in enabled)


def is_task_strictly_complete(task: Task) -> bool:
    """Return whether a task has a terminal status and complete evidence."""
    if task.status not in COMPLETE_TASK_STATUSES:
        return False
    return is_task_evidence_complete(task)


def count_strictly_completed_tasks(tasks: Iterable[Task]) -> int:
    return sum(1 for task in tasks if is_task_strictly_complete(task))


def summarize_tasks(tasks: Sequence[Task]) -> TaskCompletionSummary:
    """Summarize strict task completion.

    Args:
        tasks: Every task of the organization.

    Returns:
        TaskCompletionSummary with the incomplete tasks listed in input order.
    """
    incomplete = [task for task in tasks if not is_task_strictly_complete(task)]
    return TaskCompletionSummary(
        total_tasks=len(tasks),
        done_tasks=len(tasks) - len(incomplete),
        incomplete_tasks=incomplete,
    )
