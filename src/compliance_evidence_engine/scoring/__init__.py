"""Compliance scoring.

Pure functions over in-memory values. The current time is always passed in.

Modules:
- freshness: Whether a document is outstanding
- documents: Document completeness counts, with meeting roll-up
- tasks: Strict task completion from status and automation runs
- overall: Category percentages and the overall compliance score
"""

from compliance_evidence_engine.scoring.documents import (
    DocumentsProgress,
    SubmissionAggregate,
    build_document_form_statuses,
    compute_documents_progress,
    is_meeting_outstanding,
)
from compliance_evidence_engine.scoring.freshness import SIX_MONTHS, is_outstanding
from compliance_evidence_engine.scoring.overall import (
    CategoryScore,
    ComplianceOverview,
    build_compliance_overview,
    calculate_overall_compliance_score,
)
from compliance_evidence_engine.scoring.tasks import (
    AutomationRun,
    EvidenceAutomation,
    Task,
    TaskCompletionSummary,
    count_strictly_completed_tasks,
    is_task_evidence_complete,
    is_task_strictly_complete,
    summarize_tasks,
)

__all__ = [
    "SIX_MONTHS",
    "AutomationRun",
    "CategoryScore",
    "ComplianceOverview",
    "DocumentsProgress",
    "EvidenceAutomation",
    "SubmissionAggregate",
    "Task",
    "TaskCompletionSummary",
    "build_compliance_overview",
    "build_document_form_statuses",
    "calculate_overall_compliance_score",
    "compute_documents_progress",
    "count_strictly_completed_tasks",
    "is_meeting_outstanding",
    "is_outstanding",
    "is_task_evidence_complete",
    "is_task_strictly_complete",
    "summarize_tasks",
]
