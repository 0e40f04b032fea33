"""Documents progress — how many required documents are up to date.

Aggregates per-form-type submission timestamps into total / completed /
outstanding counts for an organization:
- Hidden and optional forms are excluded from the total
- The "meeting" document is stored as three independent subtypes and counts
  as one document, outstanding only when all three subtypes are outstanding
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta

from compliance_evidence_engine.forms.registry import (
    MEETING_SUB_TYPE_VALUES,
    EvidenceFormType,
    FormDefinition,
    list_form_definitions,
)
from compliance_evidence_engine.forms.type_map import PersistedFormType, to_external_form_type
from compliance_evidence_engine.observability import get_logger
from compliance_evidence_engine.scoring.freshness import SIX_MONTHS, is_outstanding

logger = get_logger(__name__)

# form type -> latest submission timestamp (None when never submitted)
DocumentFormStatuses = Mapping[EvidenceFormType, datetime | None]


@dataclass(frozen=True)
class SubmissionAggregate:
    """One row of the "latest submission per form type" query.

    Attributes:
        form_type: Persisted form type of the group.
        max_submitted_at: Latest submittedAt in the group.
    """

    form_type: PersistedFormType
    max_submitted_at: datetime | None


@dataclass(frozen=True)
class DocumentsProgress:
    """Document completeness counts for one organization.

    Invariant: completed_documents + outstanding_documents == total_documents.
    """

    total_documents: int
    completed_documents: int
    outstanding_documents: int
    outstanding_form_types: tuple[EvidenceFormType, ...] = ()


def build_document_form_statuses(
    aggregates: Iterable[SubmissionAggregate],
) -> dict[EvidenceFormType, datetime | None]:
    """Build a status entry for every form type from grouped query rows.

    Args:
        aggregates: Latest-submission rows, at most one per persisted form type.

    Returns:
        Mapping of every EvidenceFormType to its latest submission time or None.
    """
    statuses: dict[EvidenceFormType, datetime | None] = {
        form_type: None for form_type in EvidenceFormType
    }
    for aggregate in aggregates:
        external = to_external_form_type(aggregate.form_type)
        if external is not None:
            statuses[external] = aggregate.max_submitted_at
    return statuses


def is_meeting_outstanding(
    statuses: DocumentFormStatuses,
    now: datetime,
    window: timedelta = SIX_MONTHS,
) -> bool:
    """Return whether the meeting document is outstanding.

    Any fresh subtype keeps the meeting document up to date.
    """
    return all(
        is_outstanding(statuses.get(sub_type), now, window) for sub_type in MEETING_SUB_TYPE_VALUES
    )


def compute_documents_progress(
    statuses: DocumentFormStatuses,
    now: datetime,
    window: timedelta = SIX_MONTHS,
    definitions: Iterable[FormDefinition] | None = None,
) -> DocumentsProgress:
    """Compute document completeness for an organization.

    Args:
        statuses: Latest submission time per form type. Missing keys count as
            never submitted.
        now: Current time.
        window: Staleness window.
        definitions: Form definitions to score. Defaults to the full catalog.

    Returns:
        DocumentsProgress with total, completed, and outstanding counts.
    """
    catalog = definitions if definitions is not None else list_form_definitions(include_hidden=True)
    included = [d for d in catalog if d.counts_toward_documents]

    outstanding: list[EvidenceFormType] = []
    for definition in included:
        if definition.type is EvidenceFormType.MEETING:
            if is_meeting_outstanding(statuses, now, window):
                outstanding.append(definition.type)
        elif is_outstanding(statuses.get(definition.type), now, window):
            outstanding.append(definition.type)

    total = len(included)
    progress = DocumentsProgress(
        total_documents=total,
        completed_documents=total - len(outstanding),
        outstanding_documents=len(outstanding),
        outstanding_form_types=tuple(outstanding),
    )
    logger.debug(
        "Documents progress computed",
        total=progress.total_documents,
        completed=progress.completed_documents,
        outstanding=progress.outstanding_documents,
    )
    return progress
