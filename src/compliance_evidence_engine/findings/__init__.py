"""Audit findings: targets, canonical URLs, and notifications."""

from compliance_evidence_engine.findings.targets import (
    FINDING_STATUS_ORDER,
    Finding,
    FindingStatus,
    FindingTarget,
    FormTypeTarget,
    SubmissionTarget,
    TaskTarget,
    finding_target_from_references,
    sort_findings,
)
from compliance_evidence_engine.findings.urls import build_finding_url

__all__ = [
    "FINDING_STATUS_ORDER",
    "Finding",
    "FindingStatus",
    "FindingTarget",
    "FormTypeTarget",
    "SubmissionTarget",
    "TaskTarget",
    "build_finding_url",
    "finding_target_from_references",
    "sort_findings",
]
