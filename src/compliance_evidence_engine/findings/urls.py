"""Finding URL router — canonical in-app link for a finding.

The link is embedded verbatim in email and push notification payloads:
- Task target:        {base}/{org}/tasks/{taskId}
- Submission target:  {base}/{org}/documents/{formType}/submissions/{submissionId}
- Form type target:   {base}/{org}/documents/{formType}

The form type segment is always the external (hyphenated) identifier. Path
segments are percent-encoded so ids can never inject extra path components.
"""

from urllib.parse import quote

from compliance_evidence_engine.findings.targets import (
    Finding,
    FindingTarget,
    SubmissionTarget,
    TaskTarget,
)


def _segment(value: str) -> str:
    return quote(value, safe="")


def build_target_path(organization_id: str, target: FindingTarget) -> str:
    """Return the app-relative path for a finding target, without a leading slash."""
    org = _segment(organization_id)
    if isinstance(target, TaskTarget):
        return f"{org}/tasks/{_segment(target.task_id)}"
    if isinstance(target, SubmissionTarget):
        return (
            f"{org}/documents/{target.form_type.value}"
            f"/submissions/{_segment(target.submission_id)}"
        )
    return f"{org}/documents/{target.form_type.value}"


def build_finding_url(base_url: str, organization_id: str, finding: Finding | FindingTarget) -> str:
    """Build the canonical URL for a finding.

    Args:
        base_url: Application base URL, e.g. "https://app.example.com".
        organization_id: Owning organization.
        finding: The finding, or directly its target.

    Returns:
        Absolute URL string.
    """
    target = finding.target if isinstance(finding, Finding) else finding
    return f"{base_url.rstrip('/')}/{build_target_path(organization_id, target)}"
