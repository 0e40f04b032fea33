"""Pydantic submission schemas — one payload schema per evidence form type.

Each form type maps to exactly one schema class. Schemas enforce:
- Required scalar fields, with "<Label> is required" messages
- Enumerated fields (permission levels, ratings, scenario types)
- Matrix fields: at least one row, and non-blank trimmed values for every
  required column in every row
- Cross-field rules (a network diagram needs either a link or a file)

Payload keys are camelCase on the wire; models use snake_case attributes with
camelCase aliases. validate_submission() never raises for a bad payload: it
returns every violation as a field-path + message pair.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    PlainValidator,
    ValidationInfo,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from compliance_evidence_engine.forms.registry import (
    SUBMISSION_DATE_AUTO,
    EvidenceFormType,
    get_form_definition,
)
from compliance_evidence_engine.observability import get_logger

logger = get_logger(__name__)


def to_camel(name: str) -> str:
    """Convert a snake_case attribute name to its camelCase payload key."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


# ---------------------------------------------------------------------------
# Field type builders
# ---------------------------------------------------------------------------


def _required_message(label: str | None) -> str:
    return f"{label} is required" if label else "This field is required"


def required_text(label: str | None = None, *, trim: bool = False) -> Any:
    """Annotated string type that must be present and non-empty.

    Args:
        label: Field label used in the error message.
        trim: Strip surrounding whitespace before the emptiness check and in
            the normalized value.

    Returns:
        An Annotated type usable as a model field annotation.
    """
    message = _required_message(label)

    def _check(value: Any) -> str:
        if not isinstance(value, str):
            raise PydanticCustomError("required", message)
        text = value.strip() if trim else value
        if not text:
            raise PydanticCustomError("required", message)
        return text

    return Annotated[str | None, PlainValidator(_check)]


def choice(options: tuple[str, ...], message: str) -> Any:
    """Annotated string type restricted to a fixed set of values."""

    def _check(value: Any) -> str:
        if not isinstance(value, str) or value not in options:
            raise PydanticCustomError("enum", message)
        return value

    return Annotated[str | None, PlainValidator(_check)]


def _strip_if_text(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


OptionalTrimmedText = Annotated[str | None, BeforeValidator(_strip_if_text)]


def _present(message: str) -> Callable[[Any], Any]:
    def _check(value: Any) -> Any:
        if value is None:
            raise PydanticCustomError("required", message)
        return value

    return _check


def _min_rows(message: str) -> Callable[[list[Any] | None], list[Any]]:
    def _check(rows: list[Any] | None) -> list[Any]:
        if not rows:
            raise PydanticCustomError("too_short", message)
        return rows

    return _check


class SubmissionModel(BaseModel):
    """Base for every submission payload schema.

    Unknown keys are dropped. Defaults are validated so that a missing
    required field reports its own labelled message.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        extra="ignore",
    )


class EvidenceFormFile(SubmissionModel):
    """Reference to an uploaded evidence file. Storage is handled elsewhere."""

    file_name: required_text("File name") = None
    file_key: required_text("File key") = None
    mime_type: str | None = None
    file_size: int | None = None


def required_file(label: str) -> Any:
    return Annotated[EvidenceFormFile | None, AfterValidator(_present(_required_message(label)))]


def required_rows(row_model: type[SubmissionModel], message: str) -> Any:
    return Annotated[list[row_model] | None, AfterValidator(_min_rows(message))]  # type: ignore[valid-type]


SubmissionDate = required_text("Submission date")


# ---------------------------------------------------------------------------
# Meeting minutes (parent type and all three subtypes)
# ---------------------------------------------------------------------------


class MeetingSubmission(SubmissionModel):
    submission_date: SubmissionDate = None
    attendees: required_text("Attendees") = None
    date: required_text("Meeting date") = None
    meeting_minutes: required_text("Meeting minutes") = None
    meeting_minutes_approved_by: required_text("Approved by") = None
    approved_date: required_text("Approved date") = None


# ---------------------------------------------------------------------------
# Access request
# ---------------------------------------------------------------------------

PERMISSION_LEVELS: tuple[str, ...] = ("read", "write", "admin")


class AccessRequestSubmission(SubmissionModel):
    submission_date: SubmissionDate = None
    user_name: required_text("User name") = None
    accounts_needed: required_text("Accounts needed") = None
    permissions_needed: choice(PERMISSION_LEVELS, "Please select a permissions level") = None
    reason_for_request: required_text("Reason for request") = None
    access_granted_by: required_text("Access granted by") = None
    date_access_granted: required_text("Date access granted") = None


class WhistleblowerReportSubmission(SubmissionModel):
    submission_date: SubmissionDate = None
    incident_date: required_text("Incident date") = None
    complaint_details: required_text("Complaint details") = None
    individuals_involved: required_text("Individuals involved") = None
    evidence: required_text("Evidence") = None
    evidence_file: EvidenceFormFile | None = None


class PenetrationTestSubmission(SubmissionModel):
    submission_date: SubmissionDate = None
    test_date: required_text("Test date") = None
    vendor_name: required_text("Vendor name") = None
    summary: required_text("Summary of findings") = None
    pentest_report: required_file("Penetration test report") = None


# ---------------------------------------------------------------------------
# Matrix forms
# ---------------------------------------------------------------------------


class RbacMatrixRow(SubmissionModel):
    system: required_text("System", trim=True) = None
    role_name: required_text("Role name", trim=True) = None
    permissions_scope: required_text("Permissions / Scope", trim=True) = None
    approved_by: required_text("Approved by", trim=True) = None
    last_reviewed: required_text("Last reviewed", trim=True) = None


class RbacMatrixSubmission(SubmissionModel):
    submission_date: SubmissionDate = None
    matrix_rows: required_rows(RbacMatrixRow, "At least one RBAC entry is required") = None


class InfrastructureInventoryRow(SubmissionModel):
    asset_id: required_text("Asset ID", trim=True) = None
    system_type: required_text("System type", trim=True) = None
    environment: required_text("Environment", trim=True) = None
    location: OptionalTrimmedText = None
    assigned_owner: required_text("Assigned owner", trim=True) = None
    last_reviewed: required_text("Last reviewed", trim=True) = None


class InfrastructureInventorySubmission(SubmissionModel):
    submission_date: SubmissionDate = None
    inventory_rows: required_rows(
        InfrastructureInventoryRow, "At least one infrastructure asset is required"
    ) = None


OVERALL_RATINGS: tuple[str, ...] = (
    "needs-improvement",
    "meets-expectations",
    "exceeds-expectations",
)


class EmployeePerformanceEvaluationSubmission(SubmissionModel):
    submission_date: SubmissionDate = None
    employee_name: required_text("Employee name", trim=True) = None
    manager: required_text("Manager", trim=True) = None
    review_period_to: required_text("Review period end date") = None
    overall_rating: choice(OVERALL_RATINGS, "Please select an overall rating") = None
    manager_comments: required_text("Manager comments", trim=True) = None
    manager_signature: required_text("Manager signature", trim=True) = None
    manager_signature_date: required_text("Manager signature date") = None


class NetworkDiagramSubmission(SubmissionModel):
    """Either a diagram link or an uploaded file must be supplied.

    The error for a missing diagram is reported on ``diagramFile``.
    """

    submission_date: SubmissionDate = None
    diagram_url: OptionalTrimmedText = None
    diagram_file: EvidenceFormFile | None = None

    @field_validator("diagram_file", mode="after")
    @classmethod
    def _require_link_or_file(
        cls, value: EvidenceFormFile | None, info: ValidationInfo
    ) -> EvidenceFormFile | None:
        if value is None and not info.data.get("diagram_url"):
            raise PydanticCustomError(
                "link_or_file", "Provide either a link to the diagram or upload a file"
            )
        return value


SCENARIO_TYPES: tuple[str, ...] = (
    "data-breach",
    "ransomware",
    "insider-threat",
    "phishing",
    "ddos",
    "third-party-breach",
    "natural-disaster",
    "custom",
)


class TabletopAttendeeRow(SubmissionModel):
    name: required_text("Name", trim=True) = None
    role_title: required_text("Role / Title", trim=True) = None
    department: required_text("Department", trim=True) = None


class TabletopActionItemRow(SubmissionModel):
    finding: required_text("Finding", trim=True) = None
    improvement_action: required_text("Improvement action", trim=True) = None
    assigned_owner: required_text("Assigned owner", trim=True) = None
    due_date: required_text("Due date", trim=True) = None


class TabletopExerciseSubmission(SubmissionModel):
    submission_date: SubmissionDate = None
    exercise_date: required_text("Exercise date") = None
    facilitator: required_text("Facilitator", trim=True) = None
    scenario_type: choice(SCENARIO_TYPES, "Please select a scenario type") = None
    scenario_description: required_text("Scenario description") = None
    attendees: required_rows(TabletopAttendeeRow, "At least one attendee is required") = None
    session_notes: required_text("Session notes") = None
    action_items: required_rows(
        TabletopActionItemRow, "At least one after-action finding is required"
    ) = None
    evidence_file: EvidenceFormFile | None = None


# ---------------------------------------------------------------------------
# Schema registry
# ---------------------------------------------------------------------------

SUBMISSION_SCHEMAS: dict[EvidenceFormType, type[SubmissionModel]] = {
    EvidenceFormType.MEETING: MeetingSubmission,
    EvidenceFormType.BOARD_MEETING: MeetingSubmission,
    EvidenceFormType.IT_LEADERSHIP_MEETING: MeetingSubmission,
    EvidenceFormType.RISK_COMMITTEE_MEETING: MeetingSubmission,
    EvidenceFormType.ACCESS_REQUEST: AccessRequestSubmission,
    EvidenceFormType.WHISTLEBLOWER_REPORT: WhistleblowerReportSubmission,
    EvidenceFormType.PENETRATION_TEST: PenetrationTestSubmission,
    EvidenceFormType.RBAC_MATRIX: RbacMatrixSubmission,
    EvidenceFormType.INFRASTRUCTURE_INVENTORY: InfrastructureInventorySubmission,
    EvidenceFormType.EMPLOYEE_PERFORMANCE_EVALUATION: EmployeePerformanceEvaluationSubmission,
    EvidenceFormType.NETWORK_DIAGRAM: NetworkDiagramSubmission,
    EvidenceFormType.TABLETOP_EXERCISE: TabletopExerciseSubmission,
}

_missing_schemas = set(EvidenceFormType) - set(SUBMISSION_SCHEMAS)
if _missing_schemas:
    raise RuntimeError(
        f"Evidence form types without a submission schema: {sorted(t.value for t in _missing_schemas)}"
    )


# ---------------------------------------------------------------------------
# Validation entry points
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldError:
    """A single validation failure.

    Attributes:
        path: Location of the failing value, e.g. ("matrixRows", 0, "approvedBy").
        message: Human-readable message for inline display.
    """

    path: tuple[str | int, ...]
    message: str

    @property
    def field(self) -> str | None:
        return str(self.path[0]) if self.path else None

    @property
    def row_index(self) -> int | None:
        if len(self.path) > 1 and isinstance(self.path[1], int):
            return self.path[1]
        return None

    @property
    def column(self) -> str | None:
        if len(self.path) > 2 and isinstance(self.path[2], str):
            return self.path[2]
        return None

    @property
    def dotted_path(self) -> str:
        return ".".join(str(part) for part in self.path)


@dataclass(frozen=True)
class SubmissionValidationResult:
    """Outcome of validating a candidate payload against its form schema."""

    form_type: EvidenceFormType
    data: dict[str, Any] | None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _normalize_loc(loc: tuple[int | str, ...]) -> tuple[str | int, ...]:
    return tuple(to_camel(part) if isinstance(part, str) else part for part in loc)


# Raised when a nested row or file reference is not an object
_OBJECT_TYPE_ERRORS = frozenset({"model_type", "model_attributes_type", "dict_type"})


def _error_message(form_type: EvidenceFormType, path: tuple[str | int, ...], error: Any) -> str:
    if error["type"] not in _OBJECT_TYPE_ERRORS:
        return error["msg"]
    if not path:
        return "Submission must be an object"
    form_field = get_form_definition(form_type).get_field(str(path[0]))
    label = form_field.label if form_field is not None else "This value"
    if form_field is not None and form_field.is_matrix and len(path) > 1 and isinstance(path[1], int):
        return f"Row {path[1] + 1} of {label} is invalid"
    return f"{label} is invalid"


def validate_submission(form_type: EvidenceFormType | str, payload: Any) -> SubmissionValidationResult:
    """Validate a submission payload for a form type.

    Args:
        form_type: External form type the payload is submitted for, as the
            enum or its hyphenated string value.
        payload: Candidate payload, normally a dict decoded from JSON.

    Returns:
        SubmissionValidationResult carrying the normalized camelCase payload
        when valid, or every field error when not.

    Raises:
        ValueError: If form_type is not a known external form type.
    """
    form_type = EvidenceFormType(form_type)
    schema = SUBMISSION_SCHEMAS[form_type]
    try:
        model = schema.model_validate(payload)
    except PydanticValidationError as exc:
        errors = []
        for error in exc.errors():
            path = _normalize_loc(tuple(error["loc"]))
            errors.append(FieldError(path=path, message=_error_message(form_type, path, error)))
        logger.debug(
            "Submission payload rejected",
            form_type=form_type.value,
            error_count=len(errors),
        )
        return SubmissionValidationResult(form_type=form_type, data=None, errors=errors)

    return SubmissionValidationResult(
        form_type=form_type,
        data=model.model_dump(by_alias=True, exclude_none=True),
    )


def prepare_submission_payload(
    form_type: EvidenceFormType | str,
    payload: Mapping[str, Any],
    now: datetime,
) -> dict[str, Any]:
    """Apply the form's submission-date mode to a raw payload.

    Forms in "auto" mode get ``submissionDate`` stamped with ``now``; forms in
    "custom" mode keep the user-supplied value.

    Args:
        form_type: External form type.
        payload: Raw payload.
        now: Current time, injected by the caller.

    Returns:
        A new payload dict.
    """
    form_type = EvidenceFormType(form_type)
    prepared = dict(payload)
    if get_form_definition(form_type).submission_date_mode == SUBMISSION_DATE_AUTO:
        prepared["submissionDate"] = now.isoformat()
    return prepared


@dataclass(frozen=True)
class MatrixCellError:
    """A required matrix cell left blank."""

    field_key: str
    row_index: int
    column_key: str
    message: str


def find_incomplete_matrix_cells(
    form_type: EvidenceFormType,
    payload: Mapping[str, Any],
) -> list[MatrixCellError]:
    """List required matrix cells that are blank after trimming.

    Used to point the user at the first cell to fix before the full schema
    runs. Rows are reported in order; the message uses 1-based row numbers.

    Args:
        form_type: External form type.
        payload: Raw payload.

    Returns:
        Ordered list of MatrixCellError, empty when every required cell is filled.
    """
    incomplete: list[MatrixCellError] = []
    for matrix_field in get_form_definition(form_type).matrix_fields:
        rows = payload.get(matrix_field.key)
        if not isinstance(rows, list):
            continue
        for row_index, row in enumerate(rows):
            row_values = row if isinstance(row, Mapping) else {}
            for column in matrix_field.required_columns:
                raw_value = row_values.get(column.key)
                value = raw_value.strip() if isinstance(raw_value, str) else ""
                if value:
                    continue
                incomplete.append(
                    MatrixCellError(
                        field_key=matrix_field.key,
                        row_index=row_index,
                        column_key=column.key,
                        message=f'Complete "{column.label}" in row {row_index + 1}',
                    )
                )
    return incomplete
