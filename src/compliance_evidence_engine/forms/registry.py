"""Evidence form registry — catalog of every evidence form type and its fields.

Provides the authoritative definition of each form an organization can submit:
- Title, description, and category
- Ordered field list (text, date, select, textarea, file, matrix)
- Submission-date mode (system-stamped or user-supplied)
- Hidden/optional flags that exclude a form from document completeness totals

This module is the single source of truth for form metadata. It is consumed
by the type mapper, the submission schemas, and the documents progress
calculation.
"""

from dataclasses import dataclass
from enum import Enum


class EvidenceFormType(str, Enum):
    """External (user-facing, hyphenated) evidence form type identifiers."""

    MEETING = "meeting"
    BOARD_MEETING = "board-meeting"
    IT_LEADERSHIP_MEETING = "it-leadership-meeting"
    RISK_COMMITTEE_MEETING = "risk-committee-meeting"
    ACCESS_REQUEST = "access-request"
    WHISTLEBLOWER_REPORT = "whistleblower-report"
    PENETRATION_TEST = "penetration-test"
    RBAC_MATRIX = "rbac-matrix"
    INFRASTRUCTURE_INVENTORY = "infrastructure-inventory"
    EMPLOYEE_PERFORMANCE_EVALUATION = "employee-performance-evaluation"
    NETWORK_DIAGRAM = "network-diagram"
    TABLETOP_EXERCISE = "tabletop-exercise"


class FieldType(str, Enum):
    """Closed set of field variants a form can render."""

    TEXT = "text"
    DATE = "date"
    SELECT = "select"
    TEXTAREA = "textarea"
    FILE = "file"
    MATRIX = "matrix"


SUBMISSION_DATE_AUTO = "auto"
SUBMISSION_DATE_CUSTOM = "custom"


@dataclass(frozen=True)
class SelectOption:
    """A selectable value for a select field."""

    value: str
    label: str


@dataclass(frozen=True)
class MatrixColumn:
    """A named column inside a matrix field.

    Attributes:
        key: Payload key of the cell value within each row.
        label: Column header shown to the user.
        required: Whether every row must carry a non-blank value for this column.
        placeholder: Optional hint text for empty cells.
    """

    key: str
    label: str
    required: bool = True
    placeholder: str | None = None


@dataclass(frozen=True)
class FieldDefinition:
    """A single field within an evidence form.

    Attributes:
        key: Payload key for the field value.
        label: Human-readable field label.
        type: Field variant.
        required: Whether the field must be supplied.
        placeholder: Optional hint text.
        options: Allowed values for select fields.
        columns: Column definitions for matrix fields.
        add_row_label: Button text for adding a matrix row.
    """

    key: str
    label: str
    type: FieldType
    required: bool = True
    placeholder: str | None = None
    options: tuple[SelectOption, ...] = ()
    columns: tuple[MatrixColumn, ...] = ()
    add_row_label: str | None = None

    @property
    def is_matrix(self) -> bool:
        return self.type is FieldType.MATRIX

    @property
    def required_columns(self) -> tuple[MatrixColumn, ...]:
        return tuple(column for column in self.columns if column.required)


@dataclass(frozen=True)
class FormDefinition:
    """Complete definition of an evidence form.

    Attributes:
        type: External form type identifier.
        title: Short human-readable title.
        description: What the evidence demonstrates.
        category: Grouping used on the documents page.
        submission_date_mode: "auto" when the system stamps the submission
            time, "custom" when the user supplies it.
        fields: Ordered field list.
        hidden: Excluded from listings and completeness totals.
        optional: Listed but excluded from completeness totals.
    """

    type: EvidenceFormType
    title: str
    description: str
    category: str
    submission_date_mode: str
    fields: tuple[FieldDefinition, ...]
    hidden: bool = False
    optional: bool = False

    @property
    def counts_toward_documents(self) -> bool:
        return not self.hidden and not self.optional

    def get_field(self, key: str) -> FieldDefinition | None:
        for form_field in self.fields:
            if form_field.key == key:
                return form_field
        return None

    @property
    def matrix_fields(self) -> tuple[FieldDefinition, ...]:
        return tuple(form_field for form_field in self.fields if form_field.is_matrix)


@dataclass(frozen=True)
class MeetingSubType:
    """A meeting subtype that rolls up into the single "meeting" document."""

    value: EvidenceFormType
    label: str
    minutes_placeholder: str


# ---------------------------------------------------------------------------
# Meeting subtypes
# ---------------------------------------------------------------------------

MEETING_SUB_TYPES: tuple[MeetingSubType, ...] = (
    MeetingSubType(
        value=EvidenceFormType.BOARD_MEETING,
        label="Board Meeting",
        minutes_placeholder=(
            "Summarize board oversight of security and compliance: risks reviewed, "
            "decisions taken, and resolutions approved."
        ),
    ),
    MeetingSubType(
        value=EvidenceFormType.IT_LEADERSHIP_MEETING,
        label="IT Leadership Meeting",
        minutes_placeholder=(
            "Summarize infrastructure changes, open security issues, access reviews, "
            "and action items assigned to IT owners."
        ),
    ),
    MeetingSubType(
        value=EvidenceFormType.RISK_COMMITTEE_MEETING,
        label="Risk Committee Meeting",
        minutes_placeholder=(
            "Summarize risk register updates, new or changed risks, treatment decisions, "
            "and accepted residual risk."
        ),
    ),
)

MEETING_SUB_TYPE_VALUES: tuple[EvidenceFormType, ...] = tuple(m.value for m in MEETING_SUB_TYPES)


def _submission_date_field() -> FieldDefinition:
    return FieldDefinition(key="submissionDate", label="Submission date", type=FieldType.DATE)


def meeting_fields(minutes_placeholder: str = "") -> tuple[FieldDefinition, ...]:
    """Build the meeting minutes field list with a subtype-specific placeholder.

    Args:
        minutes_placeholder: Hint text for the meeting minutes field.

    Returns:
        Ordered field definitions shared by all meeting forms.
    """
    return (
        _submission_date_field(),
        FieldDefinition(key="attendees", label="Attendees", type=FieldType.TEXTAREA),
        FieldDefinition(key="date", label="Meeting date", type=FieldType.DATE),
        FieldDefinition(
            key="meetingMinutes",
            label="Meeting minutes",
            type=FieldType.TEXTAREA,
            placeholder=minutes_placeholder or None,
        ),
        FieldDefinition(key="meetingMinutesApprovedBy", label="Approved by", type=FieldType.TEXT),
        FieldDefinition(key="approvedDate", label="Approved date", type=FieldType.DATE),
    )


def _meeting_definition(
    form_type: EvidenceFormType,
    title: str,
    placeholder: str,
    hidden: bool,
) -> FormDefinition:
    return FormDefinition(
        type=form_type,
        title=title,
        description="Minutes of a recurring governance meeting, with attendees and approval.",
        category="Governance",
        submission_date_mode=SUBMISSION_DATE_CUSTOM,
        fields=meeting_fields(placeholder),
        hidden=hidden,
    )


# ---------------------------------------------------------------------------
# Form definitions
# ---------------------------------------------------------------------------

_FORM_DEFINITION_LIST: tuple[FormDefinition, ...] = (
    _meeting_definition(EvidenceFormType.MEETING, "Meeting Minutes", "", hidden=False),
    *(
        _meeting_definition(sub.value, sub.label, sub.minutes_placeholder, hidden=True)
        for sub in MEETING_SUB_TYPES
    ),
    FormDefinition(
        type=EvidenceFormType.ACCESS_REQUEST,
        title="Access Request",
        description="Record of a user access request and who approved it.",
        category="Access Control",
        submission_date_mode=SUBMISSION_DATE_AUTO,
        fields=(
            _submission_date_field(),
            FieldDefinition(key="userName", label="User name", type=FieldType.TEXT),
            FieldDefinition(key="accountsNeeded", label="Accounts needed", type=FieldType.TEXT),
            FieldDefinition(
                key="permissionsNeeded",
                label="Permissions needed",
                type=FieldType.SELECT,
                options=(
                    SelectOption(value="read", label="Read"),
                    SelectOption(value="write", label="Write"),
                    SelectOption(value="admin", label="Admin"),
                ),
            ),
            FieldDefinition(key="reasonForRequest", label="Reason for request", type=FieldType.TEXTAREA),
            FieldDefinition(key="accessGrantedBy", label="Access granted by", type=FieldType.TEXT),
            FieldDefinition(key="dateAccessGranted", label="Date access granted", type=FieldType.DATE),
        ),
    ),
    FormDefinition(
        type=EvidenceFormType.WHISTLEBLOWER_REPORT,
        title="Whistleblower Report",
        description="Confidential report of suspected misconduct and the evidence supplied.",
        category="Governance",
        submission_date_mode=SUBMISSION_DATE_AUTO,
        optional=True,
        fields=(
            _submission_date_field(),
            FieldDefinition(key="incidentDate", label="Incident date", type=FieldType.DATE),
            FieldDefinition(key="complaintDetails", label="Complaint details", type=FieldType.TEXTAREA),
            FieldDefinition(
                key="individualsInvolved", label="Individuals involved", type=FieldType.TEXTAREA
            ),
            FieldDefinition(key="evidence", label="Evidence", type=FieldType.TEXTAREA),
            FieldDefinition(
                key="evidenceFile", label="Supporting file", type=FieldType.FILE, required=False
            ),
        ),
    ),
    FormDefinition(
        type=EvidenceFormType.PENETRATION_TEST,
        title="Penetration Test",
        description="Report from an independent penetration test and its key findings.",
        category="Security Testing",
        submission_date_mode=SUBMISSION_DATE_CUSTOM,
        fields=(
            _submission_date_field(),
            FieldDefinition(key="testDate", label="Test date", type=FieldType.DATE),
            FieldDefinition(key="vendorName", label="Vendor name", type=FieldType.TEXT),
            FieldDefinition(key="summary", label="Summary of findings", type=FieldType.TEXTAREA),
            FieldDefinition(key="pentestReport", label="Penetration test report", type=FieldType.FILE),
        ),
    ),
    FormDefinition(
        type=EvidenceFormType.RBAC_MATRIX,
        title="RBAC Matrix",
        description="Role-based access matrix listing each system role, its scope and approver.",
        category="Access Control",
        submission_date_mode=SUBMISSION_DATE_AUTO,
        fields=(
            _submission_date_field(),
            FieldDefinition(
                key="matrixRows",
                label="RBAC entries",
                type=FieldType.MATRIX,
                add_row_label="Add role",
                columns=(
                    MatrixColumn(key="system", label="System", placeholder="e.g. AWS"),
                    MatrixColumn(key="roleName", label="Role name", placeholder="e.g. Administrator"),
                    MatrixColumn(key="permissionsScope", label="Permissions / Scope"),
                    MatrixColumn(key="approvedBy", label="Approved by"),
                    MatrixColumn(key="lastReviewed", label="Last reviewed"),
                ),
            ),
        ),
    ),
    FormDefinition(
        type=EvidenceFormType.INFRASTRUCTURE_INVENTORY,
        title="Infrastructure Inventory",
        description="Inventory of infrastructure assets with environment and accountable owner.",
        category="Asset Management",
        submission_date_mode=SUBMISSION_DATE_AUTO,
        fields=(
            _submission_date_field(),
            FieldDefinition(
                key="inventoryRows",
                label="Infrastructure assets",
                type=FieldType.MATRIX,
                add_row_label="Add asset",
                columns=(
                    MatrixColumn(key="assetId", label="Asset ID"),
                    MatrixColumn(key="systemType", label="System type"),
                    MatrixColumn(key="environment", label="Environment", placeholder="e.g. Production"),
                    MatrixColumn(key="location", label="Location", required=False),
                    MatrixColumn(key="assignedOwner", label="Assigned owner"),
                    MatrixColumn(key="lastReviewed", label="Last reviewed"),
                ),
            ),
        ),
    ),
    FormDefinition(
        type=EvidenceFormType.EMPLOYEE_PERFORMANCE_EVALUATION,
        title="Employee Performance Evaluation",
        description="Signed manager evaluation for an employee review period.",
        category="People",
        submission_date_mode=SUBMISSION_DATE_CUSTOM,
        fields=(
            _submission_date_field(),
            FieldDefinition(key="employeeName", label="Employee name", type=FieldType.TEXT),
            FieldDefinition(key="manager", label="Manager", type=FieldType.TEXT),
            FieldDefinition(key="reviewPeriodTo", label="Review period end date", type=FieldType.DATE),
            FieldDefinition(
                key="overallRating",
                label="Overall rating",
                type=FieldType.SELECT,
                options=(
                    SelectOption(value="needs-improvement", label="Needs improvement"),
                    SelectOption(value="meets-expectations", label="Meets expectations"),
                    SelectOption(value="exceeds-expectations", label="Exceeds expectations"),
                ),
            ),
            FieldDefinition(key="managerComments", label="Manager comments", type=FieldType.TEXTAREA),
            FieldDefinition(key="managerSignature", label="Manager signature", type=FieldType.TEXT),
            FieldDefinition(
                key="managerSignatureDate", label="Manager signature date", type=FieldType.DATE
            ),
        ),
    ),
    FormDefinition(
        type=EvidenceFormType.NETWORK_DIAGRAM,
        title="Network Diagram",
        description="Current network diagram, either linked or uploaded.",
        category="Asset Management",
        submission_date_mode=SUBMISSION_DATE_AUTO,
        fields=(
            _submission_date_field(),
            FieldDefinition(
                key="diagramUrl",
                label="Diagram link",
                type=FieldType.TEXT,
                required=False,
                placeholder="https://",
            ),
            FieldDefinition(key="diagramFile", label="Diagram file", type=FieldType.FILE, required=False),
        ),
    ),
    FormDefinition(
        type=EvidenceFormType.TABLETOP_EXERCISE,
        title="Tabletop Exercise",
        description="Incident response tabletop exercise with attendees and after-action items.",
        category="Incident Response",
        submission_date_mode=SUBMISSION_DATE_CUSTOM,
        fields=(
            _submission_date_field(),
            FieldDefinition(key="exerciseDate", label="Exercise date", type=FieldType.DATE),
            FieldDefinition(key="facilitator", label="Facilitator", type=FieldType.TEXT),
            FieldDefinition(
                key="scenarioType",
                label="Scenario type",
                type=FieldType.SELECT,
                options=(
                    SelectOption(value="data-breach", label="Data breach"),
                    SelectOption(value="ransomware", label="Ransomware"),
                    SelectOption(value="insider-threat", label="Insider threat"),
                    SelectOption(value="phishing", label="Phishing"),
                    SelectOption(value="ddos", label="DDoS"),
                    SelectOption(value="third-party-breach", label="Third-party breach"),
                    SelectOption(value="natural-disaster", label="Natural disaster"),
                    SelectOption(value="custom", label="Custom"),
                ),
            ),
            FieldDefinition(
                key="scenarioDescription", label="Scenario description", type=FieldType.TEXTAREA
            ),
            FieldDefinition(
                key="attendees",
                label="Attendees",
                type=FieldType.MATRIX,
                add_row_label="Add attendee",
                columns=(
                    MatrixColumn(key="name", label="Name"),
                    MatrixColumn(key="roleTitle", label="Role / Title"),
                    MatrixColumn(key="department", label="Department"),
                ),
            ),
            FieldDefinition(key="sessionNotes", label="Session notes", type=FieldType.TEXTAREA),
            FieldDefinition(
                key="actionItems",
                label="After-action findings",
                type=FieldType.MATRIX,
                add_row_label="Add finding",
                columns=(
                    MatrixColumn(key="finding", label="Finding"),
                    MatrixColumn(key="improvementAction", label="Improvement action"),
                    MatrixColumn(key="assignedOwner", label="Assigned owner"),
                    MatrixColumn(key="dueDate", label="Due date"),
                ),
            ),
            FieldDefinition(
                key="evidenceFile", label="Supporting file", type=FieldType.FILE, required=False
            ),
        ),
    ),
)

FORM_DEFINITIONS: dict[EvidenceFormType, FormDefinition] = {
    definition.type: definition for definition in _FORM_DEFINITION_LIST
}

_missing_definitions = set(EvidenceFormType) - set(FORM_DEFINITIONS)
if _missing_definitions:
    raise RuntimeError(
        f"Evidence form types without a definition: {sorted(t.value for t in _missing_definitions)}"
    )


def get_form_definition(form_type: EvidenceFormType) -> FormDefinition:
    """Return the definition for a form type.

    Args:
        form_type: External form type.

    Returns:
        The FormDefinition.

    Raises:
        KeyError: If form_type is not a registered EvidenceFormType.
    """
    return FORM_DEFINITIONS[form_type]


def list_form_definitions(include_hidden: bool = False) -> list[FormDefinition]:
    """Return form definitions in catalog order.

    Args:
        include_hidden: Include hidden forms such as the meeting subtypes.

    Returns:
        Ordered list of FormDefinition instances.
    """
    return [d for d in _FORM_DEFINITION_LIST if include_hidden or not d.hidden]


def parse_form_type(value: str | None) -> EvidenceFormType | None:
    """Parse an external form type from an untrusted string such as a URL segment.

    Args:
        value: Candidate identifier.

    Returns:
        The EvidenceFormType, or None when the value is not a known form type
        (callers treat None as "not found").
    """
    if not value:
        return None
    try:
        return EvidenceFormType(value)
    except ValueError:
        return None


def is_meeting_sub_type(form_type: EvidenceFormType) -> bool:
    return form_type in MEETING_SUB_TYPE_VALUES


def related_form_types(form_type: EvidenceFormType) -> tuple[EvidenceFormType, ...]:
    """Return every stored form type that belongs to a document's family.

    The "meeting" document is stored as three independent subtypes (plus the
    legacy parent type); every other document maps to itself.

    Args:
        form_type: The document's external form type.

    Returns:
        Tuple of form types whose submissions and findings belong to the document.
    """
    if form_type is EvidenceFormType.MEETING:
        return (*MEETING_SUB_TYPE_VALUES, EvidenceFormType.MEETING)
    return (form_type,)
