"""Evidence form catalog, form-type mapping, and submission validation.

Modules:
- registry: Form types, field definitions, and form metadata
- type_map: External <-> persisted form type mapping
- submission_schemas: Per-form-type payload schemas and validation
"""

from compliance_evidence_engine.forms.registry import (
    FORM_DEFINITIONS,
    MEETING_SUB_TYPE_VALUES,
    MEETING_SUB_TYPES,
    EvidenceFormType,
    FieldDefinition,
    FieldType,
    FormDefinition,
    MatrixColumn,
    get_form_definition,
    list_form_definitions,
    parse_form_type,
    related_form_types,
)
from compliance_evidence_engine.forms.submission_schemas import (
    FieldError,
    SubmissionValidationResult,
    find_incomplete_matrix_cells,
    prepare_submission_payload,
    validate_submission,
)
from compliance_evidence_engine.forms.type_map import (
    PersistedFormType,
    coerce_external_form_type,
    to_external_form_type,
    to_persisted_form_type,
)

__all__ = [
    "FORM_DEFINITIONS",
    "MEETING_SUB_TYPES",
    "MEETING_SUB_TYPE_VALUES",
    "EvidenceFormType",
    "FieldDefinition",
    "FieldError",
    "FieldType",
    "FormDefinition",
    "MatrixColumn",
    "PersistedFormType",
    "SubmissionValidationResult",
    "coerce_external_form_type",
    "find_incomplete_matrix_cells",
    "get_form_definition",
    "list_form_definitions",
    "parse_form_type",
    "prepare_submission_payload",
    "related_form_types",
    "to_external_form_type",
    "to_persisted_form_type",
    "validate_submission",
]
