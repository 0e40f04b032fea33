"""Bidirectional mapping between external and persisted evidence form types.

External identifiers are hyphenated (``"rbac-matrix"``) and appear in URLs and
API payloads. Persisted identifiers are the storage enum values
(``"rbac_matrix"``). Both tables are written out explicitly and verified at
import time to be total over their domains and exact inverses, so a form type
added on one side and forgotten on the other fails fast at startup.
"""

from enum import Enum

from compliance_evidence_engine.forms.registry import EvidenceFormType


class PersistedFormType(str, Enum):
    """Evidence form type values as stored on submission and finding records."""

    MEETING = "meeting"
    BOARD_MEETING = "board_meeting"
    IT_LEADERSHIP_MEETING = "it_leadership_meeting"
    RISK_COMMITTEE_MEETING = "risk_committee_meeting"
    ACCESS_REQUEST = "access_request"
    WHISTLEBLOWER_REPORT = "whistleblower_report"
    PENETRATION_TEST = "penetration_test"
    RBAC_MATRIX = "rbac_matrix"
    INFRASTRUCTURE_INVENTORY = "infrastructure_inventory"
    EMPLOYEE_PERFORMANCE_EVALUATION = "employee_performance_evaluation"
    NETWORK_DIAGRAM = "network_diagram"
    TABLETOP_EXERCISE = "tabletop_exercise"


_EXTERNAL_TO_PERSISTED: dict[EvidenceFormType, PersistedFormType] = {
    EvidenceFormType.MEETING: PersistedFormType.MEETING,
    EvidenceFormType.BOARD_MEETING: PersistedFormType.BOARD_MEETING,
    EvidenceFormType.IT_LEADERSHIP_MEETING: PersistedFormType.IT_LEADERSHIP_MEETING,
    EvidenceFormType.RISK_COMMITTEE_MEETING: PersistedFormType.RISK_COMMITTEE_MEETING,
    EvidenceFormType.ACCESS_REQUEST: PersistedFormType.ACCESS_REQUEST,
    EvidenceFormType.WHISTLEBLOWER_REPORT: PersistedFormType.WHISTLEBLOWER_REPORT,
    EvidenceFormType.PENETRATION_TEST: PersistedFormType.PENETRATION_TEST,
    EvidenceFormType.RBAC_MATRIX: PersistedFormType.RBAC_MATRIX,
    EvidenceFormType.INFRASTRUCTURE_INVENTORY: PersistedFormType.INFRASTRUCTURE_INVENTORY,
    EvidenceFormType.EMPLOYEE_PERFORMANCE_EVALUATION: (
        PersistedFormType.EMPLOYEE_PERFORMANCE_EVALUATION
    ),
    EvidenceFormType.NETWORK_DIAGRAM: PersistedFormType.NETWORK_DIAGRAM,
    EvidenceFormType.TABLETOP_EXERCISE: PersistedFormType.TABLETOP_EXERCISE,
}

_PERSISTED_TO_EXTERNAL: dict[PersistedFormType, EvidenceFormType] = {
    PersistedFormType.MEETING: EvidenceFormType.MEETING,
    PersistedFormType.BOARD_MEETING: EvidenceFormType.BOARD_MEETING,
    PersistedFormType.IT_LEADERSHIP_MEETING: EvidenceFormType.IT_LEADERSHIP_MEETING,
    PersistedFormType.RISK_COMMITTEE_MEETING: EvidenceFormType.RISK_COMMITTEE_MEETING,
    PersistedFormType.ACCESS_REQUEST: EvidenceFormType.ACCESS_REQUEST,
    PersistedFormType.WHISTLEBLOWER_REPORT: EvidenceFormType.WHISTLEBLOWER_REPORT,
    PersistedFormType.PENETRATION_TEST: EvidenceFormType.PENETRATION_TEST,
    PersistedFormType.RBAC_MATRIX: EvidenceFormType.RBAC_MATRIX,
    PersistedFormType.INFRASTRUCTURE_INVENTORY: EvidenceFormType.INFRASTRUCTURE_INVENTORY,
    PersistedFormType.EMPLOYEE_PERFORMANCE_EVALUATION: (
        EvidenceFormType.EMPLOYEE_PERFORMANCE_EVALUATION
    ),
    PersistedFormType.NETWORK_DIAGRAM: EvidenceFormType.NETWORK_DIAGRAM,
    PersistedFormType.TABLETOP_EXERCISE: EvidenceFormType.TABLETOP_EXERCISE,
}


def verify_form_type_mapping(
    external_to_persisted: dict[EvidenceFormType, PersistedFormType],
    persisted_to_external: dict[PersistedFormType, EvidenceFormType],
) -> None:
    """Check that two mapping tables form a bijection over both enums.

    Args:
        external_to_persisted: External -> persisted table.
        persisted_to_external: Persisted -> external table.

    Raises:
        RuntimeError: If either table is not total or they are not exact inverses.
    """
    missing_external = set(EvidenceFormType) - set(external_to_persisted)
    if missing_external:
        raise RuntimeError(
            f"No persisted form type for: {sorted(t.value for t in missing_external)}"
        )

    missing_persisted = set(PersistedFormType) - set(persisted_to_external)
    if missing_persisted:
        raise RuntimeError(
            f"No external form type for: {sorted(t.value for t in missing_persisted)}"
        )

    for external, persisted in external_to_persisted.items():
        if persisted_to_external.get(persisted) is not external:
            raise RuntimeError(
                f"Form type mapping is not invertible: {external.value} -> {persisted.value} "
                f"-> {getattr(persisted_to_external.get(persisted), 'value', None)}"
            )

    for persisted, external in persisted_to_external.items():
        if external_to_persisted.get(external) is not persisted:
            raise RuntimeError(
                f"Form type mapping is not invertible: {persisted.value} -> {external.value} "
                f"-> {getattr(external_to_persisted.get(external), 'value', None)}"
            )


verify_form_type_mapping(_EXTERNAL_TO_PERSISTED, _PERSISTED_TO_EXTERNAL)


def to_persisted_form_type(form_type: EvidenceFormType) -> PersistedFormType:
    """Map an external form type to its persisted enum value.

    Args:
        form_type: External form type.

    Returns:
        The persisted form type.
    """
    return _EXTERNAL_TO_PERSISTED[form_type]


def to_external_form_type(
    form_type: PersistedFormType | str | None,
) -> EvidenceFormType | None:
    """Map a persisted form type back to its external identifier.

    Args:
        form_type: Persisted form type, its raw string value, or None.

    Returns:
        The external form type, or None when form_type is None or empty.

    Raises:
        ValueError: If a raw string is not a persisted form type value.
    """
    if not form_type:
        return None
    return _PERSISTED_TO_EXTERNAL[PersistedFormType(form_type)]


def coerce_external_form_type(form_type: EvidenceFormType | PersistedFormType | str) -> EvidenceFormType:
    """Normalize an external or persisted identifier to the external form type.

    Stored records may carry either representation; URLs and payloads always use
    the external one.

    Args:
        form_type: External or persisted identifier.

    Returns:
        The external form type.

    Raises:
        ValueError: If the value belongs to neither domain.
    """
    if isinstance(form_type, EvidenceFormType):
        return form_type
    if isinstance(form_type, PersistedFormType):
        return _PERSISTED_TO_EXTERNAL[form_type]
    try:
        return EvidenceFormType(form_type)
    except ValueError:
        return _PERSISTED_TO_EXTERNAL[PersistedFormType(form_type)]
