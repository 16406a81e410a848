"""Severity, category and risk rationale rules for changed archive files.

All rules look at the normalized (lowercased) path; the first matching
rule wins. Added/removed files and modified files have separate tables
because some artifact kinds only matter when their content changes.
"""

from dataclasses import dataclass

from integration_diff.domain.constants import MAPPING_EXTENSIONS, SERVICE_EXTENSIONS
from integration_diff.domain.enums import Category, ChangeType, Severity
from integration_diff.normalizer import normalize_xml


@dataclass(frozen=True)
class SeverityAssessment:
    severity: Severity
    risk_reason: str


# ── Path Signals ─────────────────────────────────────────────────────────

def is_flow_path(path: str) -> bool:
    return 'orchestration' in path


def is_mapping_path(path: str) -> bool:
    return path.endswith(MAPPING_EXTENSIONS) or 'mapping' in path


def is_connection_path(path: str) -> bool:
    return 'connection' in path or path.endswith('.jca')


def is_lookup_path(path: str) -> bool:
    return 'lookup' in path or 'dvm' in path


def is_error_handling_path(path: str) -> bool:
    return 'fault' in path or 'error' in path


def categorize(path: str) -> Category:
    """Map a normalized path to its functional category."""
    path = path.lower()
    if is_connection_path(path):
        return Category.CONNECTIONS
    if is_mapping_path(path):
        return Category.MAPPINGS
    if is_flow_path(path) or 'bpel' in path:
        return Category.FLOW_LOGIC
    if is_lookup_path(path):
        return Category.LOOKUPS
    if 'schedule' in path or 'tracking' in path or path.endswith('.properties'):
        return Category.CONFIGURATION
    return Category.OTHER


# ── Assessments ──────────────────────────────────────────────────────────

def assess_presence_change(path: str, change_type: ChangeType) -> SeverityAssessment:
    """Severity for a file that exists on one side only."""
    path = path.lower()
    action = 'added' if change_type is ChangeType.ADDED else 'removed'

    if is_flow_path(path):
        return SeverityAssessment(
            Severity.HIGH,
            f"Integration flow was {action}. This controls the main processing logic.",
        )
    if is_mapping_path(path):
        return SeverityAssessment(
            Severity.HIGH if change_type is ChangeType.REMOVED else Severity.MEDIUM,
            f"Data transformation was {action}. This affects how data is converted between systems.",
        )
    if is_connection_path(path):
        return SeverityAssessment(
            Severity.MEDIUM,
            f"Connection configuration was {action}. This affects connectivity to external systems.",
        )
    if path.endswith(SERVICE_EXTENSIONS):
        return SeverityAssessment(
            Severity.MEDIUM,
            f"Service definition was {action}. This may affect API compatibility.",
        )
    if is_lookup_path(path):
        return SeverityAssessment(
            Severity.LOW,
            f"Lookup data was {action}. Used for value translation.",
        )
    if 'schedule' in path:
        return SeverityAssessment(
            Severity.LOW,
            f"Schedule was {action}. This controls when the integration runs.",
        )
    return SeverityAssessment(Severity.INFO, f"Supporting file was {action}.")


def assess_modification(
    path: str, left_content: str | None, right_content: str | None,
) -> SeverityAssessment:
    """Severity for a file present on both sides with differing content.

    Mappings are rated High only when a structural difference survives XML
    normalization; with either content unknown they stay Medium.
    """
    path = path.lower()

    if is_flow_path(path):
        return SeverityAssessment(
            Severity.HIGH,
            'Integration flow logic changed. The processing steps or decision logic was modified.',
        )
    if is_mapping_path(path):
        if left_content is not None and right_content is not None:
            if normalize_xml(left_content) != normalize_xml(right_content):
                return SeverityAssessment(
                    Severity.HIGH,
                    'Data transformation logic changed. The rules for converting data were modified.',
                )
        return SeverityAssessment(Severity.MEDIUM, 'Data mapping updated with minor changes.')
    if is_connection_path(path):
        return SeverityAssessment(
            Severity.MEDIUM,
            'Connection settings changed. Endpoint URLs or credentials may have been updated.',
        )
    if path.endswith('.wsdl'):
        return SeverityAssessment(
            Severity.MEDIUM,
            'Web service definition changed. The API contract may have been updated.',
        )
    if path.endswith('.xsd'):
        return SeverityAssessment(
            Severity.MEDIUM,
            'Data schema changed. The expected data structure was modified.',
        )
    if is_lookup_path(path):
        return SeverityAssessment(
            Severity.LOW,
            'Lookup values updated. Reference data for value translation was changed.',
        )
    if 'schedule' in path:
        return SeverityAssessment(
            Severity.LOW,
            'Schedule modified. The timing for when this integration runs was changed.',
        )
    if 'tracking' in path:
        return SeverityAssessment(
            Severity.LOW,
            'Tracking fields updated. Business identifiers for monitoring were changed.',
        )
    if path.endswith('.properties'):
        return SeverityAssessment(Severity.LOW, 'Configuration values changed.')
    if is_error_handling_path(path):
        return SeverityAssessment(
            Severity.LOW,
            'Error handling changed. How failures are handled was modified.',
        )
    return SeverityAssessment(Severity.INFO, 'Supporting file modified.')
