"""Human-readable enrichment for diff items.

Extraction helpers here are best-effort: they look for well-known export
markers with regular expressions and return ``None`` when nothing usable is
found, so a diff item always falls back to a generic description.
"""

import json
import re
from typing import Any

from integration_diff.domain.constants import ADAPTER_NAMES, MAPPING_EXTENSIONS, PROCESS_ACTION_LABELS
from integration_diff.domain.enums import ChangeType


# ── Names ────────────────────────────────────────────────────────────────

_FRIENDLY_EXT_RE = re.compile(r'\.(xml|xsl|xslt|jca|wsdl|xsd|properties)$', re.IGNORECASE)
_FRIENDLY_ID_RE = re.compile(r'^(req_|res_)[a-f0-9]+', re.IGNORECASE)
_CAMEL_CASE_RE = re.compile(r'([a-z])([A-Z])')

REQUEST_RESPONSE_NAME = 'Request/Response'


def friendly_name(path: str) -> str:
    """Turn the last path segment into a display name.

    Examples:
        >>> friendly_name('icspackage/resources/Customer_Lookup.xsl')
        'Customer Lookup'
        >>> friendly_name('a/req_ab12cd.xsl')
        'Request/Response'
    """
    filename = path.rsplit('/', 1)[-1]
    name = _FRIENDLY_EXT_RE.sub('', filename)
    name = _FRIENDLY_ID_RE.sub(REQUEST_RESPONSE_NAME, name)
    name = name.replace('_', ' ')
    name = _CAMEL_CASE_RE.sub(r'\1 \2', name)
    return name.strip()


def entity_type_for(path: str) -> str:
    """Human label for the kind of artifact a path holds."""
    path = path.lower()
    if 'orchestration' in path:
        return 'Integration Flow'
    if path.endswith(MAPPING_EXTENSIONS) or 'mapping' in path:
        return 'Data Mapping'
    if 'connection' in path or path.endswith('.jca'):
        return 'Connection'
    if 'lookup' in path or 'dvm' in path:
        return 'Lookup Table'
    if 'schedule' in path:
        return 'Schedule'
    if 'tracking' in path:
        return 'Tracking'
    if path.endswith('.wsdl'):
        return 'Web Service'
    if path.endswith('.xsd'):
        return 'Data Schema'
    if 'fault' in path or 'error' in path:
        return 'Error Handling'
    return 'Configuration'


def entity_name_for(path: str, object_name: str | None = None) -> str:
    """Extracted object name, else a friendly file name, else the entity type."""
    if object_name:
        return object_name
    name = friendly_name(path)
    if name and name != REQUEST_RESPONSE_NAME and len(name) > 2:
        return name
    return entity_type_for(path)


# ── Object Names ─────────────────────────────────────────────────────────

_OBJECT_NAME_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r'adapter-config\s+name="([^"]+)"'),
    re.compile(r'ProcedureName"[^>]*value="([^"]+)"'),
    re.compile(r'TableName"[^>]*value="([^"]+)"'),
)
_CONNECTION_FACTORY_RE = re.compile(r'connection-factory\s+location="([^"]+)"')
_TRAILING_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r'operation="([^"]+)"'),
    re.compile(r'(?:xsd|xs):element\s+name="([^"]+)"'),
    re.compile(r'targetNamespace="[^"]*/([^"/]+)"'),
)

RECORD_NAME_KEY = 'RECORD_NAME_KEY'
SAMPLE_FILE_NAME_KEY = 'SAMPLE_FILE_NAME_KEY'


def _find_json_key(data: Any, key: str) -> str | None:
    stack = [data]
    while stack:
        node = stack.pop()
        if isinstance(node, dict):
            value = node.get(key)
            if isinstance(value, str) and value:
                return value
            stack.extend(reversed(list(node.values())))
        elif isinstance(node, list):
            stack.extend(reversed(node))
    return None


def extract_json_object_name(content: str) -> str | None:
    """Record or sample-file name from a JSON metadata file."""
    try:
        data = json.loads(content)
    except (ValueError, RecursionError):
        return None

    record_name = _find_json_key(data, RECORD_NAME_KEY)
    if record_name:
        return record_name
    sample_file = _find_json_key(data, SAMPLE_FILE_NAME_KEY)
    if sample_file:
        return re.sub(r'\.[^.]+$', '', sample_file)
    return None


def extract_object_name(content: str | None) -> str | None:
    """Name of the configuration object a file describes.

    Tried in order: adapter-config name, stored procedure, table, connection
    factory location (last segment), WSDL operation, schema element,
    target namespace (last segment), then JSON record/sample-file keys.

    Args:
        content: File text; ``None`` when withheld.

    Returns:
        The object name, or ``None`` when nothing recognisable is present.
    """
    if not content:
        return None

    for pattern in _OBJECT_NAME_PATTERNS:
        match = pattern.search(content)
        if match:
            return match.group(1)

    match = _CONNECTION_FACTORY_RE.search(content)
    if match:
        connection_name = match.group(1).rstrip('/').rsplit('/', 1)[-1]
        if connection_name:
            return connection_name

    for pattern in _TRAILING_PATTERNS:
        match = pattern.search(content)
        if match:
            return match.group(1)

    if content.lstrip().startswith('{'):
        return extract_json_object_name(content)
    return None


# ── Action Types ─────────────────────────────────────────────────────────

_ADAPTER_RE = re.compile(r'adapter\s*=\s*"([^"]+)"', re.IGNORECASE)


def _activity_pattern(tag: str) -> re.Pattern:
    return re.compile(rf'<(?:\w+:)?{tag}[\s>/]', re.IGNORECASE)


_PROCESS_ACTION_PATTERNS: tuple[tuple[tuple[re.Pattern, ...], str], ...] = tuple(
    (tuple(_activity_pattern(tag) for tag in tags), label)
    for tags, label in PROCESS_ACTION_LABELS
)
_INVOKE_HINT_RE = re.compile(r'<(?:\w+:)?invoke', re.IGNORECASE)


def adapter_label(adapter: str) -> str | None:
    """Map a raw adapter attribute value to a display label."""
    adapter = adapter.lower()
    for key, label in ADAPTER_NAMES:
        if key in adapter:
            return label
    return None


def extract_action_type(content: str | None, path: str) -> str | None:
    """Classify what kind of integration step a file configures."""
    if not content:
        return None
    lower_path = path.lower()

    match = _ADAPTER_RE.search(content)
    if match:
        label = adapter_label(match.group(1))
        if label:
            return label

    if 'orchestration' in lower_path or _INVOKE_HINT_RE.search(content):
        for patterns, label in _PROCESS_ACTION_PATTERNS:
            if any(p.search(content) for p in patterns):
                return label

    if 'StageFile' in content or 'stage-file' in content or 'stagefile' in lower_path:
        if 'WriteFile' in content or 'write' in content:
            return 'Stage File Write'
        if 'ReadFile' in content or 'read' in content:
            return 'Stage File Read'
        if 'ListFile' in content or 'list' in content:
            return 'Stage File List'
        return 'Stage File'

    if 'notification' in content or 'email' in content:
        return 'Notification'
    if lower_path.endswith(MAPPING_EXTENSIONS):
        return 'Data Mapping'
    if 'javascript' in content.lower():
        return 'JavaScript'
    if 'callback' in content.lower():
        return 'Callback'
    if '<wait' in content or 'Wait' in content:
        return 'Wait'
    if 'schedule' in lower_path or 'schedule' in content:
        return 'Schedule'
    return None


# ── Change Descriptions ──────────────────────────────────────────────────

_CONNECTION_STRING_RE = re.compile(r'ConnectionString"[^>]*value="([^"]{20})')
_PROCEDURE_RE = re.compile(r'ProcedureName"[^>]*value="([^"]+)"')
_ENDPOINT_RE = re.compile(r'uriAbsoluteLocation>([^<]+)')
_COLUMN_HEADERS_RE = re.compile(r'"SAMPLE_COLUMN_HEADERS_KEY"\s*:\s*"([^"]+)"')


def _changed(pattern: re.Pattern, old: str, new: str) -> tuple[str, str] | None:
    old_match = pattern.search(old)
    new_match = pattern.search(new)
    if old_match and new_match and old_match.group(1) != new_match.group(1):
        return old_match.group(1), new_match.group(1)
    return None


def _is_mapping(path: str) -> bool:
    return 'mapping' in path or path.endswith('.xsl')


def describe_specific_changes(old_content: str, new_content: str, path: str) -> list[str]:
    """Recognised configuration changes between two versions of a file."""
    changes = []
    if 'ConnectionString' in old_content and 'ConnectionString' in new_content:
        if _changed(_CONNECTION_STRING_RE, old_content, new_content):
            changes.append('Database connection string was updated')

    procedure = _changed(_PROCEDURE_RE, old_content, new_content)
    if procedure:
        changes.append(f'Stored procedure changed from "{procedure[0]}" to "{procedure[1]}"')

    if _changed(_ENDPOINT_RE, old_content, new_content):
        changes.append('Service endpoint URL was updated')

    if path.endswith('.json') or 'metadata' in path:
        if _changed(_COLUMN_HEADERS_RE, old_content, new_content):
            changes.append('Data schema columns were modified')
    return changes


def describe_change(
    change_type: ChangeType,
    path: str,
    old_content: str | None,
    new_content: str | None,
) -> str:
    """Sentence describing what changed, naming the object when possible.

    Args:
        change_type: Added, Removed or Modified.
        path: Normalized archive path.
        old_content: Left-side content (``None`` when absent or withheld).
        new_content: Right-side content (``None`` when absent or withheld).

    Returns:
        A one-line description suitable for reports.
    """
    path = path.lower()

    if change_type is ChangeType.ADDED:
        object_name = extract_object_name(new_content)
        if object_name:
            return f'New component "{object_name}" was added to the integration'
        if _is_mapping(path):
            return 'New data transformation mapping was added'
        if path.endswith('.wsdl'):
            return 'New web service endpoint was configured'
        return 'New configuration file was added'

    if change_type is ChangeType.REMOVED:
        object_name = extract_object_name(old_content)
        if object_name:
            return f'Component "{object_name}" was removed from the integration'
        if _is_mapping(path):
            return 'Data transformation mapping was removed'
        if path.endswith('.wsdl'):
            return 'Web service endpoint was removed'
        return 'Configuration file was removed'

    if old_content and new_content:
        changes = describe_specific_changes(old_content, new_content, path)
        if changes:
            return '. '.join(changes)

    object_name = extract_object_name(new_content)
    if object_name:
        return f'Configuration for "{object_name}" was modified'
    if _is_mapping(path):
        return 'Data transformation logic was updated'
    if path.endswith('.wsdl'):
        return 'Web service definition was modified'
    if 'connection' in path:
        return 'Connection settings were changed'
    return 'Configuration values were updated'


def simple_description(path: str, change_type: ChangeType, display_path: str | None = None) -> str:
    """Short headline such as ``Data mapping "Orders" was updated``."""
    lower_path = path.lower()
    action = {
        ChangeType.ADDED: 'added',
        ChangeType.REMOVED: 'removed',
    }.get(change_type, 'updated')
    name = friendly_name(display_path or path)

    if 'orchestration' in lower_path:
        return f'Integration flow logic was {action}'
    if lower_path.endswith(MAPPING_EXTENSIONS):
        return f'Data mapping "{name}" was {action}'
    if 'connection' in lower_path or lower_path.endswith('.jca'):
        return f'Connection "{name}" settings were {action}'
    if 'lookup' in lower_path or 'dvm' in lower_path:
        return f'Lookup table data was {action}'
    if 'schedule' in lower_path:
        return f'Schedule timing was {action}'
    if 'tracking' in lower_path:
        return f'Business tracking fields were {action}'
    if lower_path.endswith('.wsdl'):
        return f'Web service definition was {action}'
    if lower_path.endswith('.xsd'):
        return f'Data schema was {action}'
    if 'fault' in lower_path or 'error' in lower_path:
        return f'Error handling was {action}'
    return f'Configuration was {action}'
