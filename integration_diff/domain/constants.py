"""Shared constants: file-type groups, adapter names, flow vocabularies and layout.

Centralizes the tables that are shared between the diff engine, the
enrichment helpers and both flow dialects.
"""

from integration_diff.domain.enums import NodeType

# ── File Types ───────────────────────────────────────────────────────────

XML_EXTENSIONS = ('.xml', '.xsl', '.xslt', '.wsdl', '.xsd', '.jca')
MAPPING_EXTENSIONS = ('.xsl', '.xslt')
SERVICE_EXTENSIONS = ('.wsdl', '.xsd')

# Files whose content is always retained by the archive reader
FLOW_FILE_MARKERS = ('project.xml', 'orchestration')
FLOW_FILE_SUFFIXES = ('.bpel',)

# ── Adapter Names ────────────────────────────────────────────────────────

# Checked in order, substring match against the lowercased adapter attribute
ADAPTER_NAMES: tuple[tuple[str, str], ...] = (
    ('atpdatabase', 'Database Adapter'),
    ('database', 'Database Adapter'),
    ('oracle/db', 'Database Adapter'),
    ('sftp', 'SFTP Adapter'),
    ('ftp', 'FTP Adapter'),
    ('file', 'File Adapter'),
    ('rest', 'REST Adapter'),
    ('soap', 'SOAP Adapter'),
    ('jms', 'JMS Adapter'),
    ('kafka', 'Kafka Adapter'),
    ('mq', 'MQ Adapter'),
    ('oracleerp', 'Oracle ERP Adapter'),
    ('oraclecrm', 'Oracle CRM Adapter'),
    ('oic', 'Integration Invoke'),
    ('salesforce', 'Salesforce Adapter'),
    ('sap', 'SAP Adapter'),
    ('workday', 'Workday Adapter'),
    ('servicenow', 'ServiceNow Adapter'),
    ('netsuite', 'NetSuite Adapter'),
)

# Process activity tags and the action label reported for them, in priority order
PROCESS_ACTION_LABELS: tuple[tuple[tuple[str, ...], str], ...] = (
    (('invoke',), 'Invoke'),
    (('receive',), 'Receive'),
    (('reply',), 'Reply'),
    (('assign',), 'Assign'),
    (('switch', 'if'), 'Switch'),
    (('while',), 'While Loop'),
    (('forEach', 'repeatUntil'), 'For Each'),
    (('throw',), 'Throw'),
    (('catch', 'faultHandlers'), 'Catch'),
    (('scope',), 'Scope'),
    (('sequence',), 'Sequence'),
    (('flow',), 'Parallel Flow'),
    (('pick',), 'Pick'),
    (('wait',), 'Wait'),
)

# ── Dialect A (project form) ─────────────────────────────────────────────

PROJECT_ROOT_TAG = 'icsproject'
PROJECT_FLOW_TAG = 'icsflow'

PROJECT_ELEMENT_TAGS = (
    'receive', 'transformer', 'invoke', 'stageFile', 'try', 'switch',
    'forEach', 'assign', 'activityStreamLogger', 'stop', 'case', 'otherwise',
)
PROJECT_CONTAINER_TAGS = ('try', 'switch', 'forEach')
PROJECT_BRANCH_TAGS = ('case', 'otherwise')
PROJECT_COUNTED_CHILD_TAGS = ('transformer', 'invoke', 'assign', 'stageFile')

PROJECT_NODE_TYPES: dict[str, NodeType] = {
    'receive': NodeType.TRIGGER,
    'transformer': NodeType.ACTION,
    'invoke': NodeType.ACTION,
    'stageFile': NodeType.ACTION,
    'try': NodeType.SCOPE,
    'catchAll': NodeType.ERROR,
    'activityStreamLogger': NodeType.ACTION,
    'stop': NodeType.END,
    'switch': NodeType.SWITCH,
    'otherwise': NodeType.ACTION,
    'case': NodeType.SWITCH,
    'forEach': NodeType.LOOP,
    'assign': NodeType.ACTION,
}

PROJECT_ICONS: dict[str, str] = {
    'receive': 'inbox',
    'transformer': 'shuffle',
    'invoke': 'database',
    'stageFile': 'file',
    'try': 'shield',
    'catchAll': 'alert-triangle',
    'activityStreamLogger': 'activity',
    'stop': 'square',
    'switch': 'git-fork',
    'forEach': 'repeat',
    'assign': 'copy',
}

# ── Dialect B (process form) ─────────────────────────────────────────────

PROCESS_NODE_TYPES: dict[str, NodeType] = {
    'receive': NodeType.TRIGGER,
    'invoke': NodeType.ACTION,
    'reply': NodeType.END,
    'assign': NodeType.ACTION,
    'throw': NodeType.ERROR,
    'rethrow': NodeType.ERROR,
    'exit': NodeType.END,
    'wait': NodeType.ACTION,
    'empty': NodeType.ACTION,
    'sequence': NodeType.SCOPE,
    'flow': NodeType.SCOPE,
    'switch': NodeType.SWITCH,
    'if': NodeType.SWITCH,
    'while': NodeType.LOOP,
    'repeatUntil': NodeType.LOOP,
    'forEach': NodeType.LOOP,
    'pick': NodeType.SWITCH,
    'scope': NodeType.SCOPE,
    'compensate': NodeType.ACTION,
    'compensateScope': NodeType.ACTION,
    'validate': NodeType.ACTION,
    'extensionActivity': NodeType.ACTION,
}

# Lowercase tag -> canonical activity name
PROCESS_ACTIVITIES: dict[str, str] = {name.lower(): name for name in PROCESS_NODE_TYPES}

PROCESS_ICONS: dict[str, str] = {
    'receive': 'inbox',
    'invoke': 'send',
    'reply': 'reply',
    'assign': 'copy',
    'throw': 'alert-triangle',
    'wait': 'clock',
    'sequence': 'list',
    'flow': 'git-branch',
    'switch': 'git-fork',
    'if': 'git-fork',
    'while': 'repeat',
    'forEach': 'repeat',
    'pick': 'mouse-pointer',
    'scope': 'box',
    'catch': 'shield',
}

LOOP_ACTIVITIES = ('while', 'repeatUntil', 'forEach')

# ── Layout ───────────────────────────────────────────────────────────────

LAYOUT_START_Y = 50
PROJECT_X_CENTER = 400
PROJECT_Y_SPACING = 100
PROCESS_X_CENTER = 300
PROCESS_Y_SPACING = 120
BRANCH_WIDTH = 200
ERROR_HANDLER_OFFSET = 250
BRANCH_LABEL_LIMIT = 30

# ── Sentinels ────────────────────────────────────────────────────────────

UNKNOWN_PROCESS = 'Unknown'
PARSE_ERROR_PROCESS = 'Parse Error'
