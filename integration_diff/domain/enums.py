"""Domain enums for the integration diff engine."""
from enum import Enum


class ChangeType(str, Enum):
    """Kind of change reported for a matched path."""
    ADDED = "Added"
    REMOVED = "Removed"
    MODIFIED = "Modified"


class Severity(str, Enum):
    """Impact ranking of a change, highest first."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    INFO = "Info"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def is_meaningful(self) -> bool:
        return self in (Severity.HIGH, Severity.MEDIUM)


_SEVERITY_RANK = {
    Severity.HIGH: 0,
    Severity.MEDIUM: 1,
    Severity.LOW: 2,
    Severity.INFO: 3,
}


class Category(str, Enum):
    """Functional area a changed file belongs to."""
    CONNECTIONS = "connections"
    MAPPINGS = "mappings"
    FLOW_LOGIC = "flowLogic"
    LOOKUPS = "lookups"
    CONFIGURATION = "configuration"
    OTHER = "other"


class NodeType(str, Enum):
    """Common node categories shared by both flow dialects."""
    TRIGGER = "trigger"
    ACTION = "action"
    SWITCH = "switch"
    LOOP = "loop"
    SCOPE = "scope"
    ERROR = "error"
    END = "end"


class ConnectionType(str, Enum):
    DEFAULT = "default"
    CONDITIONAL = "conditional"
    ERROR = "error"


class NodeChangeStatus(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


class LineChangeType(str, Enum):
    """Line-level operation produced by the LCS differ."""
    UNCHANGED = "unchanged"
    REMOVED = "removed"
    ADDED = "added"
    EMPTY = "empty"
