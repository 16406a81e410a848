"""Shared data models used across the diff engine, flow parser and outputs."""

from dataclasses import dataclass, field
from typing import Any

from integration_diff.domain.enums import (
    Category,
    ChangeType,
    ConnectionType,
    LineChangeType,
    NodeChangeStatus,
    NodeType,
    Severity,
)


# ── Archive Records ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class ArchiveFileRecord:
    """One file of an archive snapshot.

    ``content`` is ``None`` when the storage tier withheld it; that means
    "unknown", never "empty".
    """

    path: str
    hash: str
    size: int = 0
    content: str | None = None


@dataclass
class ArchiveSnapshot:
    """All file records read from one exported archive."""

    file_name: str
    sha256: str
    size: int
    files: list[ArchiveFileRecord] = field(default_factory=list)


# ── File Diff ────────────────────────────────────────────────────────────

@dataclass
class DiffMetadata:
    """Enrichment attached to a diff item for display and reporting."""

    category: Category
    normalized_path: str
    original_paths: list[str]
    object_name: str | None = None
    action_type: str | None = None
    change_description: str = ''
    simple_description: str = ''
    left_hash: str | None = None
    right_hash: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'category': self.category.value,
            'normalized_path': self.normalized_path,
            'original_paths': list(self.original_paths),
            'object_name': self.object_name,
            'action_type': self.action_type,
            'change_description': self.change_description,
            'simple_description': self.simple_description,
            'left_hash': self.left_hash,
            'right_hash': self.right_hash,
        }


@dataclass
class DiffItem:
    """A single reported change for one matched path."""

    entity_type: str
    entity_name: str
    change_type: ChangeType
    severity: Severity
    risk_reason: str
    left_ref: str | None
    right_ref: str | None
    diff_patch: str | None
    metadata: DiffMetadata

    def __post_init__(self):
        if self.left_ref is None and self.right_ref is None:
            raise ValueError(f"Diff item '{self.entity_name}' must reference at least one file")

    def to_dict(self) -> dict[str, Any]:
        return {
            'entity_type': self.entity_type,
            'entity_name': self.entity_name,
            'change_type': self.change_type.value,
            'severity': self.severity.value,
            'risk_reason': self.risk_reason,
            'left_ref': self.left_ref,
            'right_ref': self.right_ref,
            'diff_patch': self.diff_patch,
            'metadata': self.metadata.to_dict(),
        }


def _empty_categories() -> dict[str, int]:
    return {c.value: 0 for c in Category}


@dataclass
class DiffSummary:
    """Severity and category counts for one diff run."""

    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0
    categories: dict[str, int] = field(default_factory=_empty_categories)

    @property
    def total_meaningful(self) -> int:
        return self.high + self.medium

    @property
    def total(self) -> int:
        return self.high + self.medium + self.low + self.info

    def record(self, item: DiffItem) -> None:
        if item.severity is Severity.HIGH:
            self.high += 1
        elif item.severity is Severity.MEDIUM:
            self.medium += 1
        elif item.severity is Severity.LOW:
            self.low += 1
        else:
            self.info += 1
        key = item.metadata.category.value
        self.categories[key] = self.categories.get(key, 0) + 1

    def to_dict(self) -> dict[str, Any]:
        return {
            'high': self.high,
            'medium': self.medium,
            'low': self.low,
            'info': self.info,
            'total_meaningful': self.total_meaningful,
            'categories': dict(self.categories),
        }


@dataclass
class FileDiffResult:
    """Output of ``compute_file_diff``."""

    items: list[DiffItem] = field(default_factory=list)
    summary: DiffSummary = field(default_factory=DiffSummary)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            'summary': self.summary.to_dict(),
            'items': [item.to_dict() for item in self.items],
            'warnings': list(self.warnings),
        }


# ── Line Diff ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DiffOperation:
    """One aligned step; -1 marks the side a line is absent from."""

    type: LineChangeType
    left_index: int
    right_index: int


@dataclass(frozen=True)
class DiffLine:
    """A row of one pane in a side-by-side view. Gap rows have no number."""

    line_number: int | None
    content: str
    type: LineChangeType

    def to_dict(self) -> dict[str, Any]:
        return {'line_number': self.line_number, 'content': self.content, 'type': self.type.value}


@dataclass(frozen=True)
class UnifiedDiffLine:
    left_line_number: int | None
    right_line_number: int | None
    content: str
    type: LineChangeType

    def to_dict(self) -> dict[str, Any]:
        return {
            'left_line_number': self.left_line_number,
            'right_line_number': self.right_line_number,
            'content': self.content,
            'type': self.type.value,
        }


# ── Flow Graph ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class FlowNode:
    """A step of a parsed flow. ``id`` is only stable within one parse."""

    id: str
    type: NodeType
    name: str
    activity_type: str
    position: Position
    icon: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type.value,
            'name': self.name,
            'activity_type': self.activity_type,
            'icon': self.icon,
            'position': {'x': self.position.x, 'y': self.position.y},
            'data': dict(self.data),
        }


@dataclass(frozen=True)
class FlowConnection:
    id: str
    source: str
    target: str
    type: ConnectionType = ConnectionType.DEFAULT
    label: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {'id': self.id, 'source': self.source, 'target': self.target, 'type': self.type.value}
        if self.label is not None:
            result['label'] = self.label
        return result


@dataclass(frozen=True)
class FlowMetadata:
    process_name: str
    namespace: str | None = None
    version: str | None = None


@dataclass(frozen=True)
class ParsedFlow:
    """Node/edge graph reconstructed from one process definition."""

    nodes: list[FlowNode]
    connections: list[FlowConnection]
    metadata: FlowMetadata

    @classmethod
    def empty(cls, process_name: str) -> 'ParsedFlow':
        return cls(nodes=[], connections=[], metadata=FlowMetadata(process_name=process_name))

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node(self, node_id: str) -> FlowNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        metadata: dict[str, Any] = {'process_name': self.metadata.process_name}
        if self.metadata.namespace is not None:
            metadata['namespace'] = self.metadata.namespace
        if self.metadata.version is not None:
            metadata['version'] = self.metadata.version
        return {
            'nodes': [n.to_dict() for n in self.nodes],
            'connections': [c.to_dict() for c in self.connections],
            'metadata': metadata,
        }


@dataclass
class FlowComparison:
    """Per-node change status for both sides, keyed by node id."""

    left_changes: dict[str, NodeChangeStatus] = field(default_factory=dict)
    right_changes: dict[str, NodeChangeStatus] = field(default_factory=dict)

    def counts(self) -> dict[str, dict[str, int]]:
        def tally(changes: dict[str, NodeChangeStatus]) -> dict[str, int]:
            totals = {s.value: 0 for s in NodeChangeStatus}
            for status in changes.values():
                totals[status.value] += 1
            return totals

        return {'left': tally(self.left_changes), 'right': tally(self.right_changes)}

    def to_dict(self) -> dict[str, Any]:
        return {
            'left_changes': {k: v.value for k, v in self.left_changes.items()},
            'right_changes': {k: v.value for k, v in self.right_changes.items()},
            'counts': self.counts(),
        }


# ── Options / Results ────────────────────────────────────────────────────

@dataclass
class CompareOptions:
    """Options controlling an archive comparison run."""

    patch_line_limit: int = 50
    max_inline_content: int = 100_000
    include_flows: bool = True
    pretty: bool = True


@dataclass
class CompareResult:
    """Result summary of a compare operation."""

    items_count: int
    summary: DiffSummary
    warnings_count: int
    flows_compared: bool
    output_dir: str


@dataclass
class SnapshotComparison:
    """Everything computed for one pair of archive snapshots."""

    diff: FileDiffResult
    left_flow: ParsedFlow | None = None
    right_flow: ParsedFlow | None = None
    flow_comparison: FlowComparison = field(default_factory=FlowComparison)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.diff.to_dict(),
            'left_flow': self.left_flow.to_dict() if self.left_flow else None,
            'right_flow': self.right_flow.to_dict() if self.right_flow else None,
            'flow_comparison': self.flow_comparison.to_dict(),
        }
