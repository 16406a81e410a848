"""Mutable graph-building context threaded through the recursive flow parsers."""

from typing import Any

from integration_diff.domain.constants import LAYOUT_START_Y
from integration_diff.domain.enums import ConnectionType, NodeType
from integration_diff.domain.models import FlowConnection, FlowMetadata, FlowNode, ParsedFlow, Position


class FlowBuilder:
    """Collects nodes and edges and owns the vertical layout cursor.

    Nodes sit on a vertical axis at ``x_center + x_offset``; each placed node
    moves the cursor down one row. Ids are ``node_N`` / ``edge_N`` in
    allocation order.
    """

    def __init__(self, x_center: float, y_spacing: float, start_y: float = LAYOUT_START_Y):
        self.x_center = x_center
        self.y_spacing = y_spacing
        self._y = start_y
        self._node_counter = 0
        self._edge_counter = 0
        self.nodes: list[FlowNode] = []
        self.connections: list[FlowConnection] = []

    # ── Ids ──────────────────────────────────────────────────────────────

    def next_node_id(self) -> str:
        self._node_counter += 1
        return f'node_{self._node_counter}'

    def next_edge_id(self) -> str:
        self._edge_counter += 1
        return f'edge_{self._edge_counter}'

    # ── Layout cursor ────────────────────────────────────────────────────

    def current_row(self) -> float:
        return self._y

    def set_row(self, y: float) -> None:
        self._y = y

    def advance_row(self, fraction: float = 1.0) -> None:
        self._y += self.y_spacing * fraction

    # ── Graph ────────────────────────────────────────────────────────────

    def add_node(
        self,
        node_type: NodeType,
        name: str,
        activity_type: str,
        x_offset: float = 0,
        icon: str | None = None,
        data: dict[str, Any] | None = None,
        node_id: str | None = None,
        row_fraction: float = 1.0,
    ) -> str:
        """Place a node at the cursor and advance it.

        Args:
            node_id: A previously reserved id; a fresh one is allocated when omitted.
            row_fraction: How far to move the cursor afterwards, in rows.

        Returns:
            The node id.
        """
        node_id = node_id or self.next_node_id()
        self.nodes.append(FlowNode(
            id=node_id,
            type=node_type,
            name=name,
            activity_type=activity_type,
            position=Position(self.x_center + x_offset, self._y),
            icon=icon,
            data=data or {},
        ))
        self.advance_row(row_fraction)
        return node_id

    def connect(
        self,
        source: str,
        target: str,
        connection_type: ConnectionType = ConnectionType.DEFAULT,
        label: str | None = None,
    ) -> str:
        edge_id = self.next_edge_id()
        self.connections.append(FlowConnection(edge_id, source, target, connection_type, label))
        return edge_id

    def build(self, metadata: FlowMetadata) -> ParsedFlow:
        return ParsedFlow(nodes=list(self.nodes), connections=list(self.connections), metadata=metadata)
