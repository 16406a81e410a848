"""Node-level comparison of two parsed flows.

Nodes are paired across versions by case-insensitive name only. When two
nodes on one side share a name, the later one is the pairing target.
"""

import json

from integration_diff.domain.enums import NodeChangeStatus
from integration_diff.domain.models import FlowComparison, FlowNode, ParsedFlow


def _by_name(flow: ParsedFlow) -> dict[str, FlowNode]:
    return {node.name.lower(): node for node in flow.nodes}


def _fingerprint(node: FlowNode) -> tuple[str, str, str]:
    return node.activity_type, node.type.value, json.dumps(node.data, sort_keys=True, default=str)


def _status(node: FlowNode, counterpart: FlowNode | None, missing: NodeChangeStatus) -> NodeChangeStatus:
    if counterpart is None:
        return missing
    if _fingerprint(node) != _fingerprint(counterpart):
        return NodeChangeStatus.MODIFIED
    return NodeChangeStatus.UNCHANGED


def compare_flows(left: ParsedFlow | None, right: ParsedFlow | None) -> FlowComparison:
    """Classify every node of both flows as added, removed, modified or unchanged.

    Either side missing gives an empty comparison.
    """
    if left is None or right is None:
        return FlowComparison()

    left_names = _by_name(left)
    right_names = _by_name(right)

    return FlowComparison(
        left_changes={
            node.id: _status(node, right_names.get(node.name.lower()), NodeChangeStatus.REMOVED)
            for node in left.nodes
        },
        right_changes={
            node.id: _status(node, left_names.get(node.name.lower()), NodeChangeStatus.ADDED)
            for node in right.nodes
        },
    )
