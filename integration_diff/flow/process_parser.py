"""
Parser for process-form flow definitions (BPEL-style ``process`` documents).

Activity tags are matched case-insensitively with namespaces stripped, and
mapped onto the common node categories. Control constructs fan out and back
in:

- sequence: linear chain
- flow: parallel branches side by side, closed by a ``Join`` node
- switch / if / pick: labelled conditional branches, closed by a merge node
- while / repeatUntil / forEach: body chain plus a ``loop`` edge back to the loop node
- scope: body chain, fault handlers as side error nodes
"""

from dataclasses import dataclass
from typing import Any

from integration_diff.domain.constants import (
    BRANCH_LABEL_LIMIT,
    BRANCH_WIDTH,
    ERROR_HANDLER_OFFSET,
    LOOP_ACTIVITIES,
    PROCESS_ACTIVITIES,
    PROCESS_ICONS,
    PROCESS_NODE_TYPES,
    PROCESS_X_CENTER,
    PROCESS_Y_SPACING,
)
from integration_diff.domain.enums import ConnectionType, NodeType
from integration_diff.domain.models import FlowMetadata, ParsedFlow
from integration_diff.flow.builder import FlowBuilder
from integration_diff.flow.xml_tree import XmlNode

UNNAMED_PROCESS = 'Unnamed Process'

# Attributes copied verbatim into node data
_DATA_ATTRIBUTES = (
    'partnerLink', 'operation', 'variable', 'inputVariable',
    'outputVariable', 'faultName', 'createInstance',
)


@dataclass
class Branch:
    label: str
    body: XmlNode


def activity_name(node: XmlNode) -> str | None:
    """Canonical activity name for a tag, or ``None`` if it is not an activity."""
    return PROCESS_ACTIVITIES.get(node.lower_tag)


def child_activities(container: XmlNode) -> list[tuple[str, XmlNode]]:
    """Direct activity children of ``container`` in document order."""
    activities = []
    for child in container.children:
        name = activity_name(child)
        if name:
            activities.append((name, child))
    return activities


def find_process(root: XmlNode) -> XmlNode | None:
    """Locate the process element.

    An element tagged exactly ``process`` wins; otherwise the first element
    whose tag contains ``process`` (but is not a ``processor``) is used.
    """
    for node in root.iter():
        if node.lower_tag == 'process':
            return node
    for node in root.iter():
        if 'process' in node.lower_tag and 'processor' not in node.lower_tag:
            return node
    return None


def _truncate(label: str) -> str:
    return label[:BRANCH_LABEL_LIMIT]


def _condition_text(node: XmlNode) -> str | None:
    condition = node.first_child_ci('condition')
    if condition is not None and condition.text:
        return condition.text
    return None


def conditional_branches(activity: XmlNode, kind: str) -> list[Branch]:
    """Branches of an ``if``, ``switch`` or ``pick`` construct, in layout order."""
    branches = []
    if kind == 'if':
        branches.append(Branch(_truncate(_condition_text(activity) or 'condition'), activity))
        for idx, elseif in enumerate(activity.all_children_ci('elseif'), start=1):
            branches.append(Branch(_truncate(_condition_text(elseif) or f'elseif {idx}'), elseif))
        otherwise = activity.first_child_ci('else')
        if otherwise is not None:
            branches.append(Branch('else', otherwise))
    elif kind == 'switch':
        for idx, case in enumerate(activity.all_children_ci('case'), start=1):
            label = case.attr('condition') or _condition_text(case) or f'case {idx}'
            branches.append(Branch(_truncate(label), case))
        otherwise = activity.first_child_ci('otherwise')
        if otherwise is not None:
            branches.append(Branch('otherwise', otherwise))
    elif kind == 'pick':
        for message in activity.all_children_ci('onMessage'):
            branches.append(Branch(_truncate(message.attr('operation') or 'onMessage'), message))
        for alarm in activity.all_children_ci('onAlarm'):
            branches.append(Branch('onAlarm', alarm))
    return branches


def activity_data(activity: XmlNode, kind: str) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for key in _DATA_ATTRIBUTES:
        if activity.attr(key):
            data[key] = activity.attr(key)

    if kind == 'forEach':
        for key in ('counterName', 'parallel'):
            if activity.attr(key):
                data[key] = activity.attr(key)
        start = activity.first_child_ci('startCounterValue')
        if start is not None and start.text:
            data['startValue'] = start.text
        final = activity.first_child_ci('finalCounterValue')
        if final is not None and final.text:
            data['finalValue'] = final.text

    if kind == 'wait':
        duration = activity.first_child_ci('for')
        if duration is not None and duration.text:
            data['duration'] = duration.text
        deadline = activity.first_child_ci('until')
        if deadline is not None and deadline.text:
            data['deadline'] = deadline.text

    if kind == 'assign':
        copies = activity.all_children_ci('copy')
        if copies:
            data['copyCount'] = len(copies)

    return data


class ProcessFlowParser:
    """Builds a ParsedFlow from one process element."""

    def __init__(self):
        self.builder = FlowBuilder(PROCESS_X_CENTER, PROCESS_Y_SPACING)

    def parse(self, process: XmlNode) -> ParsedFlow:
        self._chain(child_activities(process), None, 0)

        handlers = process.first_child_ci('faultHandlers')
        if handlers is not None and self.builder.nodes:
            self._add_fault_handlers(handlers, self.builder.nodes[0].id, 0)

        return self.builder.build(FlowMetadata(
            process_name=process.attr('name') or UNNAMED_PROCESS,
            namespace=process.attr('targetNamespace'),
        ))

    # ── Chains ───────────────────────────────────────────────────────────

    def _chain(
        self,
        activities: list[tuple[str, XmlNode]],
        parent_id: str | None,
        x_offset: float,
        entry_type: ConnectionType = ConnectionType.DEFAULT,
        entry_label: str | None = None,
    ) -> str | None:
        """Link activities one after another starting from ``parent_id``.

        Only the first activity uses ``entry_type``/``entry_label`` for its
        incoming edge. Returns the last id, or ``parent_id`` when empty.
        """
        prev_id = parent_id
        for idx, (kind, activity) in enumerate(activities):
            if idx == 0:
                prev_id = self._activity(activity, kind, prev_id, x_offset, entry_type, entry_label)
            else:
                prev_id = self._activity(activity, kind, prev_id, x_offset)
        return prev_id

    def _activity(
        self,
        activity: XmlNode,
        kind: str,
        parent_id: str | None,
        x_offset: float,
        entry_type: ConnectionType = ConnectionType.DEFAULT,
        entry_label: str | None = None,
    ) -> str:
        """Add one activity (recursing into constructs); returns the id to chain from."""
        node_id = self.builder.add_node(
            PROCESS_NODE_TYPES.get(kind, NodeType.ACTION),
            activity.attr('name') or kind,
            kind,
            x_offset,
            PROCESS_ICONS.get(kind),
            activity_data(activity, kind),
        )
        if parent_id:
            self.builder.connect(parent_id, node_id, entry_type, entry_label)

        if kind == 'sequence':
            return self._chain(child_activities(activity), node_id, x_offset)
        if kind == 'flow':
            return self._parallel(activity, node_id, x_offset)
        if kind in ('switch', 'if', 'pick'):
            return self._conditional(activity, kind, node_id, x_offset)
        if kind in LOOP_ACTIVITIES:
            return self._loop(activity, node_id, x_offset)
        if kind == 'scope':
            return self._scope(activity, node_id, x_offset)
        return node_id

    # ── Constructs ───────────────────────────────────────────────────────

    def _parallel(self, activity: XmlNode, node_id: str, x_offset: float) -> str:
        branches = child_activities(activity)
        join_id = self.builder.next_node_id()
        start_x = -((len(branches) - 1) * BRANCH_WIDTH) / 2
        start_y = self.builder.current_row()
        max_y = start_y

        for idx, (kind, child) in enumerate(branches):
            self.builder.set_row(start_y)
            branch_end = self._activity(child, kind, node_id, x_offset + start_x + idx * BRANCH_WIDTH)
            max_y = max(max_y, self.builder.current_row())
            self.builder.connect(branch_end, join_id)

        if not branches:
            self.builder.connect(node_id, join_id)

        self.builder.set_row(max_y)
        return self.builder.add_node(NodeType.ACTION, 'Join', 'flowEnd', x_offset, node_id=join_id)

    def _conditional(self, activity: XmlNode, kind: str, node_id: str, x_offset: float) -> str:
        branches = conditional_branches(activity, kind)
        merge_id = self.builder.next_node_id()
        start_x = -((len(branches) - 1) * BRANCH_WIDTH) / 2
        start_y = self.builder.current_row()
        max_y = start_y

        for idx, branch in enumerate(branches):
            self.builder.set_row(start_y)
            body = child_activities(branch.body)
            if body:
                last_id = self._chain(
                    body, node_id, x_offset + start_x + idx * BRANCH_WIDTH,
                    ConnectionType.CONDITIONAL, branch.label,
                )
                self.builder.connect(last_id, merge_id)
            else:
                self.builder.connect(node_id, merge_id, ConnectionType.CONDITIONAL, branch.label)
            max_y = max(max_y, self.builder.current_row())

        if not branches:
            self.builder.connect(node_id, merge_id)

        self.builder.set_row(max_y)
        if kind == 'pick':
            return self.builder.add_node(NodeType.ACTION, 'Pick End', 'pickEnd', x_offset, node_id=merge_id)
        return self.builder.add_node(NodeType.ACTION, 'Merge', 'conditionEnd', x_offset, node_id=merge_id)

    def _loop(self, activity: XmlNode, node_id: str, x_offset: float) -> str:
        last_id = self._chain(child_activities(activity), node_id, x_offset)
        if last_id != node_id:
            self.builder.connect(last_id, node_id, ConnectionType.CONDITIONAL, 'loop')
        return node_id

    def _scope(self, activity: XmlNode, node_id: str, x_offset: float) -> str:
        last_id = self._chain(child_activities(activity), node_id, x_offset)
        handlers = activity.first_child_ci('faultHandlers')
        if handlers is not None:
            self._add_fault_handlers(handlers, node_id, x_offset)
        return last_id

    def _add_fault_handlers(self, handlers: XmlNode, anchor_id: str, x_offset: float) -> list[str]:
        """Side error nodes for every ``catch`` and ``catchAll`` handler."""
        catches = [(c, False) for c in handlers.all_children_ci('catch')]
        catches += [(c, True) for c in handlers.all_children_ci('catchAll')]

        ids = []
        for idx, (handler, is_catch_all) in enumerate(catches, start=1):
            fault_name = handler.attr('faultName')
            if is_catch_all:
                name = 'Catch All'
            else:
                name = fault_name or f'Catch {idx}'
            node_id = self.builder.add_node(
                NodeType.ERROR,
                name,
                'catchAll' if is_catch_all else 'catch',
                x_offset + ERROR_HANDLER_OFFSET,
                PROCESS_ICONS['catch'],
                {'faultName': fault_name} if fault_name else {},
                row_fraction=0.5,
            )
            self.builder.connect(anchor_id, node_id, ConnectionType.ERROR, 'error')
            ids.append(node_id)
        return ids


def parse_process_flow(root: XmlNode) -> ParsedFlow | None:
    """Parse a process-form document.

    Returns:
        ``None`` when no process element exists; otherwise the node graph
        (possibly empty).
    """
    process = find_process(root)
    if process is None:
        return None
    return ProcessFlowParser().parse(process)
