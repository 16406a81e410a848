"""
Parser for project-form flow definitions (``icsproject`` documents).

A project document declares its external connectors ("applications") and
named sub-behaviours ("processors") up front, then describes the flow as an
orchestration tree. Orchestration elements reference connectors through a
``refUri`` attribute; resolved references replace the generic tag name with
the connector's own name and adapter kind.

Layout:
- main chain on x = 400, one row (100) per node
- containers (try/switch/forEach) are closed by a synthesized end node
- catchAll handlers sit 250 to the right, linked by an error edge
"""

import re
from dataclasses import dataclass
from typing import Any

from integration_diff.domain.constants import (
    ERROR_HANDLER_OFFSET,
    PROJECT_BRANCH_TAGS,
    PROJECT_CONTAINER_TAGS,
    PROJECT_COUNTED_CHILD_TAGS,
    PROJECT_ELEMENT_TAGS,
    PROJECT_FLOW_TAG,
    PROJECT_ICONS,
    PROJECT_NODE_TYPES,
    PROJECT_ROOT_TAG,
    PROJECT_X_CENTER,
    PROJECT_Y_SPACING,
    UNKNOWN_PROCESS,
)
from integration_diff.domain.enums import ConnectionType, NodeType
from integration_diff.domain.models import FlowMetadata, ParsedFlow
from integration_diff.flow.builder import FlowBuilder
from integration_diff.flow.xml_tree import XmlNode

DEFAULT_PROJECT_NAME = 'Integration Project'

_APPLICATION_REF_RE = re.compile(r'^(application_\d+)')
_PROCESSOR_REF_RE = re.compile(r'^(processor_\d+)')


@dataclass(frozen=True)
class ApplicationRef:
    """An external system connector declared by the project."""
    name: str
    role: str
    type: str
    code: str


@dataclass(frozen=True)
class ProcessorRef:
    type: str
    role: str


def index_applications(flow: XmlNode) -> dict[str, ApplicationRef]:
    applications = {}
    for app in flow.all_children('application'):
        key = app.attr('name')
        if not key:
            continue
        adapter = app.first_child('adapter') or XmlNode('adapter')
        applications[key] = ApplicationRef(
            name=adapter.child_text('name') or key,
            role=app.child_text('role') or 'unknown',
            type=adapter.child_text('type') or 'unknown',
            code=adapter.child_text('code') or '',
        )
    return applications


def index_processors(flow: XmlNode) -> dict[str, ProcessorRef]:
    processors = {}
    for proc in flow.all_children('processor'):
        key = proc.attr('name')
        if not key:
            continue
        processors[key] = ProcessorRef(
            type=proc.child_text('type') or 'unknown',
            role=proc.child_text('role') or '',
        )
    return processors


def find_orchestration(flow: XmlNode) -> XmlNode | None:
    """Locate the orchestration tree inside an ``icsflow`` element.

    Checked in order: a direct ``orchestration`` child, an ``orchestration``
    (or bare ``globalTry``) inside a ``messageContext``, then a ``globalTry``
    directly under the flow.
    """
    orchestration = flow.first_child('orchestration')
    if orchestration is not None:
        return orchestration

    for context in flow.all_children('messageContext'):
        nested = context.first_child('orchestration')
        if nested is not None:
            return nested
        if context.first_child('globalTry') is not None:
            return context

    if flow.first_child('globalTry') is not None:
        return flow
    return None


class ProjectFlowParser:
    """Builds a ParsedFlow from one ``icsflow`` element."""

    def __init__(self, flow: XmlNode):
        self.applications = index_applications(flow)
        self.processors = index_processors(flow)
        self.builder = FlowBuilder(PROJECT_X_CENTER, PROJECT_Y_SPACING)

    def parse(self, orchestration: XmlNode, metadata: FlowMetadata) -> ParsedFlow:
        root = orchestration.first_child('globalTry') or orchestration
        self._walk(root, None, 0)
        return self.builder.build(metadata)

    # ── Walk ─────────────────────────────────────────────────────────────

    def _walk(self, container: XmlNode, parent_id: str | None, x_offset: float) -> str | None:
        """Chain the orchestration children of ``container`` in document order.

        Returns:
            Id of the last node of the chain, or ``parent_id`` when the
            container has no orchestration children.
        """
        last_id = parent_id
        for child in container.children:
            if child.tag in PROJECT_ELEMENT_TAGS:
                last_id = self._add_element(child, last_id, x_offset)

        for handler in container.all_children('catchAll'):
            anchor = parent_id
            if anchor is None and self.builder.nodes:
                anchor = self.builder.nodes[0].id
            self._add_error_handler(handler, anchor, x_offset)

        return last_id

    def _add_element(self, element: XmlNode, parent_id: str | None, x_offset: float) -> str:
        tag = element.tag
        name, activity_type = self._display(element)
        node_id = self.builder.add_node(
            PROJECT_NODE_TYPES.get(tag, NodeType.ACTION),
            name,
            activity_type,
            x_offset,
            PROJECT_ICONS.get(tag),
            self._node_data(element),
        )
        if parent_id:
            self.builder.connect(parent_id, node_id)

        if tag in PROJECT_CONTAINER_TAGS:
            last_inner = self._walk(element, node_id, x_offset)
            end_id = self.builder.add_node(NodeType.ACTION, f'End {name}', f'{tag}End', x_offset)
            self.builder.connect(last_inner or node_id, end_id)
            return end_id

        if tag in PROJECT_BRANCH_TAGS:
            return self._walk(element, node_id, x_offset) or node_id

        return node_id

    def _add_error_handler(self, handler: XmlNode, anchor_id: str | None, x_offset: float) -> str:
        node_id = self.builder.add_node(
            PROJECT_NODE_TYPES['catchAll'],
            handler.attr('name') or handler.attr('id') or 'catchAll',
            'catchAll',
            x_offset + ERROR_HANDLER_OFFSET,
            PROJECT_ICONS['catchAll'],
            self._node_data(handler),
        )
        if anchor_id:
            self.builder.connect(anchor_id, node_id, ConnectionType.ERROR, 'error')
        return node_id

    # ── Enrichment ───────────────────────────────────────────────────────

    def _application_for(self, element: XmlNode) -> ApplicationRef | None:
        match = _APPLICATION_REF_RE.match(element.attr('refUri') or '')
        return self.applications.get(match.group(1)) if match else None

    def _processor_for(self, element: XmlNode) -> ProcessorRef | None:
        match = _PROCESSOR_REF_RE.match(element.attr('refUri') or '')
        return self.processors.get(match.group(1)) if match else None

    def _display(self, element: XmlNode) -> tuple[str, str]:
        """Display name and activity label, resolved through ``refUri``."""
        tag = element.tag
        name = element.attr('name') or element.attr('id') or tag
        activity_type = tag

        app = self._application_for(element)
        if app:
            name = app.name
            activity_type = f'{tag} ({app.code or app.type})'

        proc = self._processor_for(element)
        if proc:
            if proc.type == 'transformer':
                name = element.attr('name') or 'Map'
                activity_type = 'Map'
            elif 'stage' in proc.type.lower():
                name = 'Stage File'
                activity_type = 'Stage File'

        return name, activity_type

    def _node_data(self, element: XmlNode) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for key in ('id', 'refUri'):
            if element.attr(key):
                data[key] = element.attr(key)

        app = self._application_for(element)
        if app:
            data['partnerLink'] = app.name
            data['adapterType'] = app.type
            data['adapterCode'] = app.code
            data['role'] = app.role

        operation = element.first_child('operation')
        if operation is not None:
            op_name = operation.attr('name') or operation.child_text('name')
            if op_name:
                data['operation'] = op_name

        if element.attr('outputVariable'):
            data['variable'] = element.attr('outputVariable')
        if element.attr('inputVariable'):
            data['inputVariable'] = element.attr('inputVariable')

        endpoint = element.child_text('endpoint') or element.child_text('endpointUrl')
        if endpoint:
            data['endpoint'] = endpoint

        if element.tag in PROJECT_CONTAINER_TAGS:
            data['childCount'] = sum(
                1 for child in element.children if child.tag in PROJECT_COUNTED_CHILD_TAGS
            )
            data['hasErrorHandler'] = element.first_child('catchAll') is not None

        cases = element.all_children('case')
        if cases:
            data['branchCount'] = len(cases) + (1 if element.first_child('otherwise') is not None else 0)

        return data


def _project_metadata(project: XmlNode) -> FlowMetadata:
    return FlowMetadata(
        process_name=(
            project.child_text('projectName')
            or project.child_text('projectCode')
            or DEFAULT_PROJECT_NAME
        ),
        version=project.child_text('projectVersion'),
    )


def parse_project_flow(root: XmlNode) -> ParsedFlow | None:
    """Parse a project-form document.

    Returns:
        ``None`` when ``root`` is not a project document; an empty flow when
        the project has no orchestration; otherwise the node graph.
    """
    if root.lower_tag != PROJECT_ROOT_TAG:
        return None

    flow = root.first_child_ci(PROJECT_FLOW_TAG)
    if flow is None:
        return ParsedFlow.empty(UNKNOWN_PROCESS)

    orchestration = find_orchestration(flow)
    if orchestration is None:
        return ParsedFlow.empty(root.child_text('projectName') or UNKNOWN_PROCESS)

    return ProjectFlowParser(flow).parse(orchestration, _project_metadata(root))
