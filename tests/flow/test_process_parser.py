"""Tests for process-form (BPEL-style) flow parsing."""

import pytest

from integration_diff.domain.enums import ConnectionType, NodeType
from integration_diff.flow.process_parser import (
    UNNAMED_PROCESS,
    conditional_branches,
    find_process,
    parse_process_flow,
)
from integration_diff.flow.xml_tree import parse_xml
from tests.conftest import PROCESS_XML

C = ConnectionType


def _parse(xml: str):
    return parse_process_flow(parse_xml(xml))


def _edges(flow):
    return [(c.source, c.target, c.type, c.label) for c in flow.connections]


def _pos(flow, node_id):
    node = flow.node(node_id)
    return node.position.x, node.position.y


class TestOrderProcess:
    """The shared sample process end to end."""

    def setup_method(self):
        self.flow = _parse(PROCESS_XML)

    def test_metadata(self):
        assert self.flow.metadata.process_name == 'OrderProcess'
        assert self.flow.metadata.namespace == 'http://example.com/order'

    def test_nodes(self):
        assert [(n.id, n.name, n.activity_type) for n in self.flow.nodes] == [
            ('node_1', 'main', 'sequence'),
            ('node_2', 'ReceiveOrder', 'receive'),
            ('node_3', 'PrepareRequest', 'assign'),
            ('node_4', 'CheckAmount', 'if'),
            ('node_6', 'RequestApproval', 'invoke'),
            ('node_7', 'AutoApprove', 'empty'),
            ('node_5', 'Merge', 'conditionEnd'),
            ('node_8', 'ReplyOrder', 'reply'),
        ]

    def test_edges(self):
        assert _edges(self.flow) == [
            ('node_1', 'node_2', C.DEFAULT, None),
            ('node_2', 'node_3', C.DEFAULT, None),
            ('node_3', 'node_4', C.DEFAULT, None),
            ('node_4', 'node_6', C.CONDITIONAL, '$amount > 1000'),
            ('node_6', 'node_5', C.DEFAULT, None),
            ('node_4', 'node_7', C.CONDITIONAL, 'else'),
            ('node_7', 'node_5', C.DEFAULT, None),
            ('node_5', 'node_8', C.DEFAULT, None),
        ]

    def test_layout(self):
        assert _pos(self.flow, 'node_1') == (300, 50)
        assert _pos(self.flow, 'node_4') == (300, 410)
        assert _pos(self.flow, 'node_6') == (200, 530)
        assert _pos(self.flow, 'node_7') == (400, 530)
        assert _pos(self.flow, 'node_5') == (300, 650)
        assert _pos(self.flow, 'node_8') == (300, 770)

    def test_node_types_and_data(self):
        receive = self.flow.node('node_2')
        assert receive.type is NodeType.TRIGGER
        assert receive.icon == 'inbox'
        assert receive.data == {'partnerLink': 'client', 'operation': 'process', 'createInstance': 'yes'}
        assert self.flow.node('node_3').data == {'copyCount': 2}
        assert self.flow.node('node_4').type is NodeType.SWITCH
        assert self.flow.node('node_8').type is NodeType.END


class TestConstructs:

    def test_parallel_flow(self):
        flow = _parse('<process name="P"><flow name="Par"><invoke name="A"/><invoke name="B"/></flow></process>')
        assert [n.name for n in flow.nodes] == ['Par', 'A', 'B', 'Join']
        assert _edges(flow) == [
            ('node_1', 'node_3', C.DEFAULT, None),
            ('node_3', 'node_2', C.DEFAULT, None),
            ('node_1', 'node_4', C.DEFAULT, None),
            ('node_4', 'node_2', C.DEFAULT, None),
        ]
        assert _pos(flow, 'node_3') == (200, 170)
        assert _pos(flow, 'node_4') == (400, 170)
        assert _pos(flow, 'node_2') == (300, 290)
        assert flow.node('node_2').activity_type == 'flowEnd'

    def test_empty_parallel_flow(self):
        flow = _parse('<process name="P"><flow name="Par"/></process>')
        assert [n.name for n in flow.nodes] == ['Par', 'Join']
        assert _edges(flow) == [('node_1', 'node_2', C.DEFAULT, None)]

    def test_while_loop_edge(self):
        flow = _parse(
            '<process name="P"><while name="Loop"><condition>$i &lt; 3</condition>'
            '<assign name="Inc"/><invoke name="Call"/></while><empty name="After"/></process>'
        )
        assert _edges(flow) == [
            ('node_1', 'node_2', C.DEFAULT, None),
            ('node_2', 'node_3', C.DEFAULT, None),
            ('node_3', 'node_1', C.CONDITIONAL, 'loop'),
            ('node_1', 'node_4', C.DEFAULT, None),
        ]
        assert flow.node('node_1').type is NodeType.LOOP

    def test_empty_loop_has_no_loop_edge(self):
        flow = _parse('<process name="P"><while name="W"/></process>')
        assert len(flow.nodes) == 1
        assert flow.connections == []

    def test_for_each_data(self):
        flow = _parse(
            '<process name="P"><forEach name="Each" counterName="i" parallel="no">'
            '<startCounterValue>1</startCounterValue><finalCounterValue>10</finalCounterValue>'
            '<scope name="Body"/></forEach></process>'
        )
        assert flow.nodes[0].data == {'counterName': 'i', 'parallel': 'no', 'startValue': '1', 'finalValue': '10'}

    def test_wait_data(self):
        flow = _parse('<process name="P"><wait name="Pause"><for>PT5M</for></wait></process>')
        assert flow.nodes[0].data == {'duration': 'PT5M'}
        assert flow.nodes[0].icon == 'clock'

    def test_switch_with_empty_otherwise(self):
        flow = _parse(
            '<process name="P"><switch name="Route">'
            '<case condition="$a = 1"><assign name="One"/></case><otherwise/>'
            '</switch></process>'
        )
        assert [n.name for n in flow.nodes] == ['Route', 'One', 'Merge']
        assert _edges(flow) == [
            ('node_1', 'node_3', C.CONDITIONAL, '$a = 1'),
            ('node_3', 'node_2', C.DEFAULT, None),
            ('node_1', 'node_2', C.CONDITIONAL, 'otherwise'),
        ]
        assert _pos(flow, 'node_2') == (300, 290)

    def test_pick(self):
        flow = _parse(
            '<process name="P"><pick name="Await">'
            '<onMessage operation="submit"><invoke name="Handle"/></onMessage>'
            '<onAlarm><for>PT1H</for><empty name="Timeout"/></onAlarm>'
            '</pick></process>'
        )
        assert [n.name for n in flow.nodes] == ['Await', 'Handle', 'Timeout', 'Pick End']
        labels = [c.label for c in flow.connections if c.type is C.CONDITIONAL]
        assert labels == ['submit', 'onAlarm']
        assert flow.node('node_2').activity_type == 'pickEnd'

    def test_scope_fault_handlers(self):
        flow = _parse(
            '<process name="P"><scope name="S"><faultHandlers>'
            '<catch faultName="bpel:selectionFailure"/><catchAll/>'
            '</faultHandlers><invoke name="Call"/></scope><empty name="Next"/></process>'
        )
        assert [(n.name, n.activity_type) for n in flow.nodes] == [
            ('S', 'scope'),
            ('Call', 'invoke'),
            ('bpel:selectionFailure', 'catch'),
            ('Catch All', 'catchAll'),
            ('Next', 'empty'),
        ]
        assert _edges(flow) == [
            ('node_1', 'node_2', C.DEFAULT, None),
            ('node_1', 'node_3', C.ERROR, 'error'),
            ('node_1', 'node_4', C.ERROR, 'error'),
            ('node_2', 'node_5', C.DEFAULT, None),
        ]
        assert _pos(flow, 'node_3') == (550, 290)
        assert _pos(flow, 'node_4') == (550, 350)
        assert _pos(flow, 'node_5') == (300, 410)
        assert flow.node('node_3').type is NodeType.ERROR
        assert flow.node('node_3').data == {'faultName': 'bpel:selectionFailure'}
        assert flow.node('node_4').icon == 'shield'

    def test_process_fault_handlers_anchor_first_node(self):
        flow = _parse(
            '<process name="P"><sequence name="Main"><receive name="In"/></sequence>'
            '<faultHandlers><catch/></faultHandlers></process>'
        )
        assert flow.nodes[-1].name == 'Catch 1'
        assert _edges(flow)[-1] == ('node_1', 'node_3', C.ERROR, 'error')

    def test_case_insensitive_tags(self):
        flow = _parse('<Process name="P"><Sequence name="S"><Invoke name="Call"/></Sequence></Process>')
        assert [(n.name, n.activity_type) for n in flow.nodes] == [('S', 'sequence'), ('Call', 'invoke')]

    def test_unnamed_activity_uses_kind(self):
        flow = _parse('<process name="P"><assign/></process>')
        assert flow.nodes[0].name == 'assign'


class TestConditionalBranches:

    def test_if_labels(self):
        activity = parse_xml(
            '<if><condition>a</condition><elseif><condition>b</condition></elseif>'
            '<elseif/><else/></if>'
        )
        assert [b.label for b in conditional_branches(activity, 'if')] == ['a', 'b', 'elseif 2', 'else']

    def test_if_without_condition(self):
        assert [b.label for b in conditional_branches(parse_xml('<if/>'), 'if')] == ['condition']

    def test_switch_case_labels(self):
        activity = parse_xml('<switch><case><condition>x</condition></case><case/></switch>')
        assert [b.label for b in conditional_branches(activity, 'switch')] == ['x', 'case 2']

    def test_long_label_truncated(self):
        activity = parse_xml(f'<if><condition>{"z" * 50}</condition></if>')
        assert conditional_branches(activity, 'if')[0].label == 'z' * 30

    def test_empty_if_body_links_to_merge(self):
        flow = _parse('<process name="P"><if name="X"><condition>a</condition></if></process>')
        assert _edges(flow) == [('node_1', 'node_2', C.CONDITIONAL, 'a')]


class TestFindProcess:

    @pytest.mark.parametrize('xml, expected', [
        ('<definitions><process name="Inner"/></definitions>', 'Inner'),
        ('<BusinessProcess name="Loose"/>', 'Loose'),
        ('<root><processDefinition name="A"/><process name="B"/></root>', 'B'),
    ])
    def test_found(self, xml, expected):
        assert find_process(parse_xml(xml)).attr('name') == expected

    def test_processor_ignored(self):
        assert find_process(parse_xml('<processor name="x"/>')) is None
        assert _parse('<processor name="x"/>') is None

    def test_unnamed_empty_process(self):
        flow = _parse('<process/>')
        assert flow.is_empty
        assert flow.metadata.process_name == UNNAMED_PROCESS
