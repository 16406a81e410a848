"""Flow graph reconstruction and comparison."""

from integration_diff.flow.comparator import compare_flows
from integration_diff.flow.parser import parse_flow, parse_flow_from_files
from integration_diff.flow.xml_tree import FlowParseError, XmlNode, parse_xml

__all__ = [
    'compare_flows',
    'parse_flow',
    'parse_flow_from_files',
    'parse_xml',
    'FlowParseError',
    'XmlNode',
]
