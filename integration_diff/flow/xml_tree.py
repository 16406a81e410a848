"""Generic tagged XML tree used by both flow dialects.

Namespaces are stripped on load so that ``<bpel:invoke>`` and ``<invoke>``
look the same to the parsers. Lookups are exact on the local tag unless the
``*_ci`` variants are used.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Iterator


class FlowParseError(Exception):
    """XML text could not be parsed into a tree."""
    pass


def local_name(tag: str) -> str:
    """Drop a ``{namespace}`` or ``prefix:`` qualifier from a tag or attribute name."""
    if tag.startswith('{'):
        tag = tag.split('}', 1)[1]
    return tag.rsplit(':', 1)[-1]


@dataclass
class XmlNode:
    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: list['XmlNode'] = field(default_factory=list)
    text: str = ''

    @property
    def lower_tag(self) -> str:
        return self.tag.lower()

    def attr(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)

    def first_child(self, tag: str) -> 'XmlNode | None':
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    def all_children(self, tag: str) -> list['XmlNode']:
        return [child for child in self.children if child.tag == tag]

    def first_child_ci(self, tag: str) -> 'XmlNode | None':
        tag = tag.lower()
        for child in self.children:
            if child.lower_tag == tag:
                return child
        return None

    def all_children_ci(self, tag: str) -> list['XmlNode']:
        tag = tag.lower()
        return [child for child in self.children if child.lower_tag == tag]

    def child_text(self, tag: str) -> str | None:
        """Text of the first ``tag`` child, ``None`` when missing or blank."""
        child = self.first_child(tag)
        if child is None or not child.text:
            return None
        return child.text

    def iter(self) -> Iterator['XmlNode']:
        """Depth-first walk in document order, starting with this node."""
        yield self
        for child in self.children:
            yield from child.iter()


def _convert(element: ET.Element) -> XmlNode:
    return XmlNode(
        tag=local_name(element.tag),
        attributes={local_name(k): v for k, v in element.attrib.items()},
        children=[_convert(child) for child in element],
        text=(element.text or '').strip(),
    )


def parse_xml(xml_text: str) -> XmlNode:
    """Parse XML text into an ``XmlNode`` tree.

    Raises:
        FlowParseError: If the text is not well-formed XML.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise FlowParseError(f"Invalid XML: {e}") from e
    return _convert(root)
