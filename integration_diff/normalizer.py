"""
Path and content normalization for exported archives.

The export tool regenerates numeric/hex identifiers, timestamps and
namespace prefixes on every export. This module removes that noise so that
re-exports of unchanged configuration compare as equal.

Normalization is expressed as ordered lists of ``NormalizationRule`` objects
rather than one large regex, so each rule can be tested on its own:

- ID_RULES: volatile identifiers embedded in path segments and references
  (processor_123, resourcegroup_45, itg_<uuid>, req_<hex>, ...)
- PATH_ONLY_RULES: version suffixes (_01.00.0000) and duplicate suffixes ((2))
- XML_NOISE_RULES: timestamp-family attributes, xml:id/generatedId, orajsN prefixes
"""

import os
import re
from dataclasses import dataclass
from typing import Iterable

from integration_diff.domain.constants import XML_EXTENSIONS


@dataclass(frozen=True)
class NormalizationRule:
    """A single pattern -> replacement substitution."""

    pattern: re.Pattern
    replacement: str
    description: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def _rule(pattern: str, replacement: str, description: str) -> NormalizationRule:
    return NormalizationRule(re.compile(pattern), replacement, description)


# ── Rule Lists ───────────────────────────────────────────────────────────

ID_RULES: tuple[NormalizationRule, ...] = (
    _rule(r'processor_\d+', 'processor_X', 'processor numeric id'),
    _rule(r'resourcegroup_\d+', 'resourcegroup_X', 'resource group numeric id'),
    _rule(r'application_\d+', 'application_X', 'application numeric id'),
    _rule(r'inbound_\d+', 'inbound_X', 'inbound endpoint numeric id'),
    _rule(r'outbound_\d+', 'outbound_X', 'outbound endpoint numeric id'),
    _rule(r'itg_[a-f0-9-]+', 'itg_X', 'export uuid'),
    _rule(r'(?<![A-Za-z0-9])req_[a-f0-9]+', 'req_X', 'request hex id'),
    _rule(r'(?<![A-Za-z0-9])res_[a-f0-9]+', 'res_X', 'response hex id'),
)

PATH_ONLY_RULES: tuple[NormalizationRule, ...] = (
    _rule(r'_\d{2}\.\d{2}\.\d{4}', '', 'version suffix'),
    _rule(r'\s*\(\d+\)', '', 'numbered duplicate suffix'),
)

XML_NOISE_RULES: tuple[NormalizationRule, ...] = (
    _rule(r'timestamp="[^"]*"', 'timestamp=""', 'timestamp attribute'),
    _rule(r'createdTime="[^"]*"', 'createdTime=""', 'created time attribute'),
    _rule(r'modifiedTime="[^"]*"', 'modifiedTime=""', 'modified time attribute'),
    _rule(r'lastUpdatedTime="[^"]*"', 'lastUpdatedTime=""', 'last updated time attribute'),
    _rule(r'''xml:id=(?:"[^"]*"|'[^']*')''', '', 'generated xml:id attribute'),
    _rule(r'generatedId="[^"]*"', '', 'generatedId attribute'),
    _rule(r'xmlns:orajs\d+="[^"]*"', '', 'generated namespace declaration'),
    _rule(r'orajs\d+:', 'orajs:', 'generated namespace prefix'),
)

_DUPLICATE_SEPARATORS_RE = re.compile(r'/+')
_WHITESPACE_RE = re.compile(r'\s+')


def apply_rules(text: str, rules: Iterable[NormalizationRule]) -> str:
    """Apply rules in order, each one to the output of the previous."""
    for rule in rules:
        text = rule.apply(text)
    return text


# ── Paths ────────────────────────────────────────────────────────────────

def _normalize_path_once(path: str) -> str:
    normalized = apply_rules(path.lower(), ID_RULES)
    normalized = apply_rules(normalized, PATH_ONLY_RULES)
    normalized = _DUPLICATE_SEPARATORS_RE.sub('/', normalized)
    return normalized.lower().strip()


def normalize_path(path: str) -> str:
    """Collapse volatile identifiers in an archive path.

    Lowercasing happens first so that identifier rules see a single case.
    Rules are re-applied until the path stops changing; removing one
    segment can expose another match, and running to a fixed point keeps
    ``normalize_path(normalize_path(p)) == normalize_path(p)``.

    Examples:
        >>> normalize_path('icspackage/project/processor_1234/resourcegroup_55/req_ab12.xsl')
        'icspackage/project/processor_x/resourcegroup_x/req_x.xsl'
        >>> normalize_path('A//B/Flow_01.00.0000 (2).xml')
        'a/b/flow.xml'
    """
    current = _normalize_path_once(path)
    while True:
        following = _normalize_path_once(current)
        if following == current:
            return current
        current = following


# ── Contents ─────────────────────────────────────────────────────────────

def is_xml_path(path: str) -> bool:
    return path.lower().endswith(XML_EXTENSIONS)


def normalize_xml(content: str) -> str:
    """Strip export noise from XML-family content and collapse whitespace.

    Whitespace runs become single spaces; formatting is not preserved.
    """
    normalized = apply_rules(content, XML_NOISE_RULES)
    normalized = apply_rules(normalized, ID_RULES)
    return _WHITESPACE_RE.sub(' ', normalized).strip()


def normalize_content(content: str, path: str) -> str:
    """Normalize file content according to its extension.

    XML-family files (.xml .xsl .xslt .wsdl .xsd .jca) get the full XML
    treatment. Every other format (JSON, properties, text) only gets the
    identifier substitutions; whitespace is left alone there.
    """
    if is_xml_path(path):
        return normalize_xml(content)
    return apply_rules(content, ID_RULES)


def file_extension(path: str) -> str:
    return os.path.splitext(path)[1].lower()
