"""Tests for path and content normalization."""

import pytest

from integration_diff.normalizer import (
    ID_RULES,
    PATH_ONLY_RULES,
    XML_NOISE_RULES,
    apply_rules,
    is_xml_path,
    normalize_content,
    normalize_path,
    normalize_xml,
)


class TestNormalizePath:
    """Tests for volatile-identifier removal in archive paths."""

    @pytest.mark.parametrize('path, expected', [
        ('icspackage/project/processor_1234/map.xsl', 'icspackage/project/processor_x/map.xsl'),
        ('icspackage/resourcegroup_55/a.xml', 'icspackage/resourcegroup_x/a.xml'),
        ('icspackage/application_7/conn.jca', 'icspackage/application_x/conn.jca'),
        ('icspackage/inbound_3/outbound_4/x.wsdl', 'icspackage/inbound_x/outbound_x/x.wsdl'),
        ('itg_0a1b2c3d-4e5f/flow.xml', 'itg_x/flow.xml'),
        ('maps/req_ab12cd.xsl', 'maps/req_x.xsl'),
        ('maps/res_ff00.xsl', 'maps/res_x.xsl'),
    ])
    def test_identifier_patterns(self, path, expected):
        assert normalize_path(path) == expected

    def test_version_suffix_removed(self):
        assert normalize_path('project/ORDERS_01.00.0000/flow.xml') == 'project/orders/flow.xml'

    def test_numbered_duplicate_removed(self):
        assert normalize_path('project/flow (2).xml') == 'project/flow.xml'

    def test_duplicate_separators_collapsed(self):
        assert normalize_path('a//b///c.xml') == 'a/b/c.xml'

    def test_lowercased_and_trimmed(self):
        assert normalize_path('  Project/Flow.XML  ') == 'project/flow.xml'

    def test_uppercase_ids_normalized(self):
        assert normalize_path('PROCESSOR_99/REQ_AB.xsl') == 'processor_x/req_x.xsl'

    def test_words_ending_in_req_untouched(self):
        assert normalize_path('lib/features_file.xml') == 'lib/features_file.xml'

    def test_regenerated_ids_match(self):
        left = normalize_path('icspackage/project/processor_11/resourcegroup_3/req_1a.xsl')
        right = normalize_path('icspackage/project/processor_42/resourcegroup_7/req_9f.xsl')
        assert left == right

    @pytest.mark.parametrize('path', [
        'icspackage/project/processor_1234/resourcegroup_55/req_ab12.xsl',
        'A//B/Flow_01.00.0000 (2).xml',
        'x/processor_1_01.00.0000/res_abc (3).json',
        'Some Dir/With Spaces (10)/file.properties',
        '',
        '///',
    ])
    def test_idempotent(self, path):
        once = normalize_path(path)
        assert normalize_path(once) == once


class TestNormalizeContent:
    """Tests for extension-dependent content normalization."""

    def test_timestamp_only_difference_is_equal(self):
        left = '<map timestamp="2024-01-01T00:00:00"><a/></map>'
        right = '<map timestamp="2025-12-31T23:59:59"><a/></map>'
        assert normalize_content(left, 'm.xsl') == normalize_content(right, 'm.xsl')

    @pytest.mark.parametrize('attribute', ['createdTime', 'modifiedTime', 'lastUpdatedTime'])
    def test_time_attributes_blanked(self, attribute):
        content = f'<x {attribute}="123"/>'
        assert normalize_xml(content) == f'<x {attribute}=""/>'

    def test_generated_ids_removed(self):
        left = '<x xml:id="a1" generatedId="g1"/>'
        right = "<x xml:id='b2' generatedId=\"g2\"/>"
        assert normalize_xml(left) == normalize_xml(right)

    def test_orajs_namespaces_collapsed(self):
        left = '<x xmlns:orajs12="http://a"><orajs12:f/></x>'
        right = '<x xmlns:orajs98="http://a"><orajs98:f/></x>'
        assert normalize_xml(left) == normalize_xml(right)

    def test_xml_whitespace_collapsed(self):
        assert normalize_content('<a>\n    <b/>\n</a>\n', 'x.xml') == '<a> <b/> </a>'

    def test_xml_identifier_references_normalized(self):
        left = '<ref path="processor_1/resourcegroup_2"/>'
        right = '<ref path="processor_8/resourcegroup_9"/>'
        assert normalize_content(left, 'x.jca') == normalize_content(right, 'x.jca')

    def test_json_keeps_whitespace(self):
        content = '{\n  "a": 1\n}'
        assert normalize_content(content, 'meta.json') == content

    def test_json_identifiers_normalized(self):
        assert normalize_content('{"ref": "processor_12"}', 'meta.json') == '{"ref": "processor_X"}'

    def test_json_timestamp_not_normalized(self):
        left = '{"timestamp="1"}'
        right = '{"timestamp="2"}'
        assert normalize_content(left, 'a.json') != normalize_content(right, 'a.json')

    def test_real_change_survives(self):
        left = '<map timestamp="1"><a/></map>'
        right = '<map timestamp="2"><b/></map>'
        assert normalize_content(left, 'm.xsl') != normalize_content(right, 'm.xsl')

    @pytest.mark.parametrize('path, expected', [
        ('a.xml', True), ('a.XSL', True), ('a.xslt', True), ('a.wsdl', True),
        ('a.xsd', True), ('a.jca', True), ('a.json', False), ('a.properties', False),
    ])
    def test_is_xml_path(self, path, expected):
        assert is_xml_path(path) is expected


class TestRuleLists:
    """Each rule list is usable on its own."""

    def test_id_rules_alone(self):
        assert apply_rules('processor_5 and inbound_6', ID_RULES) == 'processor_X and inbound_X'

    def test_path_only_rules_alone(self):
        assert apply_rules('flow_12.34.5678 (4).xml', PATH_ONLY_RULES) == 'flow.xml'

    def test_xml_noise_rules_alone(self):
        assert apply_rules('<a timestamp="t" generatedId="g"/>', XML_NOISE_RULES) == '<a timestamp="" />'

    def test_rules_have_descriptions(self):
        for rule in (*ID_RULES, *PATH_ONLY_RULES, *XML_NOISE_RULES):
            assert rule.description
