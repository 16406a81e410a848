"""Tests for JSON report output."""

import json
import os

from integration_diff.diff_engine import compute_file_diff
from integration_diff.domain.models import ArchiveSnapshot
from integration_diff.flow import compare_flows, parse_flow
from integration_diff.output.report_writer import (
    DIFF_REPORT_FILE,
    FLOW_COMPARISON_FILE,
    TOOL_NAME,
    ReportWriter,
)
from tests.conftest import PROJECT_XML, make_record


class TestReportWriter:

    def setup_method(self):
        self.result = compute_file_diff([], [make_record('x/connection1.jca', 'adapter="rest"')])

    def test_diff_report(self, tmp_path):
        left = ArchiveSnapshot('left.zip', 'abc', 10, [])
        path = ReportWriter(str(tmp_path / 'out')).write_diff_report(self.result, left, None)

        assert path == os.path.join(str(tmp_path / 'out'), DIFF_REPORT_FILE)
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
        assert data['_metadata']['tool'] == TOOL_NAME
        assert data['_metadata']['left'] == {'file_name': 'left.zip', 'sha256': 'abc', 'size': 10, 'total_files': 0}
        assert data['_metadata']['right'] is None
        assert data['summary']['medium'] == 1
        assert data['items'][0]['right_ref'] == 'x/connection1.jca'
        assert data['warnings'] == []

    def test_compact_output(self, tmp_path):
        path = ReportWriter(str(tmp_path), pretty=False).write_diff_report(self.result)
        with open(path, encoding='utf-8') as f:
            assert len(f.read().splitlines()) == 1

    def test_flow_comparison(self, tmp_path):
        left = parse_flow(PROJECT_XML)
        right = parse_flow(PROJECT_XML.replace('name="Done"', 'name="Finish"'))
        path = ReportWriter(str(tmp_path)).write_flow_comparison(left, right, compare_flows(left, right))

        assert os.path.basename(path) == FLOW_COMPARISON_FILE
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
        assert data['left_flow']['metadata']['process_name'] == 'Order Sync'
        assert data['left_changes']['node_9'] == 'removed'
        assert data['right_changes']['node_9'] == 'added'
        assert data['counts']['left']['unchanged'] == 9
