"""JSON report output.

Writes the file diff report and the flow comparison of one compare run.
"""

import json
import os
from datetime import datetime, timezone
from typing import Any

from integration_diff.domain.models import ArchiveSnapshot, FileDiffResult, FlowComparison, ParsedFlow

TOOL_NAME = 'integration-diff'
TOOL_VERSION = '1.0.0'

DIFF_REPORT_FILE = 'diff_report.json'
FLOW_COMPARISON_FILE = 'flow_comparison.json'


def _archive_info(snapshot: ArchiveSnapshot | None) -> dict[str, Any] | None:
    if snapshot is None:
        return None
    return {
        'file_name': snapshot.file_name,
        'sha256': snapshot.sha256,
        'size': snapshot.size,
        'total_files': len(snapshot.files),
    }


class ReportWriter:
    """Writes compare results to a JSON directory.

    Output structure:
        output_dir/
        ├── diff_report.json
        └── flow_comparison.json (only when flows were compared)

    Args:
        output_dir: Root directory for output files.
        pretty: Whether to pretty-print JSON (default True).
    """

    def __init__(self, output_dir: str, pretty: bool = True) -> None:
        self._output_dir = output_dir
        self._indent = 2 if pretty else None

    def _metadata(self) -> dict[str, Any]:
        return {
            'tool': TOOL_NAME,
            'version': TOOL_VERSION,
            'generated_at': datetime.now(timezone.utc).isoformat(),
        }

    def write_diff_report(
        self,
        result: FileDiffResult,
        left: ArchiveSnapshot | None = None,
        right: ArchiveSnapshot | None = None,
    ) -> str:
        """Write the file-level diff; returns the written path."""
        os.makedirs(self._output_dir, exist_ok=True)
        data = {
            '_metadata': {
                **self._metadata(),
                'left': _archive_info(left),
                'right': _archive_info(right),
            },
            **result.to_dict(),
        }
        path = os.path.join(self._output_dir, DIFF_REPORT_FILE)
        self._write_json(path, data)
        return path

    def write_flow_comparison(
        self,
        left_flow: ParsedFlow | None,
        right_flow: ParsedFlow | None,
        comparison: FlowComparison,
    ) -> str:
        """Write both flows with their node change maps; returns the written path."""
        os.makedirs(self._output_dir, exist_ok=True)
        data = {
            '_metadata': self._metadata(),
            'left_flow': left_flow.to_dict() if left_flow else None,
            'right_flow': right_flow.to_dict() if right_flow else None,
            **comparison.to_dict(),
        }
        path = os.path.join(self._output_dir, FLOW_COMPARISON_FILE)
        self._write_json(path, data)
        return path

    def _write_json(self, path: str, data: Any) -> None:
        """Write data as JSON to a file."""
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=self._indent, ensure_ascii=False, default=str)
