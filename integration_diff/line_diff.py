"""Line-level diffing for display.

Classic longest-common-subsequence alignment over line lists, plus the two
presentation forms built from the same operation list:

- side-by-side: independent left/right numbering with empty gap rows
- unified: one interleaved stream with both line-number columns
"""

import json
import re

from integration_diff.domain.enums import LineChangeType
from integration_diff.domain.models import DiffLine, DiffOperation, UnifiedDiffLine
from integration_diff.normalizer import file_extension


def split_lines(content: str | None) -> list[str]:
    """Split content into lines; ``None`` and ``''`` both give no lines."""
    if not content:
        return []
    return content.splitlines()


def compute_diff_operations(left: list[str], right: list[str]) -> list[DiffOperation]:
    """Align two line lists with an O(m*n) LCS table.

    The backtrace runs from (m, n) to (0, 0). When the lines at the cursor
    differ, an ``added`` step is preferred whenever ``dp[i][j-1] >= dp[i-1][j]``,
    otherwise a ``removed`` step is taken, which yields the familiar diff
    ordering (removals before additions once reversed).

    Args:
        left: Lines of the old version.
        right: Lines of the new version.

    Returns:
        Operations in forward order; -1 marks the absent side.
    """
    m, n = len(left), len(right)

    if m == 0 and n == 0:
        return []
    if m == 0:
        return [DiffOperation(LineChangeType.ADDED, -1, j) for j in range(n)]
    if n == 0:
        return [DiffOperation(LineChangeType.REMOVED, i, -1) for i in range(m)]

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        row, prev_row = dp[i], dp[i - 1]
        left_line = left[i - 1]
        for j in range(1, n + 1):
            if left_line == right[j - 1]:
                row[j] = prev_row[j - 1] + 1
            else:
                row[j] = max(prev_row[j], row[j - 1])

    ops: list[DiffOperation] = []
    i, j = m, n
    while i > 0 or j > 0:
        if i > 0 and j > 0 and left[i - 1] == right[j - 1]:
            ops.append(DiffOperation(LineChangeType.UNCHANGED, i - 1, j - 1))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
            ops.append(DiffOperation(LineChangeType.ADDED, -1, j - 1))
            j -= 1
        else:
            ops.append(DiffOperation(LineChangeType.REMOVED, i - 1, -1))
            i -= 1

    ops.reverse()
    return ops


def side_by_side_diff(
    left_content: str | None, right_content: str | None,
) -> tuple[list[DiffLine], list[DiffLine]]:
    """Build aligned left/right panes. Both lists always have equal length."""
    left_raw = split_lines(left_content)
    right_raw = split_lines(right_content)

    left_rows: list[DiffLine] = []
    right_rows: list[DiffLine] = []
    left_num = right_num = 1
    gap = DiffLine(None, '', LineChangeType.EMPTY)

    for op in compute_diff_operations(left_raw, right_raw):
        if op.type is LineChangeType.UNCHANGED:
            left_rows.append(DiffLine(left_num, left_raw[op.left_index], op.type))
            right_rows.append(DiffLine(right_num, right_raw[op.right_index], op.type))
            left_num += 1
            right_num += 1
        elif op.type is LineChangeType.REMOVED:
            left_rows.append(DiffLine(left_num, left_raw[op.left_index], op.type))
            right_rows.append(gap)
            left_num += 1
        else:
            left_rows.append(gap)
            right_rows.append(DiffLine(right_num, right_raw[op.right_index], op.type))
            right_num += 1

    return left_rows, right_rows


def unified_diff(left_content: str | None, right_content: str | None) -> list[UnifiedDiffLine]:
    """Build a single interleaved stream; no gap rows."""
    left_raw = split_lines(left_content)
    right_raw = split_lines(right_content)

    lines: list[UnifiedDiffLine] = []
    left_num = right_num = 1

    for op in compute_diff_operations(left_raw, right_raw):
        if op.type is LineChangeType.UNCHANGED:
            lines.append(UnifiedDiffLine(left_num, right_num, left_raw[op.left_index], op.type))
            left_num += 1
            right_num += 1
        elif op.type is LineChangeType.REMOVED:
            lines.append(UnifiedDiffLine(left_num, None, left_raw[op.left_index], op.type))
            left_num += 1
        else:
            lines.append(UnifiedDiffLine(None, right_num, right_raw[op.right_index], op.type))
            right_num += 1

    return lines


# ── Content Formatting ───────────────────────────────────────────────────

_TAG_BOUNDARY_RE = re.compile(r'>\s*<')


def format_xml(xml: str) -> str:
    """Put one tag per line and indent by nesting depth."""
    if not xml or not xml.strip().startswith('<'):
        return xml

    formatted: list[str] = []
    indent = 0
    for raw_line in _TAG_BOUNDARY_RE.sub('>\n<', xml).split('\n'):
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith('</'):
            indent = max(0, indent - 1)
        formatted.append('  ' * indent + line)
        opens_element = (
            line.startswith('<')
            and not line.startswith(('</', '<?', '<!'))
            and not line.endswith('/>')
            and '</' not in line
        )
        if opens_element:
            indent += 1
    return '\n'.join(formatted)


def format_json(text: str) -> str:
    stripped = text.strip() if text else ''
    if not stripped.startswith(('{', '[')):
        return text
    try:
        return json.dumps(json.loads(stripped), indent=2)
    except (ValueError, RecursionError):
        return text


def format_content(content: str | None, path: str = '') -> str | None:
    """Pretty-print XML or JSON content before a line diff.

    Content that cannot be formatted is returned unchanged.
    """
    if not content:
        return content

    ext = file_extension(path)
    stripped = content.strip()
    if ext in ('.xml', '.xsl', '.xslt', '.wsdl', '.xsd', '.jca', '.bpel') or stripped.startswith('<'):
        return format_xml(content)
    if ext == '.json' or stripped.startswith(('{', '[')):
        return format_json(content)
    return content
