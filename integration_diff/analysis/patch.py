"""Coarse textual diff patches attached to diff items.

Modified patches compare trimmed line *sets*, not an aligned diff; they are
meant for quick scanning in a report. Use ``line_diff`` for exact alignment.
"""

from integration_diff.domain.enums import ChangeType

ADDED_BANNER = '+++ ADDED FILE +++'
REMOVED_BANNER = '--- REMOVED FILE ---'
MODIFIED_BANNER = '=== FILE MODIFIED ==='
WHITESPACE_ONLY_NOTE = '(Content differs only in whitespace or line ordering)'


def _section(lines: list[str], header: str, marker: str, noun: str, limit: int) -> list[str]:
    out = [header]
    out.extend(f'{marker} {line}' for line in lines[:limit])
    if len(lines) > limit:
        out.append(f'... and {len(lines) - limit} more {noun} lines')
    return out


def modified_patch(left_content: str, right_content: str, line_limit: int = 50) -> str:
    left_lines = left_content.split('\n')
    right_lines = right_content.split('\n')
    size_delta = len(right_content) - len(left_content)

    patch = [
        MODIFIED_BANNER,
        f'Old: {len(left_lines)} lines, {len(left_content)} bytes',
        f'New: {len(right_lines)} lines, {len(right_content)} bytes',
        f"Change: {'+' if size_delta > 0 else ''}{size_delta} bytes",
        '',
    ]

    left_set = {line.strip() for line in left_lines}
    right_set = {line.strip() for line in right_lines}
    removed = [line for line in left_lines if line.strip() and line.strip() not in right_set]
    added = [line for line in right_lines if line.strip() and line.strip() not in left_set]

    if removed:
        patch.extend(_section(removed, f'--- REMOVED ({len(removed)} lines) ---', '-', 'removed', line_limit))
        patch.append('')
    if added:
        patch.extend(_section(added, f'+++ ADDED ({len(added)} lines) +++', '+', 'added', line_limit))
    if not removed and not added:
        patch.append(WHITESPACE_ONLY_NOTE)

    return '\n'.join(patch)


def generate_diff_patch(
    left_content: str | None,
    right_content: str | None,
    change_type: ChangeType,
    line_limit: int = 50,
) -> str | None:
    """Build the patch text for one diff item.

    Args:
        left_content: Old content, ``None`` when absent or withheld.
        right_content: New content, ``None`` when absent or withheld.
        change_type: Which banner or comparison to produce.
        line_limit: Lines shown per side before the overflow counter.

    Returns:
        Patch text, or ``None`` when the content needed is unknown.
    """
    if change_type is ChangeType.ADDED:
        return None if right_content is None else f'{ADDED_BANNER}\n\n{right_content}'
    if change_type is ChangeType.REMOVED:
        return None if left_content is None else f'{REMOVED_BANNER}\n\n{left_content}'
    if left_content is None or right_content is None:
        return None
    return modified_patch(left_content, right_content, line_limit)
