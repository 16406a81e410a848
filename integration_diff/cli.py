"""CLI for integration-diff."""

import argparse
import json
import logging
import os
import sys

from integration_diff.archive_reader import ArchiveReader, ArchiveReadError
from integration_diff.diff_engine import compute_file_diff
from integration_diff.domain.enums import LineChangeType
from integration_diff.domain.models import ArchiveSnapshot, CompareOptions, CompareResult, SnapshotComparison
from integration_diff.flow import compare_flows, parse_flow_from_files
from integration_diff.line_diff import format_content, side_by_side_diff, unified_diff
from integration_diff.output.report_writer import ReportWriter

logger = logging.getLogger(__name__)

_MARKERS = {
    LineChangeType.UNCHANGED: ' ',
    LineChangeType.REMOVED: '-',
    LineChangeType.ADDED: '+',
    LineChangeType.EMPTY: ' ',
}


def compare_snapshots(
    left: ArchiveSnapshot, right: ArchiveSnapshot, options: CompareOptions,
) -> SnapshotComparison:
    """File diff plus, when enabled, parsed flows and their node comparison."""
    comparison = SnapshotComparison(diff=compute_file_diff(left.files, right.files, options))
    if options.include_flows:
        comparison.left_flow = parse_flow_from_files(left.files)
        comparison.right_flow = parse_flow_from_files(right.files)
        comparison.flow_comparison = compare_flows(comparison.left_flow, comparison.right_flow)
    return comparison


def compare_archives(left_path: str, right_path: str, output_dir: str, options: CompareOptions) -> CompareResult:
    """Main orchestration: two ZIPs -> diff + flows -> JSON reports."""
    reader = ArchiveReader(max_inline_content=options.max_inline_content)

    logger.info('Reading %s', left_path)
    left = reader.read(left_path)
    logger.info('Reading %s', right_path)
    right = reader.read(right_path)

    comparison = compare_snapshots(left, right, options)

    writer = ReportWriter(output_dir, pretty=options.pretty)
    writer.write_diff_report(comparison.diff, left, right)
    flows_compared = options.include_flows and (
        comparison.left_flow is not None or comparison.right_flow is not None
    )
    if flows_compared:
        writer.write_flow_comparison(comparison.left_flow, comparison.right_flow, comparison.flow_comparison)
    logger.info('Reports written to %s', output_dir)

    return CompareResult(
        items_count=len(comparison.diff.items),
        summary=comparison.diff.summary,
        warnings_count=len(comparison.diff.warnings),
        flows_compared=flows_compared,
        output_dir=output_dir,
    )


# ── Line Diff Rendering ──────────────────────────────────────────────────

def _num(value: int | None) -> str:
    return f'{value:>5}' if value is not None else '     '


def render_unified(left_content: str, right_content: str) -> list[str]:
    return [
        f'{_num(line.left_line_number)} {_num(line.right_line_number)} {_MARKERS[line.type]} {line.content}'
        for line in unified_diff(left_content, right_content)
    ]


def render_side_by_side(left_content: str, right_content: str, width: int = 60) -> list[str]:
    left_rows, right_rows = side_by_side_diff(left_content, right_content)
    return [
        f'{_num(left.line_number)} {_MARKERS[left.type]} {left.content[:width]:<{width}} | '
        f'{_num(right.line_number)} {_MARKERS[right.type]} {right.content}'
        for left, right in zip(left_rows, right_rows)
    ]


def _read_text(path: str) -> str:
    with open(path, encoding='utf-8', errors='replace') as f:
        return f.read()


def _require_file(path: str) -> None:
    if not os.path.isfile(path):
        print(f"Error: {path} not found", file=sys.stderr)
        sys.exit(1)


def main(argv: list[str] | None = None):
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    parser = argparse.ArgumentParser(prog='integration-diff', description='Integration archive diff tool')
    subparsers = parser.add_subparsers(dest='command')

    # compare command
    compare_parser = subparsers.add_parser(
        'compare', parents=[common], help='Compare two archives and write JSON reports',
    )
    compare_parser.add_argument('left', help='Path to the older archive ZIP file')
    compare_parser.add_argument('right', help='Path to the newer archive ZIP file')
    compare_parser.add_argument('output', help='Output directory')
    compare_parser.add_argument('--no-pretty', action='store_true', help='Disable pretty printing')
    compare_parser.add_argument('--no-flows', action='store_true', help='Skip flow parsing and comparison')
    compare_parser.add_argument('--patch-lines', type=int, default=50, help='Lines per side in diff patches (default: 50)')

    # flow command
    flow_parser = subparsers.add_parser('flow', parents=[common], help='Print the parsed flow of one archive as JSON')
    flow_parser.add_argument('archive', help='Path to archive ZIP file')

    # diff-file command
    file_parser = subparsers.add_parser('diff-file', parents=[common], help='Line diff of two files')
    file_parser.add_argument('left', help='Old file')
    file_parser.add_argument('right', help='New file')
    file_parser.add_argument('--unified', action='store_true', help='Unified instead of side-by-side output')
    file_parser.add_argument('--format', action='store_true', help='Pretty-print XML/JSON before diffing')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, 'verbose', False) else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.command == 'compare':
        _require_file(args.left)
        _require_file(args.right)

        options = CompareOptions(
            pretty=not args.no_pretty,
            include_flows=not args.no_flows,
            patch_line_limit=args.patch_lines,
        )
        try:
            result = compare_archives(args.left, args.right, args.output, options)
        except ArchiveReadError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        summary = result.summary
        print(
            f"Done! {result.items_count} changes "
            f"({summary.high} high, {summary.medium} medium, {summary.low} low, {summary.info} info)"
        )
        if result.warnings_count:
            print(f"Warnings: {result.warnings_count} path normalization collisions")
        print(f"Output: {result.output_dir}")

    elif args.command == 'flow':
        _require_file(args.archive)
        try:
            snapshot = ArchiveReader().read(args.archive)
        except ArchiveReadError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        flow = parse_flow_from_files(snapshot.files)
        if flow is None:
            print(f"Error: no flow definition found in {args.archive}", file=sys.stderr)
            sys.exit(1)
        print(json.dumps(flow.to_dict(), indent=2))

    elif args.command == 'diff-file':
        _require_file(args.left)
        _require_file(args.right)

        left_content = _read_text(args.left)
        right_content = _read_text(args.right)
        if args.format:
            left_content = format_content(left_content, args.left)
            right_content = format_content(right_content, args.right)

        render = render_unified if args.unified else render_side_by_side
        for line in render(left_content, right_content):
            print(line)

    else:
        parser.print_help()


if __name__ == '__main__':
    main()
