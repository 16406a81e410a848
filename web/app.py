"""Simple Flask web interface for integration-diff."""

from flask import Flask, request, jsonify

from integration_diff.archive_reader import ArchiveReader, ArchiveReadError
from integration_diff.cli import compare_snapshots
from integration_diff.domain.models import CompareOptions
from integration_diff.line_diff import format_content, side_by_side_diff, unified_diff

app = Flask(__name__)

LINE_DIFF_MODES = ('side_by_side', 'unified')


def _uploaded_archive(field: str):
    """Return (file, error_response) for one multipart upload field."""
    file = request.files.get(field)
    if file is None:
        return None, (jsonify({'error': f"No '{field}' file provided"}), 400)
    if not file.filename or not file.filename.endswith('.zip'):
        return None, (jsonify({'error': f"'{field}' must be a ZIP file"}), 400)
    return file, None


@app.route('/api/compare', methods=['POST'])
def compare():
    """Upload two ZIP files and return the diff and flow comparison."""
    left_file, error = _uploaded_archive('left')
    if error:
        return error
    right_file, error = _uploaded_archive('right')
    if error:
        return error

    options = CompareOptions(include_flows=request.form.get('include_flows', 'true').lower() != 'false')
    reader = ArchiveReader(max_inline_content=options.max_inline_content)
    try:
        left = reader.read(left_file.read(), name=left_file.filename)
        right = reader.read(right_file.read(), name=right_file.filename)
    except ArchiveReadError as e:
        return jsonify({'error': str(e)}), 400

    comparison = compare_snapshots(left, right, options)
    return jsonify({
        'left': {'file_name': left.file_name, 'sha256': left.sha256, 'total_files': len(left.files)},
        'right': {'file_name': right.file_name, 'sha256': right.sha256, 'total_files': len(right.files)},
        **comparison.to_dict(),
    })


@app.route('/api/line-diff', methods=['POST'])
def line_diff():
    """Line-level diff of two text contents."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({'error': 'Expected a JSON object body'}), 400

    mode = body.get('mode', 'side_by_side')
    if mode not in LINE_DIFF_MODES:
        return jsonify({'error': f"Unknown mode '{mode}'"}), 400

    for field in ('left', 'right', 'path'):
        if body.get(field) is not None and not isinstance(body[field], str):
            return jsonify({'error': f"'{field}' must be a string"}), 400

    path = body.get('path') or ''
    left = format_content(body.get('left'), path)
    right = format_content(body.get('right'), path)

    if mode == 'unified':
        return jsonify({'mode': mode, 'lines': [line.to_dict() for line in unified_diff(left, right)]})

    left_rows, right_rows = side_by_side_diff(left, right)
    return jsonify({
        'mode': mode,
        'left': [row.to_dict() for row in left_rows],
        'right': [row.to_dict() for row in right_rows],
    })


if __name__ == '__main__':
    app.run(debug=True, port=5002)
