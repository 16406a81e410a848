"""Tests for reading exported archives."""

import hashlib
import zipfile

import pytest

from integration_diff.archive_reader import ArchiveReader, ArchiveReadError, is_flow_critical
from tests.conftest import PROJECT_XML, content_hash


class TestArchiveReader:

    def test_reads_all_files(self, make_zip):
        path = make_zip({'a/one.xml': '<one/>', 'a/two.properties': 'k=v'})
        snapshot = ArchiveReader().read(path)

        assert snapshot.file_name == 'archive.zip'
        assert sorted(r.path for r in snapshot.files) == ['a/one.xml', 'a/two.properties']
        record = next(r for r in snapshot.files if r.path == 'a/one.xml')
        assert record.content == '<one/>'
        assert record.hash == content_hash('<one/>')
        assert record.size == len('<one/>')

    def test_archive_digest_and_size(self, make_zip):
        path = make_zip({'a.txt': 'x'})
        with open(path, 'rb') as f:
            data = f.read()
        snapshot = ArchiveReader().read(path)
        assert snapshot.sha256 == hashlib.sha256(data).hexdigest()
        assert snapshot.size == len(data)

    def test_reads_bytes(self, make_zip):
        with open(make_zip({'a.txt': 'x'}), 'rb') as f:
            data = f.read()
        snapshot = ArchiveReader().read(data, name='upload.zip')
        assert snapshot.file_name == 'upload.zip'
        assert [r.path for r in snapshot.files] == ['a.txt']

    def test_directories_skipped(self, tmp_path):
        path = tmp_path / 'dirs.zip'
        with zipfile.ZipFile(path, 'w') as zf:
            zf.writestr('folder/', '')
            zf.writestr('folder/file.txt', 'data')
        snapshot = ArchiveReader().read(str(path))
        assert [r.path for r in snapshot.files] == ['folder/file.txt']

    def test_large_content_withheld(self, make_zip):
        path = make_zip({'big/data.xml': 'x' * 20, 'small.txt': 'tiny'})
        snapshot = ArchiveReader(max_inline_content=10).read(path)
        by_path = {r.path: r for r in snapshot.files}
        assert by_path['big/data.xml'].content is None
        assert by_path['big/data.xml'].hash == content_hash('x' * 20)
        assert by_path['small.txt'].content == 'tiny'

    def test_flow_files_always_kept(self, make_zip):
        path = make_zip({
            'icspackage/project/PROJECT-INF/project.xml': PROJECT_XML,
            'x/orchestration/flow.xml': 'y' * 50,
            'x/main.bpel': 'z' * 50,
        })
        snapshot = ArchiveReader(max_inline_content=10).read(path)
        assert all(r.content is not None for r in snapshot.files)

    def test_invalid_utf8_replaced(self, tmp_path):
        path = tmp_path / 'binary.zip'
        with zipfile.ZipFile(path, 'w') as zf:
            zf.writestr('img.bin', b'ab\xffcd')
        record = ArchiveReader().read(str(path)).files[0]
        assert record.content == 'ab\ufffdcd'

    def test_not_a_zip(self, tmp_path):
        path = tmp_path / 'bad.zip'
        path.write_text('not a zip')
        with pytest.raises(ArchiveReadError):
            ArchiveReader().read(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ArchiveReadError):
            ArchiveReader().read(str(tmp_path / 'missing.zip'))

    def test_bad_bytes(self):
        with pytest.raises(ArchiveReadError):
            ArchiveReader().read(b'garbage')


class TestIsFlowCritical:

    @pytest.mark.parametrize('path, expected', [
        ('icspackage/project/PROJECT-INF/project.xml', True),
        ('x/orchestration/flow.xml', True),
        ('x/Main.BPEL', True),
        ('x/resources/map.xsl', False),
    ])
    def test_paths(self, path, expected):
        assert is_flow_critical(path) is expected
