"""Archive reader for exported integration zip files."""

import hashlib
import io
import logging
import os
import zipfile

from integration_diff.domain.constants import FLOW_FILE_MARKERS, FLOW_FILE_SUFFIXES
from integration_diff.domain.models import ArchiveFileRecord, ArchiveSnapshot

logger = logging.getLogger(__name__)


class ArchiveReadError(Exception):
    """Error reading archive."""
    pass


def is_flow_critical(path: str) -> bool:
    """Flow definition files always keep their content."""
    lower = path.lower()
    return any(marker in lower for marker in FLOW_FILE_MARKERS) or lower.endswith(FLOW_FILE_SUFFIXES)


class ArchiveReader:
    """Reads every file of an archive into in-memory records.

    Args:
        max_inline_content: Content of this many characters or more is
            withheld (``None``) unless the file is flow-critical.
    """

    def __init__(self, max_inline_content: int = 100_000):
        self.max_inline_content = max_inline_content

    def read(self, source: str | bytes, name: str | None = None) -> ArchiveSnapshot:
        """Read an archive from a file path or raw bytes."""
        try:
            if isinstance(source, (bytes, bytearray)):
                data = bytes(source)
                file_name = name or 'archive.zip'
            else:
                with open(source, 'rb') as f:
                    data = f.read()
                file_name = name or os.path.basename(source)

            with zipfile.ZipFile(io.BytesIO(data), 'r') as zip_file:
                records = [self._read_entry(zip_file, info) for info in zip_file.infolist() if not info.is_dir()]
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise ArchiveReadError(f"Failed to read archive: {e}") from e

        withheld = sum(1 for r in records if r.content is None)
        logger.debug('Read %s: %d entries, %d with content withheld', file_name, len(records), withheld)

        return ArchiveSnapshot(
            file_name=file_name,
            sha256=hashlib.sha256(data).hexdigest(),
            size=len(data),
            files=records,
        )

    def _read_entry(self, zip_file: zipfile.ZipFile, info: zipfile.ZipInfo) -> ArchiveFileRecord:
        text = zip_file.read(info).decode('utf-8', errors='replace')
        keep = len(text) < self.max_inline_content or is_flow_critical(info.filename)
        return ArchiveFileRecord(
            path=info.filename,
            hash=hashlib.sha256(text.encode('utf-8')).hexdigest(),
            size=info.file_size,
            content=text if keep else None,
        )
