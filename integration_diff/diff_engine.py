"""File-level diff between two archive snapshots.

Files are matched on their normalized path, classified as Added, Removed or
Modified, rated for severity and enriched with human-readable descriptions.
Modified candidates whose contents are equal after normalization are
treated as export noise and dropped.
"""

import logging
from typing import Iterable

from integration_diff.analysis.descriptions import (
    describe_change,
    entity_name_for,
    entity_type_for,
    extract_action_type,
    extract_object_name,
    simple_description,
)
from integration_diff.analysis.patch import generate_diff_patch
from integration_diff.analysis.severity import (
    SeverityAssessment,
    assess_modification,
    assess_presence_change,
    categorize,
)
from integration_diff.domain.enums import ChangeType
from integration_diff.domain.models import (
    ArchiveFileRecord,
    CompareOptions,
    DiffItem,
    DiffMetadata,
    DiffSummary,
    FileDiffResult,
)
from integration_diff.normalizer import normalize_content, normalize_path

logger = logging.getLogger(__name__)


def build_path_index(
    files: Iterable[ArchiveFileRecord], side: str, warnings: list[str],
) -> dict[str, ArchiveFileRecord]:
    """Map normalized path -> record for one side.

    When two original paths normalize to the same key the later record
    wins; each such collision is logged and appended to ``warnings``.
    """
    index: dict[str, ArchiveFileRecord] = {}
    for record in files:
        key = normalize_path(record.path)
        previous = index.get(key)
        if previous is not None and previous.path != record.path:
            message = (
                f"{side}: '{previous.path}' and '{record.path}' both normalize to "
                f"'{key}'; keeping '{record.path}'"
            )
            logger.warning('Path normalization collision: %s', message)
            warnings.append(message)
        index[key] = record
    return index


def summarize(items: Iterable[DiffItem]) -> DiffSummary:
    """Recompute severity and category counts for a list of items."""
    summary = DiffSummary()
    for item in items:
        summary.record(item)
    return summary


def order_items(items: list[DiffItem]) -> list[DiffItem]:
    """Meaningful (High/Medium) first, then minor; each group by severity rank.

    ``sorted`` is stable, so items of equal severity keep discovery order.
    """
    meaningful = [i for i in items if i.severity.is_meaningful]
    minor = [i for i in items if not i.severity.is_meaningful]
    return (
        sorted(meaningful, key=lambda i: i.severity.rank)
        + sorted(minor, key=lambda i: i.severity.rank)
    )


def _classify(
    key: str, left: ArchiveFileRecord | None, right: ArchiveFileRecord | None,
) -> tuple[ChangeType, SeverityAssessment] | None:
    if left is None:
        return ChangeType.ADDED, assess_presence_change(key, ChangeType.ADDED)
    if right is None:
        return ChangeType.REMOVED, assess_presence_change(key, ChangeType.REMOVED)
    if left.hash == right.hash:
        return None
    if left.content is not None and right.content is not None:
        if normalize_content(left.content, left.path) == normalize_content(right.content, right.path):
            return None
    return ChangeType.MODIFIED, assess_modification(key, left.content, right.content)


def build_diff_item(
    key: str,
    change_type: ChangeType,
    assessment: SeverityAssessment,
    left: ArchiveFileRecord | None,
    right: ArchiveFileRecord | None,
    options: CompareOptions,
) -> DiffItem:
    """Assemble one enriched diff item for a matched normalized path."""
    left_content = left.content if left else None
    right_content = right.content if right else None
    current_content = right_content if right_content is not None else left_content
    display_path = (right or left).path

    object_name = extract_object_name(current_content)
    metadata = DiffMetadata(
        category=categorize(key),
        normalized_path=key,
        original_paths=[r.path for r in (left, right) if r is not None],
        object_name=object_name,
        action_type=extract_action_type(current_content, key),
        change_description=describe_change(change_type, key, left_content, right_content),
        simple_description=simple_description(key, change_type, display_path),
        left_hash=left.hash if left else None,
        right_hash=right.hash if right else None,
    )

    return DiffItem(
        entity_type=entity_type_for(key),
        entity_name=entity_name_for(display_path, object_name),
        change_type=change_type,
        severity=assessment.severity,
        risk_reason=assessment.risk_reason,
        left_ref=left.path if left else None,
        right_ref=right.path if right else None,
        diff_patch=generate_diff_patch(left_content, right_content, change_type, options.patch_line_limit),
        metadata=metadata,
    )


def compute_file_diff(
    left_files: Iterable[ArchiveFileRecord],
    right_files: Iterable[ArchiveFileRecord],
    options: CompareOptions | None = None,
) -> FileDiffResult:
    """Compare two archive file listings.

    Args:
        left_files: Records of the older snapshot.
        right_files: Records of the newer snapshot.
        options: Patch size limits; defaults to ``CompareOptions()``.

    Returns:
        FileDiffResult with ordered items, a consistent summary and any
        normalization-collision warnings.
    """
    options = options or CompareOptions()
    warnings: list[str] = []
    left_index = build_path_index(left_files, 'left', warnings)
    right_index = build_path_index(right_files, 'right', warnings)

    items: list[DiffItem] = []
    unchanged = 0
    for key in dict.fromkeys([*left_index, *right_index]):
        left = left_index.get(key)
        right = right_index.get(key)
        classification = _classify(key, left, right)
        if classification is None:
            unchanged += 1
            continue
        change_type, assessment = classification
        items.append(build_diff_item(key, change_type, assessment, left, right, options))

    ordered = order_items(items)
    logger.debug(
        'File diff: %d changed (%d added, %d removed, %d modified), %d unchanged or noise-only',
        len(ordered),
        sum(1 for i in ordered if i.change_type is ChangeType.ADDED),
        sum(1 for i in ordered if i.change_type is ChangeType.REMOVED),
        sum(1 for i in ordered if i.change_type is ChangeType.MODIFIED),
        unchanged,
    )
    return FileDiffResult(items=ordered, summary=summarize(ordered), warnings=warnings)
