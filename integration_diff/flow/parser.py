"""Flow parsing entry points.

The dialect parsers are tried in order; each returns ``None`` when the
document is not in its form. Parsing never raises: malformed XML yields an
empty flow named ``Parse Error``.
"""

import logging
from typing import Callable, Iterable

from integration_diff.domain.constants import PARSE_ERROR_PROCESS, UNKNOWN_PROCESS
from integration_diff.domain.models import ArchiveFileRecord, ParsedFlow
from integration_diff.flow.process_parser import parse_process_flow
from integration_diff.flow.project_parser import parse_project_flow
from integration_diff.flow.xml_tree import FlowParseError, XmlNode, parse_xml

logger = logging.getLogger(__name__)

FlowStrategy = Callable[[XmlNode], ParsedFlow | None]

FLOW_STRATEGIES: tuple[FlowStrategy, ...] = (parse_project_flow, parse_process_flow)


def parse_flow(xml_text: str) -> ParsedFlow:
    """Parse a flow definition in either dialect.

    Returns:
        The first strategy result that has nodes; otherwise the first
        (empty) result a strategy recognised, else an empty ``Unknown`` flow.
    """
    try:
        return _run_strategies(parse_xml(xml_text))
    except FlowParseError as e:
        logger.warning('Flow definition could not be parsed: %s', e)
    except RecursionError:
        logger.warning('Flow definition could not be parsed: nesting too deep')
    return ParsedFlow.empty(PARSE_ERROR_PROCESS)


def _run_strategies(root: XmlNode) -> ParsedFlow:
    fallback: ParsedFlow | None = None
    for strategy in FLOW_STRATEGIES:
        result = strategy(root)
        if result is None:
            continue
        if not result.is_empty:
            logger.debug('Flow parsed by %s: %d nodes', strategy.__name__, len(result.nodes))
            return result
        fallback = fallback or result

    return fallback or ParsedFlow.empty(UNKNOWN_PROCESS)


# ── Archive Lookup ───────────────────────────────────────────────────────

def find_project_file(files: Iterable[ArchiveFileRecord]) -> ArchiveFileRecord | None:
    for record in files:
        if not record.content:
            continue
        path = record.path.lower()
        if 'project-inf/project.xml' in path:
            return record
        if path.endswith('project.xml') and 'orchestration' in record.content:
            return record
    return None


def find_process_file(files: Iterable[ArchiveFileRecord]) -> ArchiveFileRecord | None:
    for record in files:
        if not record.content:
            continue
        path = record.path.lower()
        if 'orchestration' not in path and 'bpel' not in path:
            continue
        if '<process' in record.content or ':process' in record.content:
            return record
    return None


def parse_flow_from_files(files: Iterable[ArchiveFileRecord]) -> ParsedFlow | None:
    """Find and parse the flow definition of one archive.

    The project form is preferred; the process form is used when no project
    file exists or it yields no nodes.

    Returns:
        The parsed flow, or ``None`` when no candidate file has content.
    """
    files = list(files)

    project_file = find_project_file(files)
    if project_file is not None:
        flow = parse_flow(project_file.content)
        if not flow.is_empty:
            return flow

    process_file = find_process_file(files)
    if process_file is None:
        return None
    return parse_flow(process_file.content)
