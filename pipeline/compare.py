"""pipeline.compare

Compare the findings of one matched project pair.

    fetch both sides -> normalize -> sort -> serialize -> canonicalize -> diff
        -> equal:     log it
        -> different: log it and write <out>/<name>_<version>.html

Each call works only on its own pair, so any number of calls can run in
parallel. Failures are returned as outcomes and never raised.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional, Protocol, Sequence

import requests

from dtrack_compare.domain import Finding, Project
from tools.dtrack.errors import DTrackError

from .canonical import CanonicalizationError, canonicalize, structural_diff
from .models import ComparisonOutcome, ComparisonPair
from .normalize import clear_dynamic_fields
from .ordering import sort_findings
from .report import ReportWriter

logger = logging.getLogger(__name__)


class FindingsSource(Protocol):
    base_url: str

    def get_findings(self, project_uuid: str, *, suppressed: bool = True) -> List[Finding]:
        ...


def serialize_findings(findings: Sequence[Finding]) -> bytes:
    """Serialize findings to a JSON array (UTF-8)."""
    return json.dumps([f.to_dict() for f in findings], ensure_ascii=False, allow_nan=False).encode("utf-8")


def _fetch(client: FindingsSource, project: Project) -> List[Finding]:
    if not project.uuid:
        raise ValueError(f"project {project.label} has no uuid")
    return client.get_findings(project.uuid, suppressed=True)


def compare_pair(
    pair: ComparisonPair,
    *,
    source: FindingsSource,
    target: FindingsSource,
    writer: Optional[ReportWriter],
) -> ComparisonOutcome:
    """Compare the findings of *pair* and report the result.

    With ``writer=None`` differences are only logged.
    """
    project = pair.source
    logger.info("comparing findings for %s", pair.label)

    sides = []
    for client, side in ((source, pair.source), (target, pair.target)):
        try:
            findings = _fetch(client, side)
        except (DTrackError, requests.RequestException, TypeError, ValueError) as e:
            reason = f"failed to fetch findings for {side.label} from {client.base_url}: {e}"
            logger.error(reason)
            return ComparisonOutcome.failed(project, reason)
        sides.append((client, findings))

    documents = []
    for client, findings in sides:
        ordered = sort_findings(clear_dynamic_fields(findings))

        try:
            raw = serialize_findings(ordered)
        except (TypeError, ValueError) as e:
            reason = f"failed to serialize findings for {pair.label} from {client.base_url}: {e}"
            logger.error(reason)
            return ComparisonOutcome.failed(project, reason)

        try:
            documents.append(canonicalize(raw))
        except CanonicalizationError as e:
            reason = f"failed to canonicalize findings for {pair.label} from {client.base_url}: {e}"
            logger.error(reason)
            return ComparisonOutcome.failed(project, reason)

    result = structural_diff(
        documents[0],
        documents[1],
        a_label=source.base_url,
        b_label=target.base_url,
    )
    if result.full_match:
        logger.info("findings for %s are equal", pair.label)
        return ComparisonOutcome.equal(project)

    logger.info("findings for %s are different", pair.label)
    if writer is None:
        return ComparisonOutcome.different(project, None)

    try:
        path = writer.write_diff(project, result.rendering)
    except OSError as e:
        logger.error("failed to write diff output for %s: %s", pair.label, e)
        return ComparisonOutcome.different(project, None, reason=f"failed to write diff output: {e}")
    return ComparisonOutcome.different(project, path)
