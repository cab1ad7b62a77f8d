"""pipeline.normalize

Clear the fields of a finding that differ between two instances even when the
underlying data is the same: UUIDs, the owning-project back-reference, the
attribution timestamp and the matrix key.

Both sides of a comparison must go through :func:`clear_dynamic_fields` before
they are sorted or serialized.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List

from dtrack_compare.domain import Finding


def normalize_finding(finding: Finding) -> Finding:
    """Return a copy of *finding* with every instance-local field cleared."""
    return replace(
        finding,
        component=replace(finding.component, uuid=None, project=None),
        vulnerability=replace(finding.vulnerability, uuid=None),
        attribution=replace(finding.attribution, uuid=None, attributed_on=None),
        matrix=None,
    )


def clear_dynamic_fields(findings: Iterable[Finding]) -> List[Finding]:
    """Normalize every finding. The input collection is left untouched."""
    return [normalize_finding(f) for f in findings]
