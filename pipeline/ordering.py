"""pipeline.ordering

Canonical order for a findings collection.

Findings are ordered by component name, then vulnerability id, comparing the
UTF-8 bytes so the order is case-sensitive and independent of locale. The sort
is stable: duplicate (component, vulnerability) entries keep their relative
order.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from dtrack_compare.domain import Finding


def finding_sort_key(finding: Finding) -> Tuple[bytes, bytes]:
    return (
        (finding.component.name or "").encode("utf-8", "surrogatepass"),
        (finding.vulnerability.vuln_id or "").encode("utf-8", "surrogatepass"),
    )


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    return sorted(findings, key=finding_sort_key)
