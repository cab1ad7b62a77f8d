"""dtrack_compare.domain.finding

Typed representation of a Dependency-Track finding.

A finding is one (component, vulnerability) detection for a project. The API
returns it as a document with four parts::

    {
      "component":     {"uuid": ..., "name": ..., "project": ..., ...},
      "vulnerability": {"uuid": ..., "vulnId": ..., ...},
      "analysis":      {...},
      "attribution":   {"uuid": ..., "attributedOn": ..., ...},
      "matrix":        "<project uuid>:<component uuid>:<vulnerability uuid>"
    }

Why dataclasses instead of untyped dicts?
----------------------------------------
The comparison has to clear a handful of instance-local fields on *both*
sides in exactly the same way. Naming those fields explicitly makes it hard to
miss one, while everything else the server sends is carried along in
``extra`` so it still takes part in the diff.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


def _as_mapping(v: Any) -> Mapping[str, Any]:
    return v if isinstance(v, Mapping) else {}


def _optional_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    return str(v)


def _optional_int(v: Any) -> Optional[int]:
    if v is None:
        return None
    # bool is a subclass of int; treat as invalid.
    if isinstance(v, bool):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def _rest(d: Mapping[str, Any], known: set) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if k not in known}


@dataclass(frozen=True)
class FindingComponent:
    """The affected component. ``uuid`` and ``project`` are instance-local."""

    name: str
    uuid: Optional[str] = None
    project: Optional[str] = None

    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "FindingComponent":
        d = _as_mapping(d)
        return cls(
            name=str(d.get("name") or ""),
            uuid=_optional_str(d.get("uuid")),
            project=_optional_str(d.get("project")),
            extra=_rest(d, {"name", "uuid", "project"}),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra or {})
        out.update({"uuid": self.uuid, "name": self.name, "project": self.project})
        return out


@dataclass(frozen=True)
class FindingVulnerability:
    """The matched vulnerability. ``vuln_id`` (e.g. a CVE id) is stable."""

    vuln_id: str
    uuid: Optional[str] = None

    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "FindingVulnerability":
        d = _as_mapping(d)
        return cls(
            vuln_id=str(d.get("vulnId") or ""),
            uuid=_optional_str(d.get("uuid")),
            extra=_rest(d, {"vulnId", "uuid"}),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra or {})
        out.update({"uuid": self.uuid, "vulnId": self.vuln_id})
        return out


@dataclass(frozen=True)
class FindingAttribution:
    """How and when the finding was detected. Entirely instance-local."""

    uuid: Optional[str] = None
    attributed_on: Optional[int] = None

    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "FindingAttribution":
        d = _as_mapping(d)
        return cls(
            uuid=_optional_str(d.get("uuid")),
            attributed_on=_optional_int(d.get("attributedOn")),
            extra=_rest(d, {"uuid", "attributedOn"}),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra or {})
        out.update({"uuid": self.uuid, "attributedOn": self.attributed_on})
        return out


@dataclass(frozen=True)
class Finding:
    """One (component, vulnerability) detection for a project."""

    component: FindingComponent
    vulnerability: FindingVulnerability
    attribution: FindingAttribution = field(default_factory=FindingAttribution)
    matrix: Optional[str] = None

    # analysis, and any top-level keys newer servers may add
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Finding":
        """Parse one element of ``/api/v1/finding/project/{uuid}``."""
        if not isinstance(d, Mapping):
            raise TypeError(f"Finding.from_dict expected mapping, got {type(d)!r}")

        return cls(
            component=FindingComponent.from_dict(d.get("component")),
            vulnerability=FindingVulnerability.from_dict(d.get("vulnerability")),
            attribution=FindingAttribution.from_dict(d.get("attribution")),
            matrix=_optional_str(d.get("matrix")),
            extra=_rest(d, {"component", "vulnerability", "attribution", "matrix"}),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict (API key names)."""
        out: Dict[str, Any] = dict(self.extra or {})
        out.update(
            {
                "component": self.component.to_dict(),
                "vulnerability": self.vulnerability.to_dict(),
                "attribution": self.attribution.to_dict(),
                "matrix": self.matrix,
            }
        )
        return out
