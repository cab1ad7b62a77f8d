"""dtrack_compare.domain.project

A Dependency-Track project as seen by the comparison.

Only the identity (name + version) matters to the pipeline. The UUID is local
to one server instance and is used solely to fetch findings from that
instance. Everything else the API returns is kept in ``extra`` so it survives a
round-trip through :meth:`Project.to_dict`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Project:
    """A project in one Dependency-Track instance."""

    uuid: Optional[str]
    name: str
    version: Optional[str] = None

    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def identity(self) -> Tuple[str, str]:
        """(name, version) pair; unique within an instance."""
        return (self.name, self.version or "")

    @property
    def label(self) -> str:
        return f"{self.name}/{self.version or ''}"

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Project":
        """Parse a project object as returned by ``/api/v1/project``."""
        if not isinstance(d, Mapping):
            raise TypeError(f"Project.from_dict expected mapping, got {type(d)!r}")

        name = d.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError(f"project without a name: {dict(d)!r}")

        version = d.get("version")
        return cls(
            uuid=d.get("uuid"),
            name=name,
            version=str(version) if version is not None else None,
            extra={k: v for k, v in d.items() if k not in {"uuid", "name", "version"}},
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra or {})
        out["uuid"] = self.uuid
        out["name"] = self.name
        out["version"] = self.version
        return out
