"""dtrack_compare.domain

Domain objects that form the *contract* between the client and the pipeline.

Key idea
--------
The Dependency-Track API returns loosely-typed JSON. The client parses it into
these dataclasses once, so normalization, ordering and serialization work on
explicit fields instead of nested dict lookups.
"""

from __future__ import annotations

from .finding import (
    Finding,
    FindingAttribution,
    FindingComponent,
    FindingVulnerability,
)
from .project import Project

__all__ = [
    "Finding",
    "FindingAttribution",
    "FindingComponent",
    "FindingVulnerability",
    "Project",
]
