"""pipeline.matching

Pair every source project with the project of the same name and version in
the target instance.

A project that does not exist in the target (lookup returns None) is expected
and common: it is left out without any report. Any other lookup failure is
logged and recorded as a skipped outcome, and matching carries on with the
next project.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol

import requests

from dtrack_compare.domain import Project
from tools.dtrack.errors import DTrackError

from .models import ComparisonOutcome, ComparisonPair

logger = logging.getLogger(__name__)


class ProjectLookup(Protocol):
    base_url: str

    def lookup_project(self, name: str, version: Optional[str]) -> Optional[Project]:
        ...


@dataclass
class MatchResult:
    pairs: List[ComparisonPair] = field(default_factory=list)
    failures: List[ComparisonOutcome] = field(default_factory=list)


def match_projects(
    projects: Iterable[Project],
    target: ProjectLookup,
    *,
    cancel: Optional[threading.Event] = None,
) -> MatchResult:
    """Build the comparison work list, in source enumeration order."""
    result = MatchResult()

    for project in projects:
        if cancel is not None and cancel.is_set():
            logger.info("matching cancelled")
            break

        try:
            match = target.lookup_project(project.name, project.version)
        except (DTrackError, requests.RequestException, TypeError, ValueError) as e:
            logger.warning("failed to lookup project %s in %s: %s", project.label, target.base_url, e)
            result.failures.append(ComparisonOutcome.skipped(project, f"lookup failed: {e}"))
            continue

        if match is None:
            logger.debug("project %s not found in %s", project.label, target.base_url)
            continue

        try:
            result.pairs.append(ComparisonPair(source=project, target=match))
        except ValueError as e:
            logger.warning("lookup of %s in %s returned %s", project.label, target.base_url, match.label)
            result.failures.append(ComparisonOutcome.skipped(project, str(e)))

    return result
