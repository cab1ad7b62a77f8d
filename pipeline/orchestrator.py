"""pipeline.orchestrator

One comparison run, end to end:

  list source projects -> match in target -> worker pool (compare_pair)
      -> summary.json

This module contains no CLI parsing and no client construction; callers pass
ready-made clients (see :mod:`pipeline.wiring`), which keeps it easy to drive
from tests with in-memory fakes.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from dtrack_compare.domain import Finding, Project

from .compare import compare_pair
from .matching import match_projects
from .models import ComparisonOutcome, OutcomeStatus
from .report import DEFAULT_FILE_MODE, ReportWriter, build_summary
from .workers import DEFAULT_CONCURRENCY, run_worker_pool

logger = logging.getLogger(__name__)


class InstanceClient(Protocol):
    base_url: str

    def list_projects(self) -> List[Project]:
        ...

    def lookup_project(self, name: str, version: Optional[str]) -> Optional[Project]:
        ...

    def get_findings(self, project_uuid: str, *, suppressed: bool = True) -> List[Finding]:
        ...


@dataclass(frozen=True)
class CompareRequest:
    """Parameters for one comparison run."""

    out_dir: Path = Path(".")
    concurrency: int = DEFAULT_CONCURRENCY
    write_summary: bool = True
    file_mode: int = DEFAULT_FILE_MODE


@dataclass
class CompareResult:
    source_projects: int = 0
    pairs: int = 0
    outcomes: List[ComparisonOutcome] = field(default_factory=list)
    summary_path: Optional[Path] = None
    cancelled: bool = False

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)

    @property
    def clean(self) -> bool:
        """True when no pair differed or failed."""
        return not any(o.status in (OutcomeStatus.DIFFERENT, OutcomeStatus.FAILED) for o in self.outcomes)

    def describe(self) -> str:
        return (
            f"{self.source_projects} source projects, {self.pairs} matched: "
            + ", ".join(f"{self.count(s)} {s.value}" for s in OutcomeStatus)
        )


def run_compare(
    req: CompareRequest,
    *,
    source: InstanceClient,
    target: InstanceClient,
    cancel: Optional[threading.Event] = None,
) -> CompareResult:
    """Compare the findings of every source project that exists in *target*.

    Errors listing the source projects propagate; everything after that is
    handled per project.
    """
    cancel = cancel or threading.Event()
    result = CompareResult()

    logger.info("collecting projects from %s", source.base_url)
    projects = source.list_projects()
    result.source_projects = len(projects)
    logger.info("collected %d projects from %s", len(projects), source.base_url)
    if not projects:
        logger.info("nothing to do")
        return result

    logger.info("matching projects from %s with projects in %s", source.base_url, target.base_url)
    matched = match_projects(projects, target, cancel=cancel)
    result.pairs = len(matched.pairs)
    result.outcomes.extend(matched.failures)

    if not matched.pairs:
        logger.info("no project from %s matches any project in %s", source.base_url, target.base_url)
    else:
        writer = ReportWriter(req.out_dir, file_mode=req.file_mode)
        compare_fn = partial(compare_pair, source=source, target=target, writer=writer)
        result.outcomes.extend(
            run_worker_pool(matched.pairs, compare_fn, concurrency=req.concurrency, cancel=cancel)
        )

    result.cancelled = cancel.is_set()
    if req.write_summary and (matched.pairs or matched.failures):
        result.summary_path = _write_summary(req, result.outcomes, source, target, result.source_projects)

    logger.info("all done: %s", result.describe())
    return result


def _write_summary(
    req: CompareRequest,
    outcomes: Sequence[ComparisonOutcome],
    source: InstanceClient,
    target: InstanceClient,
    source_projects: int,
) -> Optional[Path]:
    summary = build_summary(
        outcomes,
        source_url=source.base_url,
        target_url=target.base_url,
        source_projects=source_projects,
    )
    try:
        return ReportWriter(req.out_dir, file_mode=req.file_mode).write_summary(summary)
    except OSError as e:
        logger.error("failed to write run summary: %s", e)
        return None
