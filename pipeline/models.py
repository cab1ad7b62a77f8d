"""pipeline.models

Lightweight data structures passed between the comparison stages.

Why this exists
---------------
The matcher, the worker pool and the report writer need a small shared
vocabulary for:
- what is being compared (ComparisonPair)
- what came out of one comparison (ComparisonOutcome)

Outcomes are returned as values instead of only being logged, so the run
summary and the tests can look at them directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from dtrack_compare.domain import Project


class OutcomeStatus(str, Enum):
    EQUAL = "equal"
    DIFFERENT = "different"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ComparisonPair:
    """A source project and its counterpart in the target instance."""

    source: Project
    target: Project

    def __post_init__(self) -> None:
        if self.source.identity != self.target.identity:
            raise ValueError(
                f"cannot pair {self.source.label} with {self.target.label}: identities differ"
            )

    @property
    def label(self) -> str:
        return self.source.label


@dataclass(frozen=True)
class ComparisonOutcome:
    """The result of comparing (or trying to compare) one project."""

    project: Project
    status: OutcomeStatus
    reason: Optional[str] = None
    report_path: Optional[Path] = None

    @classmethod
    def equal(cls, project: Project) -> "ComparisonOutcome":
        return cls(project=project, status=OutcomeStatus.EQUAL)

    @classmethod
    def different(
        cls,
        project: Project,
        report_path: Optional[Path],
        reason: Optional[str] = None,
    ) -> "ComparisonOutcome":
        return cls(project=project, status=OutcomeStatus.DIFFERENT, reason=reason, report_path=report_path)

    @classmethod
    def skipped(cls, project: Project, reason: str) -> "ComparisonOutcome":
        return cls(project=project, status=OutcomeStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, project: Project, reason: str) -> "ComparisonOutcome":
        return cls(project=project, status=OutcomeStatus.FAILED, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.project.name,
            "version": self.project.version,
            "status": self.status.value,
            "reason": self.reason,
            "report_path": str(self.report_path) if self.report_path else None,
        }
