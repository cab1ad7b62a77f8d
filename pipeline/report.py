"""pipeline.report

Artifacts written by a comparison run:

* ``<out>/<name>_<version>.html`` for every pair whose findings differ
  (``/`` in the name or version is replaced by ``-``)
* ``<out>/summary.json`` with one record per outcome, written once the pool
  has finished
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from dtrack_compare.domain import Project
from dtrack_compare.io import write_json_atomic, write_text_atomic

from .models import ComparisonOutcome, OutcomeStatus

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o666
SUMMARY_FILENAME = "summary.json"
SUMMARY_SCHEMA_VERSION = "dtrack_compare_summary_v1"


def report_filename(project: Project) -> str:
    return f"{project.name}_{project.version or ''}.html".replace("/", "-")


def render_report(rendering: str) -> str:
    return f"<pre>{rendering}</pre>"


def build_summary(
    outcomes: Sequence[ComparisonOutcome],
    *,
    source_url: Optional[str] = None,
    target_url: Optional[str] = None,
    source_projects: Optional[int] = None,
) -> Dict[str, Any]:
    counts = Counter(o.status for o in outcomes)
    records = sorted((o.to_dict() for o in outcomes), key=lambda r: (r["name"], r["version"] or ""))
    return {
        "schema_version": SUMMARY_SCHEMA_VERSION,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "source_url": source_url,
        "target_url": target_url,
        "source_projects": source_projects,
        "counts": {s.value: counts.get(s, 0) for s in OutcomeStatus},
        "outcomes": records,
    }


class ReportWriter:
    """Writes diff reports and the run summary into one output directory.

    Safe to share between worker threads: every report has its own file name
    and writes are atomic.
    """

    def __init__(self, out_dir: Path, *, file_mode: int = DEFAULT_FILE_MODE) -> None:
        self.out_dir = Path(out_dir)
        self.file_mode = file_mode

    def report_path(self, project: Project) -> Path:
        return self.out_dir / report_filename(project)

    def write_diff(self, project: Project, rendering: str) -> Path:
        path = self.report_path(project)
        write_text_atomic(path, render_report(rendering), mode=self.file_mode)
        return path

    def write_summary(self, summary: Dict[str, Any]) -> Path:
        path = self.out_dir / SUMMARY_FILENAME
        write_json_atomic(path, summary, mode=self.file_mode)
        logger.info("wrote run summary to %s", path)
        return path
