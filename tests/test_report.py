import os
import stat
import tempfile
import unittest
from pathlib import Path

from pipeline.models import ComparisonOutcome
from pipeline.report import ReportWriter, build_summary, render_report, report_filename

from fakes import make_project


class TestReportNames(unittest.TestCase):
    def test_plain_name(self) -> None:
        self.assertEqual("app_1.0.html", report_filename(make_project("app", "1.0", "x")))

    def test_slashes_in_name_and_version(self) -> None:
        self.assertEqual("group-app_3.0.html", report_filename(make_project("group/app", "3.0", "x")))
        self.assertEqual("a-b_release-1.html", report_filename(make_project("a/b", "release/1", "x")))

    def test_missing_version(self) -> None:
        self.assertEqual("app_.html", report_filename(make_project("app", "", "x")))


class TestReportWriter(unittest.TestCase):
    def test_write_diff_wraps_in_pre_and_sets_mode(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            writer = ReportWriter(Path(td) / "out", file_mode=0o640)

            path = writer.write_diff(make_project("group/app", "3.0", "x"), "-a\n+b")

            self.assertEqual(Path(td) / "out" / "group-app_3.0.html", path)
            self.assertEqual("<pre>-a\n+b</pre>", path.read_text(encoding="utf-8"))
            self.assertEqual(0o640, stat.S_IMODE(os.stat(path).st_mode))
            self.assertEqual([path.name], os.listdir(path.parent))

    def test_render_report(self) -> None:
        self.assertEqual("<pre></pre>", render_report(""))


class TestSummary(unittest.TestCase):
    def test_counts_and_records(self) -> None:
        outcomes = [
            ComparisonOutcome.failed(make_project("b", "1", "x"), "fetch failed"),
            ComparisonOutcome.equal(make_project("a", "1", "x")),
            ComparisonOutcome.different(make_project("c", "1", "x"), Path("out/c_1.html")),
            ComparisonOutcome.skipped(make_project("d", "1", "x"), "lookup failed: 500"),
        ]

        summary = build_summary(outcomes, source_url="https://a", target_url="https://b", source_projects=10)

        self.assertEqual({"equal": 1, "different": 1, "skipped": 1, "failed": 1}, summary["counts"])
        self.assertEqual(["a", "b", "c", "d"], [r["name"] for r in summary["outcomes"]])
        self.assertEqual(
            {"name": "b", "version": "1", "status": "failed", "reason": "fetch failed", "report_path": None},
            summary["outcomes"][1],
        )
        self.assertEqual(str(Path("out/c_1.html")), summary["outcomes"][2]["report_path"])
        self.assertEqual(10, summary["source_projects"])


if __name__ == "__main__":
    unittest.main()
