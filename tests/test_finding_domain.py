import unittest

from dtrack_compare.domain import Finding, Project

from fakes import finding_dict


class TestFindingDomain(unittest.TestCase):
    def test_from_dict_reads_instance_local_fields(self) -> None:
        f = Finding.from_dict(finding_dict("libX", "CVE-2020-1", uid="u1"))

        self.assertEqual("libX", f.component.name)
        self.assertEqual("comp-u1", f.component.uuid)
        self.assertEqual("proj-u1", f.component.project)
        self.assertEqual("CVE-2020-1", f.vulnerability.vuln_id)
        self.assertEqual("vuln-u1", f.vulnerability.uuid)
        self.assertEqual("attr-u1", f.attribution.uuid)
        self.assertEqual(1700000000000, f.attribution.attributed_on)
        self.assertEqual("proj-u1:comp-u1:vuln-u1", f.matrix)

    def test_round_trip_keeps_unknown_keys(self) -> None:
        raw = finding_dict("libX", "CVE-2020-1")
        raw["vulnerability"]["cwes"] = [{"cweId": 79, "name": "XSS"}]
        raw["newTopLevelKey"] = {"x": 1}

        out = Finding.from_dict(raw).to_dict()

        self.assertEqual(raw, out)

    def test_missing_parts_become_empty_records(self) -> None:
        f = Finding.from_dict({"component": {"name": "libX"}, "vulnerability": {"vulnId": "CVE-1"}})

        self.assertIsNone(f.attribution.uuid)
        self.assertIsNone(f.attribution.attributed_on)
        self.assertIsNone(f.matrix)
        self.assertEqual({"uuid": None, "attributedOn": None}, f.to_dict()["attribution"])

    def test_from_dict_rejects_non_mapping(self) -> None:
        with self.assertRaises(TypeError):
            Finding.from_dict(["not", "a", "finding"])  # type: ignore[arg-type]


class TestProjectDomain(unittest.TestCase):
    def test_identity_and_label(self) -> None:
        p = Project.from_dict({"uuid": "p-1", "name": "group/app", "version": "3.0", "active": True})

        self.assertEqual(("group/app", "3.0"), p.identity)
        self.assertEqual("group/app/3.0", p.label)
        self.assertEqual({"active": True}, p.extra)

    def test_missing_version_matches_empty_version(self) -> None:
        a = Project.from_dict({"uuid": "p-1", "name": "app"})
        b = Project.from_dict({"uuid": "p-2", "name": "app", "version": ""})

        self.assertEqual(a.identity, b.identity)

    def test_project_without_name_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Project.from_dict({"uuid": "p-1", "version": "1.0"})


if __name__ == "__main__":
    unittest.main()
