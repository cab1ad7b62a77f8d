import json
import threading
import unittest
from typing import Any, Dict, List, Optional
from unittest.mock import patch

import requests

from tools.dtrack import DTrackAPIError, DTrackClient, DTrackConfig, DTrackConfigError


def _response(status: int, payload: Any, *, url: str = "https://dt.example/api", total: Optional[int] = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = json.dumps(payload).encode("utf-8")
    resp.url = url
    if total is not None:
        resp.headers["X-Total-Count"] = str(total)
    return resp


def _projects(start: int, n: int) -> List[Dict[str, Any]]:
    return [{"uuid": f"p-{i}", "name": f"project-{i}", "version": "1.0"} for i in range(start, start + n)]


class TestClientConfig(unittest.TestCase):
    def test_rejects_invalid_url(self) -> None:
        for url in ("", "dt.example", "ftp://dt.example", "https://"):
            with self.subTest(url=url):
                with self.assertRaises(DTrackConfigError):
                    DTrackClient(DTrackConfig(url, "key"))

    def test_rejects_missing_api_key(self) -> None:
        with self.assertRaises(DTrackConfigError):
            DTrackClient(DTrackConfig("https://dt.example", ""))

    def test_base_url_is_trimmed(self) -> None:
        self.assertEqual("https://dt.example", DTrackClient(DTrackConfig("https://dt.example/", "k")).base_url)


class TestClientRequests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = DTrackClient(DTrackConfig("https://dt.example", "secret", timeout=5, page_size=2))

    def test_list_projects_follows_pagination(self) -> None:
        pages = [_response(200, _projects(0, 2), total=5), _response(200, _projects(2, 2), total=5), _response(200, _projects(4, 1), total=5)]
        with patch.object(requests.Session, "get", autospec=True, side_effect=pages) as get:
            projects = self.client.list_projects()

        self.assertEqual([f"project-{i}" for i in range(5)], [p.name for p in projects])
        self.assertEqual(3, get.call_count)
        for n, call in enumerate(get.call_args_list, start=1):
            self.assertEqual("https://dt.example/api/v1/project", call.args[1])
            self.assertEqual({"pageNumber": n, "pageSize": 2}, call.kwargs["params"])
            self.assertEqual(5, call.kwargs["timeout"])

    def test_session_sends_api_key(self) -> None:
        with patch.object(requests.Session, "get", autospec=True, return_value=_response(200, [], total=0)) as get:
            self.client.list_projects()

        session = get.call_args.args[0]
        self.assertEqual("secret", session.headers["X-Api-Key"])

    def test_each_thread_gets_its_own_session(self) -> None:
        sessions = []

        def fake_get(session, url, params=None, timeout=None):
            sessions.append(session)
            return _response(200, [], total=0)

        with patch.object(requests.Session, "get", autospec=True, side_effect=fake_get):
            t = threading.Thread(target=self.client.list_projects)
            t.start()
            t.join()
            self.client.list_projects()
            self.client.list_projects()

        self.assertEqual(3, len(sessions))
        self.assertIsNot(sessions[0], sessions[1])
        self.assertIs(sessions[1], sessions[2])

    def test_close_closes_sessions_from_every_thread(self) -> None:
        sessions = []

        def fake_get(session, url, params=None, timeout=None):
            sessions.append(session)
            return _response(200, [], total=0)

        with patch.object(requests.Session, "get", autospec=True, side_effect=fake_get):
            t = threading.Thread(target=self.client.list_projects)
            t.start()
            t.join()
            self.client.list_projects()

            with patch.object(requests.Session, "close", autospec=True) as close:
                self.client.close()
                self.client.close()

            self.client.list_projects()

        self.assertEqual(2, close.call_count)
        self.assertEqual({id(s) for s in sessions[:2]}, {id(c.args[0]) for c in close.call_args_list})
        self.assertNotIn(sessions[2], sessions[:2])

    def test_missing_total_header_means_single_page(self) -> None:
        with patch.object(requests.Session, "get", autospec=True, return_value=_response(200, _projects(0, 2))) as get:
            projects = self.client.list_projects()

        self.assertEqual(2, len(projects))
        self.assertEqual(1, get.call_count)

    def test_lookup_returns_project(self) -> None:
        payload = {"uuid": "p-9", "name": "group/app", "version": "3.0"}
        with patch.object(requests.Session, "get", autospec=True, return_value=_response(200, payload)) as get:
            project = self.client.lookup_project("group/app", "3.0")

        self.assertIsNotNone(project)
        assert project is not None
        self.assertEqual("p-9", project.uuid)
        self.assertEqual("https://dt.example/api/v1/project/lookup", get.call_args.args[1])
        self.assertEqual({"name": "group/app", "version": "3.0"}, get.call_args.kwargs["params"])

    def test_lookup_not_found_returns_none(self) -> None:
        with patch.object(requests.Session, "get", autospec=True, return_value=_response(404, {"message": "nope"})):
            self.assertIsNone(self.client.lookup_project("missing", "1.0"))

    def test_lookup_server_error_raises(self) -> None:
        with patch.object(requests.Session, "get", autospec=True, return_value=_response(500, {"message": "boom"})):
            with self.assertRaises(DTrackAPIError) as ctx:
                self.client.lookup_project("app", "1.0")

        self.assertEqual(500, ctx.exception.status_code)

    def test_get_findings_includes_suppressed(self) -> None:
        finding = {
            "component": {"uuid": "c", "name": "libX", "project": "p"},
            "vulnerability": {"uuid": "v", "vulnId": "CVE-2020-1"},
            "attribution": {"uuid": "a", "attributedOn": 1},
            "matrix": "p:c:v",
        }
        with patch.object(requests.Session, "get", autospec=True, return_value=_response(200, [finding], total=1)) as get:
            findings = self.client.get_findings("p-1")

        self.assertEqual(["CVE-2020-1"], [f.vulnerability.vuln_id for f in findings])
        self.assertEqual("https://dt.example/api/v1/finding/project/p-1", get.call_args.args[1])
        self.assertEqual("true", get.call_args.kwargs["params"]["suppressed"])

    def test_non_array_page_raises(self) -> None:
        with patch.object(requests.Session, "get", autospec=True, return_value=_response(200, {"oops": 1}, total=1)):
            with self.assertRaises(DTrackAPIError):
                self.client.get_findings("p-1")

    def test_transport_errors_propagate(self) -> None:
        with patch.object(requests.Session, "get", autospec=True, side_effect=requests.ConnectionError("refused")):
            with self.assertRaises(requests.ConnectionError):
                self.client.list_projects()


if __name__ == "__main__":
    unittest.main()
