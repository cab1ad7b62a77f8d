"""tools/dtrack/api.py

All Dependency-Track HTTP calls live here.

Design goals:
  - Keep network I/O separated from normalization and diffing.
  - Return complete collections: pagination is hidden behind list_projects()
    and get_findings().
  - Be safe to share between worker threads (one requests.Session per thread).

Unlike a best-effort fetcher, a partial result here would produce a bogus
diff, so every HTTP or decoding error is raised to the caller.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterator, List, Mapping, Optional
from urllib.parse import quote, urlsplit

import requests

from dtrack_compare.domain import Finding, Project

from .errors import DTrackAPIError, DTrackConfigError
from .types import DTrackConfig

logger = logging.getLogger(__name__)

TOTAL_COUNT_HEADER = "X-Total-Count"


def _validate_config(cfg: DTrackConfig) -> str:
    parts = urlsplit(cfg.base_url or "")
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise DTrackConfigError(f"invalid Dependency-Track URL: {cfg.base_url!r}")
    if not cfg.api_key:
        raise DTrackConfigError(f"no API key given for {cfg.base_url}")
    if cfg.page_size < 1:
        raise DTrackConfigError(f"page size must be >= 1, got {cfg.page_size}")
    return cfg.base_url.rstrip("/")


class DTrackClient:
    """Minimal Dependency-Track API v1 client.

    Construction validates the configuration and raises
    :class:`DTrackConfigError` when no usable endpoint is given.
    """

    def __init__(self, cfg: DTrackConfig) -> None:
        self._base_url = _validate_config(cfg)
        self._cfg = cfg
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @property
    def base_url(self) -> str:
        return self._base_url

    def __repr__(self) -> str:
        return f"DTrackClient({self._base_url!r})"

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(
                {
                    "X-Api-Key": self._cfg.api_key,
                    "Accept": "application/json",
                }
            )
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def close(self) -> None:
        """Close every session this client opened, in any thread."""
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()

    def _get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> requests.Response:
        url = f"{self._base_url}{path}"
        resp = self._session().get(url, params=params, timeout=self._cfg.timeout)
        if not resp.ok:
            raise DTrackAPIError(resp.status_code, url, resp.text[:200])
        return resp

    def _iter_pages(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Iterator[Dict[str, Any]]:
        """Yield every item of a paginated list endpoint.

        Pages are requested until ``X-Total-Count`` items have been read or a
        page comes back short. Endpoints that do not send the header are
        treated as unpaginated.
        """
        page_size = self._cfg.page_size
        page_number = 1
        seen = 0

        while True:
            query: Dict[str, Any] = dict(params or {})
            query.update({"pageNumber": page_number, "pageSize": page_size})

            resp = self._get(path, query)
            try:
                items = resp.json()
            except ValueError as e:
                raise DTrackAPIError(resp.status_code, resp.url, f"could not decode JSON: {e}") from e
            if not isinstance(items, list):
                raise DTrackAPIError(resp.status_code, resp.url, "expected a JSON array")

            yield from items
            seen += len(items)

            total_raw = resp.headers.get(TOTAL_COUNT_HEADER)
            if total_raw is None:
                return
            try:
                total = int(total_raw)
            except ValueError:
                logger.warning("ignoring malformed %s header %r from %s", TOTAL_COUNT_HEADER, total_raw, resp.url)
                return

            if seen >= total or len(items) < page_size:
                return
            page_number += 1

    def list_projects(self) -> List[Project]:
        """Fetch every project of this instance."""
        return [Project.from_dict(p) for p in self._iter_pages("/api/v1/project")]

    def lookup_project(self, name: str, version: Optional[str]) -> Optional[Project]:
        """Look up a project by name and version. Returns None on 404."""
        params = {"name": name, "version": version or ""}
        try:
            resp = self._get("/api/v1/project/lookup", params)
        except DTrackAPIError as e:
            if e.status_code == 404:
                return None
            raise

        try:
            payload = resp.json()
        except ValueError as e:
            raise DTrackAPIError(resp.status_code, resp.url, f"could not decode JSON: {e}") from e
        return Project.from_dict(payload)

    def get_findings(self, project_uuid: str, *, suppressed: bool = True) -> List[Finding]:
        """Fetch every finding of a project (suppressed ones included by default)."""
        path = f"/api/v1/finding/project/{quote(str(project_uuid), safe='')}"
        params = {"suppressed": "true" if suppressed else "false"}
        return [Finding.from_dict(f) for f in self._iter_pages(path, params)]
