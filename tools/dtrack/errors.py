from __future__ import annotations

from typing import Optional


class DTrackError(RuntimeError):
    """Base class for Dependency-Track client errors."""


class DTrackConfigError(DTrackError):
    """The client cannot be built (bad URL, missing API key)."""


class DTrackAPIError(DTrackError):
    """The server answered with a non-success status code."""

    def __init__(self, status_code: int, url: str, message: Optional[str] = None) -> None:
        self.status_code = status_code
        self.url = url
        self.message = message or ""
        detail = f": {self.message}" if self.message else ""
        super().__init__(f"HTTP {status_code} from {url}{detail}")
