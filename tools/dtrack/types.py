from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DTrackConfig:
    """Connection settings for one Dependency-Track instance."""
    base_url: str
    api_key: str
    timeout: float = 30.0
    page_size: int = 100
