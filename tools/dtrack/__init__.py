"""tools.dtrack

Dependency-Track REST API client used by the comparison pipeline.
"""

from __future__ import annotations

from .api import DTrackClient
from .errors import DTrackAPIError, DTrackConfigError, DTrackError
from .types import DTrackConfig

__all__ = [
    "DTrackAPIError",
    "DTrackClient",
    "DTrackConfig",
    "DTrackConfigError",
    "DTrackError",
]
