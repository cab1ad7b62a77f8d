"""dtrack_compare.io

Filesystem helpers for comparison artifacts (HTML diff reports and the run
summary).
"""

from __future__ import annotations

from .fs import read_json, write_json_atomic, write_text_atomic

__all__ = [
    "read_json",
    "write_json_atomic",
    "write_text_atomic",
]
