"""dtrack_compare

Core package for the Dependency-Track findings comparison.

Why this exists
---------------
The top-level ``tools`` and ``pipeline`` packages own transport and
orchestration. This package owns the pieces both of them share:

* domain types (the data contract for projects and findings)
* IO helpers (how artifacts are written to disk)

Keeping them here lets the client and the comparison pipeline depend on the
same types without importing each other.
"""

from __future__ import annotations

__version__ = "0.1.0"
