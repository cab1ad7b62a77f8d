"""dtrack_compare.io.fs

Atomic, stable filesystem writers.

Diff reports are written by several worker threads at once and the run summary
is written while other tools may already be watching the output directory. A
reader must never observe a half-written file, so every write goes to a temp
file in the target directory and is moved into place with ``os.replace``.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Optional, TextIO


def _atomic_write_text(
    path: Path,
    write_fn: Callable[[TextIO], None],
    *,
    encoding: str = "utf-8",
    mode: Optional[int] = None,
) -> None:
    """Write a file atomically by writing to a temp file and os.replace()."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=str(p.parent))
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())

        # mkstemp creates 0600 files
        if mode is not None:
            os.chmod(tmp_path, mode)

        os.replace(tmp_path, p)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def write_text_atomic(
    path: Path,
    text: str,
    *,
    encoding: str = "utf-8",
    mode: Optional[int] = None,
) -> None:
    """Write text atomically, optionally setting the final file mode."""

    def _write(f: TextIO) -> None:
        f.write(text)

    _atomic_write_text(Path(path), _write, encoding=encoding, mode=mode)


def write_json_atomic(
    path: Path,
    data: Any,
    *,
    indent: int = 2,
    sort_keys: bool = True,
    mode: Optional[int] = None,
) -> None:
    """Write JSON atomically with stable formatting."""

    def _write(f: TextIO) -> None:
        json.dump(data, f, indent=indent, sort_keys=sort_keys, ensure_ascii=False)
        f.write("\n")

    _atomic_write_text(Path(path), _write, mode=mode)


def read_json(path: Path, *, encoding: str = "utf-8") -> Any:
    """Read JSON from disk."""

    with Path(path).open("r", encoding=encoding) as f:
        return json.load(f)
