"""pipeline.canonical

JSON canonicalization and structural diff.

Two documents that carry the same data must canonicalize to the same bytes.
:func:`canonicalize` emits the RFC 8785 (JCS) form:

* object keys are sorted by their UTF-16 code units
* no insignificant whitespace
* UTF-8 output, only ``"``, ``\\`` and control characters are escaped
* numbers are IEEE-754 doubles written the way ECMAScript prints them
  (``9.0``, ``9`` and ``9e0`` all become ``9``; ``1e21`` becomes ``1e+21``)
* NaN / Infinity and numbers beyond the double range are rejected

The diff compares canonical bytes. A full match means the bytes are identical;
otherwise the rendering is a line diff of the two documents pretty-printed with
sorted keys, HTML-escaped and highlighted, ready to be placed inside a
``<pre>`` block.
"""

from __future__ import annotations

import difflib
import html
import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Tuple

ADDED_STYLE = "background-color: #8bff7f"
REMOVED_STYLE = "background-color: #fd7f7f"
HUNK_STYLE = "color: #808080"


class CanonicalizationError(ValueError):
    """The input is not valid JSON and cannot be canonicalized."""


class DiffKind(str, Enum):
    FULL_MATCH = "full_match"
    NO_MATCH = "no_match"
    FIRST_INVALID = "first_invalid"
    SECOND_INVALID = "second_invalid"


@dataclass(frozen=True)
class DiffResult:
    kind: DiffKind
    rendering: str = ""

    @property
    def full_match(self) -> bool:
        return self.kind is DiffKind.FULL_MATCH


def _reject_constant(name: str) -> Any:
    raise CanonicalizationError(f"non-standard JSON constant {name!r}")


def _loads(data: bytes) -> Any:
    try:
        return json.loads(data, parse_constant=_reject_constant)
    except CanonicalizationError:
        raise
    except (UnicodeDecodeError, ValueError) as e:
        raise CanonicalizationError(f"malformed JSON: {e}") from e


def _shortest_digits(x: float) -> Tuple[str, int]:
    """Split ``abs(x)`` into significant digits and decimal point position.

    ``x == 0.d1d2...dk * 10**n``. ``repr`` already gives the shortest digit
    string that round-trips, which is what ECMAScript uses too.
    """
    mantissa, _, exp = repr(abs(x)).partition("e")
    int_part, _, frac = mantissa.partition(".")
    raw = int_part + frac
    digits = raw.lstrip("0")
    n = len(int_part) + int(exp or 0) - (len(raw) - len(digits))
    return digits.rstrip("0"), n


def _format_number(value: Any) -> str:
    try:
        x = float(value)
    except OverflowError as e:
        raise CanonicalizationError(f"number out of range: {value}") from e
    if not math.isfinite(x):
        raise CanonicalizationError(f"number out of range: {value}")
    if x == 0:
        return "0"

    digits, n = _shortest_digits(x)
    k = len(digits)
    sign = "-" if x < 0 else ""
    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits

    e = n - 1
    exponent = f"e{'+' if e >= 0 else '-'}{abs(e)}"
    if k == 1:
        return sign + digits + exponent
    return sign + digits[0] + "." + digits[1:] + exponent


def _utf16_key(key: str) -> bytes:
    return key.encode("utf-16-be", "surrogatepass")


def _emit(value: Any, out: List[str]) -> None:
    if value is None:
        out.append("null")
    elif value is True:
        out.append("true")
    elif value is False:
        out.append("false")
    elif isinstance(value, str):
        out.append(json.dumps(value, ensure_ascii=False))
    elif isinstance(value, (int, float)):
        out.append(_format_number(value))
    elif isinstance(value, list):
        out.append("[")
        for i, item in enumerate(value):
            if i:
                out.append(",")
            _emit(item, out)
        out.append("]")
    elif isinstance(value, dict):
        out.append("{")
        for i, key in enumerate(sorted(value, key=_utf16_key)):
            if i:
                out.append(",")
            out.append(json.dumps(key, ensure_ascii=False))
            out.append(":")
            _emit(value[key], out)
        out.append("}")
    else:
        raise CanonicalizationError(f"unsupported JSON value of type {type(value).__name__}")


def canonicalize(data: bytes) -> bytes:
    """Return the canonical (RFC 8785) form of a JSON document."""
    out: List[str] = []
    _emit(_loads(data), out)
    return "".join(out).encode("utf-8", "surrogatepass")


def _pretty_lines(doc: Any) -> List[str]:
    return json.dumps(doc, sort_keys=True, indent=2, ensure_ascii=False).splitlines()


def _render_line(line: str) -> str:
    escaped = html.escape(line, quote=False)
    if line.startswith(("+++", "---")):
        return escaped
    if line.startswith("+"):
        return f'<span style="{ADDED_STYLE}">{escaped}</span>'
    if line.startswith("-"):
        return f'<span style="{REMOVED_STYLE}">{escaped}</span>'
    if line.startswith("@@"):
        return f'<span style="{HUNK_STYLE}">{escaped}</span>'
    return escaped


def structural_diff(
    a: bytes,
    b: bytes,
    *,
    a_label: str = "a",
    b_label: str = "b",
    context: int = 3,
) -> DiffResult:
    """Compare two canonical JSON documents."""
    try:
        doc_a = _loads(a)
    except CanonicalizationError as e:
        return DiffResult(DiffKind.FIRST_INVALID, html.escape(str(e), quote=False))
    try:
        doc_b = _loads(b)
    except CanonicalizationError as e:
        return DiffResult(DiffKind.SECOND_INVALID, html.escape(str(e), quote=False))

    if a == b:
        return DiffResult(DiffKind.FULL_MATCH)

    lines = difflib.unified_diff(
        _pretty_lines(doc_a),
        _pretty_lines(doc_b),
        fromfile=a_label,
        tofile=b_label,
        n=context,
        lineterm="",
    )
    rendering = "\n".join(_render_line(line) for line in lines)
    if not rendering:
        # same data, different bytes: the inputs were not canonical
        rendering = html.escape("documents differ only in their encoding", quote=False)
    return DiffResult(DiffKind.NO_MATCH, rendering)
