"""Cell value coercion.

Declared column types are never consulted.  Each cell goes through an ordered
list of probes; the first probe that decodes the value wins and its JSON
constructor builds the output.  When no probe matches the cell becomes JSON
null, so SQL NULL and unsupported values (dates, decimals, arrays, blobs, ...)
are indistinguishable in the output.

Probe order: text, int32, int64, bool, float64.

The text probe declines strings that spell a 64-bit integer literal, so such
strings fall through to the integer probes: ``"007"`` stored in a text column
comes back as the number ``7``.  This is lossy and intentional.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import Any, NamedTuple

from query_backend.domain.models import JSONValue

INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1

_INTEGER_LITERAL = re.compile(r"\s*([+-]?)0*([0-9]+)\s*")

# Any literal with more significant digits is outside int64
_INT64_MAX_DIGITS = len(str(INT64_MAX))


class Probe(NamedTuple):
    name: str
    decode: Callable[[Any], Any]
    to_json: Callable[[Any], JSONValue]


def _decode_integer(cell: Any, low: int, high: int) -> int | None:
    if isinstance(cell, bool):
        return None
    if isinstance(cell, int):
        value = cell
    elif isinstance(cell, str) and (match := _INTEGER_LITERAL.fullmatch(cell)):
        sign, digits = match.groups()
        if len(digits) > _INT64_MAX_DIGITS:
            return None
        value = int(sign + digits)
    else:
        return None
    return value if low <= value <= high else None


def _decode_text(cell: Any) -> str | None:
    if not isinstance(cell, str):
        return None
    if _decode_integer(cell, INT64_MIN, INT64_MAX) is not None:
        return None
    return cell


def _decode_int32(cell: Any) -> int | None:
    return _decode_integer(cell, INT32_MIN, INT32_MAX)


def _decode_int64(cell: Any) -> int | None:
    return _decode_integer(cell, INT64_MIN, INT64_MAX)


def _decode_bool(cell: Any) -> bool | None:
    return cell if isinstance(cell, bool) else None


def _decode_float64(cell: Any) -> float | None:
    # JSON has no NaN or Infinity
    if isinstance(cell, float) and math.isfinite(cell):
        return cell
    return None


PROBES: tuple[Probe, ...] = (
    Probe("text", _decode_text, str),
    Probe("int32", _decode_int32, int),
    Probe("int64", _decode_int64, int),
    Probe("bool", _decode_bool, bool),
    Probe("float64", _decode_float64, float),
)

PROBE_ORDER: tuple[str, ...] = tuple(probe.name for probe in PROBES)

NULL_PROBE = "null"


def _resolve(cell: Any) -> tuple[str, JSONValue]:
    for probe in PROBES:
        decoded = probe.decode(cell)
        if decoded is not None:
            return probe.name, probe.to_json(decoded)
    return NULL_PROBE, None


def classify(cell: Any) -> str:
    """Return the name of the probe that claims *cell* (``"null"`` if none)."""
    return _resolve(cell)[0]


def coerce(cell: Any) -> JSONValue:
    """Convert a driver-native cell value into a JSON-safe value."""
    return _resolve(cell)[1]


def coerce_row(row: Any) -> list[JSONValue]:
    return [coerce(cell) for cell in row]
