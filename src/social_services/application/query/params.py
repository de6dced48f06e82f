"""Application query – decoding of raw URL query parameters.

A raw query arrives as the HTTP layer decoded it: string values, lists for
repeated keys and, for bracket syntax (``age[gte]=18``), nested mappings.
:func:`normalize_query` folds flat pairs into that shape; the ``parse_*``
helpers turn individual values into what the query builder needs and raise
:class:`~social_services.kernel.errors.InvalidQueryError` on anything they
cannot read.
"""
from __future__ import annotations

import copy
import re
from typing import Any, Iterable, Mapping
from urllib.parse import parse_qsl

from social_services.kernel.errors import InvalidQueryError

__all__ = [
    "MAX_INT64",
    "RESERVED_KEYS",
    "coerce_bool",
    "coerce_number",
    "normalize_query",
    "parse_csv",
    "parse_positive_int",
    "parse_query_string",
    "single_value",
    "split_list",
    "validate_field_name",
]

SEARCH_TERM = "searchTerm"
SORT = "sort"
LIMIT = "limit"
PAGE = "page"
FIELDS = "fields"

RESERVED_KEYS = frozenset({SEARCH_TERM, SORT, LIMIT, PAGE, FIELDS})

# BSON stores integers in at most 8 bytes
MAX_INT64 = 2**63 - 1
_MAX_INT64_DIGITS = len(str(MAX_INT64))

_BRACKET_KEY = re.compile(r"^(?P<field>[^\[\]]+)\[(?P<op>[^\[\]]*)\]$")
_FIELD_NAME = re.compile(r"^[A-Za-z_]\w*(\.\w+)*$")
_INT = re.compile(r"^[+-]?\d+$")
_FLOAT = re.compile(r"^[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$")

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


def parse_query_string(query_string: str) -> dict[str, Any]:
    """Decode ``a=1&b[gte]=2&c=x&c=y`` into ``{"a": "1", "b": {"gte": "2"}, "c": ["x", "y"]}``."""
    return normalize_query(parse_qsl(query_string.lstrip("?"), keep_blank_values=True))


def normalize_query(source: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """Return a fresh raw-query dict with repeated keys folded and bracket keys nested.

    Accepts either a mapping (possibly already nested) or an iterable of
    ``(key, value)`` pairs. The result shares no mutable state with *source*.
    """
    pairs = source.items() if isinstance(source, Mapping) else source
    result: dict[str, Any] = {}
    for key, value in pairs:
        bracket = _BRACKET_KEY.match(key)
        if bracket is None:
            _merge(result, key, value)
            continue
        field, op = bracket["field"], bracket["op"]
        if op == "":
            _merge(result, field, value if isinstance(value, list) else [value])
            continue
        bucket = result.setdefault(field, {})
        if not isinstance(bucket, dict):
            raise InvalidQueryError(
                f"'{field}' is given both as a plain value and with operators",
                parameter=field,
            )
        _merge(bucket, op, value)
    return result


def _merge(target: dict[str, Any], key: str, value: Any) -> None:
    value = copy.deepcopy(value)
    if key not in target:
        target[key] = value
        return
    existing = target[key]
    if isinstance(existing, dict) or isinstance(value, Mapping):
        if isinstance(existing, dict) and isinstance(value, Mapping):
            for op, op_value in value.items():
                _merge(existing, op, op_value)
            return
        raise InvalidQueryError(
            f"'{key}' is given both as a plain value and with operators",
            parameter=key,
        )
    combined = existing if isinstance(existing, list) else [existing]
    combined.extend(value if isinstance(value, list) else [value])
    target[key] = combined


def _parse_int64(text: str, *, parameter: str | None) -> int:
    # length is checked first; int() refuses very long digit strings
    digits = text.lstrip("+-").lstrip("0")
    if len(digits) > _MAX_INT64_DIGITS:
        raise _out_of_range(parameter)
    number = int(digits or "0")
    if text.startswith("-"):
        number = -number
    if not -MAX_INT64 - 1 <= number <= MAX_INT64:
        raise _out_of_range(parameter)
    return number


def _out_of_range(parameter: str | None) -> InvalidQueryError:
    name = f"'{parameter}'" if parameter else "Number"
    return InvalidQueryError(f"{name} is outside the 64-bit integer range", parameter=parameter)


def single_value(raw: Mapping[str, Any], key: str) -> Any:
    """Return the value of a scalar parameter, rejecting repeats and operator maps."""
    value = raw.get(key)
    if isinstance(value, list):
        if len(value) != 1:
            raise InvalidQueryError(f"'{key}' must be given once", parameter=key)
        value = value[0]
    if isinstance(value, Mapping):
        raise InvalidQueryError(f"'{key}' does not accept operators", parameter=key)
    return value


def parse_positive_int(value: Any, *, parameter: str, default: int) -> int:
    """Read a 1-based integer; absent → *default*, values below 1 → 1."""
    if value is None:
        return default
    if isinstance(value, bool):
        raise InvalidQueryError(f"'{parameter}' must be an integer", parameter=parameter)
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return default
        if not _INT.match(text):
            raise InvalidQueryError(
                f"'{parameter}' must be an integer, got {value!r}",
                parameter=parameter,
            )
        number = _parse_int64(text, parameter=parameter)
    if number > MAX_INT64:
        raise _out_of_range(parameter)
    return max(number, 1)


def parse_csv(value: Any, *, parameter: str | None = None) -> list[str]:
    """Split ``"a, b,,c"`` (or a list of such strings) into ``["a", "b", "c"]``."""
    if value is None:
        return []
    chunks = value if isinstance(value, list) else [value]
    out: list[str] = []
    for chunk in chunks:
        if isinstance(chunk, Mapping):
            raise InvalidQueryError(f"'{parameter}' does not accept operators", parameter=parameter)
        out.extend(part.strip() for part in str(chunk).split(",") if part.strip())
    return out


def split_list(value: Any) -> tuple[Any, ...]:
    """Values for ``in`` / ``nin``: repeated keys and comma-separated strings both work."""
    if isinstance(value, (list, tuple)):
        items: list[Any] = []
        for item in value:
            items.extend(split_list(item))
        return tuple(items)
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return (value,)


def coerce_number(value: Any, *, parameter: str | None = None) -> Any:
    """Turn numeric strings into ``int`` / ``float``; leave anything else as is.

    Integers outside the signed 64-bit range raise :class:`InvalidQueryError`.
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    if _INT.match(text):
        return _parse_int64(text, parameter=parameter)
    if _FLOAT.match(text):
        return float(text)
    return value


def coerce_bool(value: Any, *, parameter: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise InvalidQueryError(
        f"'{parameter}' expects true or false, got {value!r}",
        parameter=parameter,
    )


def validate_field_name(name: str, *, parameter: str) -> str:
    """Accept plain or dotted document paths; reject operators and empty segments."""
    if not _FIELD_NAME.match(name):
        raise InvalidQueryError(f"'{name}' is not a valid field name", parameter=parameter)
    return name
