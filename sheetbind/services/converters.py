from __future__ import annotations

import math
import re
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import numpy as np

from ..errors import ConvertError, InvalidDatetimeFormatError
from ..models.binding import Converter
from ..models.kinds import Kind

"""Cell converter registry.

One pure text -> value function per Kind, chosen once when bindings are
compiled. Converters return `(value, present)` and raise ConvertError /
InvalidDatetimeFormatError on bad input. Empty cells never reach them: the
walker wraps every converter with `guard_empty()`.
"""

__all__ = [
    "DEFAULT_DATETIME_FORMATS",
    "ZERO_TIME",
    "converter_for",
    "guard_empty",
    "zero_value",
    "parse_datetime",
]

DEFAULT_DATETIME_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S %z",
)

ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)

_TRUE = frozenset({"1", "t", "true"})
_FALSE = frozenset({"0", "f", "false"})

# width -> numpy dtype used for its bounds
_INT_DTYPES: dict[Kind, Any] = {
    Kind.INT: np.int64,
    Kind.INT8: np.int8,
    Kind.INT16: np.int16,
    Kind.INT32: np.int32,
    Kind.INT64: np.int64,
    Kind.UINT: np.uint64,
    Kind.UINT8: np.uint8,
    Kind.UINT16: np.uint16,
    Kind.UINT32: np.uint32,
    Kind.UINT64: np.uint64,
}


def _make_int_converter(kind: Kind) -> Converter:
    info = np.iinfo(_INT_DTYPES[kind])
    lo, hi = int(info.min), int(info.max)
    pattern = _UNSIGNED_RE if kind.is_unsigned else _SIGNED_RE

    def convert(cv: str, _formats: Sequence[str]) -> tuple[int, bool]:
        if not pattern.fullmatch(cv):
            raise ConvertError(kind, cv) from ValueError(f"invalid syntax: {cv!r}")
        v = int(cv)
        if v < lo or v > hi:
            raise ConvertError(kind, cv) from ValueError(f"value out of range [{lo}, {hi}]: {cv!r}")
        return v, True

    return convert


def _make_float_converter(kind: Kind) -> Converter:
    def convert(cv: str, _formats: Sequence[str]) -> tuple[float, bool]:
        if not _FLOAT_RE.fullmatch(cv):
            raise ConvertError(kind, cv) from ValueError(f"invalid syntax: {cv!r}")
        v = float(cv)
        if kind is Kind.FLOAT32:
            with np.errstate(over="ignore"):
                single = np.float32(v)
            if math.isfinite(v) and not np.isfinite(single):
                raise ConvertError(kind, cv) from ValueError(f"value out of range for float32: {cv!r}")
            v = float(single)
        elif not math.isfinite(v) and _is_finite_literal(cv):
            raise ConvertError(kind, cv) from ValueError(f"value out of range for float64: {cv!r}")
        return v, True

    return convert


def _is_finite_literal(cv: str) -> bool:
    s = cv.lower().lstrip("+-")
    return not (s.startswith("inf") or s == "nan")


def _convert_bool(cv: str, _formats: Sequence[str]) -> tuple[bool, bool]:
    s = cv.lower()
    if s in _TRUE:
        return True, True
    if s in _FALSE:
        return False, True
    raise ConvertError(Kind.BOOL, cv) from ValueError(f"invalid boolean: {cv!r}")


def _convert_string(cv: str, _formats: Sequence[str]) -> tuple[str, bool]:
    return cv, True


def parse_datetime(cv: str, formats: Sequence[str]) -> datetime:
    """Try each `strptime` format in order; the first match wins.

    Values parsed without an offset are taken as UTC.
    """
    for fmt in formats:
        try:
            dt = datetime.strptime(cv, fmt)
        except ValueError:
            continue
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    raise InvalidDatetimeFormatError(cv, formats)


def _convert_time(cv: str, formats: Sequence[str]) -> tuple[datetime, bool]:
    return parse_datetime(cv, formats), True


_REGISTRY: dict[Kind, Converter] = {
    Kind.BOOL: _convert_bool,
    Kind.STRING: _convert_string,
    Kind.TIME: _convert_time,
    **{k: _make_float_converter(k) for k in Kind if k.is_float},
    **{k: _make_int_converter(k) for k in _INT_DTYPES},
}


def converter_for(kind: Kind) -> Converter:
    return _REGISTRY[kind]


def zero_value(kind: Kind | None, optional: bool) -> Any:
    """Zero value of a leaf: None for optional leaves, else the kind's zero."""
    if optional or kind is None:
        return None
    if kind is Kind.BOOL:
        return False
    if kind is Kind.STRING:
        return ""
    if kind is Kind.TIME:
        return ZERO_TIME
    if kind.is_integer:
        return 0
    return 0.0


def guard_empty(convert: Converter, zero: Any) -> Converter:
    """Short-circuit empty cells to `(zero, False)` without converting."""
    def guarded(cv: str, formats: Sequence[str]) -> tuple[Any, bool]:
        if cv == "":
            return zero, False
        return convert(cv, formats)

    return guarded
