from __future__ import annotations

import dataclasses
import logging
import types
from datetime import datetime
from functools import lru_cache
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from ..errors import UnsupportedTypeError
from ..models.binding import Allocator, FieldBinding
from ..models.kinds import Kind
from .converters import converter_for, guard_empty, zero_value

"""Type descriptor walker.

Turns a dataclass record type into its ordered, flattened FieldBinding list:
depth-first over the fields in declaration order, nested records contributing
their leaves (not themselves). Compilation is pure, so results are cached per
(record type, tag name).
"""

__all__ = [
    "DEFAULT_TAG",
    "IGNORE_TAG",
    "column",
    "compile_bindings",
    "new_record",
]

logger = logging.getLogger(__name__)

DEFAULT_TAG = "sheets"
IGNORE_TAG = "-"

_NONE_TYPE = type(None)

_PLAIN_KINDS: dict[Any, Kind] = {
    bool: Kind.BOOL,
    int: Kind.INT,
    float: Kind.FLOAT64,
    str: Kind.STRING,
    datetime: Kind.TIME,
}


def column(name: str, *, tag: str = DEFAULT_TAG, **field_kwargs: Any) -> Any:
    """`dataclasses.field()` carrying a column-name override under `tag`.

    `column("-")` removes the field from binding entirely.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[tag] = name
    return dataclasses.field(metadata=metadata, **field_kwargs)


def _strip_annotated(tp: Any) -> tuple[Any, Kind | None]:
    kind = None
    while get_origin(tp) is Annotated:
        args = get_args(tp)
        tp = args[0]
        for meta in args[1:]:
            if isinstance(meta, Kind):
                kind = meta
    return tp, kind


def _classify(tp: Any) -> tuple[Any, Kind | None, bool]:
    """Strip one level of optionality; return (type, explicit kind, optional)."""
    tp, kind = _strip_annotated(tp)
    optional = False
    if get_origin(tp) in (Union, types.UnionType):
        members = [a for a in get_args(tp) if a is not _NONE_TYPE]
        if len(members) == 1 and len(get_args(tp)) == 2:
            optional = True
            tp, inner_kind = _strip_annotated(members[0])
            kind = inner_kind or kind
    return tp, kind, optional


@lru_cache(maxsize=256)
def _hints(record_type: type) -> dict[str, Any]:
    """Resolved field annotations of `record_type`.

    Raises:
        UnsupportedTypeError: an annotation cannot be resolved (forward
            reference to an unknown or function-local type).
    """
    try:
        return get_type_hints(record_type, include_extras=True)
    except (NameError, TypeError) as e:
        raise UnsupportedTypeError(
            getattr(record_type, "__name__", repr(record_type)), f"unresolved annotation: {e}"
        ) from e


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


def _column_name(f: dataclasses.Field, tag_name: str) -> str:
    tag = f.metadata.get(tag_name)
    if tag is None:
        return f.name
    return str(tag).split(",", 1)[0]


def _chain_allocator(parent: Allocator | None, path: tuple[str, ...], record_type: type) -> Allocator:
    owner_path, attr = path[:-1], path[-1]

    def allocate(root: Any) -> None:
        if parent is not None:
            parent(root)
        owner = root
        for name in owner_path:
            owner = getattr(owner, name)
        if getattr(owner, attr) is None:
            object.__setattr__(owner, attr, new_record(record_type))

    return allocate


def _walk(
    record_type: type,
    tag_name: str,
    prefix: tuple[str, ...],
    qualifier: str,
    parent_alloc: Allocator | None,
    ancestors: tuple[type, ...],
) -> list[FieldBinding]:
    hints = _hints(record_type)
    out: list[FieldBinding] = []
    for f in dataclasses.fields(record_type):
        if f.name.startswith("_"):
            continue
        col = _column_name(f, tag_name)
        if col == IGNORE_TAG:
            continue

        path = prefix + (f.name,)
        qualified = f"{qualifier}.{f.name}"
        tp, kind, optional = _classify(hints.get(f.name, f.type))

        if dataclasses.is_dataclass(tp) and isinstance(tp, type) and tp not in ancestors:
            alloc = _chain_allocator(parent_alloc, path, tp) if optional else parent_alloc
            out.extend(_walk(tp, tag_name, path, qualified, alloc, ancestors + (tp,)))
            continue

        if kind is None:
            kind = _PLAIN_KINDS.get(tp)
        elif _PLAIN_KINDS.get(tp) not in (Kind.INT, Kind.FLOAT64):
            # width aliases only apply to int / float
            kind = None

        if kind is None:
            out.append(FieldBinding(
                path=path,
                column=col,
                qualified_name=qualified,
                kind=None,
                optional=optional,
                allocate=parent_alloc,
                fault=UnsupportedTypeError(qualified, _type_name(tp)),
            ))
            continue

        out.append(FieldBinding(
            path=path,
            column=col,
            qualified_name=qualified,
            kind=kind,
            optional=optional,
            convert=guard_empty(converter_for(kind), zero_value(kind, optional)),
            allocate=parent_alloc,
        ))
    return out


@lru_cache(maxsize=256)
def compile_bindings(record_type: type, tag_name: str = DEFAULT_TAG) -> tuple[FieldBinding, ...]:
    """Compile the flattened FieldBinding list of a dataclass record type.

    Raises:
        UnsupportedTypeError: `record_type` is not a dataclass type.
    """
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise UnsupportedTypeError(_type_name(record_type), type(record_type).__name__)
    bindings = tuple(_walk(record_type, tag_name, (), record_type.__name__, None, (record_type,)))
    logger.debug(
        "compiled %d bindings for %s (tag=%s)", len(bindings), record_type.__name__, tag_name
    )
    return bindings


def _field_zero(f: dataclasses.Field, hint: Any) -> Any:
    if f.default is not dataclasses.MISSING:
        return f.default
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()
    tp, kind, optional = _classify(hint)
    if optional:
        return None
    if dataclasses.is_dataclass(tp) and isinstance(tp, type):
        return new_record(tp)
    if kind is None:
        kind = _PLAIN_KINDS.get(tp)
    return zero_value(kind, False)


def new_record(record_type: type) -> Any:
    """Allocate a zero-valued record without running `__init__`.

    Declared defaults win; otherwise optional fields are None, nested value
    records are zero-valued recursively and scalars get their kind's zero.

    Note that a field declared with a default (`level: int = 5`) keeps that
    default, not the kind's zero, when its cell is empty or its column is
    skipped. Declare the field without a default to get the plain zero.
    """
    hints = _hints(record_type)
    obj = record_type.__new__(record_type)
    for f in dataclasses.fields(record_type):
        object.__setattr__(obj, f.name, _field_zero(f, hints.get(f.name, f.type)))
    return obj
