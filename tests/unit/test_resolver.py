from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import pytest

from sheetbind.errors import (
    FieldNotFoundInRecordError,
    FieldNotFoundInSheetError,
    NoMappingError,
    UnmappedColumnsError,
    UnsupportedTypeError,
    find_error,
)
from sheetbind.services.resolver import header_columns, resolve_columns
from sheetbind.services.walker import column, compile_bindings


@dataclass
class Pair:
    a: int
    b: int


@dataclass
class Renamed:
    first: str = column("First")
    second: str = column("Second")


@dataclass
class Flags:
    enabled: bool
    visible: bool


@dataclass
class Mixed:
    valid: int
    invalid: complex


@dataclass
class Inner:
    a: int


@dataclass
class Shadowed:
    a: int
    inner: Optional[Inner] = None


def resolve(record_type, header, **kwargs):
    return resolve_columns(compile_bindings(record_type), header, record_name=record_type.__name__, **kwargs)


def test_header_columns_stops_at_first_blank():
    assert header_columns(["a", "b", "", "c"]) == {"a": 0, "b": 1}
    assert header_columns([None, "a"]) == {}


def test_header_columns_first_duplicate_wins():
    assert header_columns(["a", "b", "a"]) == {"a": 0, "b": 1}


def test_exact_match_in_binding_order():
    mappings = resolve(Pair, ["b", "a"])
    assert [(m.column, m.column_index) for m in mappings] == [("a", 1), ("b", 0)]


def test_column_overrides_are_used():
    mappings = resolve(Renamed, ["Second", "First"])
    assert [(m.binding.attribute, m.column_index) for m in mappings] == [("first", 1), ("second", 0)]


def test_matching_is_case_sensitive():
    with pytest.raises(FieldNotFoundInSheetError) as exc_info:
        resolve(Pair, ["A", "b"])
    assert exc_info.value.column == "a"
    assert exc_info.value.field == "Pair.a"


def test_missing_field_allowed_when_skipping_fields(caplog):
    with caplog.at_level(logging.WARNING, logger="sheetbind"):
        mappings = resolve(Pair, ["b"], allow_skip_fields=True)
    assert [m.column for m in mappings] == ["b"]
    assert "Pair.a" in caplog.text


def test_extra_columns_collected_in_column_order():
    with pytest.raises(UnmappedColumnsError) as exc_info:
        resolve(Pair, ["z", "a", "y", "b"])
    err = exc_info.value
    assert err.columns == ["z", "y"]
    assert all(isinstance(e, FieldNotFoundInRecordError) for e in err.errors)
    assert [e.column_index for e in err.errors] == [0, 2]
    assert find_error(err, FieldNotFoundInRecordError) is err.errors[0]


def test_extra_columns_ignored_when_skipping_columns():
    mappings = resolve(Pair, ["a", "z", "b"], allow_skip_columns=True)
    assert [(m.column, m.column_index) for m in mappings] == [("a", 0), ("b", 2)]


def test_columns_after_blank_header_cell_are_ignored():
    mappings = resolve(Pair, ["a", "b", "", "c"])
    assert len(mappings) == 2


def test_no_mapping_even_with_both_skips():
    with pytest.raises(NoMappingError):
        resolve(Flags, ["x", "y"], allow_skip_fields=True, allow_skip_columns=True)


def test_empty_header_has_no_mapping():
    with pytest.raises(NoMappingError):
        resolve(Flags, [], allow_skip_fields=True)


def test_field_not_in_record_reported_before_no_mapping():
    with pytest.raises(UnmappedColumnsError):
        resolve(Flags, ["x"], allow_skip_fields=True)


def test_unsupported_type_raised_only_when_matched():
    with pytest.raises(UnsupportedTypeError):
        resolve(Mixed, ["valid", "invalid"])
    mappings = resolve(Mixed, ["valid"], allow_skip_fields=True)
    assert [m.column for m in mappings] == ["valid"]


def test_consumed_column_cannot_serve_twice():
    # Shadowed.a and Shadowed.inner.a both want column "a"
    with pytest.raises(FieldNotFoundInSheetError) as exc_info:
        resolve(Shadowed, ["a"])
    assert exc_info.value.field == "Shadowed.inner.a"
    mappings = resolve(Shadowed, ["a"], allow_skip_fields=True)
    assert [m.binding.qualified_name for m in mappings] == ["Shadowed.a"]
