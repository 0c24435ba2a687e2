from __future__ import annotations

import json

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from sheetbind.config.loader import SCHEMA_PATH

"""Options file schema contract (config/load.yml)."""


@pytest.fixture(scope="module")
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_schema_is_a_valid_draft_2020_12_schema(schema):
    jsonschema.Draft202012Validator.check_schema(schema)


def test_minimal_valid_options(schema):
    jsonschema.validate({"source": "./data/workouts.xlsx"}, schema)


def test_full_valid_options(schema):
    options = {
        "source": "./data/workouts.csv",
        "format": "csv",
        "sheet": "Workouts",
        "tag_name": "xls",
        "datetime_formats": ["%d.%m.%Y", "%Y/%m/%d"],
        "allow_skip_fields": True,
        "allow_skip_columns": False,
        "timeout_seconds": 2.5,
        "csv": {"delimiter": ";", "encoding": "utf-8-sig"},
    }
    jsonschema.validate(options, schema)


def test_sample_yaml_validates(schema, sample_options_yaml: str):
    jsonschema.validate(yaml.safe_load(sample_options_yaml), schema)


@pytest.mark.parametrize("options", [
    {},
    {"source": ""},
    {"source": "b.xlsx", "format": "ods"},
    {"source": "b.xlsx", "datetime_formats": "%Y"},
    {"source": "b.xlsx", "allow_skip_fields": "yes"},
    {"source": "b.xlsx", "timeout_seconds": 0},
    {"source": "b.xlsx", "csv": {"delimiter": ";;"}},
    {"source": "b.xlsx", "extra_field": "not allowed"},
])
def test_invalid_options_rejected(schema, options):
    with pytest.raises(ValidationError):
        jsonschema.validate(options, schema)
