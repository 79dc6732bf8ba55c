"""
Module 01 - Schemas & Canonicalization
File: tests/unit/test_canonical.py

Purpose: Unit tests for canonical JSON serialization of records that are
committed as leaves, and for the structured error taxonomy.
"""

from datetime import datetime, timezone, timedelta
from enum import Enum

import pytest
from pydantic import BaseModel

from authpath.schemas import (
    CanonicalizationException,
    ConfigException,
    ErrorCodes,
    MarshalError,
    MarshalException,
    TreeFullException,
    canonicalize_value,
    dumps_canonical,
)
from authpath.schemas.canonical import format_datetime_canonical


class SampleEnum(str, Enum):
    """Sample enum for testing."""
    OPTION_A = "option_a"


class SampleModel(BaseModel):
    """Sample record committed as a leaf."""
    name: str
    count: int
    note: str | None = None


class TestDumpsCanonical:
    """Tests for dumps_canonical()."""

    def test_sorted_keys_no_whitespace(self):
        assert dumps_canonical({"b": 2, "a": 1}) == '{"a":1,"b":2}'

    def test_nested_dicts_sorted(self):
        assert dumps_canonical({"z": {"y": 1, "x": 2}}) == '{"z":{"x":2,"y":1}}'

    def test_none_fields_dropped(self):
        """None-valued keys do not change the commitment."""
        assert dumps_canonical({"a": 1, "b": None}) == dumps_canonical({"a": 1})

    def test_pydantic_model(self):
        model = SampleModel(name="leaf", count=3)
        assert dumps_canonical(model) == '{"count":3,"name":"leaf"}'

    def test_unicode_kept(self):
        assert dumps_canonical({"k": "é"}) == '{"k":"é"}'


class TestCanonicalizeValue:
    """Tests for canonicalize_value()."""

    def test_enum_becomes_value(self):
        assert canonicalize_value(SampleEnum.OPTION_A) == "option_a"

    def test_bytes_become_hex(self):
        assert canonicalize_value(b"\x00\xff") == "00ff"

    def test_tuple_becomes_list(self):
        assert canonicalize_value((1, 2)) == [1, 2]

    def test_nan_rejected(self):
        with pytest.raises(CanonicalizationException) as exc_info:
            canonicalize_value({"x": [float("inf")]})
        assert exc_info.value.details["path"] == "x[0]"

    def test_unsupported_type_rejected(self):
        with pytest.raises(CanonicalizationException, match="set"):
            canonicalize_value({1, 2})


class TestDatetimeFormatting:
    """Tests for format_datetime_canonical()."""

    def test_naive_is_utc(self):
        assert format_datetime_canonical(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05Z"

    def test_aware_converted_to_utc(self):
        tz = timezone(timedelta(hours=2))
        dt = datetime(2024, 1, 2, 5, 4, 5, tzinfo=tz)
        assert format_datetime_canonical(dt) == "2024-01-02T03:04:05Z"

    def test_microseconds_kept(self):
        dt = datetime(2024, 1, 2, 3, 4, 5, 120000, tzinfo=timezone.utc)
        assert format_datetime_canonical(dt) == "2024-01-02T03:04:05.120000Z"


class TestErrorTaxonomy:
    """Tests for error models and exceptions."""

    def test_tree_full_exception_fields(self):
        exc = TreeFullException("full", capacity=4)
        assert exc.code == ErrorCodes.TREE_FULL
        assert exc.details == {"capacity": 4}
        assert exc.retryable is False

    def test_exception_to_error_model(self):
        model = TreeFullException("full", capacity=8).to_error_model()
        assert model.code == ErrorCodes.TREE_FULL
        assert model.message == "full"

    def test_marshal_error_defaults(self):
        error = MarshalError(message="bad", token_index=3, expected="digest", actual="zz")
        assert error.code == ErrorCodes.MALFORMED_STATE

    def test_marshal_error_to_exception(self):
        error = MarshalError(message="bad", token_index=3, expected="digest", actual="zz")
        exc = error.to_exception()
        assert isinstance(exc, MarshalException)
        assert exc.error is error
        assert exc.details["token_index"] == 3
        assert exc.details["actual"] == "zz"

    def test_config_exception_field_path(self):
        exc = ConfigException("bad depth", field_path="tree.depth")
        assert exc.code == ErrorCodes.CONFIG_ERROR
        assert exc.details["field_path"] == "tree.depth"
        assert "ConfigException" in repr(exc)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
