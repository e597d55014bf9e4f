"""Tests for tessera_sink.errors."""

from __future__ import annotations

from tessera_sink.errors import (
    ContentAccessError,
    ConversionError,
    ErrorCode,
    ErrorKind,
    RecordError,
    RecordValidationError,
)


class TestErrorCode:
    def test_every_code_has_a_kind(self):
        for code in ErrorCode:
            assert isinstance(code.kind, ErrorKind)

    def test_codes_are_unique(self):
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))

    def test_access_codes_share_kind(self):
        assert ErrorCode.ACCESS_PARSED_AS_BROKEN.kind is ErrorKind.ACCESS_MISMATCH
        assert ErrorCode.ACCESS_BROKEN_AS_PARSED.kind is ErrorKind.ACCESS_MISMATCH


class TestRecordError:
    def test_message_carries_code(self):
        err = RecordValidationError(ErrorCode.WRONG_VALUE_TYPE, "bad value")
        assert str(err) == "[0010] bad value"
        assert err.message == "bad value"
        assert err.kind is ErrorKind.WRONG_VALUE_TYPE

    def test_hierarchy(self):
        for cls in (ContentAccessError, ConversionError, RecordValidationError):
            assert issubclass(cls, RecordError)
