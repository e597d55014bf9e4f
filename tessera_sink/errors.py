"""Record conversion errors and their stable codes."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Symbolic failure category, used for dead-letter routing."""

    ACCESS_MISMATCH = "access_mismatch"
    NULL_VALUE_IGNORED = "null_value_ignored"
    MISSING_REQUIRED_VALUE = "missing_required_value"
    NO_SCHEMA_TYPE = "no_schema_type"
    INVALID_VALUE_TYPE = "invalid_value_type"
    WRONG_VALUE_TYPE = "wrong_value_type"
    WRONG_KEY_TYPE = "wrong_key_type"
    WRONG_VALUE_SCHEMA = "wrong_value_schema"
    WRONG_KEY_SCHEMA = "wrong_key_schema"


class ErrorCode(str, Enum):
    """Stable numeric codes carried by every :class:`RecordError`."""

    WRONG_VALUE_SCHEMA = "0009"
    WRONG_VALUE_TYPE = "0010"
    WRONG_KEY_SCHEMA = "0011"
    WRONG_KEY_TYPE = "0012"
    NULL_VALUE_IGNORED = "0013"
    ACCESS_PARSED_AS_BROKEN = "5011"
    ACCESS_BROKEN_AS_PARSED = "5012"
    MISSING_REQUIRED_VALUE = "5015"
    NO_SCHEMA_TYPE = "5016"
    INVALID_VALUE_TYPE = "5017"

    @property
    def kind(self) -> ErrorKind:
        return _KINDS[self]


_KINDS: dict[ErrorCode, ErrorKind] = {
    ErrorCode.WRONG_VALUE_SCHEMA: ErrorKind.WRONG_VALUE_SCHEMA,
    ErrorCode.WRONG_VALUE_TYPE: ErrorKind.WRONG_VALUE_TYPE,
    ErrorCode.WRONG_KEY_SCHEMA: ErrorKind.WRONG_KEY_SCHEMA,
    ErrorCode.WRONG_KEY_TYPE: ErrorKind.WRONG_KEY_TYPE,
    ErrorCode.NULL_VALUE_IGNORED: ErrorKind.NULL_VALUE_IGNORED,
    ErrorCode.ACCESS_PARSED_AS_BROKEN: ErrorKind.ACCESS_MISMATCH,
    ErrorCode.ACCESS_BROKEN_AS_PARSED: ErrorKind.ACCESS_MISMATCH,
    ErrorCode.MISSING_REQUIRED_VALUE: ErrorKind.MISSING_REQUIRED_VALUE,
    ErrorCode.NO_SCHEMA_TYPE: ErrorKind.NO_SCHEMA_TYPE,
    ErrorCode.INVALID_VALUE_TYPE: ErrorKind.INVALID_VALUE_TYPE,
}


class RecordError(Exception):
    """A record could not be turned into a row.

    Never retried by the sink core; the task routes it to the dead-letter
    topic using :attr:`code`.
    """

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(f"[{code.value}] {message}")
        self.code = code
        self.message = message

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind


class ContentAccessError(RecordError):
    """The wrong branch of a parsed-or-broken container was read."""


class ConversionError(RecordError):
    """A typed value could not be rendered as canonical JSON."""


class RecordValidationError(RecordError):
    """A record's key or value has the wrong shape, schema or null policy."""
