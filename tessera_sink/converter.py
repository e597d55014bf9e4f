"""Typed value → canonical JSON tree.

The canonical tree is plain Python JSON data (``dict``, ``list``, ``str``,
``int``, ``float``, ``Decimal``, ``bool``, ``None``); bytes leaves are
base64 text. Both
the bulk row and the streaming row are derived from it, so the conversion
and :func:`dumps_node` must stay byte-for-byte stable.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, TypeAlias

import simplejson

from tessera_schema import (
    DATE_LOGICAL_NAME,
    DECIMAL_LOGICAL_NAME,
    TIME_LOGICAL_NAME,
    TIMESTAMP_LOGICAL_NAME,
    Schema,
    SchemaType,
    Struct,
    infer_schema_type,
)

from .errors import ConversionError, ErrorCode

JsonNode: TypeAlias = "dict[str, Any] | list[Any] | str | int | float | Decimal | bool | None"

_INT_RANGES: dict[SchemaType, tuple[int, int]] = {
    SchemaType.INT8: (-(2**7), 2**7 - 1),
    SchemaType.INT16: (-(2**15), 2**15 - 1),
    SchemaType.INT32: (-(2**31), 2**31 - 1),
    SchemaType.INT64: (-(2**63), 2**63 - 1),
}


def dumps_node(node: JsonNode) -> str:
    """Serialize a canonical node: compact, key order preserved, UTF-8 text.

    ``Decimal`` leaves are written as exact JSON numbers.
    """
    return simplejson.dumps(node, separators=(",", ":"), ensure_ascii=False, use_decimal=True)


def convert_to_json(schema: Schema | None, value: Any, is_streaming: bool = False) -> JsonNode:
    """Render *value*, described by *schema*, as a canonical JSON node.

    With no schema the kind is inferred from the Python type, which is how
    schemaless maps and lists are handled. *is_streaming* only changes how
    decimals are rendered: exact text for the streaming channel, a JSON
    number for staged files.

    Raises :class:`ConversionError` when a required value is missing, when
    no kind can be determined, or when the value does not fit its kind.
    """
    if value is None:
        if schema is None:
            return None
        if schema.default is not None:
            return convert_to_json(schema, schema.default, is_streaming)
        if schema.optional:
            return None
        raise ConversionError(
            ErrorCode.MISSING_REQUIRED_VALUE,
            "Conversion error: null value for field that is required and has no default value",
        )

    if schema is None:
        schema_type = infer_schema_type(value)
        if schema_type is None:
            raise ConversionError(
                ErrorCode.NO_SCHEMA_TYPE,
                f"Python type {type(value).__name__} does not have a corresponding schema type",
            )
    else:
        schema_type = schema.type

    name = schema.name if schema is not None else None

    match schema_type:
        case SchemaType.INT8 | SchemaType.INT16:
            return _integer(schema_type, value)
        case SchemaType.INT32:
            if name == DATE_LOGICAL_NAME:
                return _date_text(value)
            if name == TIME_LOGICAL_NAME:
                return _time_text(value)
            return _integer(schema_type, value)
        case SchemaType.INT64:
            if name == TIMESTAMP_LOGICAL_NAME:
                return _epoch_millis(value)
            return _integer(schema_type, value)
        case SchemaType.FLOAT32 | SchemaType.FLOAT64:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise _invalid(schema_type, value)
            return float(value)
        case SchemaType.BOOLEAN:
            if not isinstance(value, bool):
                raise _invalid(schema_type, value)
            return value
        case SchemaType.STRING:
            if not isinstance(value, str):
                raise _invalid(schema_type, value)
            return value
        case SchemaType.BYTES:
            if name == DECIMAL_LOGICAL_NAME:
                return _decimal(value, is_streaming)
            if not isinstance(value, (bytes, bytearray, memoryview)):
                raise _invalid(schema_type, value)
            return base64.b64encode(bytes(value)).decode("ascii")
        case SchemaType.ARRAY:
            if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
                raise _invalid(schema_type, value)
            element_schema = schema.value_schema if schema is not None else None
            return [convert_to_json(element_schema, element, is_streaming) for element in value]
        case SchemaType.MAP:
            if not isinstance(value, Mapping):
                raise _invalid(schema_type, value)
            return _map(schema, value, is_streaming)
        case SchemaType.STRUCT:
            if not isinstance(value, Struct):
                raise _invalid(schema_type, value)
            if schema is not None and value.schema != schema:
                raise ConversionError(ErrorCode.INVALID_VALUE_TYPE, "Mismatching schema.")
            return {
                f.name: convert_to_json(f.schema, value.get(f.name), is_streaming)
                for f in value.schema.fields
            }

    raise ConversionError(ErrorCode.INVALID_VALUE_TYPE, f"Couldn't convert {value!r} to JSON.")


def _invalid(schema_type: SchemaType, value: Any) -> ConversionError:
    return ConversionError(
        ErrorCode.INVALID_VALUE_TYPE,
        f"Invalid type for {schema_type.value.upper()}: {type(value).__name__}",
    )


def _integer(schema_type: SchemaType, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _invalid(schema_type, value)
    low, high = _INT_RANGES[schema_type]
    if not low <= value <= high:
        raise ConversionError(
            ErrorCode.INVALID_VALUE_TYPE,
            f"Value {value} out of range for {schema_type.value.upper()}",
        )
    return value


def _map(schema: Schema | None, value: Mapping[Any, Any], is_streaming: bool) -> JsonNode:
    # Object mode for string keys; otherwise an array of [key, value] pairs
    if schema is None:
        object_mode = all(isinstance(k, str) for k in value)
        key_schema = value_schema = None
    else:
        key_schema, value_schema = schema.key_schema, schema.value_schema
        object_mode = key_schema is not None and key_schema.type is SchemaType.STRING

    if object_mode:
        obj: dict[str, Any] = {}
        for k, v in value.items():
            map_key = convert_to_json(key_schema, k, is_streaming)
            obj[map_key if isinstance(map_key, str) else dumps_node(map_key)] = convert_to_json(
                value_schema, v, is_streaming
            )
        return obj

    return [
        [convert_to_json(key_schema, k, is_streaming), convert_to_json(value_schema, v, is_streaming)]
        for k, v in value.items()
    ]


def _date_text(value: Any) -> str:
    if not isinstance(value, date):
        raise _invalid(SchemaType.INT32, value)
    if isinstance(value, datetime):
        value = value.astimezone(timezone.utc).date() if value.tzinfo else value.date()
    return value.isoformat()


def _time_text(value: Any) -> str:
    if isinstance(value, datetime):
        value = (value.astimezone(timezone.utc) if value.tzinfo else value).time()
    if not isinstance(value, time):
        raise _invalid(SchemaType.INT32, value)
    return f"{value.strftime('%H:%M:%S')}.{value.microsecond // 1000:03d}+0000"


def _epoch_millis(value: Any) -> int:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        delta = value - datetime(1970, 1, 1, tzinfo=timezone.utc)
        return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000
    return _integer(SchemaType.INT64, value)


def _decimal(value: Any, is_streaming: bool) -> JsonNode:
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float)):
        raise _invalid(SchemaType.BYTES, value)
    value = Decimal(value) if not isinstance(value, Decimal) else value
    if not value.is_finite():
        raise ConversionError(
            ErrorCode.INVALID_VALUE_TYPE,
            f"Decimal value {value} is not a finite number",
        )
    if is_streaming:
        return format(value, "f")
    if value == value.to_integral_value():
        return int(value)
    return value
