"""Typed-value vocabulary: the field descriptors and structs handed to the
sink by schema-aware deserializers (Avro, Protobuf, JSON-with-schema).
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

DECIMAL_LOGICAL_NAME = "org.apache.kafka.connect.data.Decimal"
DATE_LOGICAL_NAME = "org.apache.kafka.connect.data.Date"
TIME_LOGICAL_NAME = "org.apache.kafka.connect.data.Time"
TIMESTAMP_LOGICAL_NAME = "org.apache.kafka.connect.data.Timestamp"


class SchemaType(str, Enum):
    """The closed set of kinds a field descriptor can declare."""

    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOLEAN = "boolean"
    STRING = "string"
    BYTES = "bytes"
    ARRAY = "array"
    MAP = "map"
    STRUCT = "struct"


@dataclass(frozen=True)
class SchemaField:
    """A named, positioned member of a struct schema."""

    name: str
    index: int
    schema: Schema


@dataclass(frozen=True)
class Schema:
    """Field descriptor: kind, optionality, default and nested descriptors.

    ``name`` is set for named records and for logical types (see the
    ``*_LOGICAL_NAME`` constants). ``fields`` is only meaningful for STRUCT,
    ``key_schema`` for MAP and ``value_schema`` for ARRAY and MAP.
    """

    type: SchemaType
    optional: bool = False
    default: Any = dataclasses.field(default=None, hash=False)
    name: str | None = None
    version: int | None = None
    doc: str | None = None
    parameters: Mapping[str, str] = dataclasses.field(default_factory=dict, hash=False)
    fields: tuple[SchemaField, ...] = ()
    key_schema: Schema | None = None
    value_schema: Schema | None = None

    def field(self, name: str) -> SchemaField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def as_optional(self, default: Any = None) -> Schema:
        """Return a copy marked optional, with *default* as its default value."""
        return dataclasses.replace(self, optional=True, default=default)

    def named(self, name: str) -> Schema:
        return dataclasses.replace(self, name=name)


INT8_SCHEMA = Schema(SchemaType.INT8)
INT16_SCHEMA = Schema(SchemaType.INT16)
INT32_SCHEMA = Schema(SchemaType.INT32)
INT64_SCHEMA = Schema(SchemaType.INT64)
FLOAT32_SCHEMA = Schema(SchemaType.FLOAT32)
FLOAT64_SCHEMA = Schema(SchemaType.FLOAT64)
BOOLEAN_SCHEMA = Schema(SchemaType.BOOLEAN)
STRING_SCHEMA = Schema(SchemaType.STRING)
BYTES_SCHEMA = Schema(SchemaType.BYTES)

DATE_SCHEMA = Schema(SchemaType.INT32, name=DATE_LOGICAL_NAME)
TIME_SCHEMA = Schema(SchemaType.INT32, name=TIME_LOGICAL_NAME)
TIMESTAMP_SCHEMA = Schema(SchemaType.INT64, name=TIMESTAMP_LOGICAL_NAME)


def struct_schema(
    fields: Mapping[str, Schema] | list[tuple[str, Schema]],
    *,
    name: str | None = None,
    optional: bool = False,
    doc: str | None = None,
) -> Schema:
    """Build a STRUCT schema; field order follows *fields*."""
    items = list(fields.items()) if isinstance(fields, Mapping) else list(fields)
    return Schema(
        SchemaType.STRUCT,
        name=name,
        optional=optional,
        doc=doc,
        fields=tuple(
            SchemaField(field_name, i, field_schema)
            for i, (field_name, field_schema) in enumerate(items)
        ),
    )


def array_schema(value_schema: Schema, *, optional: bool = False) -> Schema:
    return Schema(SchemaType.ARRAY, optional=optional, value_schema=value_schema)


def map_schema(key_schema: Schema, value_schema: Schema, *, optional: bool = False) -> Schema:
    return Schema(
        SchemaType.MAP,
        optional=optional,
        key_schema=key_schema,
        value_schema=value_schema,
    )


def decimal_schema(scale: int, *, optional: bool = False) -> Schema:
    return Schema(
        SchemaType.BYTES,
        optional=optional,
        name=DECIMAL_LOGICAL_NAME,
        parameters={"scale": str(scale)},
    )


class Struct:
    """A typed structured value bound to a STRUCT schema.

    Values are set with :meth:`put` (chainable) and read with :meth:`get`.
    Unset fields read as ``None``.
    """

    def __init__(self, schema: Schema) -> None:
        if schema.type is not SchemaType.STRUCT:
            raise ValueError(f"Struct requires a struct schema, got {schema.type.value}")
        self._schema = schema
        self._values: dict[str, Any] = {}

    @property
    def schema(self) -> Schema:
        return self._schema

    def put(self, name: str, value: Any) -> Struct:
        self._require_field(name)
        self._values[name] = value
        return self

    def get(self, name: str) -> Any:
        self._require_field(name)
        return self._values.get(name)

    def _require_field(self, name: str) -> None:
        if self._schema.field(name) is None:
            raise ValueError(f"{name} is not a valid field name")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Struct):
            return NotImplemented
        return self._schema == other._schema and self._values == other._values

    def __repr__(self) -> str:
        return f"Struct({self._values!r})"


def infer_schema_type(value: Any) -> SchemaType | None:
    """Map a Python value to the kind a schemaless conversion should use."""
    # bool is an int subclass
    if isinstance(value, bool):
        return SchemaType.BOOLEAN
    if isinstance(value, int):
        return SchemaType.INT64
    if isinstance(value, float):
        return SchemaType.FLOAT64
    if isinstance(value, str):
        return SchemaType.STRING
    if isinstance(value, (bytes, bytearray, memoryview)):
        return SchemaType.BYTES
    if isinstance(value, (list, tuple)):
        return SchemaType.ARRAY
    if isinstance(value, Mapping):
        return SchemaType.MAP
    if isinstance(value, Struct):
        return SchemaType.STRUCT
    return None
