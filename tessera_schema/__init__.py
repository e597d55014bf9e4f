from .connect_schema import (
    BOOLEAN_SCHEMA,
    BYTES_SCHEMA,
    DATE_LOGICAL_NAME,
    DATE_SCHEMA,
    DECIMAL_LOGICAL_NAME,
    FLOAT32_SCHEMA,
    FLOAT64_SCHEMA,
    INT8_SCHEMA,
    INT16_SCHEMA,
    INT32_SCHEMA,
    INT64_SCHEMA,
    STRING_SCHEMA,
    TIME_LOGICAL_NAME,
    TIME_SCHEMA,
    TIMESTAMP_LOGICAL_NAME,
    TIMESTAMP_SCHEMA,
    Schema,
    SchemaField,
    SchemaType,
    Struct,
    array_schema,
    decimal_schema,
    infer_schema_type,
    map_schema,
    struct_schema,
)

__all__ = [
    "BOOLEAN_SCHEMA",
    "BYTES_SCHEMA",
    "DATE_LOGICAL_NAME",
    "DATE_SCHEMA",
    "DECIMAL_LOGICAL_NAME",
    "FLOAT32_SCHEMA",
    "FLOAT64_SCHEMA",
    "INT16_SCHEMA",
    "INT32_SCHEMA",
    "INT64_SCHEMA",
    "INT8_SCHEMA",
    "STRING_SCHEMA",
    "Schema",
    "SchemaField",
    "SchemaType",
    "Struct",
    "TIMESTAMP_LOGICAL_NAME",
    "TIMESTAMP_SCHEMA",
    "TIME_LOGICAL_NAME",
    "TIME_SCHEMA",
    "array_schema",
    "decimal_schema",
    "infer_schema_type",
    "map_schema",
    "struct_schema",
]
