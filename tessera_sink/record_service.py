"""RecordService: turns a SinkRecord into a staged-file row or a streaming row."""

from __future__ import annotations

from typing import Any, NamedTuple

import structlog

from tessera_schema import SchemaType, Struct

from .column_names import format_column_name
from .config import RecordServiceConfig
from .content import NON_FORMAT_ID, RecordContent
from .converter import JsonNode, convert_to_json, dumps_node
from .errors import ErrorCode, RecordValidationError
from .json_converter import JSON_CONTENT_SCHEMA_NAME
from .models import BehaviorOnNull, SinkRecord, TimestampType

logger = structlog.get_logger()

# Staged-file row keys
CONTENT = "content"
META = "meta"

# Metadata keys
OFFSET = "offset"
TOPIC = "topic"
PARTITION = "partition"
KEY = "key"
SCHEMA_ID = "schema_id"
KEY_SCHEMA_ID = "key_schema_id"
HEADERS = "headers"

# Streaming columns
TABLE_COLUMN_CONTENT = "RECORD_CONTENT"
TABLE_COLUMN_METADATA = "RECORD_METADATA"


class CustomColumn(NamedTuple):
    """A top-level content field promoted to its own always-text column."""

    field_name: str
    table_column: str
    row_key: str


DEFAULT_CUSTOM_COLUMNS: tuple[CustomColumn, ...] = (
    CustomColumn("TenantId", "TENANT_ID", "tenantId"),
    CustomColumn("EntityType", "ENTITY_TYPE", "entityType"),
    CustomColumn("RowCreated", "ROW_CREATED", "rowCreated"),
)


class RecordService:
    """Build destination rows from sink records.

    Holds only configuration, so one instance may be shared by concurrent
    workers. Every method either returns a complete row or raises a
    :class:`~tessera_sink.errors.RecordError`; nothing is emitted partially.
    """

    def __init__(
        self,
        config: RecordServiceConfig | None = None,
        custom_columns: tuple[CustomColumn, ...] = DEFAULT_CUSTOM_COLUMNS,
    ) -> None:
        self._config = config or RecordServiceConfig()
        self._custom_columns = custom_columns

    @property
    def schematization_enabled(self) -> bool:
        return self._config.schematization_enabled

    @property
    def behavior_on_null(self) -> BehaviorOnNull:
        return self._config.behavior_on_null

    # ------------------------------------------------------------------
    # Bulk (staged-file) rows
    # ------------------------------------------------------------------

    def process_for_bulk(self, record: SinkRecord) -> str:
        """Return the staged-file text for *record*: one JSON line per element."""
        content = self._value_content(record, is_streaming=False)
        meta = self._metadata(record, content, is_streaming=False)

        lines: list[str] = []
        for node in content.elements():
            row: dict[str, Any] = {CONTENT: node, META: meta}
            if isinstance(node, dict):
                for column in self._custom_columns:
                    if column.field_name in node:
                        row[column.row_key] = _as_text(node[column.field_name])
            lines.append(dumps_node(row))
        return "".join(lines)

    # ------------------------------------------------------------------
    # Streaming rows
    # ------------------------------------------------------------------

    def process_for_streaming(self, record: SinkRecord) -> dict[str, str | None]:
        """Return the column → value map appended to the streaming channel.

        A streaming row holds exactly one content element; multi-element
        content is rejected rather than truncated.
        """
        content = self._value_content(record, is_streaming=True)
        meta = self._metadata(record, content, is_streaming=True)
        nodes = content.elements()
        if len(nodes) != 1:
            raise RecordValidationError(
                ErrorCode.WRONG_VALUE_TYPE,
                f"Streaming rows take a single content element, got {len(nodes)}",
            )
        node = nodes[0]

        row: dict[str, str | None] = {TABLE_COLUMN_METADATA: dumps_node(meta)}

        if not self._config.schematization_enabled:
            row[TABLE_COLUMN_CONTENT] = dumps_node(node)
            fields = node if isinstance(node, dict) else {}
            for column in self._custom_columns:
                row[column.table_column] = _as_text(fields.get(column.field_name))
            return row

        if not isinstance(node, dict):
            raise RecordValidationError(
                ErrorCode.WRONG_VALUE_TYPE,
                f"Schematized content must be a JSON object, got {type(node).__name__}",
            )
        for field_name, field_node in node.items():
            row[format_column_name(field_name)] = _as_text(field_node)
        return row

    # ------------------------------------------------------------------
    # Key
    # ------------------------------------------------------------------

    def put_key(self, record: SinkRecord, meta: dict[str, Any], is_streaming: bool = False) -> None:
        """Validate the record key and store its JSON form under ``meta["key"]``.

        A null key leaves *meta* untouched.
        """
        key, schema = record.key, record.key_schema
        if key is None:
            return

        if schema is not None and schema.type is SchemaType.STRING and not schema.name:
            if not isinstance(key, str):
                raise RecordValidationError(
                    ErrorCode.WRONG_KEY_TYPE,
                    f"Key with a string schema must be str, got {type(key).__name__}",
                )
            meta[KEY] = key
            return

        if not isinstance(key, (RecordContent, Struct)):
            raise RecordValidationError(
                ErrorCode.WRONG_KEY_TYPE,
                "Unsupported key format; use a string key or a record-content/struct key",
            )

        if isinstance(key, Struct):
            if schema is None or not schema.name:
                raise RecordValidationError(
                    ErrorCode.WRONG_KEY_SCHEMA,
                    "Struct keys require a named key schema",
                )
            meta[KEY] = convert_to_json(schema, key, is_streaming)
            return

        if schema is None or schema.name != JSON_CONTENT_SCHEMA_NAME:
            raise RecordValidationError(
                ErrorCode.WRONG_KEY_SCHEMA,
                f"Record-content keys require the {JSON_CONTENT_SCHEMA_NAME} schema",
            )
        nodes = key.elements()
        meta[KEY] = nodes[0] if len(nodes) == 1 else list(nodes)
        if key.format_id != NON_FORMAT_ID:
            meta[KEY_SCHEMA_ID] = key.format_id

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _value_content(self, record: SinkRecord, *, is_streaming: bool) -> RecordContent:
        # Order matters: shape, then null policy, then schema name
        value, schema = record.value, record.value_schema

        if value is not None and not isinstance(value, (RecordContent, Struct)):
            raise RecordValidationError(
                ErrorCode.WRONG_VALUE_TYPE,
                f"Value must be record content or a struct, got {type(value).__name__}",
            )

        if value is None or schema is None:
            if self._config.behavior_on_null is BehaviorOnNull.IGNORE:
                raise RecordValidationError(
                    ErrorCode.NULL_VALUE_IGNORED,
                    "Null value rejected by behavior_on_null=ignore",
                )
            logger.debug("tombstone_loaded_as_empty_content", topic=record.topic, offset=record.offset)
            return RecordContent.empty()

        if isinstance(value, Struct):
            if not schema.name:
                raise RecordValidationError(
                    ErrorCode.WRONG_VALUE_SCHEMA,
                    "Struct values require a named value schema",
                )
            return RecordContent.from_value(schema, value, is_streaming)

        if schema.name != JSON_CONTENT_SCHEMA_NAME:
            raise RecordValidationError(
                ErrorCode.WRONG_VALUE_SCHEMA,
                f"Record-content values require the {JSON_CONTENT_SCHEMA_NAME} schema, "
                f"got {schema.name!r}",
            )
        return value

    def _metadata(self, record: SinkRecord, content: RecordContent, *, is_streaming: bool) -> dict[str, Any]:
        flags = self._config.metadata
        meta: dict[str, Any] = {}
        if not flags.all:
            # the key is still validated even when nothing is emitted
            self.put_key(record, {}, is_streaming)
            return meta

        if flags.offset_and_partition:
            meta[OFFSET] = record.offset
            meta[PARTITION] = record.partition
        if flags.topic:
            meta[TOPIC] = record.topic
        if (
            flags.createtime
            and record.timestamp is not None
            and record.timestamp_type is not TimestampType.NO_TIMESTAMP_TYPE
        ):
            meta[record.timestamp_type.value] = record.timestamp

        self.put_key(record, meta, is_streaming)

        if content.format_id != NON_FORMAT_ID:
            meta[SCHEMA_ID] = content.format_id
        if record.headers:
            meta[HEADERS] = {
                name: convert_to_json(None, value, is_streaming) for name, value in record.headers.items()
            }
        return meta


def _as_text(node: JsonNode) -> str | None:
    if node is None:
        return None
    if isinstance(node, str):
        return node
    return dumps_node(node)
