"""JSON deserialization boundary: raw message bytes → RecordContent."""

from __future__ import annotations

import json

import structlog

from tessera_schema import Schema, SchemaType

from .content import RecordContent
from .models import SchemaAndValue

logger = structlog.get_logger()

JSON_CONTENT_SCHEMA_NAME = "tessera.content.json"

JSON_CONTENT_SCHEMA = Schema(SchemaType.BYTES, optional=True, name=JSON_CONTENT_SCHEMA_NAME)
"""Marks a key or value whose payload is a :class:`RecordContent`."""


class JsonRecordConverter:
    """Stateless converter from JSON message bytes to record content.

    Bytes that are not valid UTF-8 JSON are not an error here: they become
    broken content carrying the original bytes, so the task can dead-letter
    them intact.
    """

    def to_connect_data(self, topic: str, payload: bytes | None) -> SchemaAndValue:
        if payload is None:
            return SchemaAndValue(JSON_CONTENT_SCHEMA, None)

        try:
            node = json.loads(payload.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning(
                "json_payload_unparseable",
                topic=topic,
                size_bytes=len(payload),
                error=str(exc),
            )
            return SchemaAndValue(JSON_CONTENT_SCHEMA, RecordContent.from_broken(payload))

        return SchemaAndValue(JSON_CONTENT_SCHEMA, RecordContent.from_node(node))
