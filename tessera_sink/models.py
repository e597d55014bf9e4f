"""Data models for the sink: inbound records, policies and dead-letter envelopes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, Field

from tessera_schema import Schema


class BehaviorOnNull(str, Enum):
    """What to do with a tombstone (a record whose value is null)."""

    DEFAULT = "default"
    IGNORE = "ignore"


class IngestionMode(str, Enum):
    """Delivery path for processed rows."""

    BULK = "bulk"
    STREAMING = "streaming"


class TimestampType(str, Enum):
    """Kafka timestamp semantics; the value doubles as the metadata key."""

    NO_TIMESTAMP_TYPE = "NoTimestampType"
    CREATE_TIME = "CreateTime"
    LOG_APPEND_TIME = "LogAppendTime"


class TaskStatus(str, Enum):
    """Runtime status of a sink task."""

    STARTING = "starting"
    RUNNING = "running"
    DEGRADED = "degraded"
    STOPPING = "stopping"
    STOPPED = "stopped"


class SchemaAndValue(NamedTuple):
    schema: Schema | None
    value: Any


@dataclass(frozen=True)
class SinkRecord:
    """One record delivered from a topic partition, after deserialization.

    ``key`` and ``value`` are whatever the deserializers produced: a
    :class:`~tessera_sink.content.RecordContent`, a
    :class:`~tessera_schema.Struct`, a plain string, or ``None``.
    """

    topic: str
    partition: int
    key_schema: Schema | None
    key: Any
    value_schema: Schema | None
    value: Any
    offset: int
    timestamp: int | None = None
    timestamp_type: TimestampType = TimestampType.NO_TIMESTAMP_TYPE
    headers: dict[str, Any] = field(default_factory=dict)


class DeadLetterEnvelope(BaseModel):
    """A record the sink could not load, with enough context to replay it."""

    model_config = {"ser_json_bytes": "base64"}

    topic: str = Field(description="Source topic of the failed record")
    partition: int = Field(description="Source partition of the failed record")
    offset: int = Field(description="Source offset of the failed record")
    raw_key: bytes | None = Field(default=None, description="Original key bytes")
    raw_value: bytes | None = Field(default=None, description="Original value bytes, unmodified")
    task_name: str = Field(description="Sink task that rejected the record")
    error: str = Field(description="Final error message")
    error_code: str | None = Field(
        default=None,
        description="Stable RecordError code, absent for delivery failures",
    )
    attempts: int = Field(default=1, description="Total delivery attempts made")
    failed_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the record was routed to dead-letter (UTC)",
    )
