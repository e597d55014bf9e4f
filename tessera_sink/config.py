"""Sink configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via env vars,
which is the natural config mechanism in Kubernetes.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from .models import BehaviorOnNull, IngestionMode


class MetadataConfig(BaseSettings):
    """Which fields go into the row metadata object."""

    model_config = {"env_prefix": "METADATA_"}

    all: bool = Field(default=True, description="Emit metadata at all")
    topic: bool = Field(default=True, description="Include the source topic")
    offset_and_partition: bool = Field(
        default=True,
        description="Include the source offset and partition",
    )
    createtime: bool = Field(
        default=True,
        description="Include the record timestamp (CreateTime / LogAppendTime)",
    )


class RecordServiceConfig(BaseSettings):
    """Row-building behaviour shared by the bulk and streaming paths."""

    model_config = {"env_prefix": "RECORDS_"}

    schematization_enabled: bool = Field(
        default=False,
        description="Explode top-level fields into their own streaming columns",
    )
    behavior_on_null: BehaviorOnNull = Field(
        default=BehaviorOnNull.DEFAULT,
        description="Tombstone policy: 'default' loads {}, 'ignore' rejects the record",
    )
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)


class KafkaConfig(BaseSettings):
    """Kafka consumer and dead-letter producer settings."""

    model_config = {"env_prefix": "KAFKA_"}

    bootstrap_servers: str = Field(
        default="localhost:9092",
        description="Comma-separated Kafka bootstrap servers",
    )
    source_topics: list[str] = Field(
        default_factory=lambda: ["events"],
        description="Topics to consume records from",
    )
    consumer_group: str = Field(
        default="tessera-sink",
        description="Kafka consumer group ID",
    )
    auto_offset_reset: str = Field(
        default="earliest",
        description="Where to start when the group has no committed offset",
    )
    dead_letter_topic: str = Field(
        default="tessera-dlq",
        description="Topic for records that could not be loaded",
    )
    producer_acks: str = Field(
        default="all",
        description="Producer acknowledgement level",
    )
    producer_compression: str = Field(
        default="gzip",
        description="Compression codec for produced messages",
    )


class RetryConfig(BaseSettings):
    """Retry / backoff settings driven by Tenacity."""

    model_config = {"env_prefix": "RETRY_"}

    max_attempts: int = Field(default=5, description="Maximum delivery attempts per row")
    initial_wait_seconds: float = Field(
        default=1.0,
        description="Initial backoff wait in seconds",
    )
    max_wait_seconds: float = Field(
        default=60.0,
        description="Maximum backoff wait in seconds",
    )
    multiplier: float = Field(default=2.0, description="Exponential backoff multiplier")


class LoggingConfig(BaseSettings):
    """structlog output settings."""

    model_config = {"env_prefix": "LOG_"}

    render_json: bool = Field(
        default=True,
        description="JSON lines (production) or console rendering (development)",
    )
    level: str = Field(default="INFO", description="Root log level name")


class SinkTaskConfig(BaseSettings):
    """Root configuration for a sink task instance.

    Nested configs are populated from their own env-var prefixes.
    """

    model_config = {"env_prefix": "SINK_"}

    name: str = Field(description="Unique task name (e.g. orders-streaming)")
    ingestion_mode: IngestionMode = Field(
        default=IngestionMode.STREAMING,
        description="Build staged-file rows ('bulk') or channel rows ('streaming')",
    )

    records: RecordServiceConfig = Field(default_factory=RecordServiceConfig)
    kafka: KafkaConfig = Field(default_factory=KafkaConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
