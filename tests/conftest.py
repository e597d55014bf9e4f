"""Shared test fixtures for the tessera_sink test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from tessera_schema import STRING_SCHEMA
from tessera_sink.config import (
    KafkaConfig,
    RecordServiceConfig,
    RetryConfig,
    SinkTaskConfig,
)
from tessera_sink.json_converter import JsonRecordConverter
from tessera_sink.models import SinkRecord

TOPIC = "test"
PARTITION = 0


@pytest.fixture
def json_converter() -> JsonRecordConverter:
    return JsonRecordConverter()


@pytest.fixture
def kafka_config() -> KafkaConfig:
    return KafkaConfig(
        bootstrap_servers="localhost:9092",
        source_topics=["events"],
        dead_letter_topic="dead-letter",
    )


@pytest.fixture
def retry_config() -> RetryConfig:
    return RetryConfig(
        max_attempts=3,
        initial_wait_seconds=0.01,
        max_wait_seconds=0.1,
        multiplier=2.0,
    )


@pytest.fixture
def task_config(kafka_config: KafkaConfig, retry_config: RetryConfig) -> SinkTaskConfig:
    return SinkTaskConfig(
        name="test-task",
        kafka=kafka_config,
        retry=retry_config,
        records=RecordServiceConfig(),
    )


@pytest.fixture
def record_factory(json_converter: JsonRecordConverter):
    """Factory building a SinkRecord from a JSON value string, with overrides."""

    def _make(value: str | None = '{"name":123}', **overrides: Any) -> SinkRecord:
        payload = value.encode("utf-8") if value is not None else None
        value_schema, content = json_converter.to_connect_data(TOPIC, payload)
        defaults: dict[str, Any] = dict(
            topic=TOPIC,
            partition=PARTITION,
            key_schema=STRING_SCHEMA,
            key="string",
            value_schema=value_schema,
            value=content,
            offset=PARTITION,
        )
        defaults.update(overrides)
        return SinkRecord(**defaults)

    return _make


@pytest.fixture
def mock_kafka_producer() -> AsyncMock:
    """A mock AIOKafkaProducer with async start/stop/send_and_wait."""
    producer = AsyncMock()
    producer.start = AsyncMock()
    producer.stop = AsyncMock()
    producer.send_and_wait = AsyncMock()
    return producer
