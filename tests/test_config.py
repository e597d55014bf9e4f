"""Tests for tessera_sink.config."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tessera_sink.config import (
    KafkaConfig,
    LoggingConfig,
    MetadataConfig,
    RecordServiceConfig,
    RetryConfig,
    SinkTaskConfig,
)
from tessera_sink.models import BehaviorOnNull, IngestionMode


class TestMetadataConfig:
    def test_defaults(self):
        cfg = MetadataConfig()
        assert cfg.all and cfg.topic and cfg.offset_and_partition and cfg.createtime

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("METADATA_CREATETIME", "false")
        cfg = MetadataConfig()
        assert cfg.createtime is False
        assert cfg.topic is True


class TestRecordServiceConfig:
    def test_defaults(self):
        cfg = RecordServiceConfig()
        assert cfg.schematization_enabled is False
        assert cfg.behavior_on_null is BehaviorOnNull.DEFAULT
        assert isinstance(cfg.metadata, MetadataConfig)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("RECORDS_SCHEMATIZATION_ENABLED", "true")
        monkeypatch.setenv("RECORDS_BEHAVIOR_ON_NULL", "ignore")
        cfg = RecordServiceConfig()
        assert cfg.schematization_enabled is True
        assert cfg.behavior_on_null is BehaviorOnNull.IGNORE

    def test_rejects_unknown_null_behavior(self):
        with pytest.raises(ValidationError):
            RecordServiceConfig(behavior_on_null="drop")


class TestKafkaConfig:
    def test_defaults(self):
        cfg = KafkaConfig()
        assert cfg.bootstrap_servers == "localhost:9092"
        assert cfg.source_topics == ["events"]
        assert cfg.consumer_group == "tessera-sink"
        assert cfg.dead_letter_topic == "tessera-dlq"
        assert cfg.producer_acks == "all"
        assert cfg.producer_compression == "gzip"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("KAFKA_BOOTSTRAP_SERVERS", "envbroker:9092")
        monkeypatch.setenv("KAFKA_SOURCE_TOPICS", '["orders","payments"]')
        cfg = KafkaConfig()
        assert cfg.bootstrap_servers == "envbroker:9092"
        assert cfg.source_topics == ["orders", "payments"]


class TestRetryConfig:
    def test_defaults(self):
        cfg = RetryConfig()
        assert cfg.max_attempts == 5
        assert cfg.initial_wait_seconds == 1.0
        assert cfg.max_wait_seconds == 60.0
        assert cfg.multiplier == 2.0

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "7")
        monkeypatch.setenv("RETRY_INITIAL_WAIT_SECONDS", "0.5")
        cfg = RetryConfig()
        assert cfg.max_attempts == 7
        assert cfg.initial_wait_seconds == 0.5


class TestLoggingConfig:
    def test_defaults(self):
        cfg = LoggingConfig()
        assert cfg.render_json is True
        assert cfg.level == "INFO"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_RENDER_JSON", "false")
        assert LoggingConfig().render_json is False


class TestSinkTaskConfig:
    def test_construction_with_name(self):
        cfg = SinkTaskConfig(name="orders-streaming")
        assert cfg.name == "orders-streaming"
        assert cfg.ingestion_mode is IngestionMode.STREAMING
        assert isinstance(cfg.records, RecordServiceConfig)
        assert isinstance(cfg.kafka, KafkaConfig)
        assert isinstance(cfg.retry, RetryConfig)
        assert isinstance(cfg.logging, LoggingConfig)

    def test_nested_overrides(self):
        cfg = SinkTaskConfig(
            name="orders-bulk",
            ingestion_mode=IngestionMode.BULK,
            kafka=KafkaConfig(bootstrap_servers="custom:9092"),
            retry=RetryConfig(max_attempts=10),
        )
        assert cfg.kafka.bootstrap_servers == "custom:9092"
        assert cfg.retry.max_attempts == 10

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SINK_NAME", "env-task")
        monkeypatch.setenv("SINK_INGESTION_MODE", "bulk")
        cfg = SinkTaskConfig()
        assert cfg.name == "env-task"
        assert cfg.ingestion_mode is IngestionMode.BULK

    def test_name_required(self, monkeypatch):
        monkeypatch.delenv("SINK_NAME", raising=False)
        with pytest.raises(ValidationError):
            SinkTaskConfig()
