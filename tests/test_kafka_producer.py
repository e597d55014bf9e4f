"""Tests for tessera_sink.kafka_producer."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from tessera_sink.config import KafkaConfig
from tessera_sink.kafka_producer import KafkaProducerWrapper
from tessera_sink.models import DeadLetterEnvelope


@pytest.fixture
def wrapper(kafka_config: KafkaConfig) -> KafkaProducerWrapper:
    return KafkaProducerWrapper(kafka_config)


@pytest.fixture
def envelope() -> DeadLetterEnvelope:
    return DeadLetterEnvelope(
        topic="orders",
        partition=3,
        offset=11,
        raw_value=b"{bad",
        task_name="test-task",
        error="boom",
        error_code="0010",
    )


class TestKafkaProducerWrapper:
    @pytest.mark.asyncio
    async def test_start_creates_producer(self, wrapper: KafkaProducerWrapper):
        with patch("tessera_sink.kafka_producer.AIOKafkaProducer") as MockProducer:
            mock_instance = AsyncMock()
            MockProducer.return_value = mock_instance
            await wrapper.start()
            MockProducer.assert_called_once_with(
                bootstrap_servers="localhost:9092",
                acks="all",
                compression_type="gzip",
            )
            mock_instance.start.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stop_when_not_started(self, wrapper: KafkaProducerWrapper):
        await wrapper.stop()

    @pytest.mark.asyncio
    async def test_stop_calls_producer_stop(self, wrapper: KafkaProducerWrapper):
        with patch("tessera_sink.kafka_producer.AIOKafkaProducer") as MockProducer:
            mock_instance = AsyncMock()
            MockProducer.return_value = mock_instance
            await wrapper.start()
            await wrapper.stop()
            mock_instance.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_send_dead_letter(
        self, wrapper: KafkaProducerWrapper, envelope: DeadLetterEnvelope
    ):
        with patch("tessera_sink.kafka_producer.AIOKafkaProducer") as MockProducer:
            mock_instance = AsyncMock()
            MockProducer.return_value = mock_instance
            await wrapper.start()

            await wrapper.send_dead_letter(envelope)

            mock_instance.send_and_wait.assert_awaited_once()
            call_args = mock_instance.send_and_wait.call_args
            assert call_args[0][0] == "dead-letter"
            parsed = json.loads(call_args[1]["value"])
            assert parsed["task_name"] == "test-task"
            assert parsed["error"] == "boom"
            assert parsed["error_code"] == "0010"
            assert parsed["offset"] == 11
            assert call_args[1]["key"] == b"orders-3"

    @pytest.mark.asyncio
    async def test_send_dead_letter_not_started_raises(
        self, wrapper: KafkaProducerWrapper, envelope: DeadLetterEnvelope
    ):
        with pytest.raises(AssertionError, match="Producer not started"):
            await wrapper.send_dead_letter(envelope)
