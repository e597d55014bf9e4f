"""Async Kafka producer for the dead-letter topic."""

from __future__ import annotations

from aiokafka import AIOKafkaProducer
import structlog

from .config import KafkaConfig
from .models import DeadLetterEnvelope

logger = structlog.get_logger()


class KafkaProducerWrapper:
    """Thin async wrapper around :class:`AIOKafkaProducer`.

    Serializes :class:`DeadLetterEnvelope` models to JSON and keys them by
    source position so replays of one partition stay ordered.
    """

    def __init__(self, config: KafkaConfig) -> None:
        self._config = config
        self._producer: AIOKafkaProducer | None = None

    async def start(self) -> None:
        self._producer = AIOKafkaProducer(
            bootstrap_servers=self._config.bootstrap_servers,
            acks=self._config.producer_acks,
            compression_type=self._config.producer_compression,
        )
        await self._producer.start()
        logger.info("kafka_producer_started", servers=self._config.bootstrap_servers)

    async def stop(self) -> None:
        if self._producer is not None:
            await self._producer.stop()
            logger.info("kafka_producer_stopped")

    async def send_dead_letter(self, envelope: DeadLetterEnvelope) -> None:
        """Publish a dead-letter envelope to the dead-letter topic."""
        assert self._producer is not None, "Producer not started"
        value = envelope.model_dump_json().encode("utf-8")
        key = f"{envelope.topic}-{envelope.partition}".encode("utf-8")
        await self._producer.send_and_wait(
            self._config.dead_letter_topic,
            value=value,
            key=key,
        )
        logger.warning(
            "dead_letter_sent",
            topic=self._config.dead_letter_topic,
            source_topic=envelope.topic,
            source_offset=envelope.offset,
            error_code=envelope.error_code,
        )
