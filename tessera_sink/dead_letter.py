"""Dead-letter handler that routes rejected records to the dead-letter topic."""

from __future__ import annotations

import structlog

from .errors import RecordError
from .kafka_producer import KafkaProducerWrapper
from .models import DeadLetterEnvelope, SinkRecord

logger = structlog.get_logger()


class DeadLetterHandler:
    """Wraps a rejected :class:`SinkRecord` and its original bytes in a
    :class:`DeadLetterEnvelope` and publishes it to the dead-letter topic.
    """

    def __init__(self, producer: KafkaProducerWrapper, task_name: str) -> None:
        self._producer = producer
        self._task_name = task_name

    async def send(
        self,
        record: SinkRecord,
        *,
        error: RecordError | str,
        raw_key: bytes | None = None,
        raw_value: bytes | None = None,
        attempts: int = 1,
    ) -> None:
        """Build a dead-letter envelope and publish it.

        *error* is either the :class:`RecordError` that rejected the record,
        whose code is carried along, or a plain message for delivery failures.
        """
        error_code = error.code.value if isinstance(error, RecordError) else None
        envelope = DeadLetterEnvelope(
            topic=record.topic,
            partition=record.partition,
            offset=record.offset,
            raw_key=raw_key,
            raw_value=raw_value,
            task_name=self._task_name,
            error=str(error),
            error_code=error_code,
            attempts=attempts,
        )
        await self._producer.send_dead_letter(envelope)
        logger.error(
            "record_dead_lettered",
            task=self._task_name,
            error=str(error),
            error_code=error_code,
            attempts=attempts,
        )
