"""Sink task that consumes records, builds rows and dead-letters rejects."""

from __future__ import annotations

import asyncio
import signal
import time
from typing import Any

import structlog
from aiokafka import AIOKafkaConsumer

from tessera_schema import STRING_SCHEMA

from .config import SinkTaskConfig
from .content import RecordContent
from .dead_letter import DeadLetterHandler
from .errors import RecordError
from .interface import RowWriter
from .json_converter import JsonRecordConverter
from .kafka_producer import KafkaProducerWrapper
from .logging import bind_record_context
from .models import IngestionMode, SinkRecord, TaskStatus, TimestampType
from .record_service import RecordService
from .retry import with_retry

logger = structlog.get_logger()

_TIMESTAMP_TYPES = {
    0: TimestampType.CREATE_TIME,
    1: TimestampType.LOG_APPEND_TIME,
}


class SinkTask:
    """Kafka consumer that turns each message into one destination row.

    Keys are read as UTF-8 text, values through
    :class:`JsonRecordConverter`. Broken payloads and records rejected by
    :class:`RecordService` go to the dead-letter topic with their original
    bytes; writer failures are retried and dead-lettered once exhausted.
    Offsets are committed after every message so a poison pill never
    blocks the partition.
    """

    def __init__(self, config: SinkTaskConfig, writer: RowWriter) -> None:
        self.config = config
        self.status: TaskStatus = TaskStatus.STARTING

        self._writer = writer
        self._service = RecordService(config.records)
        self._converter = JsonRecordConverter()
        self._producer = KafkaProducerWrapper(config.kafka)
        self._dead_letter = DeadLetterHandler(self._producer, config.name)
        self._consumer: AIOKafkaConsumer | None = None
        self._shutdown_event = asyncio.Event()

        self._records_loaded: int = 0
        self._records_dead_lettered: int = 0
        self._start_time: float = 0.0

    @property
    def records_loaded(self) -> int:
        return self._records_loaded

    @property
    def records_dead_lettered(self) -> int:
        return self._records_dead_lettered

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def run(self) -> None:
        """Start the consumer and dead-letter producer; process until shutdown."""
        self._start_time = time.monotonic()
        self._install_signal_handlers()

        kafka_cfg = self.config.kafka
        self._consumer = AIOKafkaConsumer(
            *kafka_cfg.source_topics,
            bootstrap_servers=kafka_cfg.bootstrap_servers,
            group_id=kafka_cfg.consumer_group,
            auto_offset_reset=kafka_cfg.auto_offset_reset,
            enable_auto_commit=False,
        )

        await self._producer.start()
        await self._consumer.start()
        logger.info(
            "sink_task_started",
            task=self.config.name,
            mode=self.config.ingestion_mode.value,
            topics=kafka_cfg.source_topics,
        )
        self.status = TaskStatus.RUNNING

        try:
            await self._consume_loop()
        except Exception:
            self.status = TaskStatus.DEGRADED
            logger.exception("sink_task_error", task=self.config.name)
            raise
        finally:
            self.status = TaskStatus.STOPPING
            await self._writer.flush()
            await self._consumer.stop()
            await self._producer.stop()
            self.status = TaskStatus.STOPPED
            logger.info(
                "sink_task_stopped",
                task=self.config.name,
                records_loaded=self._records_loaded,
                records_dead_lettered=self._records_dead_lettered,
                uptime_seconds=time.monotonic() - self._start_time,
            )

    # ------------------------------------------------------------------
    # Consume loop
    # ------------------------------------------------------------------

    async def _consume_loop(self) -> None:
        assert self._consumer is not None

        async for msg in self._consumer:
            if self._shutdown_event.is_set():
                break
            record = self.to_sink_record(msg)
            await self.put(record, raw_key=msg.key, raw_value=msg.value)
            await self._consumer.commit()

    def to_sink_record(self, msg: Any) -> SinkRecord:
        """Deserialize one consumer message into a :class:`SinkRecord`."""
        key = msg.key.decode("utf-8", errors="replace") if msg.key is not None else None
        value_schema, value = self._converter.to_connect_data(msg.topic, msg.value)
        return SinkRecord(
            topic=msg.topic,
            partition=msg.partition,
            key_schema=STRING_SCHEMA if key is not None else None,
            key=key,
            value_schema=value_schema,
            value=value,
            offset=msg.offset,
            timestamp=msg.timestamp,
            timestamp_type=_TIMESTAMP_TYPES.get(msg.timestamp_type, TimestampType.NO_TIMESTAMP_TYPE),
            headers={name: _header_value(raw) for name, raw in (msg.headers or ())},
        )

    # ------------------------------------------------------------------
    # Per-record delivery
    # ------------------------------------------------------------------

    async def put(
        self,
        record: SinkRecord,
        *,
        raw_key: bytes | None = None,
        raw_value: bytes | None = None,
    ) -> None:
        """Build the row for *record* and deliver it, or dead-letter it."""
        bind_record_context(record)

        if isinstance(record.value, RecordContent) and record.value.is_broken():
            await self._reject(
                record,
                error="Value could not be parsed as JSON",
                raw_key=raw_key,
                raw_value=record.value.broken_bytes(),
            )
            return

        try:
            row = self._build_row(record)
        except RecordError as exc:
            await self._reject(record, error=exc, raw_key=raw_key, raw_value=raw_value)
            return

        @with_retry(self.config.retry)
        async def _write() -> None:
            await self._writer.write(record, row)

        try:
            await _write()
        except Exception as exc:
            logger.error("row_delivery_failed_permanently", error=str(exc))
            await self._reject(
                record,
                error=str(exc),
                raw_key=raw_key,
                raw_value=raw_value,
                attempts=self.config.retry.max_attempts,
            )
            return

        self._records_loaded += 1
        logger.debug("record_loaded", mode=self.config.ingestion_mode.value)

    def _build_row(self, record: SinkRecord) -> str | dict[str, Any]:
        if self.config.ingestion_mode is IngestionMode.BULK:
            return self._service.process_for_bulk(record)
        return self._service.process_for_streaming(record)

    async def _reject(
        self,
        record: SinkRecord,
        *,
        error: RecordError | str,
        raw_key: bytes | None,
        raw_value: bytes | None,
        attempts: int = 1,
    ) -> None:
        await self._dead_letter.send(
            record,
            error=error,
            raw_key=raw_key,
            raw_value=raw_value,
            attempts=attempts,
        )
        self._records_dead_lettered += 1

    # ------------------------------------------------------------------
    # Signal handling
    # ------------------------------------------------------------------

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()

        def _handle(sig: signal.Signals) -> None:
            logger.info("shutdown_signal_received", signal=sig.name)
            self._shutdown_event.set()

        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, _handle, sig)


def _header_value(raw: bytes | None) -> str | bytes | None:
    if raw is None:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw
