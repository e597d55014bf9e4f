"""Tessera sink: record normalization for columnar table loading.

Public API re-exported here for convenience::

    from tessera_sink import RecordContent, RecordService, SinkRecord
"""

from .column_names import format_column_name
from .config import (
    KafkaConfig,
    LoggingConfig,
    MetadataConfig,
    RecordServiceConfig,
    RetryConfig,
    SinkTaskConfig,
)
from .content import NON_FORMAT_ID, BrokenContent, ParsedContent, RecordContent
from .converter import convert_to_json, dumps_node
from .dead_letter import DeadLetterHandler
from .errors import (
    ContentAccessError,
    ConversionError,
    ErrorCode,
    ErrorKind,
    RecordError,
    RecordValidationError,
)
from .interface import RowWriter
from .json_converter import JSON_CONTENT_SCHEMA, JSON_CONTENT_SCHEMA_NAME, JsonRecordConverter
from .kafka_producer import KafkaProducerWrapper
from .logging import bind_record_context, setup_logging
from .models import (
    BehaviorOnNull,
    DeadLetterEnvelope,
    IngestionMode,
    SchemaAndValue,
    SinkRecord,
    TaskStatus,
    TimestampType,
)
from .record_service import DEFAULT_CUSTOM_COLUMNS, CustomColumn, RecordService
from .retry import with_retry
from .task import SinkTask

__all__ = [
    "BehaviorOnNull",
    "BrokenContent",
    "ContentAccessError",
    "ConversionError",
    "CustomColumn",
    "DEFAULT_CUSTOM_COLUMNS",
    "DeadLetterEnvelope",
    "DeadLetterHandler",
    "ErrorCode",
    "ErrorKind",
    "IngestionMode",
    "JSON_CONTENT_SCHEMA",
    "JSON_CONTENT_SCHEMA_NAME",
    "JsonRecordConverter",
    "KafkaConfig",
    "KafkaProducerWrapper",
    "LoggingConfig",
    "MetadataConfig",
    "NON_FORMAT_ID",
    "ParsedContent",
    "RecordContent",
    "RecordError",
    "RecordService",
    "RecordServiceConfig",
    "RecordValidationError",
    "RetryConfig",
    "RowWriter",
    "SchemaAndValue",
    "SinkRecord",
    "SinkTask",
    "SinkTaskConfig",
    "TaskStatus",
    "TimestampType",
    "bind_record_context",
    "convert_to_json",
    "dumps_node",
    "format_column_name",
    "setup_logging",
    "with_retry",
]
