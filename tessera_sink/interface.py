"""RowWriter: the ABC every destination transport implements."""

from __future__ import annotations

import abc
from typing import Any

from .models import SinkRecord


class RowWriter(abc.ABC):
    """Destination for processed rows.

    In bulk mode *row* is the staged-file text of one record; a writer
    batches these into upload files. In streaming mode *row* is the
    column → value map appended to an ingestion channel. Writers may raise
    on transient failures; the task retries and finally dead-letters.
    """

    @abc.abstractmethod
    async def write(self, record: SinkRecord, row: str | dict[str, Any]) -> None:
        """Hand one processed row to the destination."""
        ...

    async def flush(self) -> None:
        """Push buffered rows to the destination.

        Called once when the task stops. Override for writers that batch;
        the default is a no-op.
        """
        return None
