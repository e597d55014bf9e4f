"""RecordContent: a record payload that either parsed or is kept as raw bytes."""

from __future__ import annotations

import abc
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from tessera_schema import Schema

from .converter import JsonNode, convert_to_json
from .errors import ContentAccessError, ErrorCode

NON_FORMAT_ID = -1
"""Format id reported when the payload carries no schema-registry id."""


class RecordContent(abc.ABC):
    """Parsed-or-broken payload of one inbound record.

    Exactly one of the two variants exists for any payload:
    :class:`ParsedContent` holds canonical JSON nodes,
    :class:`BrokenContent` holds the bytes that failed to parse. Reading
    the other branch raises :class:`ContentAccessError`, so a broken payload
    can never be silently loaded as data.
    """

    format_id: int

    @abc.abstractmethod
    def is_broken(self) -> bool: ...

    @abc.abstractmethod
    def elements(self) -> tuple[JsonNode, ...]:
        """Canonical JSON nodes of a parsed payload (usually exactly one)."""

    @abc.abstractmethod
    def broken_bytes(self) -> bytes:
        """The original bytes of a payload that failed to parse."""

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @staticmethod
    def from_node(node: JsonNode, format_id: int = NON_FORMAT_ID) -> ParsedContent:
        return ParsedContent((node,), format_id)

    @staticmethod
    def from_nodes(nodes: Iterable[JsonNode], format_id: int = NON_FORMAT_ID) -> ParsedContent:
        return ParsedContent(tuple(nodes), format_id)

    @staticmethod
    def from_broken(raw: bytes) -> BrokenContent:
        return BrokenContent(bytes(raw))

    @staticmethod
    def empty() -> ParsedContent:
        """Content standing in for a missing payload: a single empty object."""
        return ParsedContent(({},), NON_FORMAT_ID)

    @staticmethod
    def from_value(schema: Schema | None, value: Any, is_streaming: bool = False) -> ParsedContent:
        """Convert a typed (or schemaless) value into parsed content."""
        return ParsedContent((convert_to_json(schema, value, is_streaming),), NON_FORMAT_ID)


@dataclass(frozen=True)
class ParsedContent(RecordContent):
    nodes: tuple[JsonNode, ...]
    format_id: int = NON_FORMAT_ID

    def __post_init__(self) -> None:
        if not self.nodes:
            raise ValueError("ParsedContent requires at least one node")

    def is_broken(self) -> bool:
        return False

    def elements(self) -> tuple[JsonNode, ...]:
        return self.nodes

    def broken_bytes(self) -> bytes:
        raise ContentAccessError(
            ErrorCode.ACCESS_PARSED_AS_BROKEN,
            "Parsed record content cannot be read as broken bytes",
        )


@dataclass(frozen=True)
class BrokenContent(RecordContent):
    raw: bytes
    format_id: int = NON_FORMAT_ID

    def is_broken(self) -> bool:
        return True

    def elements(self) -> tuple[JsonNode, ...]:
        raise ContentAccessError(
            ErrorCode.ACCESS_BROKEN_AS_PARSED,
            "Broken record content cannot be read as parsed data",
        )

    def broken_bytes(self) -> bytes:
        return self.raw
