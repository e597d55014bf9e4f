"""Table column identifiers for schematized streaming rows."""

from __future__ import annotations

import json

IDENTIFIER_QUOTE = '"'


def format_column_name(name: str) -> str:
    """Return the quoted column identifier for a top-level field name.

    A name already wrapped in double quotes keeps its case (the
    case-sensitive opt-out); any other name is uppercased. The inner text is
    JSON-escaped so embedded quotes and control characters stay unambiguous.

    >>> format_column_name("AnSwEr")
    '"ANSWER"'
    >>> format_column_name('"NaMe"')
    '"NaMe"'
    """
    if len(name) >= 2 and name.startswith(IDENTIFIER_QUOTE) and name.endswith(IDENTIFIER_QUOTE):
        inner = name[1:-1]
    else:
        inner = name.upper()
    return f"{IDENTIFIER_QUOTE}{_escape(inner)}{IDENTIFIER_QUOTE}"


def _escape(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)[1:-1]
