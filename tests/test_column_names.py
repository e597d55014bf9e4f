"""Tests for tessera_sink.column_names."""

from __future__ import annotations

import pytest

from tessera_sink.column_names import format_column_name


class TestFormatColumnName:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("name", '"NAME"'),
            ("AnSwEr", '"ANSWER"'),
            ("already_UPPER", '"ALREADY_UPPER"'),
            ('"NaMe"', '"NaMe"'),
            ('"lower"', '"lower"'),
        ],
    )
    def test_quoting(self, name: str, expected: str):
        assert format_column_name(name) == expected

    def test_case_variants_collide_when_unquoted(self):
        assert format_column_name("Answer") == format_column_name("ANSWER")

    def test_quoted_names_stay_distinct(self):
        assert format_column_name('"Answer"') != format_column_name('"ANSWER"')

    def test_lone_quote_is_not_a_quoted_name(self):
        assert format_column_name('"') == '"\\""'

    def test_half_quoted_name_is_uppercased(self):
        assert format_column_name('"abc') == '"\\"ABC"'

    def test_embedded_quote_escaped(self):
        assert format_column_name('a"b') == '"A\\"B"'
