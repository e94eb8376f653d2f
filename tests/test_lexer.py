"""Tests for the markup scanner."""

import pytest

from liquid_core import LiquidSyntaxError
from liquid_core.template.lexer import (
    COLON, COMMA, COMPARATOR, EOF, PIPE, STRING, WORD, MarkupLexer,
)


def types(text):
    return [token.type for token in MarkupLexer().tokenize(text)]


def values(text):
    return [token.value for token in MarkupLexer().tokenize(text)]


class TestMarkupLexer:
    """Tokenization of tag and variable markup."""

    def test_empty_markup(self):
        """Empty markup yields only EOF."""
        assert types("") == [EOF]
        assert types("   ") == [EOF]

    def test_condition_tokens(self):
        """Comparators split operands even without spaces."""
        assert types("a == 'x'") == [WORD, COMPARATOR, STRING, EOF]
        assert values("a>=1") == ["a", ">=", "1", ""]

    def test_contains_is_comparator(self):
        """The contains keyword is a comparator."""
        assert types("tags contains 'red'") == [WORD, COMPARATOR, STRING, EOF]

    def test_filter_tokens(self):
        """Separators are separate tokens."""
        assert types("x | truncate: 10, '...'") == [
            WORD, PIPE, WORD, COLON, WORD, COMMA, STRING, EOF
        ]

    def test_quoted_separators_stay_in_string(self):
        """Pipes, commas and keywords inside quotes do not split."""
        assert values("'a | b, c and d'") == ["'a | b, c and d'", ""]

    def test_brackets_are_part_of_word(self):
        """Bracket lookups, including quoted keys, stay in one word."""
        assert values("user['first name'].size") == ["user['first name'].size", ""]
        assert values("items[0]") == ["items[0]", ""]

    def test_positions(self):
        """Tokens record their source offsets."""
        tokens = MarkupLexer().tokenize("ab  | cd")
        assert [(t.position, t.end) for t in tokens[:3]] == [(0, 2), (4, 5), (6, 8)]

    def test_unterminated_string(self):
        """An unclosed quote is a syntax error."""
        with pytest.raises(LiquidSyntaxError):
            MarkupLexer().tokenize("a == 'oops")

    def test_unterminated_bracket(self):
        """An unclosed bracket is a syntax error."""
        with pytest.raises(LiquidSyntaxError):
            MarkupLexer().tokenize("items[0")

    def test_stray_equals(self):
        """A lone '=' is not a comparator."""
        with pytest.raises(LiquidSyntaxError):
            MarkupLexer().tokenize("a = b")
