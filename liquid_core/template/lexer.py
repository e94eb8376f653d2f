"""
Scanner for tag and variable markup.

Turns markup such as ``user.name | truncate: 10, '...'`` or
``a == 'x' and b contains "y"`` into a flat token list. Quoted strings are
always a single token, so separators inside them never split anything.

Token types:
- STRING: quoted literal, value keeps its quotes
- WORD: bare operand (number, variable path, range, keyword)
- COMPARATOR: ==, !=, <>, <, >, <=, >=, contains
- PIPE, COMMA, COLON: separators
- EOF: end of markup
"""

from dataclasses import dataclass
from typing import List

from ..errors import LiquidSyntaxError


STRING = "STRING"
WORD = "WORD"
COMPARATOR = "COMPARATOR"
PIPE = "PIPE"
COMMA = "COMMA"
COLON = "COLON"
EOF = "EOF"

SEPARATORS = {"|": PIPE, ",": COMMA, ":": COLON}
TWO_CHAR_COMPARATORS = ("==", "!=", "<>", "<=", ">=")
ONE_CHAR_COMPARATORS = ("<", ">")
WORD_COMPARATORS = {"contains"}

# Characters that end a bare word
WORD_DELIMITERS = set("|,:'\"=!<>")
QUOTES = ("'", '"')


@dataclass(frozen=True)
class Token:
    """
    A lexical token.

    Attributes:
        type: One of the token type constants of this module
        value: Source text of the token
        position: Offset of the first character in the markup
    """
    type: str
    value: str
    position: int

    @property
    def end(self) -> int:
        return self.position + len(self.value)

    def __repr__(self):
        return f"Token({self.type}, '{self.value}', pos={self.position})"


class MarkupLexer:
    """Splits markup into tokens, skipping whitespace."""

    def tokenize(self, text: str) -> List[Token]:
        """
        Tokenize markup.

        Args:
            text: Raw markup

        Returns:
            Token list terminated by an EOF token

        Raises:
            LiquidSyntaxError: On an unterminated quote or bracket, or a stray '=' / '!'
        """
        tokens: List[Token] = []
        position = 0
        length = len(text)

        while position < length:
            char = text[position]

            if char.isspace():
                position += 1
                continue

            if char in QUOTES:
                end = self._scan_string(text, position)
                tokens.append(Token(STRING, text[position:end], position))
                position = end
                continue

            if char in SEPARATORS:
                tokens.append(Token(SEPARATORS[char], char, position))
                position += 1
                continue

            pair = text[position:position + 2]
            if pair in TWO_CHAR_COMPARATORS:
                tokens.append(Token(COMPARATOR, pair, position))
                position += 2
                continue
            if char in ONE_CHAR_COMPARATORS:
                tokens.append(Token(COMPARATOR, char, position))
                position += 1
                continue
            if char in WORD_DELIMITERS:
                raise LiquidSyntaxError(f"Unexpected character '{char}'", text, position)

            end = self._scan_word(text, position)
            value = text[position:end]
            token_type = COMPARATOR if value in WORD_COMPARATORS else WORD
            tokens.append(Token(token_type, value, position))
            position = end

        tokens.append(Token(EOF, "", position))
        return tokens

    @staticmethod
    def _scan_string(text: str, start: int) -> int:
        """Return the offset just past the quote closing the string at start."""
        close = text.find(text[start], start + 1)
        if close == -1:
            raise LiquidSyntaxError("Unterminated string", text, start)
        return close + 1

    def _scan_word(self, text: str, start: int) -> int:
        """Return the offset just past the bare word starting at start."""
        position = start
        length = len(text)

        while position < length:
            char = text[position]
            if char.isspace() or char in WORD_DELIMITERS:
                break
            if char == "[":
                position = self._scan_brackets(text, position)
                continue
            position += 1

        return position

    def _scan_brackets(self, text: str, start: int) -> int:
        """Skip a [...] lookup, honouring nested brackets and quotes."""
        depth = 0
        position = start
        length = len(text)

        while position < length:
            char = text[position]
            if char in QUOTES:
                position = self._scan_string(text, position)
                continue
            if char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
                if depth == 0:
                    return position + 1
            position += 1

        raise LiquidSyntaxError("Unterminated '['", text, start)
