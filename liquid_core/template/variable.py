"""
Variable output: ``{{ user.name | upcase | truncate: 10, '...' }}``.

The markup is parsed once into a variable name and an ordered filter chain.
Filter arguments stay unresolved expressions and are looked up through the
Context on every render.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, TYPE_CHECKING

from ..config import CompilerConfig
from ..errors import LiquidSyntaxError
from .lexer import COLON, COMMA, EOF, PIPE, STRING, WORD, MarkupLexer, Token

if TYPE_CHECKING:
    from .context import Context


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterInvocation:
    """
    One filter in a chain.

    Attributes:
        name: Filter name
        arguments: Raw argument expressions, e.g. ("10", "'...'", "omission: '-'")
    """
    name: str
    arguments: Tuple[str, ...] = ()


class FilterChainParser:
    """Parses variable markup into a name and a filter chain."""

    def __init__(self, lexer: Optional[MarkupLexer] = None):
        self.lexer = lexer or MarkupLexer()

    def parse(self, markup: str) -> Tuple[str, List[FilterInvocation]]:
        """
        Parse variable markup.

        Args:
            markup: e.g. "x | escape | upcase: 'en'"

        Returns:
            Tuple of (name, filters) with filters in evaluation order

        Raises:
            LiquidSyntaxError: If there is no variable name or a filter is malformed
        """
        tokens = self.lexer.tokenize(markup)

        name = tokens[0]
        if not self._is_operand(name):
            raise LiquidSyntaxError("Missing variable name", markup)

        position = 1
        if tokens[position].type == EOF:
            return name.value, []
        if tokens[position].type != PIPE:
            raise LiquidSyntaxError(
                f"Expected '|' after variable name, got '{tokens[position].value}'",
                markup,
                tokens[position].position,
            )

        filters: List[FilterInvocation] = []
        while tokens[position].type == PIPE:
            invocation, position = self._parse_invocation(markup, tokens, position + 1)
            filters.append(invocation)

        if tokens[position].type != EOF:
            raise LiquidSyntaxError(
                f"Unexpected token '{tokens[position].value}'", markup, tokens[position].position
            )

        return name.value, filters

    def _parse_invocation(self, markup: str, tokens: List[Token], position: int) -> Tuple[FilterInvocation, int]:
        """Parse ``name [: arg, arg, ...]`` starting at position."""
        name = tokens[position]
        if name.type != WORD or not name.value.isidentifier():
            raise LiquidSyntaxError("Invalid filter name", markup, name.position)
        position += 1

        arguments: List[str] = []
        if tokens[position].type == COLON:
            argument, position = self._parse_argument(markup, tokens, position + 1)
            arguments.append(argument)
            while tokens[position].type == COMMA:
                argument, position = self._parse_argument(markup, tokens, position + 1)
                arguments.append(argument)

        return FilterInvocation(name=name.value, arguments=tuple(arguments)), position

    def _parse_argument(self, markup: str, tokens: List[Token], position: int) -> Tuple[str, int]:
        """Parse ``[label:] operand``; a label stays part of the raw expression."""
        first = tokens[position]

        if first.type == WORD and tokens[position + 1].type == COLON:
            operand = tokens[position + 2]
            if not self._is_operand(operand):
                raise LiquidSyntaxError(f"Missing value for argument '{first.value}'", markup, operand.position)
            return markup[first.position:operand.end], position + 3

        if not self._is_operand(first):
            raise LiquidSyntaxError("Missing filter argument", markup, first.position)
        return first.value, position + 1

    @staticmethod
    def _is_operand(token: Token) -> bool:
        return token.type in (STRING, WORD)


class AutoEscapePolicy:
    """Appends an escape filter unless the chain already opts out."""

    ESCAPE_FILTER = "escape"
    # Filters that either escape or deliberately emit raw HTML
    OPT_OUT_FILTERS = frozenset({"escape", "escape_once", "raw", "newline_to_br"})

    @classmethod
    def apply(cls, filters: Sequence[FilterInvocation]) -> List[FilterInvocation]:
        if any(invocation.name in cls.OPT_OUT_FILTERS for invocation in filters):
            return list(filters)
        return [*filters, FilterInvocation(name=cls.ESCAPE_FILTER)]


class Variable:
    """A parsed variable reference, rendered against a Context."""

    def __init__(
        self,
        markup: str,
        config: Optional[CompilerConfig] = None,
        parser: Optional[FilterChainParser] = None
    ):
        self.markup = markup
        self.config = config or CompilerConfig()

        name, filters = (parser or FilterChainParser()).parse(markup)
        if self.config.auto_escape:
            escaped = AutoEscapePolicy.apply(filters)
            if len(escaped) != len(filters):
                logger.debug("Auto-escape appended to variable '%s'", name)
            filters = escaped

        self._name = name
        self._filters = tuple(filters)

    @property
    def name(self) -> str:
        return self._name

    @property
    def filters(self) -> Tuple[FilterInvocation, ...]:
        return self._filters

    def render(self, context: 'Context') -> Any:
        """
        Resolve the variable and run it through its filter chain.

        Layout variables skip the first filter, so substituted content is not
        escaped twice while later filters still apply.

        Returns:
            The filtered value; integral floats come back as text like "3.0"
        """
        output = context.get(self._name)
        skip_first = self._name.strip() in self.config.layout_variable_names

        for index, invocation in enumerate(self._filters):
            if index == 0 and skip_first:
                continue
            args = [context.get(argument) for argument in invocation.arguments]
            output = context.invoke(invocation.name, output, args)

        return self.format_output(output)

    @staticmethod
    def format_output(output: Any) -> Any:
        if isinstance(output, float) and output.is_integer():
            return f"{output:,.1f}"
        return output

    def __repr__(self):
        return f"Variable({self.markup!r})"
