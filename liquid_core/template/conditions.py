"""
Condition parsing and evaluation for control-flow tags.

An expression such as ``a == '1' and b contains 'x' or c`` is split into
condition fragments joined by ``and`` / ``or``. Each fragment is parsed into
a Condition whose operands stay unresolved until render time. Groups are
formed left to right: ``and`` binds within a group, ``or`` starts a new one,
and the expression is true when any group is true. Parentheses are not
supported.
"""

import logging
import operator
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple, TYPE_CHECKING

from ..errors import ConditionError, LiquidSyntaxError
from .lexer import COMPARATOR, EOF, STRING, WORD, MarkupLexer, Token

if TYPE_CHECKING:
    from .context import Context


logger = logging.getLogger(__name__)


class LogicalOperator(Enum):
    """Connective joining two conditions."""
    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class Condition:
    """
    One parsed condition.

    Operands are unresolved expressions (literals, quoted strings or variable
    paths). Without an operator the condition tests the truthiness of left.
    """
    left: str
    operator: Optional[str] = None
    right: Optional[str] = None

    def __str__(self) -> str:
        if self.operator is None:
            return self.left
        return f"{self.left} {self.operator} {self.right}"


def is_truthy(value: Any) -> bool:
    """Only False and None are falsy; 0, "" and empty containers are truthy."""
    return value is not False and value is not None


class ConditionSplitter:
    """Splits an expression into condition fragments and connectives."""

    def __init__(self, lexer: Optional[MarkupLexer] = None):
        self.lexer = lexer or MarkupLexer()

    def split(self, expression: str) -> Tuple[List[str], List[LogicalOperator]]:
        """
        Split an expression on ``and`` / ``or`` outside quoted strings.

        A synthetic leading AND is prepended to the connectives, so both lists
        have the same length and connectives[0] is always AND.

        Args:
            expression: Raw tag markup, e.g. "a == 1 or b"

        Returns:
            Tuple of (fragments, connectives)

        Raises:
            LiquidSyntaxError: If the expression is empty
        """
        tokens = self.lexer.tokenize(expression)
        if tokens[0].type == EOF:
            raise LiquidSyntaxError("Empty condition", expression)

        fragments: List[str] = []
        connectives = [LogicalOperator.AND]
        current: List[Token] = []

        for token in tokens:
            if token.type == EOF:
                fragments.append(self._source_of(expression, current))
                break
            if token.type == WORD and token.value in ("and", "or"):
                fragments.append(self._source_of(expression, current))
                connectives.append(LogicalOperator(token.value))
                current = []
            else:
                current.append(token)

        return fragments, connectives

    @staticmethod
    def _source_of(expression: str, tokens: List[Token]) -> str:
        if not tokens:
            return ""
        return expression[tokens[0].position:tokens[-1].end]


class ConditionParser:
    """Parses one fragment into ``<operand> [<comparator> <operand>]``."""

    OPERATORS = ("==", "!=", "<>", "<", ">", "<=", ">=", "contains")

    def __init__(self, tag_name: str = "unless", lexer: Optional[MarkupLexer] = None):
        self.tag_name = tag_name
        self.lexer = lexer or MarkupLexer()

    def parse(self, fragment: str) -> Condition:
        """
        Parse a condition fragment.

        Raises:
            LiquidSyntaxError: If the fragment has no left operand, a comparator
                without a right operand, an unknown operator or trailing tokens
        """
        tokens = self.lexer.tokenize(fragment)

        left = tokens[0]
        if not self._is_operand(left):
            raise LiquidSyntaxError(self._syntax_message(), fragment)

        comparator = tokens[1]
        if comparator.type == EOF:
            return Condition(left=left.value)

        if comparator.type != COMPARATOR:
            if comparator.type == WORD:
                raise LiquidSyntaxError(f"Unknown operator '{comparator.value}'", fragment, comparator.position)
            raise LiquidSyntaxError(self._syntax_message(), fragment, comparator.position)

        right = tokens[2]
        if not self._is_operand(right):
            raise LiquidSyntaxError(
                f"Missing right operand for '{comparator.value}'", fragment, right.position
            )

        if tokens[3].type != EOF:
            raise LiquidSyntaxError(f"Unexpected token '{tokens[3].value}'", fragment, tokens[3].position)

        return Condition(left=left.value, operator=comparator.value, right=right.value)

    def parse_expression(self, expression: str, splitter: Optional[ConditionSplitter] = None) -> Tuple[List[Condition], List[LogicalOperator]]:
        """Split an expression and parse every fragment."""
        splitter = splitter or ConditionSplitter(self.lexer)
        fragments, connectives = splitter.split(expression)
        return [self.parse(fragment) for fragment in fragments], connectives

    def _syntax_message(self) -> str:
        return f"Syntax Error in tag '{self.tag_name}' - Valid syntax: {self.tag_name} [condition]"

    @staticmethod
    def _is_operand(token: Token) -> bool:
        return token.type in (STRING, WORD)


class LogicalEvaluator:
    """Combines condition results with AND-before-OR grouping."""

    @staticmethod
    def evaluate(
        conditions: Sequence[Condition],
        connectives: Sequence[LogicalOperator],
        interpret: Callable[[Condition], Any],
        truthy: Callable[[Any], bool] = is_truthy,
    ) -> bool:
        """
        Evaluate conditions left to right.

        Every condition is interpreted, in order, even after a group has
        already failed.

        Args:
            conditions: Parsed conditions
            connectives: Aligned connectives; connectives[0] is ignored for grouping
            interpret: Resolves a condition to a value
            truthy: Truthiness policy

        Returns:
            True if any AND-group is true
        """
        if not conditions or len(conditions) != len(connectives):
            raise ValueError(
                f"Expected matching non-empty conditions and connectives, "
                f"got {len(conditions)} and {len(connectives)}"
            )

        groups: List[bool] = []
        group_result = True

        for condition, connective in zip(conditions, connectives):
            truth = truthy(interpret(condition))
            if connective is LogicalOperator.AND:
                group_result = group_result and truth
            else:
                groups.append(group_result)
                group_result = truth

        groups.append(group_result)
        return any(groups)


class ConditionInterpreter:
    """Resolves condition operands through a Context and compares them."""

    ORDERING = {
        "<": operator.lt,
        ">": operator.gt,
        "<=": operator.le,
        ">=": operator.ge,
    }

    def interpret(self, condition: Condition, context: 'Context') -> Any:
        """Interpret a parsed Condition."""
        return self.interpret_condition(condition.left, condition.right, condition.operator, context)

    def interpret_condition(
        self,
        left: str,
        right: Optional[str],
        op: Optional[str],
        context: 'Context'
    ) -> Any:
        """
        Resolve operands and apply the comparison.

        Without an operator the resolved left value is returned as is, so the
        caller applies its own truthiness policy.
        """
        if op is None:
            return context.get(left)

        left_val = context.get(left)
        right_val = context.get(right)

        if op == "==":
            return self.equal_variables(left_val, right_val)
        if op in ("!=", "<>"):
            return not self.equal_variables(left_val, right_val)
        if op in self.ORDERING:
            return self.compare(left_val, right_val, op)
        if op == "contains":
            return self.contains(left_val, right_val)

        raise LiquidSyntaxError(f"Unknown operator '{op}'")

    @staticmethod
    def equal_variables(left: Any, right: Any) -> bool:
        return left == right

    def compare(self, left: Any, right: Any, op: str) -> bool:
        if left is None or right is None:
            return False
        try:
            return bool(self.ORDERING[op](left, right))
        except TypeError as e:
            raise ConditionError(
                f"Cannot compare {type(left).__name__} with {type(right).__name__} using '{op}'"
            ) from e

    @staticmethod
    def contains(haystack: Any, needle: Any) -> bool:
        if haystack is None or needle is None:
            return False
        if isinstance(haystack, str):
            return str(needle) in haystack
        if isinstance(haystack, (Mapping, list, tuple, set, frozenset, range)):
            return needle in haystack
        return False
