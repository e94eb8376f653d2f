"""Markup parsing and expression evaluation."""

from .lexer import MarkupLexer, Token
from .conditions import (
    Condition,
    ConditionInterpreter,
    ConditionParser,
    ConditionSplitter,
    LogicalEvaluator,
    LogicalOperator,
    is_truthy,
)
from .functions import FilterRegistry, StandardFilters
from .context import Context, JSONPathEngine
from .variable import AutoEscapePolicy, FilterChainParser, FilterInvocation, Variable

__all__ = [
    "MarkupLexer",
    "Token",
    "Condition",
    "ConditionInterpreter",
    "ConditionParser",
    "ConditionSplitter",
    "LogicalEvaluator",
    "LogicalOperator",
    "is_truthy",
    "FilterRegistry",
    "StandardFilters",
    "Context",
    "JSONPathEngine",
    "AutoEscapePolicy",
    "FilterChainParser",
    "FilterInvocation",
    "Variable",
]
