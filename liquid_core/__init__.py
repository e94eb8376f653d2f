"""Condition evaluation and variable rendering core for Liquid templates."""

from .config import CompilerConfig, ConfigLoader
from .errors import (
    ConditionError,
    ContextError,
    FilterArgumentError,
    LiquidError,
    LiquidSyntaxError,
    UndefinedVariableError,
    UnknownFilterError,
)
from .rendering import Branch, BranchKind, UnlessBlock, render_all
from .template import (
    AutoEscapePolicy,
    Condition,
    ConditionInterpreter,
    ConditionParser,
    ConditionSplitter,
    Context,
    FilterChainParser,
    FilterInvocation,
    FilterRegistry,
    LogicalEvaluator,
    LogicalOperator,
    Variable,
    is_truthy,
)

__version__ = "1.0.0"

__all__ = [
    "CompilerConfig",
    "ConfigLoader",
    "ConditionError",
    "ContextError",
    "FilterArgumentError",
    "LiquidError",
    "LiquidSyntaxError",
    "UndefinedVariableError",
    "UnknownFilterError",
    "Branch",
    "BranchKind",
    "UnlessBlock",
    "render_all",
    "AutoEscapePolicy",
    "Condition",
    "ConditionInterpreter",
    "ConditionParser",
    "ConditionSplitter",
    "Context",
    "FilterChainParser",
    "FilterInvocation",
    "FilterRegistry",
    "LogicalEvaluator",
    "LogicalOperator",
    "Variable",
    "is_truthy",
]
