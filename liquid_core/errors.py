"""
Exceptions raised by the template core.

Parse-time problems surface as LiquidSyntaxError from constructors, so a
template fails before any output is produced. Render-time problems are raised
by the Context and propagate out of render() unchanged.
"""

from typing import Optional


class LiquidError(Exception):
    """Base class for all template errors."""


class LiquidSyntaxError(LiquidError):
    """
    Malformed tag or variable markup.

    Attributes:
        markup: The offending markup fragment, when known
        position: Offset of the problem inside markup, when known
    """

    def __init__(self, message: str, markup: Optional[str] = None, position: Optional[int] = None):
        self.markup = markup
        self.position = position
        if markup is not None:
            message = f"{message}: {markup!r}"
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)


class ContextError(LiquidError):
    """Invalid scope manipulation on a Context."""


class UndefinedVariableError(LiquidError, LookupError):
    """A variable path did not resolve in strict mode."""

    def __init__(self, expression: str):
        self.expression = expression
        super().__init__(f"Undefined variable '{expression}'")


class UnknownFilterError(LiquidError, LookupError):
    """A filter name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown filter '{name}'")


class FilterArgumentError(LiquidError):
    """A filter was invoked with arguments its signature does not accept."""


class ConditionError(LiquidError):
    """Operands of a condition cannot be compared."""
