"""
Render-time context: scoped variable storage, expression resolution and
filter invocation.

Expressions are resolved the Liquid way: literals (nil, booleans, quoted
strings, numbers, ranges) evaluate to themselves, anything else is a
variable path looked up through the scope stack.
"""

import logging
import re
from collections.abc import Mapping
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

from ..config import CompilerConfig
from ..errors import ContextError, LiquidSyntaxError, UndefinedVariableError
from .functions import FilterRegistry


logger = logging.getLogger(__name__)

INTEGER_RE = re.compile(r'^-?\d+$')
FLOAT_RE = re.compile(r'^-?\d+\.\d+$')
RANGE_RE = re.compile(r'^\((\S+?)\.\.(\S+?)\)$')
# Bare variable inside brackets, e.g. items[index]
BRACKET_VARIABLE_RE = re.compile(r'\[\s*([A-Za-z_][\w.]*)\s*\]')

NIL_LITERALS = ("", "nil", "null")


class JSONPathEngine:
    """Evaluates bracketed variable paths with jsonpath_ng."""

    @staticmethod
    def evaluate(expression: str, data: Any) -> List[Any]:
        """
        Evaluate a Liquid path like ``items[0].name`` against data.

        Returns:
            List of matching values
        """
        try:
            jsonpath_expr = jsonpath_parse(f"$.{expression}")
        except (JsonPathLexerError, JsonPathParserError) as e:
            raise LiquidSyntaxError("Invalid variable path", expression) from e

        return [match.value for match in jsonpath_expr.find(data)]


class Context:
    """Scope stack plus the filter registry used while rendering."""

    def __init__(
        self,
        assigns: Optional[Dict[str, Any]] = None,
        filters: Optional[FilterRegistry] = None,
        config: Optional[CompilerConfig] = None
    ):
        self.scopes: List[Dict[str, Any]] = [dict(assigns or {})]
        self.filters = filters or FilterRegistry.default()
        self.config = config or CompilerConfig()
        self.jsonpath = JSONPathEngine()

    # Scopes

    def push(self) -> None:
        self.scopes.insert(0, {})

    def pop(self) -> Dict[str, Any]:
        if len(self.scopes) == 1:
            raise ContextError("Cannot pop the outermost scope")
        return self.scopes.pop(0)

    @contextmanager
    def scope(self) -> Iterator["Context"]:
        """Push a scope for the duration of a with-block, popping it on any exit."""
        self.push()
        try:
            yield self
        finally:
            self.pop()

    def set(self, name: str, value: Any) -> None:
        self.scopes[0][name] = value

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __getitem__(self, expression: str) -> Any:
        return self.get(expression)

    def has_key(self, name: str) -> bool:
        return self._lookup(name)[1]

    # Resolution

    def get(self, expression: Optional[str]) -> Any:
        """
        Resolve an expression.

        Args:
            expression: Literal or variable path (e.g. "'text'", "42", "user.name")

        Returns:
            Resolved value; None for nil and, unless strict, for undefined variables

        Raises:
            UndefinedVariableError: For an undefined variable in strict mode
        """
        if expression is None:
            return None

        expr = expression.strip()

        if expr in NIL_LITERALS:
            return None
        if expr == "true":
            return True
        if expr == "false":
            return False

        # String literal
        if len(expr) >= 2 and expr[0] in ("'", '"') and expr[-1] == expr[0]:
            return expr[1:-1]

        # Numeric literals
        if INTEGER_RE.match(expr):
            return int(expr)
        if FLOAT_RE.match(expr):
            return float(expr)

        range_match = RANGE_RE.match(expr)
        if range_match:
            start = self._to_int(range_match.group(1))
            stop = self._to_int(range_match.group(2))
            return range(start, stop + 1)

        return self.variable(expr)

    def variable(self, path: str) -> Any:
        """Resolve a variable path through the scope stack."""
        if "[" in path:
            return self._bracket_path(path)

        parts = path.split(".")
        value, found = self._lookup(parts[0])
        if not found:
            return self._undefined(path)

        for part in parts[1:]:
            value, found = self._child(value, part)
            if not found:
                return self._undefined(path)

        return value

    # Filters

    def invoke(self, name: str, value: Any, args: Sequence[Any]) -> Any:
        """Apply a registered filter; unknown names raise UnknownFilterError."""
        logger.debug("Invoking filter '%s' with %d argument(s)", name, len(args))
        return self.filters.invoke(name, value, list(args))

    # Helpers

    def _lookup(self, name: str) -> Tuple[Any, bool]:
        for scope in self.scopes:
            if name in scope:
                return scope[name], True
        return None, False

    @staticmethod
    def _child(value: Any, key: str) -> Tuple[Any, bool]:
        """Step one path segment into value."""
        if isinstance(value, Mapping):
            if key in value:
                return value[key], True
            if key == "size":
                return len(value), True
            return None, False

        if isinstance(value, (list, tuple, str)):
            if key == "size":
                return len(value), True
            if key == "first":
                return (value[0] if value else None), True
            if key == "last":
                return (value[-1] if value else None), True
            return None, False

        if value is not None and not key.startswith("_") and hasattr(value, key):
            return getattr(value, key), True

        return None, False

    def _bracket_path(self, path: str) -> Any:
        root = re.split(r'[.\[]', path, maxsplit=1)[0]
        scope = next((s for s in self.scopes if root in s), None)
        if scope is None:
            return self._undefined(path)

        def replace_index(match: re.Match) -> str:
            index = self.get(match.group(1))
            if isinstance(index, int) and not isinstance(index, bool):
                return f"[{index}]"
            return f"['{index}']"

        results = self.jsonpath.evaluate(BRACKET_VARIABLE_RE.sub(replace_index, path), scope)
        if not results:
            return self._undefined(path)
        return results[0]

    def _to_int(self, expression: str) -> int:
        value = self.get(expression)
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise LiquidSyntaxError("Invalid range bound", expression) from e

    def _undefined(self, path: str) -> Any:
        if self.config.strict_variables:
            raise UndefinedVariableError(path)
        logger.debug("Variable '%s' is undefined", path)
        return None
