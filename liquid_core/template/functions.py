"""
Filters for variable output.

A FilterRegistry maps filter names to callables invoked as
``func(value, *args)``. Callables are validated when registered; arguments
are checked against the callable's signature on every call.
"""

import html
import inspect
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Dict, List, Sequence

from dateutil import parser as date_parser

from ..errors import FilterArgumentError, UnknownFilterError


logger = logging.getLogger(__name__)

FilterFunction = Callable[..., Any]

# Function to get current datetime - can be overridden in tests
_get_current_datetime: Callable[[], datetime] = lambda: datetime.now()


class FilterRegistry:
    """Explicit mapping from filter name to filter callable."""

    def __init__(self):
        self._filters: Dict[str, FilterFunction] = {}
        self._signatures: Dict[str, inspect.Signature] = {}

    @classmethod
    def default(cls) -> "FilterRegistry":
        """Registry pre-loaded with StandardFilters."""
        registry = cls()
        for name in StandardFilters.NAMES:
            registry.register(name, getattr(StandardFilters, name))
        return registry

    def register(self, name: str, func: FilterFunction) -> None:
        """
        Register a filter.

        Args:
            name: Filter name as written in markup
            func: Callable taking the piped value as its first positional argument

        Raises:
            ValueError: If name is not an identifier or func cannot take a piped value
        """
        if not name.isidentifier():
            raise ValueError(f"Invalid filter name: {name!r}")
        if not callable(func):
            raise ValueError(f"Filter '{name}' is not callable")

        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            # Some builtins expose no signature; accept them unchecked
            signature = None

        if signature is not None and not self._accepts_input(signature):
            raise ValueError(f"Filter '{name}' must accept the piped value as a positional argument")

        self._filters[name] = func
        if signature is not None:
            self._signatures[name] = signature
        else:
            self._signatures.pop(name, None)

    def get(self, name: str) -> FilterFunction:
        if name not in self._filters:
            raise UnknownFilterError(name)
        return self._filters[name]

    def invoke(self, name: str, value: Any, args: Sequence[Any]) -> Any:
        """Apply filter name to value with positional args."""
        func = self.get(name)

        signature = self._signatures.get(name)
        if signature is not None:
            try:
                signature.bind(value, *args)
            except TypeError as e:
                raise FilterArgumentError(f"Filter '{name}' called with {len(args)} argument(s): {e}") from e

        return func(value, *args)

    def names(self) -> List[str]:
        return sorted(self._filters)

    def __contains__(self, name: str) -> bool:
        return name in self._filters

    @staticmethod
    def _accepts_input(signature: inspect.Signature) -> bool:
        for param in signature.parameters.values():
            if param.kind in (
                inspect.Parameter.POSITIONAL_ONLY,
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
                inspect.Parameter.VAR_POSITIONAL,
            ):
                return True
        return False


def _to_number(value: Any) -> Any:
    """Coerce numeric strings for arithmetic filters."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    if value is None:
        return 0
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError as e:
        raise FilterArgumentError(f"Expected a number, got {value!r}") from e


class StandardFilters:
    """Built-in filters registered by FilterRegistry.default()."""

    NAMES = (
        "escape", "escape_once", "raw", "newline_to_br",
        "upcase", "downcase", "capitalize", "strip",
        "append", "prepend", "truncate", "size", "default",
        "join", "first", "last", "plus", "minus", "times", "date",
    )

    @staticmethod
    def escape(value: Any) -> Any:
        """HTML-escape strings; other values pass through."""
        if isinstance(value, str):
            return html.escape(value)
        return value

    @staticmethod
    def escape_once(value: Any) -> Any:
        """Escape without double-escaping existing entities."""
        if isinstance(value, str):
            return html.escape(html.unescape(value))
        return value

    @staticmethod
    def raw(value: Any) -> Any:
        return value

    @staticmethod
    def newline_to_br(value: Any) -> Any:
        if isinstance(value, str):
            return value.replace("\n", "<br />\n")
        return value

    @staticmethod
    def upcase(value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    @staticmethod
    def downcase(value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value

    @staticmethod
    def capitalize(value: Any) -> Any:
        if isinstance(value, str):
            return value.capitalize()
        return value

    @staticmethod
    def strip(value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @staticmethod
    def append(value: Any, suffix: Any = "") -> str:
        return f"{'' if value is None else value}{'' if suffix is None else suffix}"

    @staticmethod
    def prepend(value: Any, prefix: Any = "") -> str:
        return f"{'' if prefix is None else prefix}{'' if value is None else value}"

    @staticmethod
    def truncate(value: Any, length: Any = 50, ending: Any = "...") -> Any:
        """Cut a string to length characters and add ending."""
        if not isinstance(value, str):
            return value
        if length is None:
            length = 50
        try:
            length = int(length)
        except (TypeError, ValueError) as e:
            raise FilterArgumentError(f"truncate length must be a number, got {length!r}") from e
        if len(value) > length:
            return value[:length] + ("" if ending is None else str(ending))
        return value

    @staticmethod
    def size(value: Any) -> int:
        if isinstance(value, (str, list, tuple, set, frozenset, Mapping)):
            return len(value)
        return 0

    @staticmethod
    def default(value: Any, fallback: Any = "") -> Any:
        if value is None or value is False or value == "" or value == [] or value == {}:
            return fallback
        return value

    @staticmethod
    def join(value: Any, glue: Any = " ") -> Any:
        if isinstance(value, (list, tuple)):
            return str(glue).join(str(item) for item in value)
        return value

    @staticmethod
    def first(value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return value[0] if value else None
        return None

    @staticmethod
    def last(value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return value[-1] if value else None
        return None

    @staticmethod
    def plus(value: Any, operand: Any) -> Any:
        return _to_number(value) + _to_number(operand)

    @staticmethod
    def minus(value: Any, operand: Any) -> Any:
        return _to_number(value) - _to_number(operand)

    @staticmethod
    def times(value: Any, operand: Any) -> Any:
        return _to_number(value) * _to_number(operand)

    @staticmethod
    def date(value: Any, format_str: Any = None) -> Any:
        """
        Format a date with a strftime pattern.

        Accepts datetimes, unix timestamps, "now"/"today" and any string
        python-dateutil can parse. Unparseable input is returned unchanged.

        Examples:
            >>> StandardFilters.date('2025-12-01', '%b %d, %Y')
            'Dec 01, 2025'
        """
        if not format_str:
            return value

        if isinstance(value, datetime):
            dt = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            dt = datetime.fromtimestamp(value)
        elif isinstance(value, str) and value.strip().lower() in ("now", "today"):
            dt = _get_current_datetime()
        elif isinstance(value, str):
            try:
                dt = date_parser.parse(value)
            except (ValueError, OverflowError):
                logger.debug("date filter could not parse %r", value)
                return value
        else:
            return value

        return dt.strftime(str(format_str))
