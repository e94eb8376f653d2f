"""
The unless block.

    {% unless user.admin %} Restricted {% else %} Welcome {% endunless %}

Branches are kept in an owned, append-only list. The compiler reports body
nodes through add_node(), which always appends to the most recently opened
branch. Guards are parsed as soon as a branch is opened, so malformed
conditions fail before anything renders.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Tuple, TYPE_CHECKING

from ..errors import LiquidSyntaxError
from ..template.conditions import (
    Condition,
    ConditionInterpreter,
    ConditionParser,
    LogicalEvaluator,
    LogicalOperator,
)
from .renderer import render_all

if TYPE_CHECKING:
    from ..template.context import Context


logger = logging.getLogger(__name__)

BodyRenderer = Callable[[Iterable[Any], 'Context'], str]


class BranchKind(Enum):
    GUARDED = "guarded"
    ELSE = "else"


@dataclass
class Branch:
    """
    One alternative of a conditional block.

    Attributes:
        kind: GUARDED or ELSE
        guard_expression: Raw condition markup, None for else
        body: Nodes collected for this branch
        conditions: Parsed guard conditions
        connectives: Connectives aligned with conditions
    """
    kind: BranchKind
    guard_expression: Optional[str] = None
    body: List[Any] = field(default_factory=list)
    conditions: Tuple[Condition, ...] = ()
    connectives: Tuple[LogicalOperator, ...] = ()


class UnlessBlock:
    """Renders the first branch whose guard is false, else the else branch."""

    TAG_NAME = "unless"

    def __init__(
        self,
        markup: str,
        parser: Optional[ConditionParser] = None,
        interpreter: Optional[ConditionInterpreter] = None
    ):
        self.markup = markup
        self.parser = parser or ConditionParser(self.TAG_NAME)
        self.interpreter = interpreter or ConditionInterpreter()
        self.branches: List[Branch] = []
        self._current = -1

        self.add_branch(markup)

    @property
    def body(self) -> List[Any]:
        """Body of the branch currently being collected."""
        return self.branches[self._current].body

    @property
    def has_else(self) -> bool:
        return any(branch.kind is BranchKind.ELSE for branch in self.branches)

    def add_node(self, node: Any) -> None:
        self.body.append(node)

    def add_branch(self, guard_expression: str) -> int:
        """
        Open a guarded branch.

        Returns:
            Index of the new branch

        Raises:
            LiquidSyntaxError: If the guard is malformed or an else is already open
        """
        if self.has_else:
            raise LiquidSyntaxError(f"Condition after 'else' in tag '{self.TAG_NAME}'", guard_expression)

        conditions, connectives = self.parser.parse_expression(guard_expression)
        return self._append(Branch(
            kind=BranchKind.GUARDED,
            guard_expression=guard_expression,
            conditions=tuple(conditions),
            connectives=tuple(connectives),
        ))

    def add_else(self) -> int:
        if self.has_else:
            raise LiquidSyntaxError(f"Duplicate 'else' in tag '{self.TAG_NAME}'")
        return self._append(Branch(kind=BranchKind.ELSE))

    def unknown_tag(self, tag: str, params: str = "") -> None:
        """Handle a tag the compiler found inside this block."""
        if tag == "else":
            if params.strip():
                logger.debug("Ignoring parameters of 'else' in '%s': %r", self.TAG_NAME, params)
            self.add_else()
            return
        raise LiquidSyntaxError(f"Unknown tag '{tag}' in '{self.TAG_NAME}' block")

    def select_branch(self, context: 'Context') -> Optional[Branch]:
        """Return the branch to render, or None when nothing fires."""
        for index, branch in enumerate(self.branches):
            if branch.kind is BranchKind.ELSE:
                return branch

            overall = LogicalEvaluator.evaluate(
                branch.conditions,
                branch.connectives,
                lambda condition: self.interpreter.interpret(condition, context),
            )
            if not overall:
                logger.debug("'%s' branch %d fired for %r", self.TAG_NAME, index, branch.guard_expression)
                return branch

        return None

    def render(self, context: 'Context', body_renderer: BodyRenderer = render_all) -> str:
        """Render the selected branch inside a nested scope."""
        with context.scope():
            branch = self.select_branch(context)
            if branch is None:
                return ""
            return body_renderer(branch.body, context)

    def _append(self, branch: Branch) -> int:
        self.branches.append(branch)
        self._current = len(self.branches) - 1
        return self._current
