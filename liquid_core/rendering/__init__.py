"""Block rendering."""

from .renderer import render_all, to_output
from .unless import Branch, BranchKind, UnlessBlock

__all__ = ["render_all", "to_output", "Branch", "BranchKind", "UnlessBlock"]
