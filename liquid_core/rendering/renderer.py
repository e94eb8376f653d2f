"""
Body rendering for block tags.

A node list is whatever the template compiler collected for a block body:
plain text, Variables, nested blocks. Nodes with a render(context) method are
rendered, everything else is emitted as text.
"""

from typing import Any, Iterable, TYPE_CHECKING

if TYPE_CHECKING:
    from ..template.context import Context


def to_output(value: Any) -> str:
    """Convert a rendered value to output text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "".join(to_output(item) for item in value)
    return str(value)


def render_all(node_list: Iterable[Any], context: 'Context') -> str:
    """
    Render every node of a body in order.

    Args:
        node_list: Body nodes
        context: Render context

    Returns:
        Concatenated output
    """
    output = []
    for node in node_list:
        render = getattr(node, "render", None)
        value = render(context) if callable(render) else node
        output.append(to_output(value))
    return "".join(output)
