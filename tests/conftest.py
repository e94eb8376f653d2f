"""Shared fixtures."""

import pytest

from liquid_core import CompilerConfig, Context


@pytest.fixture
def assigns():
    """Sample template data."""
    return {
        "name": "Alice",
        "count": 0,
        "empty_text": "",
        "flag": True,
        "off": False,
        "nothing": None,
        "price": 3.0,
        "ratio": 3.5,
        "tags": ["red", "green", "blue"],
        "user": {"name": "Bob", "admin": False, "roles": ["editor"]},
        "html": "<b>bold</b>",
        "content_for_layout": "<p>page</p>",
    }


@pytest.fixture
def context(assigns):
    """Lax Context over the sample data."""
    return Context(assigns)


@pytest.fixture
def strict_context(assigns):
    """Context that raises on undefined variables."""
    return Context(assigns, config=CompilerConfig(strict_variables=True))


@pytest.fixture
def escaping():
    """Config with auto-escaping enabled."""
    return CompilerConfig(auto_escape=True)
