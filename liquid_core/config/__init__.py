"""Compiler configuration."""

from .loaders import CompilerConfig, ConfigLoader, DEFAULT_LAYOUT_VARIABLE

__all__ = ["CompilerConfig", "ConfigLoader", "DEFAULT_LAYOUT_VARIABLE"]
