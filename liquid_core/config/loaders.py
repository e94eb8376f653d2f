"""
Compiler configuration and its loader.

Configuration is an immutable value handed to Variable and Context at
construction time.
"""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


# Always treated as a layout variable, whatever the configuration says
DEFAULT_LAYOUT_VARIABLE = "content_for_layout"


@dataclass(frozen=True)
class CompilerConfig:
    """
    Settings read once when markup is compiled.

    Attributes:
        auto_escape: Append an implicit escape filter to every variable
        layout_variable_name: Extra name whose first filter is skipped on render
        strict_variables: Raise on undefined variables instead of yielding None
    """

    auto_escape: bool = False
    layout_variable_name: Optional[str] = None
    strict_variables: bool = False

    @property
    def layout_variable_names(self) -> Tuple[str, ...]:
        """Names that hold layout-substituted content."""
        names = [DEFAULT_LAYOUT_VARIABLE]
        if self.layout_variable_name and self.layout_variable_name not in names:
            names.append(self.layout_variable_name)
        return tuple(names)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "CompilerConfig":
        """Build a config from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ValueError(f"Unknown compiler config keys: {', '.join(unknown)}")
        return cls(**raw)


class ConfigLoader:
    """Loads compiler configuration files."""

    def __init__(self, config_dir: str = "configs"):
        self.config_dir = Path(config_dir)

    def load_compiler_config(self, name: str = "compiler") -> CompilerConfig:
        """Load a compiler configuration by name."""
        config_file = self.config_dir / f"{name}.json"
        if not config_file.exists():
            raise FileNotFoundError(f"Compiler config not found: {name}")

        with open(config_file) as f:
            raw = json.load(f)

        if not isinstance(raw, dict):
            raise ValueError(f"Compiler config '{name}' must be a JSON object")
        return CompilerConfig.from_dict(raw)
