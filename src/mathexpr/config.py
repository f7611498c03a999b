"""Parser configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class ParserOptions:
    """Options fixed when a Parser is constructed.

    Attributes:
        allow_implicit_multiplication: Read "2x" and "3(x+1)" as products
        simplify: Fold constant subexpressions while parsing
        debug: Record each parse step in ``Parser.trace`` and log it
    """

    allow_implicit_multiplication: bool = True
    simplify: bool = True
    debug: bool = False

    @classmethod
    def from_env(cls) -> ParserOptions:
        """Create options from environment variables.

        Reads MATHEXPR_IMPLICIT_MULTIPLICATION, MATHEXPR_SIMPLIFY and
        MATHEXPR_DEBUG; "1", "true", "yes" and "on" count as true. Unset
        variables keep their defaults.
        """
        defaults = cls()
        return cls(
            allow_implicit_multiplication=_env_flag(
                "MATHEXPR_IMPLICIT_MULTIPLICATION",
                defaults.allow_implicit_multiplication,
            ),
            simplify=_env_flag("MATHEXPR_SIMPLIFY", defaults.simplify),
            debug=_env_flag("MATHEXPR_DEBUG", defaults.debug),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ParserOptions:
        """Create options from a mapping of option names to booleans.

        Raises:
            ValueError: For unknown keys or non-boolean values
        """
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown parser options: {', '.join(unknown)}")
        for key, value in data.items():
            if not isinstance(value, bool):
                raise ValueError(f"Parser option '{key}' must be true or false")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> ParserOptions:
        """Load options from a YAML document.

        The options may sit at the top level or under a ``parser`` key.

        Raises:
            ValueError: If the document is not a mapping or has unknown keys
        """
        with open(path) as f:
            data = yaml.safe_load(f)
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {path}")
        if isinstance(data.get("parser"), dict):
            data = data["parser"]
        return cls.from_mapping(data)
