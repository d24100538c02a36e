"""
Configuration models for chatstyle.

Configuration is built in code or loaded from the [styling] section of a
TOML file:

    [styling]
    locale = "fr_FR"
    separator = ", "
    last_separator = " et "

    [styling.variable_types]
    integer = "myapp.styling:GroupedInteger"

The CHATSTYLE_LOCALE environment variable overrides the default locale.
"""

from __future__ import annotations

import importlib
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chatstyle.core.variables import (
    FloatVariable,
    IntegerVariable,
    StringVariable,
    TypedVariable,
)

logger = logging.getLogger(__name__)

# Environment variable name
CHATSTYLE_LOCALE_VAR = "CHATSTYLE_LOCALE"

_DEFAULT_LOCALE = "en_US"

ScalarKind = Literal["integer", "real", "string"]


def get_default_locale() -> str:
    """Get the default locale from CHATSTYLE_LOCALE, falling back to en_US."""
    value = os.environ.get(CHATSTYLE_LOCALE_VAR, "").strip()
    return value or _DEFAULT_LOCALE


def _import_class(spec: str) -> Any:
    """Import "package.module:Class" (or "package.module.Class")."""
    if ":" in spec:
        module_name, _, attr = spec.partition(":")
    else:
        module_name, _, attr = spec.rpartition(".")
    if not module_name or not attr:
        raise ValueError(f"Invalid class path: {spec!r}")
    module = importlib.import_module(module_name)
    return getattr(module, attr)


class VariableTypes(BaseModel):
    """Classes used to wrap plain scalars passed to the renderer."""

    model_config = ConfigDict(frozen=True)

    integer: type[TypedVariable] = IntegerVariable
    real: type[TypedVariable] = FloatVariable
    string: type[TypedVariable] = StringVariable

    @field_validator("integer", "real", "string", mode="before")
    @classmethod
    def _resolve_import_path(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _import_class(value)
        return value

    def get(self, kind: ScalarKind) -> type[TypedVariable]:
        """Return the class used for a scalar kind."""
        return getattr(self, kind)

    def with_type(self, kind: ScalarKind, variable_cls: type[TypedVariable] | str) -> VariableTypes:
        """Return a copy with one scalar kind rebound (validated)."""
        data = self.model_dump()
        data[kind] = variable_cls
        return VariableTypes.model_validate(data)


class StylingConfig(BaseModel):
    """Settings shared by every render call of a Styler."""

    model_config = ConfigDict(frozen=True)

    locale: str = Field(default_factory=get_default_locale)
    separator: str = ", "
    last_separator: str = " & "
    variable_types: VariableTypes = Field(default_factory=VariableTypes)


def load_config(toml_path: Path) -> StylingConfig:
    """
    Load styling configuration from a TOML file.

    Args:
        toml_path: Path to a TOML file with a [styling] section

    Returns:
        StylingConfig with values from file or defaults
    """
    if not toml_path.exists():
        return StylingConfig()

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Could not read %s, using default styling config: %s", toml_path, e)
        return StylingConfig()

    section = data.get("styling", {})
    if not section:
        return StylingConfig()

    return StylingConfig.model_validate(section)
