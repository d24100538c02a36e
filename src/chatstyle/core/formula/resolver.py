"""
Variable resolution for formulas.

Variable paths are opaque keys into the scope: "user.name" is looked up
as the single key "user.name", never as ``scope["user"]["name"]``.
Callers that want nested data flatten it into the scope beforehand.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from chatstyle.core.config import VariableTypes
from chatstyle.core.errors import (
    FormulaTypeError,
    InvalidArgumentError,
    UnknownVariableError,
)
from chatstyle.core.values import Value, ValueKind
from chatstyle.core.variables import TypedVariable

Scope = Mapping[str, Value]

_NAME_RE = re.compile(r"[a-zA-Z0-9_.]+")


def check_variable_name(name: str) -> None:
    """Raise InvalidArgumentError unless name only uses [A-Za-z0-9_.]."""
    if not isinstance(name, str) or not _NAME_RE.fullmatch(name):
        raise InvalidArgumentError(
            f'Invalid variable name "{name}". '
            "Variable names may only contain alphanumeric "
            'characters, underscores ("_") and dots (".").'
        )


def wrap_scalar(raw: Any, name: str, types: VariableTypes) -> Value:
    """Wrap a caller-supplied value into a scope Value.

    Args:
        raw: A str, int, float, TypedVariable, Mapping or list/tuple
        name: Variable name the value is bound to
        types: Classes used to wrap plain scalars

    Returns:
        A TYPED or ARRAY value.

    Raises:
        InvalidArgumentError: If the name is invalid or the type unsupported.
    """
    check_variable_name(name)

    if isinstance(raw, Value):
        return raw
    if isinstance(raw, TypedVariable):
        return Value.typed(raw)
    if isinstance(raw, Mapping):
        return Value.array(raw)
    if isinstance(raw, (list, tuple)):
        return Value.array(raw)
    # bool is an int subclass but has no sensible rendering
    if isinstance(raw, bool):
        raise InvalidArgumentError(f'Unsupported scalar type (bool) for "{name}"')
    if isinstance(raw, str):
        return Value.typed(types.string(raw))
    if isinstance(raw, int):
        return Value.typed(types.integer(raw))
    if isinstance(raw, float):
        return Value.typed(types.real(raw))
    raise InvalidArgumentError(f'Unsupported scalar type ({type(raw).__name__}) for "{name}"')


def build_scope(variables: Mapping[str, Any], types: VariableTypes) -> dict[str, Value]:
    """Wrap every caller-supplied variable."""
    return {name: wrap_scalar(raw, name, types) for name, raw in variables.items()}


class VariableResolver:
    """Looks names up in a scope and implements the count operator."""

    def __init__(self, scope: Scope) -> None:
        self.scope = scope

    def resolve(self, path: str) -> Value:
        try:
            return self.scope[path]
        except KeyError:
            raise UnknownVariableError(path) from None

    def count(self, value: Value) -> Value:
        if value.kind != ValueKind.ARRAY:
            raise FormulaTypeError(f"'#' needs an array, got {value.kind}")
        return Value.integer(value.count())

    def add(self, left: Value, right: Value) -> Value:
        if left.kind == ValueKind.ARRAY and right.kind == ValueKind.ARRAY:
            return Value(ValueKind.ARRAY, _merge(left.payload, right.payload))
        a, b = self._numeric_pair(left, right, "+")
        return Value.number(a + b)

    def subtract(self, left: Value, right: Value) -> Value:
        # Arrays only combine with '+'
        a, b = self._numeric_pair(left, right, "-")
        return Value.number(a - b)

    @staticmethod
    def _numeric_pair(left: Value, right: Value, op: str) -> tuple[int | float, int | float]:
        if left.kind == ValueKind.ARRAY or right.kind == ValueKind.ARRAY:
            raise FormulaTypeError(f"Cannot apply '{op}' to {left.kind} and {right.kind}")
        return left.as_number(), right.as_number()


def _merge(
    left: Sequence[tuple[Any, Any]], right: Sequence[tuple[Any, Any]]
) -> tuple[tuple[Any, Any], ...]:
    """Concatenate two arrays, renumbering their items."""
    items = [item for _, item in left] + [item for _, item in right]
    return tuple(enumerate(items))
