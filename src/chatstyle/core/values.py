"""
Values produced by formula evaluation and stored in variable scopes.

A ``Value`` is a tagged union: the ``kind`` says which payload it holds.

    INTEGER  -> int
    REAL     -> float
    TYPED    -> TypedVariable
    ARRAY    -> tuple of (key, raw item) pairs, in insertion order
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from chatstyle.core.errors import FormulaTypeError
from chatstyle.core.variables import TypedVariable


class ValueKind(StrEnum):
    """Kinds of values a formula can produce."""

    INTEGER = "integer"
    REAL = "real"
    TYPED = "typed"
    ARRAY = "array"


@dataclass(frozen=True, slots=True)
class Value:
    """A formula operand or result."""

    kind: ValueKind
    payload: Any

    @classmethod
    def integer(cls, number: int) -> Value:
        return cls(ValueKind.INTEGER, number)

    @classmethod
    def real(cls, number: float) -> Value:
        return cls(ValueKind.REAL, number)

    @classmethod
    def typed(cls, variable: TypedVariable) -> Value:
        return cls(ValueKind.TYPED, variable)

    @classmethod
    def array(cls, items: Mapping[Any, Any] | Sequence[Any]) -> Value:
        """Build an array value; sequences are keyed by their indices."""
        if isinstance(items, Mapping):
            entries = tuple(items.items())
        else:
            entries = tuple(enumerate(items))
        return cls(ValueKind.ARRAY, entries)

    @classmethod
    def number(cls, number: int | float) -> Value:
        if isinstance(number, int):
            return cls.integer(number)
        return cls.real(number)

    # -- Accessors --

    def entries(self) -> Iterator[tuple[Any, Any]]:
        """Iterate over (key, item) pairs of an array value."""
        if self.kind != ValueKind.ARRAY:
            raise FormulaTypeError(f"Expected an array, got {self.kind}")
        return iter(self.payload)

    def count(self) -> int:
        """Number of entries of an array value."""
        if self.kind != ValueKind.ARRAY:
            raise FormulaTypeError(f"Cannot count a value of kind {self.kind}")
        return len(self.payload)

    def as_number(self) -> int | float:
        """Return the numeric payload, unwrapping numeric typed variables."""
        if self.kind in (ValueKind.INTEGER, ValueKind.REAL):
            return self.payload
        if self.kind == ValueKind.TYPED:
            raw = self.payload.get_value()
            if isinstance(raw, (int, float)) and not isinstance(raw, bool):
                return raw
            raise FormulaTypeError(
                f"{type(self.payload).__name__} holding {type(raw).__name__} is not numeric"
            )
        raise FormulaTypeError(f"A value of kind {self.kind} is not numeric")
