"""
Error types for chatstyle formula evaluation and template rendering.
"""

from __future__ import annotations

from dataclasses import dataclass


class StylingError(Exception):
    """Base exception for all chatstyle errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class FormulaSyntaxError(StylingError):
    """
    Raised when a formula's token sequence violates the grammar.

    Examples:
    - Two operands without an operator ("1 2")
    - Unbalanced parentheses
    - Trailing operator ("a +")
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        token: object | None = None,
    ):
        self.token = token
        super().__init__(message, context)


class FormulaLexicalError(FormulaSyntaxError):
    """
    Raised when a formula contains a character no token starts with.

    Subclasses FormulaSyntaxError: the parser reports lexical errors
    as syntax errors.
    """

    pass


class FormulaTypeError(StylingError, TypeError):
    """
    Raised when formula operands have incompatible kinds.

    Examples:
    - Adding an array to a number
    - Counting ("#") something that is not an array
    - Arithmetic on a string variable
    """

    pass


class InvalidArgumentError(StylingError, ValueError):
    """
    Raised when a template or its variables are unusable.

    Examples:
    - Missing or bad markup attribute
    - Unknown color name
    - No case for the chosen plural form
    - Unsupported variable type or invalid variable name
    """

    pass


class UnknownVariableError(InvalidArgumentError):
    """Raised when a formula references a name absent from the scope."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown variable {name!r}")


@dataclass(frozen=True)
class MarkupDiagnostic:
    """
    A single problem reported by a markup validator.

    Attributes:
        path: Location of the offending node, e.g. "/msg/color[1]"
        message: Human-readable description
        line: Line number reported by the XML parser, if any
        column: Column reported by the XML parser, if any
    """

    path: str
    message: str
    line: int | None = None
    column: int | None = None

    def format(self) -> str:
        location = self.path
        if self.line is not None:
            location += f" (line {self.line}, column {self.column or 0})"
        return f"{location}: {self.message}"


class MarkupValidationError(InvalidArgumentError):
    """
    Raised when a template fails markup validation.

    The diagnostics are kept exactly as the validator produced them.
    """

    def __init__(self, diagnostics: list[MarkupDiagnostic]):
        self.diagnostics = list(diagnostics)
        super().__init__("Error while validating the message")

    def _format_message(self) -> str:
        lines = [self.message]
        lines.extend(f"  {d.format()}" for d in self.diagnostics)
        return "\n".join(lines)


@dataclass
class ErrorContext:
    """
    Context information for an error.

    Attributes:
        source: The formula text being processed
        position: 0-indexed character offset into source, if known
    """

    source: str
    position: int | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like:
                '1 $ 2'
                   ^
        """
        text = repr(self.source)
        if self.position is None:
            return text
        # +1 for the opening quote of the repr
        marker = " " * (1 + self.position) + "^"
        return f"{text}\n{marker}"


def make_formula_error(
    message: str,
    formula: str,
    position: int,
    token: object | None = None,
) -> FormulaSyntaxError:
    """
    Helper to create a FormulaSyntaxError pointing into a formula.

    Args:
        message: Error description
        formula: Formula being parsed
        position: Offset of the offending token
        token: The offending token, if any

    Returns:
        FormulaSyntaxError with context attached
    """
    context = ErrorContext(source=formula, position=position)
    return FormulaSyntaxError(message, context, token=token)

