"""
chatstyle - chat message templates with inline formatting codes.

Renders a small markup language (bold, underline, colors, loops, plurals
and arithmetic formulas over named variables) into a string carrying IRC
style control codes.

Usage:
    from chatstyle import Styler

    styler = Styler()
    styler.render("<b>Scores</b>: <var name='#scores'/>", {"scores": [42, 23]})
"""

from __future__ import annotations

from ._version import get_version
from .core.config import StylingConfig, VariableTypes, load_config
from .core.errors import (
    FormulaLexicalError,
    FormulaSyntaxError,
    FormulaTypeError,
    InvalidArgumentError,
    MarkupDiagnostic,
    MarkupValidationError,
    StylingError,
    UnknownVariableError,
)
from .core.locale import BabelFormattingService, LocaleFormattingService
from .core.normalizer import normalize
from .core.renderer import Styler, render
from .core.variables import (
    CurrencyVariable,
    DateTimeVariable,
    DurationVariable,
    FloatVariable,
    IntegerVariable,
    StringVariable,
    TypedVariable,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "BabelFormattingService",
    "CurrencyVariable",
    "DateTimeVariable",
    "DurationVariable",
    "FloatVariable",
    "FormulaLexicalError",
    "FormulaSyntaxError",
    "FormulaTypeError",
    "IntegerVariable",
    "InvalidArgumentError",
    "LocaleFormattingService",
    "MarkupDiagnostic",
    "MarkupValidationError",
    "StringVariable",
    "Styler",
    "StylingConfig",
    "StylingError",
    "TypedVariable",
    "UnknownVariableError",
    "VariableTypes",
    "load_config",
    "normalize",
    "render",
]
