"""
chatstyle formula language.

Tokenizer, evaluator and variable resolver for the expressions found in
``<var name="...">`` and ``<plural var="...">``.

Usage:
    from chatstyle.core.formula import evaluate_formula
    from chatstyle.core.values import Value

    result = evaluate_formula("#foo + 1", {"foo": Value.array([1, 2])})
    # result == Value.integer(3)
"""

from chatstyle.core.formula.parser import FormulaParser, evaluate_formula
from chatstyle.core.formula.resolver import VariableResolver, build_scope, wrap_scalar
from chatstyle.core.formula.tokenizer import FormulaLexer, Token, TokenKind, tokenize

__all__ = [
    "FormulaLexer",
    "FormulaParser",
    "Token",
    "TokenKind",
    "VariableResolver",
    "build_scope",
    "evaluate_formula",
    "tokenize",
    "wrap_scalar",
]
