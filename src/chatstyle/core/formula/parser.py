"""
Recursive descent evaluator for template formulas.

Grammar:
    expr     → term (("+" | "-") term)*
    term     → "#" primary | primary
    primary  → NUMBER | VARIABLE | "(" expr ")"

There is no AST: each rule returns the Value it reduces to. Tokens are
pulled from the lexer one at a time, with a single token of lookahead.
"""

from __future__ import annotations

from chatstyle.core.errors import (
    ErrorContext,
    FormulaLexicalError,
    FormulaSyntaxError,
    make_formula_error,
)
from chatstyle.core.formula.resolver import Scope, VariableResolver
from chatstyle.core.formula.tokenizer import FormulaLexer, Token, TokenKind
from chatstyle.core.values import Value


class FormulaParser:
    """Evaluates a formula against a scope."""

    def __init__(self, lexer: FormulaLexer, resolver: VariableResolver) -> None:
        self.lexer = lexer
        self.resolver = resolver
        self.current = self._pull()
        self._result: Value | None = None

    @property
    def result(self) -> Value:
        """The formula's value; only available once parse() has consumed EOF."""
        if self._result is None:
            raise RuntimeError("Formula has not been fully parsed yet")
        return self._result

    def _pull(self) -> Token:
        tok = self.lexer.next_token()
        if tok.kind == TokenKind.ERROR:
            raise FormulaLexicalError(
                f"Unexpected character: {tok.value!r}",
                ErrorContext(source=self.lexer.formula, position=tok.pos),
                token=tok,
            )
        return tok

    def advance(self) -> Token:
        tok = self.current
        if tok.kind != TokenKind.EOF:
            self.current = self._pull()
        return tok

    def expect(self, kind: TokenKind) -> Token:
        tok = self.current
        if tok.kind != kind:
            raise self._unexpected(tok, f"Expected {kind}")
        return self.advance()

    def _unexpected(self, tok: Token, prefix: str = "Unexpected token") -> FormulaSyntaxError:
        if tok.kind == TokenKind.EOF:
            detail = "end of formula"
        else:
            detail = f"{tok.kind} ({tok.value!r})"
        return make_formula_error(f"{prefix}: {detail}", self.lexer.formula, tok.pos, tok)

    # -- Grammar rules --

    def parse(self) -> Value:
        """Evaluate the whole formula."""
        value = self.parse_expr()
        if self.current.kind != TokenKind.EOF:
            raise self._unexpected(self.current, "Unexpected token after formula")
        self._result = value
        return value

    def parse_expr(self) -> Value:
        """term (('+' | '-') term)*"""
        left = self.parse_term()
        while self.current.kind in (TokenKind.PLUS, TokenKind.MINUS):
            op = self.advance()
            right = self.parse_term()
            if op.kind == TokenKind.PLUS:
                left = self.resolver.add(left, right)
            else:
                left = self.resolver.subtract(left, right)
        return left

    def parse_term(self) -> Value:
        """'#' primary | primary"""
        if self.current.kind == TokenKind.COUNT:
            self.advance()
            return self.resolver.count(self.parse_primary())
        return self.parse_primary()

    def parse_primary(self) -> Value:
        """NUMBER | VARIABLE | '(' expr ')'"""
        tok = self.current

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            value = self.parse_expr()
            self.expect(TokenKind.RPAREN)
            return value

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            return Value.number(tok.value)  # type: ignore[arg-type]

        if tok.kind == TokenKind.VARIABLE:
            self.advance()
            return self.resolver.resolve(str(tok.value))

        raise self._unexpected(tok)


def evaluate_formula(formula: str, scope: Scope) -> Value:
    """Evaluate a formula string against a scope.

    Args:
        formula: Formula text (e.g., "#players - 1")
        scope: Mapping of variable name -> Value

    Returns:
        The resulting Value.

    Raises:
        FormulaLexicalError: If the formula contains an unknown character.
        FormulaSyntaxError: If the formula is not grammatical.
        FormulaTypeError: If operands have incompatible kinds.
        UnknownVariableError: If a variable is not in the scope.
    """
    parser = FormulaParser(FormulaLexer(formula), VariableResolver(scope))
    parser.parse()
    return parser.result
