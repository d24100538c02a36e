"""
Template renderer.

Walks a markup tree and produces a string with inline control codes:

    styler = Styler()
    styler.render("<b>Hello</b> <var name='nick'/>!", {"nick": "Clicky"})
    # "\\x02Hello\\x02 Clicky!"

Each render call owns its variable scope and style context; a Styler
holds no per-call state and can be shared between threads as long as its
LocaleFormattingService can.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from chatstyle.core.config import StylingConfig
from chatstyle.core.errors import (
    FormulaTypeError,
    InvalidArgumentError,
    MarkupValidationError,
    UnknownVariableError,
)
from chatstyle.core.formula import build_scope, evaluate_formula, wrap_scalar
from chatstyle.core.locale import BabelFormattingService, LocaleFormattingService
from chatstyle.core.markup import (
    ElementNode,
    MarkupNode,
    TemplateParser,
    TextNode,
    TreeValidator,
    parse_template,
    validate_tree,
)
from chatstyle.core.normalizer import normalize
from chatstyle.core.styling import (
    StyleContext,
    enter_bold,
    enter_color,
    enter_underline,
    exit_bold,
    exit_color,
    exit_underline,
)
from chatstyle.core.values import Value, ValueKind

logger = logging.getLogger(__name__)

Scope = dict[str, Value]

_END = object()


class Styler:
    """
    Renders chatstyle templates.

    Args:
        service: Formats typed values and picks plural forms
            (Babel-backed by default)
        config: Locale, default separators and scalar wrapper classes
        parser: Turns template text into a tree rooted at <msg>
        validator: Returns diagnostics for a parsed tree
    """

    def __init__(
        self,
        service: LocaleFormattingService | None = None,
        config: StylingConfig | None = None,
        parser: TemplateParser = parse_template,
        validator: TreeValidator = validate_tree,
    ) -> None:
        self.service = service if service is not None else BabelFormattingService()
        self.config = config if config is not None else StylingConfig()
        self.parser = parser
        self.validator = validator

    def parse(self, template: str) -> ElementNode:
        """
        Parse and validate a template.

        Raises:
            MarkupValidationError: With the validator's diagnostics.
        """
        root = self.parser(template)
        diagnostics = self.validator(root)
        if diagnostics:
            for diagnostic in diagnostics:
                logger.error("Invalid template: %s", diagnostic.format())
            raise MarkupValidationError(diagnostics)
        return root

    def render(
        self,
        template: str,
        variables: Mapping[str, Any] | None = None,
        locale: str | None = None,
    ) -> str:
        """
        Render a template with the given variables.

        Args:
            template: Template text
            variables: name -> str, int, float, TypedVariable, list or mapping
            locale: Overrides the configured locale for this call

        Returns:
            The rendered string.

        Raises:
            InvalidArgumentError: Bad markup, attribute, color or variable.
            FormulaSyntaxError: A formula could not be parsed.
            FormulaTypeError: A formula mixes incompatible values.
        """
        # Nothing to interpret without markup or entities
        if "<" not in template and "&" not in template:
            return template

        root = self.parse(template)
        return self.render_tree(root, variables, locale)

    def render_tree(
        self,
        root: ElementNode,
        variables: Mapping[str, Any] | None = None,
        locale: str | None = None,
    ) -> str:
        """Render an already parsed and validated tree."""
        scope = build_scope(variables or {}, self.config.variable_types)
        walk = _TreeWalk(self.service, self.config, locale or self.config.locale)
        logger.debug("Rendering <%s> with %d variable(s) in %s", root.tag, len(scope), walk.locale)
        return normalize(walk.render_node(root, scope))


class _TreeWalk:
    """State of a single render call."""

    def __init__(self, service: LocaleFormattingService, config: StylingConfig, locale: str) -> None:
        self.service = service
        self.config = config
        self.locale = locale
        self.style = StyleContext()
        self._handlers: dict[str, Callable[[ElementNode, Scope], str]] = {
            "var": self._render_var,
            "b": self._render_bold,
            "u": self._render_underline,
            "color": self._render_color,
            "for": self._render_for,
            "plural": self._render_plural,
        }

    def render_node(self, node: MarkupNode, scope: Scope) -> str:
        if isinstance(node, TextNode):
            return node.content
        handler = self._handlers.get(node.tag, self._render_children)
        return handler(node, scope)

    def _render_children(self, node: ElementNode, scope: Scope) -> str:
        return "".join(self.render_node(child, scope) for child in node.children)

    @contextmanager
    def _styled(self) -> Iterator[StyleContext]:
        """Snapshot the style context and restore it on every exit path."""
        saved = self.style.copy()
        try:
            yield saved
        finally:
            self.style.restore(saved)

    # -- Tag handlers --

    def _render_var(self, node: ElementNode, scope: Scope) -> str:
        value = evaluate_formula(_required(node, "name"), scope)
        if value.kind == ValueKind.TYPED:
            return self.service.render(value.payload, self.locale)
        if value.kind == ValueKind.INTEGER:
            return str(value.payload)
        if value.kind == ValueKind.REAL:
            return _format_real(value.payload)
        if value.kind == ValueKind.ARRAY:
            raise FormulaTypeError(
                f"Cannot render an array in <var name={node.attributes['name']!r}>; count it with '#'"
            )
        raise FormulaTypeError(f"Unknown value kind: {value.kind}")

    def _render_bold(self, node: ElementNode, scope: Scope) -> str:
        with self._styled() as saved:
            result = enter_bold(self.style)
            result += self._render_children(node, scope)
            result += exit_bold(self.style, saved)
        return result

    def _render_underline(self, node: ElementNode, scope: Scope) -> str:
        with self._styled() as saved:
            result = enter_underline(self.style)
            result += self._render_children(node, scope)
            result += exit_underline(self.style, saved)
        return result

    def _render_color(self, node: ElementNode, scope: Scope) -> str:
        with self._styled() as saved:
            result = enter_color(self.style, node.get("fg"), node.get("bg"))
            result += self._render_children(node, scope)
            result += exit_color(self.style, saved)
        return result

    def _render_for(self, node: ElementNode, scope: Scope) -> str:
        source_name = _required(node, "from")
        item_name = _required(node, "item")
        key_name = node.get("key")
        separator, last_separator = self._separators(node)
        types = self.config.variable_types

        source = scope.get(source_name)
        if source is None:
            raise UnknownVariableError(source_name)
        if source.kind != ValueKind.ARRAY:
            raise InvalidArgumentError(f'<for from="{source_name}"> needs an array, got {source.kind}')
        logger.debug("Looping over %r (%d item(s))", source_name, source.count())

        parts: list[str] = []
        entries = source.entries()
        pending = next(entries, _END)
        index = 0
        while pending is not _END:
            key, item = pending  # type: ignore[misc]
            pending = next(entries, _END)
            if index:
                parts.append(last_separator if pending is _END else separator)

            # Bindings live in a copy so they never reach sibling nodes
            loop_scope = dict(scope)
            loop_scope[item_name] = wrap_scalar(item, item_name, types)
            if key_name:
                loop_scope[key_name] = wrap_scalar(types.string(str(key)), key_name, types)
            parts.append(self._render_children(node, loop_scope))
            index += 1
        return "".join(parts)

    def _separators(self, node: ElementNode) -> tuple[str, str]:
        separator = self.config.separator
        last_separator = self.config.last_separator
        for attr in ("separator", "sep"):
            if attr in node.attributes:
                separator = last_separator = node.attributes[attr]
                break
        for attr in ("last_separator", "last"):
            if attr in node.attributes:
                last_separator = node.attributes[attr]
                break
        return separator, last_separator

    def _render_plural(self, node: ElementNode, scope: Scope) -> str:
        formula = node.get("var")
        if formula is None:
            raise InvalidArgumentError("No variable name given for <plural>")
        count = _plural_count(evaluate_formula(formula, scope))

        # Every case is rendered, not only the chosen one
        cases: dict[str, str] = {}
        for child in node.elements():
            if child.tag == "case":
                cases[child.get("form") or ""] = self.render_node(child, scope)

        form = self.service.choose_form(count, self.locale, frozenset(cases))
        logger.debug("Plural form %r chosen for %d in %s", form, count, self.locale)
        if form not in cases:
            raise InvalidArgumentError(f"No <case> for plural form {form!r}")
        return cases[form]


def _required(node: ElementNode, attr: str) -> str:
    value = node.get(attr)
    if value is None:
        raise InvalidArgumentError(f'Missing "{attr}" attribute on <{node.tag}>')
    return value


def _format_real(number: float) -> str:
    # 14 significant digits; whole numbers below 1e15 print without a fraction
    if number.is_integer() and abs(number) < 1e15:
        return str(int(number))
    return format(number, ".14G")


def _plural_count(value: Value) -> int:
    if value.kind == ValueKind.ARRAY:
        raise FormulaTypeError("<plural> needs a number; count arrays with '#'")
    if value.kind == ValueKind.TYPED:
        raw = value.payload.get_value()
    else:
        raw = value.payload
    try:
        return int(raw)
    except (TypeError, ValueError, OverflowError) as e:
        raise FormulaTypeError(f"Cannot use {raw!r} as a plural count") from e


def render(
    template: str,
    variables: Mapping[str, Any] | None = None,
    locale: str | None = None,
) -> str:
    """Render a template with a default Styler."""
    return Styler().render(template, variables, locale)
