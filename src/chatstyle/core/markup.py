"""
Markup tree for chatstyle templates.

A template is XML-like text without a root element:

    <b>Scores</b>: <for from="scores" item="score" key="nick">...</for>

``parse_template`` wraps it in ``<msg>`` and parses it with ElementTree,
``validate_tree`` checks the tag/attribute grammar. Both are the default
collaborators of ``Styler`` and can be swapped for others.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterator
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from chatstyle.core.errors import MarkupDiagnostic, MarkupValidationError

logger = logging.getLogger(__name__)

ROOT_TAG = "msg"


class TextNode(BaseModel):
    """Literal text, already entity-decoded."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    content: str


class ElementNode(BaseModel):
    """An element with attributes and ordered children."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["element"] = "element"
    tag: str
    attributes: dict[str, str] = Field(default_factory=dict)
    children: list[MarkupNode] = Field(default_factory=list)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)

    def elements(self) -> Iterator[ElementNode]:
        """Iterate over child elements, skipping text."""
        for child in self.children:
            if isinstance(child, ElementNode):
                yield child


MarkupNode = TextNode | ElementNode
ElementNode.model_rebuild()

TemplateParser = Callable[[str], ElementNode]
TreeValidator = Callable[[ElementNode], list[MarkupDiagnostic]]


# =============================================================================
# Parsing
# =============================================================================


def parse_template(source: str) -> ElementNode:
    """
    Parse template text into a tree rooted at a ``msg`` element.

    Raises:
        MarkupValidationError: If the text is not well-formed.
    """
    try:
        root = ET.fromstring(f"<{ROOT_TAG}>{source}</{ROOT_TAG}>")
    except ET.ParseError as e:
        line, column = e.position
        diagnostic = MarkupDiagnostic(path=f"/{ROOT_TAG}", message=str(e), line=line, column=column)
        logger.error("Malformed template: %s", diagnostic.format())
        raise MarkupValidationError([diagnostic]) from e
    return _convert(root)


def _convert(element: ET.Element) -> ElementNode:
    children: list[MarkupNode] = []
    if element.text:
        children.append(TextNode(content=element.text))
    for child in element:
        children.append(_convert(child))
        if child.tail:
            children.append(TextNode(content=child.tail))
    return ElementNode(tag=element.tag, attributes=dict(element.attrib), children=children)


# =============================================================================
# Validation
# =============================================================================

# tag -> (required attributes, optional attributes)
_GRAMMAR: dict[str, tuple[frozenset[str], frozenset[str]]] = {
    "msg": (frozenset(), frozenset()),
    "var": (frozenset({"name"}), frozenset()),
    "u": (frozenset(), frozenset()),
    "b": (frozenset(), frozenset()),
    "color": (frozenset(), frozenset({"fg", "bg"})),
    "for": (
        frozenset({"from", "item"}),
        frozenset({"key", "separator", "sep", "last_separator", "last"}),
    ),
    "plural": (frozenset({"var"}), frozenset()),
    "case": (frozenset({"form"}), frozenset()),
}


def validate_tree(root: ElementNode) -> list[MarkupDiagnostic]:
    """
    Check a parsed template against the markup grammar.

    Returns:
        Diagnostics; an empty list means the tree is valid.
    """
    diagnostics: list[MarkupDiagnostic] = []
    if root.tag != ROOT_TAG:
        diagnostics.append(MarkupDiagnostic(f"/{root.tag}", f"Root element must be <{ROOT_TAG}>"))
    _validate(root, f"/{root.tag}", None, diagnostics)
    return diagnostics


def _validate(
    node: ElementNode,
    path: str,
    parent: str | None,
    diagnostics: list[MarkupDiagnostic],
) -> None:
    def report(message: str) -> None:
        diagnostics.append(MarkupDiagnostic(path, message))

    grammar = _GRAMMAR.get(node.tag)
    if grammar is None:
        report(f"Unknown element <{node.tag}>")
        return

    required, optional = grammar
    for attr in sorted(required - node.attributes.keys()):
        report(f'Missing "{attr}" attribute on <{node.tag}>')
    for attr in sorted(node.attributes.keys() - required - optional):
        report(f'Unexpected "{attr}" attribute on <{node.tag}>')

    if node.tag == "color" and not (node.attributes.keys() & {"fg", "bg"}):
        report('The "fg" attribute or the "bg" attribute or both must be supplied when using the <color> tag.')
    if node.tag == "var" and node.children:
        report("<var> must be empty")
    if node.tag == "case" and parent != "plural":
        report("<case> is only allowed inside <plural>")
    if node.tag == "plural":
        cases = 0
        for child in node.children:
            if isinstance(child, TextNode):
                if child.content.strip():
                    report("<plural> may only contain <case> elements")
            elif child.tag != "case":
                report(f"<plural> may only contain <case> elements, found <{child.tag}>")
            else:
                cases += 1
        if not cases:
            report("<plural> needs at least one <case>")

    positions: dict[str, int] = {}
    for child in node.elements():
        positions[child.tag] = positions.get(child.tag, 0) + 1
        _validate(child, f"{path}/{child.tag}[{positions[child.tag]}]", node.tag, diagnostics)
