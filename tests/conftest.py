"""Shared pytest fixtures for chatstyle tests."""

from __future__ import annotations

from collections.abc import Set

import pytest

from chatstyle import Styler
from chatstyle.core.variables import TypedVariable


class FakeFormattingService:
    """Records calls and applies English-like plural rules."""

    def __init__(self) -> None:
        self.rendered: list[TypedVariable] = []
        self.choices: list[tuple[int, str, frozenset[str]]] = []

    def render(self, variable: TypedVariable, locale: str) -> str:
        self.rendered.append(variable)
        return str(variable.get_value())

    def choose_form(self, count: int, locale: str, forms: Set[str]) -> str:
        self.choices.append((count, locale, frozenset(forms)))
        return "one" if count == 1 else "other"


@pytest.fixture
def styler() -> Styler:
    """A Styler using Babel and the en_US locale."""
    from chatstyle import StylingConfig

    return Styler(config=StylingConfig(locale="en_US"))


@pytest.fixture
def fake_service() -> FakeFormattingService:
    return FakeFormattingService()


@pytest.fixture
def fake_styler(fake_service: FakeFormattingService) -> Styler:
    """A Styler whose locale service is a recording fake."""
    from chatstyle import StylingConfig

    return Styler(service=fake_service, config=StylingConfig(locale="en_US"))
