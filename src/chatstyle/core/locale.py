"""
Locale Formatting Service.

The renderer never formats typed values or picks plural forms itself; it
asks a LocaleFormattingService. Implementations must be safe to share
between threads if one Styler is used concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Set
from typing import Protocol, runtime_checkable

from babel import Locale, UnknownLocaleError

from chatstyle.core.errors import InvalidArgumentError
from chatstyle.core.variables import TypedVariable

logger = logging.getLogger(__name__)

# ICU MessageFormat falls back to this form when the selected one is absent
FALLBACK_FORM = "other"


@runtime_checkable
class LocaleFormattingService(Protocol):
    """Renders typed values and chooses plural forms for a locale."""

    def render(self, variable: TypedVariable, locale: str) -> str: ...

    def choose_form(self, count: int, locale: str, forms: Set[str]) -> str: ...


class BabelFormattingService:
    """LocaleFormattingService backed by Babel's CLDR data."""

    def render(self, variable: TypedVariable, locale: str) -> str:
        try:
            return variable.render(locale)
        except InvalidArgumentError:
            raise
        except (UnknownLocaleError, ValueError) as e:
            raise InvalidArgumentError(f"Cannot render {variable!r} for locale {locale!r}: {e}") from e

    def choose_form(self, count: int, locale: str, forms: Set[str]) -> str:
        """
        Pick the case to use for count among the available forms.

        An exact "=N" form wins over the CLDR category; a missing
        category falls back to "other".

        Raises:
            InvalidArgumentError: If no available form applies.
        """
        exact = f"={count}"
        if exact in forms:
            return exact

        category = self._plural_category(count, locale)
        if category in forms:
            return category
        if FALLBACK_FORM in forms:
            logger.debug("No %r case for %d in %s, using %r", category, count, locale, FALLBACK_FORM)
            return FALLBACK_FORM
        raise InvalidArgumentError(
            f"No plural case for form {category!r} (count={count}, locale={locale}); "
            f"available: {sorted(forms)}"
        )

    @staticmethod
    def _plural_category(count: int, locale: str) -> str:
        try:
            return Locale.parse(locale).plural_form(count)
        except (UnknownLocaleError, ValueError) as e:
            raise InvalidArgumentError(f"Unknown locale {locale!r}") from e
