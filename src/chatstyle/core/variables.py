"""
Typed template variables.

A typed variable wraps a scalar and knows how to render it for a locale.
Plain ``int``, ``float`` and ``str`` values passed to the renderer are
wrapped automatically (see ``chatstyle.core.config.VariableTypes``);
currency amounts, dates and durations must be wrapped by the caller.

Usage:
    from chatstyle.core.variables import CurrencyVariable

    styler.render("<var name='price'/>", {"price": CurrencyVariable(9.5, "EUR")})
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any, Literal

from babel import Locale
from babel.dates import format_date, format_time, get_datetime_format, get_timezone
from babel.numbers import (
    format_currency,
    format_decimal,
    get_territory_currencies,
)
from babel.units import format_unit

FormatWidth = Literal["full", "long", "medium", "short"]


class TypedVariable(ABC):
    """A scalar value with locale-aware rendering."""

    def __init__(self, value: Any) -> None:
        self._value = value

    @abstractmethod
    def render(self, locale: str) -> str:
        """Render the value for the given locale (e.g. "en_US")."""

    def get_value(self) -> Any:
        """Return the wrapped scalar."""
        return self._value

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.__dict__ == other.__dict__

    def __hash__(self) -> int:
        return hash((type(self), repr(self._value)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"


class IntegerVariable(TypedVariable):
    """An integer, rendered without digit grouping."""

    def render(self, locale: str) -> str:
        return format_decimal(int(self._value), format="0", locale=locale)


class FloatVariable(TypedVariable):
    """A real number, rendered with grouping and every fraction digit kept."""

    def render(self, locale: str) -> str:
        return format_decimal(self._value, locale=locale, decimal_quantization=False)


class StringVariable(TypedVariable):
    """A string, rendered verbatim."""

    def render(self, locale: str) -> str:
        return str(self._value)


class CurrencyVariable(TypedVariable):
    """A monetary amount, rounded to the currency's usual digits."""

    def __init__(self, value: float, currency: str | None = None) -> None:
        super().__init__(value)
        self._currency = currency

    def get_currency(self) -> str | None:
        return self._currency

    def render(self, locale: str) -> str:
        currency = self._currency
        if currency is None:
            territory = Locale.parse(locale).territory
            currencies = get_territory_currencies(territory) if territory else []
            currency = currencies[0] if currencies else "XXX"
        return format_currency(self._value, currency, locale=locale)

    def __repr__(self) -> str:
        return f"CurrencyVariable({self._value!r}, {self._currency!r})"


class DateTimeVariable(TypedVariable):
    """
    A point in time, rendered with separate date and time widths.

    Args:
        value: A ``datetime`` or a UNIX timestamp
        date_format: One of "full", "long", "medium", "short"
        time_format: One of "full", "long", "medium", "short"
        timezone: IANA zone name; naive datetimes are taken as UTC and
            rendered in this zone (UTC when omitted)
    """

    def __init__(
        self,
        value: datetime | int | float,
        date_format: FormatWidth = "medium",
        time_format: FormatWidth = "medium",
        timezone: str | None = None,
    ) -> None:
        super().__init__(value)
        self._date_format = date_format
        self._time_format = time_format
        self._timezone = timezone

    def get_date_format(self) -> FormatWidth:
        return self._date_format

    def get_time_format(self) -> FormatWidth:
        return self._time_format

    def get_timezone(self) -> str | None:
        return self._timezone

    def _as_datetime(self) -> datetime:
        if isinstance(self._value, datetime):
            moment = self._value
            if moment.tzinfo is None:
                moment = moment.replace(tzinfo=UTC)
        else:
            moment = datetime.fromtimestamp(self._value, tz=UTC)
        zone = get_timezone(self._timezone) if self._timezone else UTC
        return moment.astimezone(zone)

    def render(self, locale: str) -> str:
        moment = self._as_datetime()
        # CLDR glue pattern: {1} is the date, {0} the time
        pattern = get_datetime_format(self._date_format, locale=locale)
        return (
            pattern.replace("'", "")
            .replace("{0}", format_time(moment, self._time_format, tzinfo=moment.tzinfo, locale=locale))
            .replace("{1}", format_date(moment, self._date_format, locale=locale))
        )


# Largest unit first
_DURATION_UNITS: tuple[tuple[str, int], ...] = (
    ("duration-week", 604800),
    ("duration-day", 86400),
    ("duration-hour", 3600),
    ("duration-minute", 60),
    ("duration-second", 1),
)


class DurationVariable(TypedVariable):
    """
    A duration in seconds, spelled out with words.

    12345 renders as "3 hours, 25 minutes and 45 seconds" in English.
    """

    def __init__(self, value: int, separator: str = ", ", last_separator: str = " and ") -> None:
        super().__init__(value)
        self._separator = separator
        self._last_separator = last_separator

    def render(self, locale: str) -> str:
        remaining = int(self._value)
        if remaining == 0:
            return format_unit(0, "duration-second", length="long", locale=locale)

        parts: list[str] = []
        for unit, size in _DURATION_UNITS:
            amount, remaining = divmod(remaining, size)
            if amount:
                parts.append(format_unit(amount, unit, length="long", locale=locale))

        if len(parts) == 1:
            return parts[0]
        return self._separator.join(parts[:-1]) + self._last_separator + parts[-1]
