"""
Output normalizer.

Removes the color codes and boundary markers that rendering produced but
that have no visible effect:

- a bare COLOR "," that is not a color reset,
- a color code immediately overridden by another color code,
- a double BOLD after a one-sided color code when the next character can
  not be mistaken for part of that code.
"""

from __future__ import annotations

import re

_REDUNDANT_RE = re.compile(
    "\x03,(?![01])"
    "|"
    "\x03(?:[0-9]{2})?,(?:[0-9]{2})?(?:\x02\x02)?(?=\x03)"
    "|"
    "(\x03(?:[0-9]{2})?,)\x02\x02(?![0-9])"
    "|"
    "(\x03[0-9]{2})\x02\x02(?!,)"
)


def _keep(match: re.Match[str]) -> str:
    return (match.group(1) or "") + (match.group(2) or "")


def normalize(text: str) -> str:
    """
    Collapse redundant color sequences.

    Every substitution shortens the text, so repeating the pass until
    nothing changes terminates; the result is a fixed point, which makes
    ``normalize`` idempotent.
    """
    while True:
        result = _REDUNDANT_RE.sub(_keep, text)
        if result == text:
            return result
        text = result
