"""Ruby literal emission."""

from __future__ import annotations

import re
from collections.abc import Iterable

ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\f": "\\f",
    "\v": "\\v",
    "\b": "\\b",
    "\a": "\\a",
    "\x1b": "\\e",
}

INTEGER_PATTERN = re.compile(r"\s*([-+]?\d+)")


def ruby_string(value: str, keep_newlines: bool = False) -> str:
    """Render a double-quoted Ruby string literal, as ``String#inspect`` does.

    Args:
        value: String to render
        keep_newlines: Emit newlines as-is instead of ``\\n``

    Returns:
        Ruby source for the literal
    """
    parts = ['"']

    for i, char in enumerate(value):
        if char == "\n" and keep_newlines:
            parts.append(char)
        elif char in ESCAPES:
            parts.append(ESCAPES[char])
        elif char == "#" and value[i + 1 : i + 2] in ("{", "$", "@"):
            parts.append("\\#")
        elif not char.isprintable():
            code = ord(char)
            parts.append(f"\\u{code:04X}" if code <= 0xFFFF else f"\\u{{{code:X}}}")
        else:
            parts.append(char)

    parts.append('"')
    return "".join(parts)


def ruby_array(values: Iterable[str]) -> str:
    """Render a Ruby array of string literals."""
    return "[" + ", ".join(ruby_string(value) for value in values) + "]"


def ruby_integer(text: str) -> int:
    """Convert text the way Ruby's ``String#to_i`` does (leading digits or 0)."""
    match = INTEGER_PATTERN.match(text)
    return int(match.group(1)) if match else 0
