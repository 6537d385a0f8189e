"""Element extraction from bash indexed-array text."""

from __future__ import annotations

import re

from pkgbuild_convert.core.tokenizer import decode_ansi_c

# [index]="value" or [index]=$'value', where the closing quote is not escaped
ELEMENT_PATTERN = re.compile(
    r"""\[(?:[^\]\\]|\\.)*\]=(?:"((?:[^"\\]|\\.)*)"|\$'((?:[^'\\]|\\.)*)')""",
    re.DOTALL,
)

_ESCAPE_PATTERN = re.compile(r'\\([\\"$`])')


def unescape_double_quoted(value: str) -> str:
    """Undo the escaping bash applies inside double quotes."""
    return _ESCAPE_PATTERN.sub(r"\1", value)


def extract_elements(text: str) -> list[str]:
    """Extract the element values of an array literal.

    Elements are returned in order of appearance; the indices are discarded.
    bash prints values holding newlines or control characters as ``$'...'``.

    Args:
        text: Array text as printed by ``declare -p``

    Returns:
        List of element values

    Examples:
        >>> extract_elements('([0]="x86_64" [1]="aarch64")')
        ['x86_64', 'aarch64']
        >>> extract_elements("([0]=$'a\\\\tb' [1]=\\"c\\")")
        ['a\\tb', 'c']
    """
    elements = []
    for match in ELEMENT_PATTERN.finditer(text):
        quoted, ansi_c = match.groups()
        if ansi_c is not None:
            elements.append(decode_ansi_c(ansi_c))
        else:
            elements.append(unescape_double_quoted(quoted))
    return elements


def is_array_literal(text: str) -> bool:
    """Check if text is a parenthesised array form."""
    stripped = text.strip()
    return stripped.startswith("(") and stripped.endswith(")")
