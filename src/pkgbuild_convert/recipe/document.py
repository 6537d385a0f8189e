"""Recipe document accumulation and variable substitution."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

PACKAGE_PLACEHOLDER = "<pkgName>"
PREAMBLE = f"require 'package'\n\nclass {PACKAGE_PLACEHOLDER} < Package"
TERMINATOR = "end"

REFERENCE_PATTERN = re.compile(r"\$\{([A-Za-z_]\w*)\}|\$([A-Za-z_]\w*)")


def class_name_for(package_name: str) -> str:
    """Derive the recipe class name from a package name.

    Examples:
        >>> class_name_for("foo")
        'Foo'
        >>> class_name_for("py3-setuptools")
        'Py3_setuptools'
    """
    return re.sub(r"\W", "_", package_name.capitalize())


def _reference_pattern(name: str) -> re.Pattern[str]:
    escaped = re.escape(name)
    return re.compile(rf"\$\{{{escaped}\}}|\${escaped}(?!\w)")


def substitute_variables(text: str, table: Mapping[str, str]) -> str:
    """Rewrite shell variable references into Ruby interpolations.

    Names in ``table`` are replaced by their mapped expression; any other
    ``$name`` or ``${name}`` becomes ``#{@_name}``.
    """
    for name, replacement in table.items():
        text = _reference_pattern(name).sub(lambda _: replacement, text)

    return REFERENCE_PATTERN.sub(lambda m: f"#{{@_{m.group(1) or m.group(2)}}}", text)


@dataclass
class RecipeDocument:
    """Converted statements of one recipe plus conversion-wide facts.

    Attributes:
        lines: Converted statements in input order
        package_name: Value of ``pkgname`` once seen
        source_url: First source entry once seen
        checksum: Digest given by ``sha256sums``, once seen
        checksum_slot: Index of the line reserved for ``source_sha256``
        variables: Scalar values resolved so far, by name
    """

    lines: list[str] = field(default_factory=list)
    package_name: str | None = None
    source_url: str | None = None
    checksum: str | None = None
    checksum_slot: int | None = None
    variables: dict[str, str] = field(default_factory=dict)

    def append(self, line: str) -> None:
        self.lines.append(line)

    def set_package_name(self, name: str) -> None:
        self.package_name = name

    def reserve_checksum_slot(self) -> int:
        """Reserve the position of the ``source_sha256`` line; the first call wins."""
        if self.checksum_slot is None:
            self.checksum_slot = len(self.lines)
            self.lines.append("")
        return self.checksum_slot

    def fill_checksum_slot(self, line: str | None) -> None:
        """Write the reserved line, or drop the slot when there is nothing to write."""
        if self.checksum_slot is None:
            return
        if line is None:
            del self.lines[self.checksum_slot]
            self.checksum_slot = None
        else:
            self.lines[self.checksum_slot] = line

    @property
    def class_name(self) -> str:
        if self.package_name is None:
            return PACKAGE_PLACEHOLDER
        return class_name_for(self.package_name)

    def expand(self, text: str) -> str:
        """Expand references to variables resolved so far, leaving others intact."""

        def lookup(match: re.Match[str]) -> str:
            name = match.group(1) or match.group(2)
            return self.variables.get(name, match.group(0))

        return REFERENCE_PATTERN.sub(lookup, text)

    def render(self, substitutions: Mapping[str, str] | None = None) -> str:
        """Render the complete recipe.

        Args:
            substitutions: Well-known variable names mapped to Ruby expressions

        Returns:
            Recipe source text
        """
        header = PREAMBLE.replace(PACKAGE_PLACEHOLDER, self.class_name)
        text = "\n".join([header, *self.lines, TERMINATOR]) + "\n"

        table = dict(substitutions or {})
        if self.package_name is not None:
            table.setdefault("pkgname", self.package_name)

        return substitute_variables(text, table)
