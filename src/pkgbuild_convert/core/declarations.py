"""Resolution of assignment statements through an external shell."""

from __future__ import annotations

import logging
import re
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pkgbuild_convert.core.arrays import extract_elements, is_array_literal
from pkgbuild_convert.core.statements import DECLARATION_KEYWORDS
from pkgbuild_convert.core.tokenizer import escape_expansions, tokenize, unquote
from pkgbuild_convert.errors import DeclarationError, ShellError

if TYPE_CHECKING:
    from pkgbuild_convert.core.statements import Statement

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class DeclarationFlags:
    """Attributes reported by ``declare -p``."""

    integer: bool = False
    array: bool = False
    associative: bool = False
    exported: bool = False
    readonly: bool = False

    @classmethod
    def parse(cls, option: str) -> DeclarationFlags:
        """Parse an option word such as ``-ax`` or ``--``."""
        letters = option.lstrip("-")
        return cls(
            integer="i" in letters,
            array="a" in letters,
            associative="A" in letters,
            exported="x" in letters,
            readonly="r" in letters,
        )

    @property
    def is_array(self) -> bool:
        return self.array or self.associative


@dataclass
class Declaration:
    """A variable as evaluated by the shell.

    Attributes:
        name: Variable name
        flags: Declaration attributes
        value: Value text as printed by ``declare -p`` (still quoted)
    """

    name: str
    flags: DeclarationFlags = field(default_factory=DeclarationFlags)
    value: str = ""

    @property
    def scalar(self) -> str:
        """Value with shell quoting removed."""
        return unquote(self.value)

    @property
    def elements(self) -> list[str]:
        """Array elements, or the scalar value as a single element."""
        if self.flags.is_array or is_array_literal(self.value):
            return extract_elements(self.value)
        return [self.scalar]


def assignment_name(statement: Statement) -> str:
    """Return the name of the variable an assignment statement sets.

    Raises:
        DeclarationError: If no variable name can be found
    """
    words = [token.raw for token in statement.tokens]

    if words and words[0] in DECLARATION_KEYWORDS:
        candidates = [word for word in words[1:] if word and not word.startswith("-")]
        target = candidates[0] if candidates else ""
    else:
        target = words[0] if words else ""

    match = NAME_PATTERN.match(target)
    if not match:
        raise DeclarationError(f"No variable name in statement: {statement.text!r}")
    return match.group(0)


def build_payload(statement: Statement, name: str) -> str:
    """Build the script that evaluates an assignment and prints its declaration."""
    text = statement.text
    # bash refuses 'local' outside a function body
    if statement.head == "local":
        text = "declare" + text[len("local"):]
    return f"{escape_expansions(text)}\ndeclare -p {name}"


def parse_declare_output(output: str) -> Declaration:
    """Parse one ``declare -p`` line into a Declaration.

    Raises:
        DeclarationError: If the output is not a declaration
    """
    if not output.startswith("declare "):
        pos = output.find("\ndeclare ")
        if pos < 0:
            raise DeclarationError(f"Unexpected declare output: {output!r}")
        output = output[pos + 1 :]

    if output.endswith("\n"):
        output = output[:-1]

    words = tokenize(output, max_tokens=3).words
    if len(words) < 3:
        raise DeclarationError(f"Unexpected declare output: {output!r}")

    _, option, expression = words
    name, _, value = expression.partition("=")
    return Declaration(name=name, flags=DeclarationFlags.parse(option), value=value)


class Resolver(ABC):
    """Turns assignment statements into declarations."""

    @abstractmethod
    def resolve(self, statement: Statement) -> Declaration:
        """Resolve an assignment statement.

        Args:
            statement: A complete assignment statement

        Returns:
            The evaluated declaration
        """
        ...


class ShellResolver(Resolver):
    """Resolver that evaluates assignments with an external shell."""

    def __init__(self, command: Sequence[str] = ("bash", "-c")) -> None:
        """Initialize the resolver.

        Args:
            command: Shell command; the script is passed as the last argument
        """
        self.command = list(command)

    def run(self, payload: str) -> str:
        """Run a script and return its standard output.

        Raises:
            ShellError: If the shell is missing or exits with an error
        """
        try:
            result = subprocess.run(
                [*self.command, payload],
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise ShellError(f"Shell not found: {self.command[0]}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip() if result.stderr else ""
            raise ShellError(
                f"Shell exited with status {result.returncode}: {stderr or 'no output'}",
                returncode=result.returncode,
                stderr=stderr,
            )

        return result.stdout

    def resolve(self, statement: Statement) -> Declaration:
        name = assignment_name(statement)
        logger.debug("Resolving %s (line %d)", name, statement.line_number)
        return parse_declare_output(self.run(build_payload(statement, name)))
