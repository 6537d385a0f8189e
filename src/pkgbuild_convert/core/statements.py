"""Reassembly of physical lines into classified statements."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum, auto

from pkgbuild_convert.core.tokenizer import INITIAL_STATE, Token, scan, tokenize

DECLARATION_KEYWORDS = frozenset({"local", "declare", "export"})

ASSIGNMENT_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\[[^\]]*\])?\+?=")
FUNCTION_HEADER_PATTERN = re.compile(r"^([A-Za-z_][A-Za-z0-9_-]*)\(\)\{?$")


class StatementKind(Enum):
    """Classification of a statement by its leading token."""

    COMMENT = auto()
    ASSIGNMENT = auto()
    CHDIR = auto()
    FILE_OPERATION = auto()
    FUNCTION_HEADER = auto()
    FUNCTION_END = auto()
    COMMAND = auto()


@dataclass
class Statement:
    """A logical statement, possibly spanning several physical lines.

    Attributes:
        text: Statement text, physical lines joined with newlines
        tokens: Tokens of the text
        kind: Classification (COMMAND until classified)
        line_number: Physical line the statement starts on (1-based)
        complete: False if input ended before the statement was closed
    """

    text: str
    tokens: list[Token] = field(default_factory=list)
    kind: StatementKind = StatementKind.COMMAND
    line_number: int = 1
    complete: bool = True

    @property
    def head(self) -> str:
        """First line of the leading token."""
        if not self.tokens:
            return ""
        return self.tokens[0].raw.split("\n", 1)[0]

    @property
    def args(self) -> list[Token]:
        """Tokens after the leading one."""
        return self.tokens[1:]

    @classmethod
    def from_text(cls, text: str, line_number: int = 1, complete: bool = True) -> Statement:
        return cls(
            text=text,
            tokens=tokenize(text).tokens,
            line_number=line_number,
            complete=complete,
        )


def reassemble(lines: Iterable[str]) -> Iterator[Statement]:
    """Join physical lines into complete statements.

    A line that leaves a quote, escape or bracket open absorbs the following
    lines until the statement closes. If the input ends while a statement is
    still open, it is yielded with ``complete=False``.

    Args:
        lines: Physical lines (trailing newlines allowed)

    Yields:
        Unclassified statements in input order
    """
    pending = ""
    pending_state = INITIAL_STATE
    start_line = 1

    for line_number, line in enumerate(lines, start=1):
        line = line.strip()

        if pending:
            text = pending + line
        else:
            text = line
            start_line = line_number

        state = scan(line, pending_state)
        if state.is_open:
            pending = text + "\n"
            pending_state = scan("\n", state)
            continue

        pending = ""
        pending_state = INITIAL_STATE
        yield Statement.from_text(text, line_number=start_line)

    if pending:
        yield Statement.from_text(pending[:-1], line_number=start_line, complete=False)


class StatementClassifier:
    """Assigns a StatementKind from a statement's leading token."""

    def __init__(
        self,
        function_names: Iterable[str] = (),
        file_operations: Iterable[str] = (),
    ) -> None:
        """Initialize the classifier.

        Args:
            function_names: Lifecycle functions whose headers open a block
            file_operations: Commands rewritten as file operations
        """
        self.function_names = frozenset(function_names)
        self.file_operations = frozenset(file_operations)

    def function_name(self, statement: Statement) -> str | None:
        """Return the lifecycle function a header statement opens, if any."""
        match = FUNCTION_HEADER_PATTERN.match(statement.head)
        if match and match.group(1) in self.function_names:
            return match.group(1)
        return None

    def classify(self, statement: Statement) -> StatementKind:
        """Determine the kind of a complete statement."""
        head = statement.head

        if not head or head.startswith("#"):
            return StatementKind.COMMENT
        if head in DECLARATION_KEYWORDS or ASSIGNMENT_PATTERN.match(head):
            return StatementKind.ASSIGNMENT
        if head == "cd":
            return StatementKind.CHDIR
        if head in self.file_operations:
            return StatementKind.FILE_OPERATION
        if self.function_name(statement):
            return StatementKind.FUNCTION_HEADER
        if head == "}":
            return StatementKind.FUNCTION_END
        return StatementKind.COMMAND

    def apply(self, statement: Statement) -> Statement:
        """Classify a statement in place and return it."""
        statement.kind = self.classify(statement)
        return statement
