"""PKGBUILD to recipe conversion."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

from pkgbuild_convert.config.loader import default_config
from pkgbuild_convert.core.declarations import Declaration, Resolver, ShellResolver
from pkgbuild_convert.core.statements import Statement, StatementClassifier, StatementKind, reassemble
from pkgbuild_convert.errors import IncompleteStatementError
from pkgbuild_convert.recipe.checksum import fetch_sha256
from pkgbuild_convert.recipe.document import RecipeDocument
from pkgbuild_convert.recipe.keywords import KeywordMapper
from pkgbuild_convert.recipe.literals import ruby_array, ruby_integer, ruby_string

if TYPE_CHECKING:
    from pkgbuild_convert.config.schema import Config
    from pkgbuild_convert.console import StatusCallback

logger = logging.getLogger(__name__)


def command_line(statement: Statement) -> str:
    """Render a statement as a generic shell command call."""
    return f"system {ruby_string(statement.text, keep_newlines=True)}"


def value_literal(declaration: Declaration) -> str:
    """Render a declaration's value as a Ruby literal."""
    if declaration.flags.integer:
        return str(ruby_integer(declaration.scalar))
    if declaration.flags.is_array:
        return ruby_array(declaration.elements)
    return ruby_string(declaration.scalar)


class Converter:
    """Converts PKGBUILD statements into recipe statements."""

    def __init__(
        self,
        config: Config | None = None,
        resolver: Resolver | None = None,
        checksum: Callable[[str], str] | None = None,
        status: StatusCallback | None = None,
    ) -> None:
        """Initialize the converter.

        Args:
            config: Configuration (default: built-in defaults)
            resolver: Evaluates assignments (default: the configured shell)
            checksum: Returns the SHA-256 of a source URL (default: download it)
            status: Receives user-facing progress messages
        """
        self.config = config or default_config()
        self.resolver = resolver or ShellResolver(self.config.shell.argv())
        if checksum is None:
            checksum = partial(fetch_sha256, chunk_size=self.config.checksum.chunk_size)
        self.status = status

        self.classifier = StatementClassifier(
            function_names=self.config.functions,
            file_operations=self.config.file_operations,
        )
        self.keywords = KeywordMapper(
            checksum=checksum,
            fetch=self.config.checksum.fetch,
            status=status,
        )

    def _report(self, level: str, message: str) -> None:
        if self.status:
            self.status(level, message)

    def convert_file(self, path: Path | str) -> str:
        """Convert a PKGBUILD file and return the recipe text."""
        with open(path, encoding="utf-8") as f:
            return self.convert_lines(f)

    def convert_lines(self, lines: Iterable[str]) -> str:
        """Convert PKGBUILD lines and return the recipe text."""
        document = RecipeDocument()

        for statement in reassemble(lines):
            if not statement.complete:
                self._convert_incomplete(statement, document)
                continue
            self.convert_statement(self.classifier.apply(statement), document)

        self.keywords.finalize(document)

        if document.package_name is None:
            logger.warning("No pkgname found; class name left as placeholder")

        self._report("progress", "Replacing variable substitution syntax...")
        return document.render(self.config.substitutions)

    def convert_statement(self, statement: Statement, document: RecipeDocument) -> None:
        """Append the conversion of one classified statement to a document."""
        match statement.kind:
            case StatementKind.COMMENT:
                document.append(statement.text)
            case StatementKind.ASSIGNMENT:
                self._convert_assignment(statement, document)
            case StatementKind.CHDIR:
                document.append(self._convert_chdir(statement))
            case StatementKind.FILE_OPERATION:
                document.append(self._convert_file_operation(statement))
            case StatementKind.FUNCTION_HEADER:
                function = self.classifier.function_name(statement)
                document.append(f"def self.{self.config.method_for(function)}")
            case StatementKind.FUNCTION_END:
                document.append("end")
            case _:
                document.append(command_line(statement))

    def _convert_incomplete(self, statement: Statement, document: RecipeDocument) -> None:
        if self.config.config.strict:
            raise IncompleteStatementError(statement.text, statement.line_number)
        logger.warning(
            "Unterminated statement at line %d; passed through as a command",
            statement.line_number,
        )
        document.append(command_line(statement))

    def _convert_assignment(self, statement: Statement, document: RecipeDocument) -> None:
        declaration = self.resolver.resolve(statement)
        name = declaration.name

        if not declaration.flags.is_array:
            document.variables[name] = document.expand(declaration.scalar)

        if self.keywords.handles(name):
            self.keywords.apply(declaration, document)
            return

        document.append(f"@_{name} = {value_literal(declaration)}")
        if declaration.flags.exported:
            document.append(f"ENV[{ruby_string(name)}] = @_{name}")

    def _convert_chdir(self, statement: Statement) -> str:
        # Only a plain 'cd DIR' is rewritten
        if len(statement.args) != 1:
            return command_line(statement)
        return f"Dir.chdir({ruby_string(statement.args[0].value)})"

    def _convert_file_operation(self, statement: Statement) -> str:
        action = self.config.file_operations[statement.head]
        targets = [token.value for token in statement.args if token.raw and not token.raw.startswith("-")]
        globbing = any("*" in target for target in targets)

        if len(targets) == 1:
            target = ruby_string(targets[0])
            return f"FileUtils.{action} Dir[{target}]" if globbing else f"FileUtils.{action} {target}"

        array = ruby_array(targets)
        return f"FileUtils.{action} Dir.glob({array})" if globbing else f"FileUtils.{action} {array}"
