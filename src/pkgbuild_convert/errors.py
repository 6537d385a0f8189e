"""Exceptions raised during conversion."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for conversion failures."""


class ShellError(ConversionError):
    """The external shell could not be run or exited with an error."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class DeclarationError(ConversionError):
    """Output of ``declare -p`` could not be parsed."""


class ChecksumError(ConversionError):
    """A source checksum could not be derived."""


class IncompleteStatementError(ConversionError):
    """Input ended inside an unterminated quote, escape or bracket."""

    def __init__(self, text: str, line_number: int) -> None:
        super().__init__(f"Unterminated statement starting at line {line_number}: {text!r}")
        self.text = text
        self.line_number = line_number
