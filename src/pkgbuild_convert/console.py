"""User-facing status output."""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from typing import TextIO

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText

from pkgbuild_convert.core.color import ColorParser

# Receives (level, message); levels are theme keys such as "progress"
StatusCallback = Callable[[str, str], None]


class StatusPrinter:
    """Prints status messages, styled by level from the configured theme."""

    def __init__(
        self,
        theme: Mapping[str, str],
        color: bool = True,
        file: TextIO | None = None,
    ) -> None:
        """Initialize the printer.

        Args:
            theme: Status level to color spec mapping
            color: Whether to style output
            file: Output stream (default: stderr)
        """
        self.color = color
        self.file = file
        parser = ColorParser()
        self.styles = {level: parser.parse(spec).to_prompt_toolkit_style() for level, spec in theme.items()}

    def __call__(self, level: str, message: str) -> None:
        file = self.file or sys.stderr
        if not self.color:
            print(message, file=file)
            return
        print_formatted_text(FormattedText([(self.styles.get(level, ""), message)]), file=file)
