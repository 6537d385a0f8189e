"""Best-effort external formatting of a generated recipe."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


def run_formatter(command: Sequence[str], path: Path) -> bool:
    """Run a formatter command on a file.

    Failures are logged, never raised: the unformatted file is still valid.

    Args:
        command: Formatter command; the file path is appended
        path: File to format

    Returns:
        True if the formatter ran and exited successfully
    """
    if not command:
        return False

    try:
        result = subprocess.run(
            [*command, str(path)],
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        logger.warning("Formatter not found: %s", command[0])
        return False

    if result.returncode != 0:
        message = result.stderr.strip() if result.stderr else ""
        logger.warning("Formatter exited with status %d%s", result.returncode, f": {message}" if message else "")
        return False

    return True
