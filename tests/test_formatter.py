"""Tests for the recipe formatter runner."""

import logging
import subprocess
from pathlib import Path
from unittest.mock import patch

from pkgbuild_convert.recipe.formatter import run_formatter


class TestRunFormatter:
    """Tests for run_formatter function."""

    def test_success(self):
        """Test a formatter that exits cleanly."""
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")
        with patch("pkgbuild_convert.recipe.formatter.subprocess.run", return_value=completed) as run:
            assert run_formatter(["rubocop", "-a"], Path("foo.rb"))

        assert run.call_args.args[0] == ["rubocop", "-a", "foo.rb"]

    def test_empty_command(self):
        """Test that an empty command does nothing."""
        with patch("pkgbuild_convert.recipe.formatter.subprocess.run") as run:
            assert not run_formatter([], Path("foo.rb"))

        run.assert_not_called()

    def test_missing_formatter(self, caplog):
        """Test that a missing formatter is a warning, not an error."""
        with caplog.at_level(logging.WARNING):
            assert not run_formatter(["/nonexistent/formatter"], Path("foo.rb"))

        assert "Formatter not found" in caplog.text

    def test_failing_formatter(self, caplog):
        """Test that a failing formatter is a warning, not an error."""
        completed = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="offenses\n")
        with patch("pkgbuild_convert.recipe.formatter.subprocess.run", return_value=completed):
            with caplog.at_level(logging.WARNING):
                assert not run_formatter(["rubocop"], Path("foo.rb"))

        assert "status 1: offenses" in caplog.text
