"""Pytest configuration and fixtures."""

import shutil

import pytest

from pkgbuild_convert.config.loader import default_config, load_config_from_string
from pkgbuild_convert.config.schema import Config
from pkgbuild_convert.core.declarations import (
    Declaration,
    Resolver,
    assignment_name,
    parse_declare_output,
)

requires_bash = pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")


class FakeResolver(Resolver):
    """Resolver that replays canned ``declare -p`` output by variable name."""

    def __init__(self, outputs: dict[str, str]) -> None:
        self.outputs = outputs
        self.calls: list[str] = []

    def resolve(self, statement) -> Declaration:
        name = assignment_name(statement)
        self.calls.append(name)
        return parse_declare_output(self.outputs[name])


class FakeChecksum:
    """Checksum collaborator that records the URLs it was asked for."""

    def __init__(self, digest: str = "0" * 64) -> None:
        self.digest = digest
        self.urls: list[str] = []

    def __call__(self, url: str) -> str:
        self.urls.append(url)
        return self.digest


@pytest.fixture
def config() -> Config:
    """Built-in default configuration."""
    return default_config()


@pytest.fixture
def offline_config() -> Config:
    """Default configuration with checksum fetching disabled."""
    return load_config_from_string(
        """
checksum:
  fetch: false
"""
    )


@pytest.fixture
def metadata_outputs() -> dict[str, str]:
    """declare -p output for a small PKGBUILD."""
    return {
        "pkgname": 'declare -- pkgname="foo"',
        "pkgver": 'declare -- pkgver="1.0"',
        "depends": 'declare -a depends=([0]=">=bar-1" [1]="baz")',
    }


@pytest.fixture
def fake_checksum() -> FakeChecksum:
    return FakeChecksum()
