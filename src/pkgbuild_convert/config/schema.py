"""Pydantic models for configuration schema."""

from __future__ import annotations

import re
import shlex

from pydantic import BaseModel, Field, field_validator

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class GlobalConfig(BaseModel):
    """Global configuration options."""

    color: bool = Field(default=True, description="Enable/disable colored status output")
    strict: bool = Field(
        default=False,
        description="Fail on a statement left unterminated at end of input",
    )
    output: str = Field(default="converted.rb", description="Default output file")


class ShellConfig(BaseModel):
    """External shell used to evaluate assignments."""

    command: str = Field(default="bash -c", description="Shell command; the script is appended")

    def argv(self) -> list[str]:
        return shlex.split(self.command)


class ChecksumConfig(BaseModel):
    """Source checksum derivation."""

    fetch: bool = Field(
        default=True,
        description="Download the source to compute sha256 when no sha256sums is given",
    )
    chunk_size: int = Field(default=65536, gt=0, description="Download chunk size in bytes")


class FormatterConfig(BaseModel):
    """External formatter run on the generated recipe."""

    enabled: bool = True
    command: str = Field(default="rubocop -a -x", description="Formatter command; the file is appended")

    def argv(self) -> list[str]:
        return shlex.split(self.command)


class Config(BaseModel):
    """Top-level configuration."""

    config: GlobalConfig = Field(default_factory=GlobalConfig)
    shell: ShellConfig = Field(default_factory=ShellConfig)
    checksum: ChecksumConfig = Field(default_factory=ChecksumConfig)
    formatter: FormatterConfig = Field(default_factory=FormatterConfig)
    theme: dict[str, str] = Field(
        default_factory=dict, description="Status level to color spec, e.g. 'bold yellow'"
    )
    functions: dict[str, str] = Field(
        default_factory=dict, description="PKGBUILD function name to recipe method name"
    )
    file_operations: dict[str, str] = Field(
        default_factory=dict, description="Shell command to FileUtils method"
    )
    substitutions: dict[str, str] = Field(
        default_factory=dict, description="Variable name to Ruby expression"
    )

    @field_validator("functions", mode="before")
    @classmethod
    def parse_functions(cls, v: dict[str, str] | None) -> dict[str, str]:
        """Accept function names written with their '()' suffix."""
        if v is None:
            return {}
        result = {}
        for name, method in v.items():
            name = name.removesuffix("()")
            if not IDENTIFIER_PATTERN.match(str(method)):
                raise ValueError(f"Invalid recipe method name for {name}: {method!r}")
            result[name] = method
        return result

    @field_validator("substitutions", mode="before")
    @classmethod
    def parse_substitutions(cls, v: dict[str, str] | None) -> dict[str, str]:
        """Accept variable names written as '$name' or '${name}'."""
        if v is None:
            return {}
        return {name.lstrip("$").strip("{}"): expression for name, expression in v.items()}

    def method_for(self, function: str) -> str | None:
        """Get the recipe method a PKGBUILD function maps to."""
        return self.functions.get(function)
