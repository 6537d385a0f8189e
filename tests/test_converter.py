"""Tests for the converter."""

import logging

import pytest

from pkgbuild_convert.core.converter import Converter, command_line, value_literal
from pkgbuild_convert.core.declarations import parse_declare_output
from pkgbuild_convert.core.statements import Statement
from pkgbuild_convert.errors import IncompleteStatementError

from conftest import FakeChecksum, FakeResolver, requires_bash

PKGBUILD = """\
# Maintainer: someone
pkgname=foo
pkgver=1.0
depends=('>=bar-1' 'baz')

build() {
  cd "$srcdir/$pkgname-$pkgver"
  make \\
    PREFIX=/usr
}

package() {
  rm -rf "$pkgdir/usr/share/doc"
  mkdir -p "$pkgdir/opt"
}
"""

EXPECTED = "\n".join(
    [
        "require 'package'",
        "",
        "class Foo < Package",
        "# Maintainer: someone",
        'version "1.0"',
        'depends_on "bar-1"',
        'depends_on "baz"',
        "",
        "def self.build",
        "Dir.chdir(\"#{Dir[\"#{CREW_BREW_DIR}/#{File.basename(__FILE__, '.rb')}.*.dir\"]}/foo-#{version}\")",
        'system "make \\\\',
        'PREFIX=/usr"',
        "end",
        "",
        "def self.install",
        'FileUtils.rm_rf "#{CREW_DEST_DIR}/usr/share/doc"',
        'FileUtils.mkdir_p "#{CREW_DEST_DIR}/opt"',
        "end",
        "end",
        "",
    ]
)


def make_converter(config, outputs, **kwargs):
    return Converter(config, resolver=FakeResolver(outputs), **kwargs)


def convert(config, text, outputs=None, **kwargs):
    converter = make_converter(config, outputs or {}, **kwargs)
    return converter.convert_lines(text.splitlines(keepends=True))


def body(recipe):
    """Lines between the class header and the final 'end'."""
    lines = recipe.splitlines()
    return lines[3:-1]


class TestHelpers:
    """Tests for module helper functions."""

    def test_command_line(self):
        """Test rendering a generic command."""
        assert command_line(Statement.from_text('echo "hi"')) == 'system "echo \\"hi\\""'

    @pytest.mark.parametrize(
        "output, expected",
        [
            ('declare -- x="abc"', '"abc"'),
            ('declare -i x="42"', "42"),
            ('declare -a x=([0]="a" [1]="b")', '["a", "b"]'),
            ("declare -a x=()", "[]"),
        ],
    )
    def test_value_literal(self, output, expected):
        """Test rendering declaration values."""
        assert value_literal(parse_declare_output(output)) == expected


class TestConverter:
    """Tests for Converter class."""

    def test_full_conversion(self, config, metadata_outputs):
        """Test converting a small PKGBUILD."""
        assert convert(config, PKGBUILD, metadata_outputs) == EXPECTED

    def test_resolver_called_per_assignment(self, config, metadata_outputs):
        """Test that each assignment is resolved once, in order."""
        converter = make_converter(config, metadata_outputs)

        converter.convert_lines(PKGBUILD.splitlines(keepends=True))

        assert converter.resolver.calls == ["pkgname", "pkgver", "depends"]

    def test_user_variable(self, config):
        """Test that other variables become instance variables."""
        recipe = convert(config, "_commit=abc\n", {"_commit": 'declare -- _commit="abc"'})

        assert body(recipe) == ['@__commit = "abc"']

    def test_exported_variable(self, config):
        """Test that exported variables are also set in the environment."""
        recipe = convert(config, "export CC=gcc\n", {"CC": 'declare -x CC="gcc"'})

        assert body(recipe) == ['@_CC = "gcc"', 'ENV["CC"] = @_CC']

    def test_integer_variable(self, config):
        """Test that integer variables become integers."""
        recipe = convert(config, "declare -i jobs=4\n", {"jobs": 'declare -i jobs="4"'})

        assert body(recipe) == ["@_jobs = 4"]

    def test_array_variable(self, config):
        """Test that array variables become arrays."""
        recipe = convert(
            config,
            "files=(a 'b c')\n",
            {"files": 'declare -a files=([0]="a" [1]="b c")'},
        )

        assert body(recipe) == ['@_files = ["a", "b c"]']

    def test_variable_reference_in_command(self, config):
        """Test that references to user variables are interpolated."""
        recipe = convert(config, "echo $_commit ${foo}\n")

        assert body(recipe) == ['system "echo #{@__commit} #{@_foo}"']

    def test_multiline_array_assignment(self, config):
        """Test an array assignment spanning several lines."""
        recipe = convert(
            config,
            "arch=(\n  'x86_64'\n  'aarch64'\n)\n",
            {"arch": 'declare -a arch=([0]="x86_64" [1]="aarch64")'},
        )

        assert body(recipe) == ['compatibility "x86_64, aarch64"']

    def test_positional_parameter_in_command(self, config):
        """Test that positional parameters are left as shell text."""
        assert body(convert(config, "echo $1 $_x\n")) == ['system "echo $1 #{@__x}"']

    def test_lifecycle_function_mapping(self, config):
        """Test the recipe method names of lifecycle functions."""
        recipe = convert(config, "prepare() {\n}\npkgver() {\n}\ncheck() {\n}\n")

        assert body(recipe) == [
            "def self.patch",
            "end",
            "def self.__arch_pkgver__",
            "end",
            "def self.check",
            "end",
        ]

    def test_unknown_function_passthrough(self, config):
        """Test that a helper function header is passed through as a command."""
        recipe = convert(config, "_helper() {\n")

        assert body(recipe) == ['system "_helper() {"']

    def test_cd_without_argument(self, config):
        """Test that 'cd' with no directory is passed through."""
        assert body(convert(config, "cd\n")) == ['system "cd"']

    def test_cd_with_options(self, config):
        """Test that 'cd' with more than one argument is passed through."""
        assert body(convert(config, "cd -P build\n")) == ['system "cd -P build"']

    def test_cd_unquotes_directory(self, config):
        """Test that the directory argument loses its quoting."""
        assert body(convert(config, "cd 'my dir'\n")) == ['Dir.chdir("my dir")']

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("rm -rf build", 'FileUtils.rm_rf "build"'),
            ("rm -f a b", 'FileUtils.rm_rf ["a", "b"]'),
            ("rm *.o", 'FileUtils.rm_rf Dir["*.o"]'),
            ("rm a *.o", 'FileUtils.rm_rf Dir.glob(["a", "*.o"])'),
            ("mkdir -p 'out dir'", 'FileUtils.mkdir_p "out dir"'),
            ("mkdir  x", 'FileUtils.mkdir_p "x"'),
        ],
    )
    def test_file_operations(self, config, line, expected):
        """Test rewriting file operations."""
        assert body(convert(config, line + "\n")) == [expected]

    def test_comment_kept(self, config):
        """Test that comments are kept verbatim."""
        assert body(convert(config, "  # note: $x\n")) == ["# note: #{@_x}"]

    def test_unterminated_passthrough(self, config, caplog):
        """Test that an unterminated statement is passed through with a warning."""
        with caplog.at_level(logging.WARNING):
            recipe = convert(config, "echo 'oops\nmore\n")

        assert body(recipe) == ['system "echo \'oops', 'more"']
        assert "Unterminated statement at line 1" in caplog.text

    def test_unterminated_strict(self, config):
        """Test that strict mode rejects an unterminated statement."""
        config.config.strict = True

        with pytest.raises(IncompleteStatementError) as exc_info:
            convert(config, "pkgname=foo\necho \"oops\n", {"pkgname": 'declare -- pkgname="foo"'})

        assert exc_info.value.line_number == 2

    def test_missing_pkgname(self, config, caplog):
        """Test that a recipe without pkgname keeps the placeholder."""
        with caplog.at_level(logging.WARNING):
            recipe = convert(config, "make\n")

        assert recipe.splitlines()[2] == "class <pkgName> < Package"
        assert "No pkgname found" in caplog.text

    def test_status_messages(self, config):
        """Test progress reporting."""
        messages = []

        convert(config, "make\n", status=lambda level, msg: messages.append((level, msg)))

        assert messages == [("progress", "Replacing variable substitution syntax...")]

    def test_derived_checksum(self, config):
        """Test downloading the source when only another checksum is given."""
        checksum = FakeChecksum("ab" * 32)
        outputs = {
            "pkgname": 'declare -- pkgname="foo"',
            "pkgver": 'declare -- pkgver="1.0"',
            "source": 'declare -a source=([0]="https://x/$pkgname-$pkgver.tar.gz")',
            "md5sums": 'declare -a md5sums=([0]="ffff")',
        }
        text = "pkgname=foo\npkgver=1.0\nsource=(https://x/$pkgname-$pkgver.tar.gz)\nmd5sums=(ffff)\n"

        recipe = convert(config, text, outputs, checksum=checksum)

        assert checksum.urls == ["https://x/foo-1.0.tar.gz"]
        assert body(recipe) == [
            'version "1.0"',
            'source_url "https://x/foo-#{version}.tar.gz"',
            f'source_sha256 "{"ab" * 32}"',
        ]

    def test_fetch_disabled(self, offline_config, fake_checksum):
        """Test that no download happens when fetching is disabled."""
        outputs = {
            "source": 'declare -a source=([0]="https://x/a.tar.gz")',
            "md5sums": 'declare -a md5sums=([0]="ffff")',
        }

        recipe = convert(offline_config, "source=(x)\nmd5sums=(y)\n", outputs, checksum=fake_checksum)

        assert fake_checksum.urls == []
        assert body(recipe) == ['source_url "https://x/a.tar.gz"']

    def test_sha256sums_after_md5sums(self, config):
        """Test that a later sha256sums is used instead of deriving one."""
        checksum = FakeChecksum("deadbeef")
        outputs = {
            "source": 'declare -a source=([0]="https://x/a.tar.gz")',
            "md5sums": 'declare -a md5sums=([0]="y")',
            "sha256sums": 'declare -a sha256sums=([0]="z")',
        }

        recipe = convert(config, "source=(x)\nmd5sums=(y)\nsha256sums=(z)\n", outputs, checksum=checksum)

        assert checksum.urls == []
        assert body(recipe) == ['source_url "https://x/a.tar.gz"', 'source_sha256 "z"']

    def test_multiline_description(self, config):
        """Test a description spanning lines."""
        outputs = {
            "pkgname": 'declare -- pkgname="foo"',
            "pkgdesc": "declare -- pkgdesc=$'A tool\\nspanning lines'",
        }

        recipe = convert(config, 'pkgname=foo\npkgdesc="A tool\nspanning lines"\n', outputs)

        assert body(recipe) == ['description "A tool\\nspanning lines"']

    def test_convert_file(self, config, metadata_outputs, tmp_path):
        """Test converting from a file."""
        path = tmp_path / "PKGBUILD"
        path.write_text(PKGBUILD)

        recipe = make_converter(config, metadata_outputs).convert_file(path)

        assert recipe == EXPECTED


@requires_bash
class TestConverterBash:
    """End-to-end tests with the default shell resolver."""

    def test_full_conversion(self, config):
        """Test converting a small PKGBUILD through bash."""
        assert Converter(config).convert_lines(PKGBUILD.splitlines(keepends=True)) == EXPECTED

    def test_metadata(self, offline_config):
        """Test converting common metadata through bash."""
        text = "\n".join(
            [
                "pkgname=py-thing",
                "pkgdesc='A \"quoted\" thing'",
                "arch=('any')",
                'url="https://example.com/$pkgname"',
                "license=('MIT')",
                "sha256sums=('SKIP')",
                "",
            ]
        )

        recipe = Converter(offline_config).convert_lines(text.splitlines(keepends=True))

        assert recipe.splitlines()[2] == "class Py_thing < Package"
        assert body(recipe) == [
            'description "A \\"quoted\\" thing"',
            'compatibility "all"',
            'homepage "https://example.com/py-thing"',
            'license "MIT"',
            'source_sha256 "SKIP"',
        ]

    def test_multiline_description(self, offline_config):
        """Test converting a description spanning lines through bash."""
        recipe = Converter(offline_config).convert_lines(["pkgname=foo\n", 'pkgdesc="A tool\n', 'spanning lines"\n'])

        assert body(recipe) == ['description "A tool\\nspanning lines"']

    def test_sha256sums_after_md5sums(self, config, fake_checksum):
        """Test that sha256sums wins over an earlier md5sums through bash."""
        text = "source=(https://x/a.tar.gz)\nmd5sums=(y)\nsha256sums=(z)\n"

        recipe = Converter(config, checksum=fake_checksum).convert_lines(text.splitlines(keepends=True))

        assert fake_checksum.urls == []
        assert body(recipe) == ['source_url "https://x/a.tar.gz"', 'source_sha256 "z"']
