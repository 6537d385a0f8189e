"""Default configuration values."""

DEFAULT_CONFIG_YAML = r"""
config:
  color: true
  strict: false
  output: converted.rb

shell:
  command: bash -c

checksum:
  fetch: true
  chunk_size: 65536

formatter:
  enabled: true
  command: rubocop -a -x

theme:
  progress: bold yellow
  success: bold green
  hint: bold cyan

functions:
  prepare: patch
  pkgver: __arch_pkgver__
  build: build
  check: check
  package: install

file_operations:
  rm: rm_rf
  mkdir: mkdir_p

substitutions:
  pkgver: '#{version}'
  pkgrel: '#{version[/.*\-(.*)$/, 1]}'
  srcdir: '#{Dir["#{CREW_BREW_DIR}/#{File.basename(__FILE__, ''.rb'')}.*.dir"]}'
  pkgdir: '#{CREW_DEST_DIR}'
"""
