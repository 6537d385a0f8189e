"""Convert PKGBUILD files into Chromebrew-style package recipes."""

__version__ = "0.1.0"
