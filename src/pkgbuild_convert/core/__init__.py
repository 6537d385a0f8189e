"""Core functionality: tokenizer, statement reassembly and declaration resolution."""

from pkgbuild_convert.core.arrays import extract_elements
from pkgbuild_convert.core.converter import Converter
from pkgbuild_convert.core.declarations import (
    Declaration,
    DeclarationFlags,
    Resolver,
    ShellResolver,
)
from pkgbuild_convert.core.statements import (
    Statement,
    StatementClassifier,
    StatementKind,
    reassemble,
)
from pkgbuild_convert.core.tokenizer import Token, TokenizerState, tokenize

__all__ = [
    "Converter",
    "Declaration",
    "DeclarationFlags",
    "Resolver",
    "ShellResolver",
    "Statement",
    "StatementClassifier",
    "StatementKind",
    "Token",
    "TokenizerState",
    "extract_elements",
    "reassemble",
    "tokenize",
]
