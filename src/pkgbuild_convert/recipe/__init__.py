"""Recipe output: literals, metadata mapping and document assembly."""

from pkgbuild_convert.recipe.document import RecipeDocument, substitute_variables
from pkgbuild_convert.recipe.keywords import KeywordMapper
from pkgbuild_convert.recipe.literals import ruby_array, ruby_integer, ruby_string

__all__ = [
    "KeywordMapper",
    "RecipeDocument",
    "ruby_array",
    "ruby_integer",
    "ruby_string",
    "substitute_variables",
]
