"""Recipe layer for describing a canvas in YAML."""

from .builder import populate_canvas
from .errors import RecipeLoadError, RecipeValidationError
from .loader import RecipeFile, load_recipe, parse_recipe_text
from .models import ConnectionEntry, GenerationEntry, MediaEntry, Recipe, SectionEntry

__all__ = [
    "RecipeLoadError",
    "RecipeValidationError",
    "ConnectionEntry",
    "GenerationEntry",
    "MediaEntry",
    "Recipe",
    "RecipeFile",
    "SectionEntry",
    "load_recipe",
    "parse_recipe_text",
    "populate_canvas",
]
