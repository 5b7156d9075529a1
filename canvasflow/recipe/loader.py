"""Reading YAML recipes into Recipe models."""

from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import RecipeLoadError, RecipeValidationError
from .models import Recipe

# Sections that may be written as a name -> entry mapping
NAMED_SECTIONS = ("media", "nodes")


@dataclass(frozen=True)
class RecipeFile:
    """A recipe together with the file it was read from."""

    recipe: Recipe
    path: Path

    @property
    def base_dir(self) -> Path:
        """Directory that relative media paths resolve against."""
        return self.path.parent


def load_recipe(path: str | Path) -> RecipeFile:
    """Read and validate a recipe file.

    Raises:
        RecipeLoadError: If the file cannot be read or is not a YAML mapping.
        RecipeValidationError: If the recipe describes an invalid canvas.
    """
    path = Path(path)

    if not path.exists():
        raise RecipeLoadError(f"File not found: {path}", str(path))

    if not path.is_file():
        raise RecipeLoadError(f"Not a file: {path}", str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RecipeLoadError(f"Cannot read file: {e}", str(path)) from e

    return RecipeFile(recipe=parse_recipe_text(text, source=str(path)), path=path.resolve())


def parse_recipe_text(text: str, source: str | None = None) -> Recipe:
    """Parse recipe YAML. An empty document is an empty recipe.

    Args:
        text: The YAML document.
        source: Where the text came from, attached to any error raised.

    Raises:
        RecipeLoadError: If the text is not a YAML mapping.
        RecipeValidationError: If the recipe describes an invalid canvas.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise RecipeLoadError(f"Invalid YAML: {e}", source) from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise RecipeLoadError(
            f"A recipe must be a mapping of media, nodes, sections and connections, "
            f"got {type(data).__name__}",
            source,
        )

    # Captured before validation, which rewrites named sections into lists
    names = {
        section: list(data[section])
        for section in NAMED_SECTIONS
        if isinstance(data.get(section), dict)
    }

    try:
        return Recipe.model_validate(data)
    except ValidationError as e:
        errors = [
            {
                "loc": _location(err["loc"], names),
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ]
        raise RecipeValidationError(
            f"Recipe has {len(errors)} problem(s)", errors, source
        ) from e


def _location(loc: tuple, names: dict[str, list[str]]) -> str:
    """Dotted location, naming entries by their recipe key where there is one."""
    parts = [str(part) for part in loc]
    if len(loc) > 1 and loc[0] in names and isinstance(loc[1], int):
        keys = names[loc[0]]
        if loc[1] < len(keys):
            parts[1] = str(keys[loc[1]])
    return ".".join(parts)
