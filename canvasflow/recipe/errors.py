"""Errors raised while reading recipes."""


class RecipeLoadError(Exception):
    """The recipe could not be read as a YAML mapping.

    ``source`` is the recipe file, or None for recipes parsed from text.
    """

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        super().__init__(message)


class RecipeValidationError(Exception):
    """The recipe is valid YAML but does not describe a valid canvas.

    Each entry in ``errors`` has a dotted ``loc`` naming the recipe entry
    (``nodes.intro.kind``; empty for problems with the recipe as a whole),
    a ``msg`` and the pydantic error ``type``.
    """

    def __init__(
        self, message: str, errors: list[dict] | None = None, source: str | None = None
    ):
        self.errors = errors or []
        self.source = source
        super().__init__(message)
