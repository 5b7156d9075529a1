"""Builder for populating a Canvas from a Recipe."""

from pathlib import Path

from ..canvas import Canvas
from ..graph.models import Position
from ..ingest import ingest_file, ingest_url
from .models import MediaEntry, Recipe

# Default layout: media in the first column, generation nodes in the second
COLUMN_WIDTH = 400.0
MEDIA_ROW_HEIGHT = 200.0
NODE_ROW_HEIGHT = 320.0


def _ingest(entry: MediaEntry, base_dir: Path):
    if entry.url is not None:
        return ingest_url(entry.url, kind=entry.kind, duration=entry.duration, name=entry.name)

    path = Path(entry.path)
    if not path.is_absolute():
        path = base_dir / path
    return ingest_file(path, duration=entry.duration, name=entry.name)


def populate_canvas(
    canvas: Canvas, recipe: Recipe, base_dir: str | Path | None = None
) -> dict[str, str]:
    """Add a recipe's media, nodes, sections and connections to a canvas.

    Args:
        canvas: The canvas to populate.
        recipe: The parsed recipe.
        base_dir: Directory relative media paths are resolved against.
            Defaults to the current directory.

    Returns:
        Mapping of recipe names to the created node ids.

    Raises:
        MediaIngestionError: If a media entry cannot be ingested.
    """
    base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
    node_ids: dict[str, str] = {}

    # Ingest all media first so a bad file fails before anything is added
    ingested = [(entry, _ingest(entry, base_dir)) for entry in recipe.media]

    for row, (entry, media) in enumerate(ingested):
        position = entry.position or Position(x=0.0, y=row * MEDIA_ROW_HEIGHT)
        node = canvas.add_media_node(media, position)
        node_ids[entry.name] = node.id

    for row, entry in enumerate(recipe.nodes):
        position = entry.position or Position(x=COLUMN_WIDTH, y=row * NODE_ROW_HEIGHT)
        node = canvas.add_generation_node(entry.kind, position)
        overrides = entry.overrides()
        if overrides:
            canvas.update_node_data(node.id, overrides)
        node_ids[entry.name] = node.id

    for index, entry in enumerate(recipe.sections):
        position = entry.position or Position(x=-COLUMN_WIDTH, y=index * NODE_ROW_HEIGHT)
        node = canvas.add_section_node(position)
        patch = {"label": entry.label}
        if entry.color is not None:
            patch["color"] = entry.color
        canvas.update_node_data(node.id, patch)

    # Connections after all nodes exist; recipe order is edge order
    for conn in recipe.connections:
        canvas.connect(node_ids[conn.source], node_ids[conn.target])

    return node_ids
