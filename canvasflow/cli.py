"""Command-line interface for canvasflow."""

import asyncio
import logging
import sys

import click

from .canvas import Canvas
from .generation.controller import JobResult
from .generation.errors import APIKeyMissingError
from .generation.service import FalGenerationService
from .ingest import MediaIngestionError
from .output.formatter import NodeReport, format_inspection, format_job_results
from .recipe.builder import populate_canvas
from .recipe.errors import RecipeLoadError, RecipeValidationError
from .recipe.loader import load_recipe
from .recipe.models import Recipe


def _load_canvas(recipe_file: str, canvas: Canvas) -> tuple[Recipe, dict[str, str]]:
    """Parse a recipe and populate the canvas, exiting with code 2 on failure."""
    try:
        loaded = load_recipe(recipe_file)
        names = populate_canvas(canvas, loaded.recipe, base_dir=loaded.base_dir)
    except RecipeLoadError as e:
        click.echo(f"Error loading file: {e}", err=True)
        sys.exit(2)
    except RecipeValidationError as e:
        click.echo(f"Recipe validation error: {e}", err=True)
        for err in e.errors:
            prefix = f"{err['loc']}: " if err["loc"] else ""
            click.echo(f"  - {prefix}{err['msg']}", err=True)
        sys.exit(2)
    except MediaIngestionError as e:
        click.echo(f"Media error: {e}", err=True)
        sys.exit(2)
    return loaded.recipe, names


def _inspect_nodes(canvas: Canvas, recipe: Recipe, names: dict[str, str]) -> list[NodeReport]:
    ids_to_names = {node_id: name for name, node_id in names.items()}
    reports = []
    for entry in recipe.nodes:
        node = canvas.get_node(names[entry.name])
        problem = canvas.controller.validate(node.id)
        reports.append(
            NodeReport(
                name=entry.name,
                kind=node.type.value,
                model=node.data.model,
                prompt=node.data.prompt,
                inputs=[ids_to_names.get(n.id, n.id) for n in canvas.resolve_inputs(node.id)],
                problem=str(problem) if problem else None,
            )
        )
    return reports


async def _run_jobs(canvas: Canvas, node_ids: list[str]) -> list[JobResult]:
    tasks = [canvas.controller.start(node_id) for node_id in node_ids]
    return list(await asyncio.gather(*tasks))


@click.group()
@click.version_option(package_name="canvasflow")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
def main(verbose: bool):
    """canvasflow: wire media into video generation nodes and run them."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("recipe_file", type=click.Path(exists=True))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
def inspect(recipe_file: str, output_format: str):
    """Show the graph a recipe builds and whether each node can generate.

    RECIPE_FILE is the path to a YAML recipe.

    Exit codes:
      0 - Recipe loaded
      2 - File, recipe or media error
    """
    canvas = Canvas()
    recipe, names = _load_canvas(recipe_file, canvas)

    reports = _inspect_nodes(canvas, recipe, names)
    media = [entry.name for entry in recipe.media]
    click.echo(format_inspection(media, reports, output_format))  # type: ignore
    sys.exit(0)


@main.command()
@click.argument("recipe_file", type=click.Path(exists=True))
@click.option(
    "--node",
    "node_names",
    multiple=True,
    help="Generation node to run (repeatable). Defaults to every node.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option(
    "--api-key",
    envvar="FAL_KEY",
    help="fal API key (defaults to FAL_KEY env var)",
)
def run(recipe_file: str, node_names: tuple[str, ...], output_format: str, api_key: str | None):
    """Run the generation nodes of a recipe concurrently.

    RECIPE_FILE is the path to a YAML recipe.

    Exit codes:
      0 - Every job succeeded
      1 - At least one job failed
      2 - File, recipe, media or API key error
    """
    try:
        service = FalGenerationService(api_key=api_key)
    except APIKeyMissingError as e:
        click.echo(f"API key error: {e}", err=True)
        sys.exit(2)

    canvas = Canvas(service=service)
    recipe, names = _load_canvas(recipe_file, canvas)

    targets = list(dict.fromkeys(node_names)) or [entry.name for entry in recipe.nodes]
    for name in targets:
        if recipe.get_node(name) is None:
            click.echo(f"Error: '{name}' is not a generation node in {recipe_file}", err=True)
            sys.exit(2)

    if not targets:
        click.echo("No generation nodes to run")
        sys.exit(0)

    results = asyncio.run(_run_jobs(canvas, [names[name] for name in targets]))

    click.echo(format_job_results(list(zip(targets, results)), output_format))  # type: ignore

    if all(result.succeeded for result in results):
        sys.exit(0)
    else:
        sys.exit(1)


if __name__ == "__main__":
    main()
