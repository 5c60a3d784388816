"""Command-line interface for Starmark."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union

import click
from rich.console import Console
from rich.table import Table

from starmark import __version__
from starmark.anchors import Anchor, display_target, resolve
from starmark.classifier import classify, matches_filter
from starmark.config import Config, load_config
from starmark.errors import StarmarkError, Unresolvable
from starmark.observability import configure_logging, export_prometheus, set_metrics_enabled
from starmark.pipeline import Pipeline, PipelineResult
from starmark.protocols import Category, ImageElement, InteractiveElement

console = Console()

Element = Union[ImageElement, InteractiveElement]


def _run(coro: Any) -> Any:
    """Run a coroutine, turning Starmark errors into clean CLI failures."""
    try:
        return asyncio.run(coro)
    except Unresolvable as e:
        if e.reason:
            raise click.ClickException(str(e)) from e
        raise click.ClickException(f"{e}. Set one with: starmark anchors prefix {e.anchor_id} <prefix>") from e
    except StarmarkError as e:
        raise click.ClickException(str(e)) from e


def _write_metrics(path: Path) -> None:
    path.write_text(export_prometheus(), encoding="utf-8")


def _pipeline(ctx: click.Context) -> Pipeline:
    if "pipeline" not in ctx.obj:
        ctx.obj["pipeline"] = Pipeline.from_config(ctx.obj["config"])
    return ctx.obj["pipeline"]


def _summary(element: Element) -> tuple[str, str, str]:
    if isinstance(element, ImageElement):
        return f"IMAGE {element.format.upper()}", "", element.url
    label = {"a": "LINK", "button": "BUTTON"}.get(element.tag, element.tag.upper())
    if element.tag in ("input", "select", "textarea"):
        label = f"FORM {element.tag.upper()}"
    text = element.text or element.value or element.placeholder or "No text"
    return label, text, element.href


def _print_elements(elements: List[tuple[int, Element]], starred: Set[int], title: str) -> None:
    table = Table(title=title)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("*", style="yellow")
    table.add_column("Category")
    table.add_column("Kind")
    table.add_column("Text")
    table.add_column("URL", overflow="fold")
    for index, element in elements:
        kind, text, url = _summary(element)
        table.add_row(str(index), "*" if index in starred else "", classify(element).value, kind, text, url)
    console.print(table)


def _print_anchors(anchors: List[Anchor]) -> None:
    table = Table(title=f"Starred ({len(anchors)})")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Target", overflow="fold")
    table.add_column("Prefix")
    for anchor in anchors:
        table.add_row(anchor.id, anchor.name, display_target(anchor), anchor.custom_prefix or "-")
    console.print(table)


def _report(
    result: PipelineResult,
    starred: Set[int],
    category: Optional[str],
    needle: Optional[str],
    as_json: bool,
) -> None:
    selected: List[tuple[int, Element]] = [
        (index, element)
        for index, element in enumerate(result.extraction.elements)
        if (category is None or classify(element).value == category)
        and (needle is None or matches_filter(element, needle))
    ]

    if as_json:
        payload: Dict[str, Any] = result.extraction.to_dict()
        payload["results"] = [
            {
                "index": index,
                "category": classify(element).value,
                "starred": index in starred,
                **element.model_dump(by_alias=True),
            }
            for index, element in selected
        ]
        payload["anchorsUpdated"] = [
            {"id": o.anchor_id, "name": o.name, "previousHref": o.previous_href, "href": o.new_href}
            for o in result.updated
        ]
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    counts = result.extraction.counts
    _print_elements(selected, starred, title=result.extraction.url)
    console.print(
        f"[green]Extracted {counts.images} images and {counts.interactive} interactive elements[/green]"
        + "".join(f" | {c.value}: {len(items)}" for c, items in result.categories.items())
    )
    for outcome in result.updated:
        console.print(f'[yellow]Updated "{outcome.name}" to new URL: {outcome.new_href}[/yellow]')


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file path",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], log_level: Optional[str]) -> None:
    """Starmark - extract page elements and keep starred shortcuts current."""
    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = load_config(config_path)
        except (FileNotFoundError, ValueError) as e:
            raise click.ClickException(f"Invalid configuration: {e}") from e

    config: Config = ctx.obj["config"]
    if log_level:
        config.monitoring.log_level = log_level
    if ctx.obj.get("configure_logging", True):
        configure_logging(config.monitoring)
    set_metrics_enabled(config.monitoring.metrics_enabled)
    if config.monitoring.metrics_enabled and config.monitoring.metrics_file:
        ctx.call_on_close(lambda: _write_metrics(Path(config.monitoring.metrics_file)))


@cli.command()
@click.argument("url")
@click.option(
    "--category",
    type=click.Choice([c.value for c in Category]),
    help="Only show elements of this category",
)
@click.option("--filter", "needle", help="Only show elements whose text, URL, title or classes contain this")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def extract(ctx: click.Context, url: str, category: Optional[str], needle: Optional[str], as_json: bool) -> None:
    """Extract images and interactive elements from URL and refresh starred items."""
    pipeline = _pipeline(ctx)

    async def _extract() -> tuple[PipelineResult, Set[int]]:
        result = await pipeline.run(url)
        return result, await pipeline.starred_indexes(result.extraction)

    result, starred = _run(_extract())
    _report(result, starred, category, needle, as_json)


@cli.command()
@click.argument("index", type=int)
@click.option("--name", help="Display name (defaults to the element's text, title or URL)")
@click.option("--prefix", default="", help="URL prefix that replaces the link's scheme and host")
@click.pass_context
def star(ctx: click.Context, index: int, name: Optional[str], prefix: str) -> None:
    """Star element INDEX from the last extraction."""
    anchor = _run(_pipeline(ctx).star(index, name=name, custom_prefix=prefix))
    console.print(f'[green]Starred as "{anchor.name}"[/green] ({anchor.id})')


@cli.command(name="open")
@click.argument("anchor_id")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def open_anchor(ctx: click.Context, anchor_id: str, as_json: bool) -> None:
    """Resolve a starred item and extract its target."""
    pipeline = _pipeline(ctx)

    async def _open() -> tuple[Anchor, str, PipelineResult, Set[int]]:
        anchor, target, result = await pipeline.activate(anchor_id)
        return anchor, target, result, await pipeline.starred_indexes(result.extraction)

    anchor, target, result, starred = _run(_open())
    if not as_json:
        console.print(f'[cyan]Opening "{anchor.name}": {target}[/cyan]')
    _report(result, starred, None, None, as_json)


@cli.group()
def anchors() -> None:
    """Manage starred items."""


@anchors.command(name="list")
@click.pass_context
def list_anchors(ctx: click.Context) -> None:
    """List starred items with their current targets."""
    _print_anchors(_run(_pipeline(ctx).store.list()))


@anchors.command()
@click.argument("anchor_id")
@click.argument("name")
@click.pass_context
def rename(ctx: click.Context, anchor_id: str, name: str) -> None:
    """Rename a starred item."""
    anchor = _run(_pipeline(ctx).store.rename(anchor_id, name))
    console.print(f'Renamed {anchor.id} to "{anchor.name}"')


@anchors.command()
@click.argument("anchor_id")
@click.argument("prefix")
@click.pass_context
def prefix(ctx: click.Context, anchor_id: str, prefix: str) -> None:
    """Set the URL prefix of a starred item ("" clears it)."""
    anchor = _run(_pipeline(ctx).store.set_prefix(anchor_id, prefix))
    console.print(f"{anchor.id} now resolves to {display_target(anchor)}")


@anchors.command()
@click.argument("anchor_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx: click.Context, anchor_id: str, yes: bool) -> None:
    """Delete a starred item."""
    if not yes:
        click.confirm(f"Delete {anchor_id}?", abort=True)
    anchor = _run(_pipeline(ctx).store.delete(anchor_id))
    console.print(f'Deleted "{anchor.name}"')


@anchors.command(name="resolve")
@click.argument("anchor_id")
@click.pass_context
def resolve_anchor(ctx: click.Context, anchor_id: str) -> None:
    """Print the URL a starred item currently points to."""

    async def _resolve() -> str:
        return resolve(await _pipeline(ctx).store.get(anchor_id))

    click.echo(_run(_resolve()))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
