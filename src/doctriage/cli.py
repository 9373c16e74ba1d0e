"""
Command-line interface for DocTriage.
"""

import logging
from pathlib import Path
from typing import Optional

import click
import structlog

from doctriage.config import get_settings
from doctriage.models.document import DocumentStatus, SearchFilters

logger = structlog.get_logger(__name__)


def configure_logging(debug: bool = False) -> None:
    """Filter structlog output at the configured level (DEBUG with --debug)."""
    settings = get_settings()
    level = logging.DEBUG if debug or settings.debug else logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug mode")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """DocTriage: legal document triage and relationship graphs."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    configure_logging(debug)


def _store():
    from doctriage.services.document_store import get_document_store

    return get_document_store()


def _describe(document) -> str:
    flags = [
        name for name, value in (
            ("key", document.is_key),
            ("relevant", document.is_relevant),
            ("privileged", document.is_privileged),
        ) if value
    ]
    flag_text = f" [{', '.join(flags)}]" if flags else ""
    return f"{document.id}  {document.file_name} ({document.file_type}) - {document.status.value}{flag_text}"


# =========================================================================
# Server Commands
# =========================================================================


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
def serve(host: Optional[str], port: Optional[int], reload: bool) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    click.echo(f"Starting DocTriage API server on {host}:{port}")

    uvicorn.run(
        "doctriage.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


# =========================================================================
# Document Commands
# =========================================================================


@cli.command()
@click.argument("archive", type=click.Path(exists=True, dir_okay=False))
def ingest(archive: str) -> None:
    """Load every document in a ZIP archive."""
    from doctriage.services.archive_loader import get_archive_loader

    loader = get_archive_loader()

    try:
        with click.progressbar(length=100, label="Ingesting") as bar:
            last = [0]

            def _progress(percent: int) -> None:
                bar.update(percent - last[0])
                last[0] = percent

            result = loader.load_zip(Path(archive), progress=_progress)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        return

    _store().set_current_zip_file(result.zip_file.file_name)

    click.echo(f"Archive: {result.zip_file.file_name}")
    click.echo(f"Documents: {len(result.documents)}")
    click.echo(f"Relationships: {len(result.relationships)}")


@cli.command(name="list")
@click.option("--query", "-q", default="", help="Free-text search")
@click.option("--archive", default=None, help="Only documents ingested from this archive")
@click.option("--type", "document_types", multiple=True, help="Filter by file type")
@click.option("--tag", "tags", multiple=True, help="Filter by tag")
@click.option(
    "--status", "statuses", multiple=True,
    type=click.Choice([s.value for s in DocumentStatus]),
    help="Filter by review status",
)
@click.option("--relevant/--not-relevant", default=None)
@click.option("--privileged/--not-privileged", default=None)
@click.option("--key/--not-key", default=None)
def list_documents(
    query: str,
    archive: Optional[str],
    document_types: tuple[str, ...],
    tags: tuple[str, ...],
    statuses: tuple[str, ...],
    relevant: Optional[bool],
    privileged: Optional[bool],
    key: Optional[bool],
) -> None:
    """List documents, optionally filtered."""
    from doctriage.services.filters import filter_documents

    filters = SearchFilters(
        query=query,
        document_types=list(document_types) or None,
        tags=list(tags) or None,
        status=[DocumentStatus(s) for s in statuses] or None,
        is_relevant=relevant,
        is_privileged=privileged,
        is_key=key,
    )
    store = _store()
    candidates = store.documents_in_zip_file(archive) if archive else store.documents
    documents = filter_documents(candidates, filters)

    if not documents:
        click.echo("No documents found.")
        return

    for document in documents:
        click.echo(_describe(document))
    click.echo(f"\n{len(documents)} document(s)")


@cli.command()
@click.argument("document_id", type=str)
def show(document_id: str) -> None:
    """Show a document's details."""
    document = _store().document_by_id(document_id)

    if document is None:
        click.echo(f"Document not found: {document_id}", err=True)
        return

    click.echo(f"\n=== Document: {document.file_name} ===\n")
    click.echo(f"ID: {document.id}")
    click.echo(f"Type: {document.file_type}")
    click.echo(f"Size: {document.file_size} bytes")
    click.echo(f"Status: {document.status.value}")
    click.echo(f"Relevant: {document.is_relevant}")
    click.echo(f"Privileged: {document.is_privileged}")
    click.echo(f"Key: {document.is_key}")

    if document.source_zip_file:
        click.echo(f"Archive: {document.source_zip_file}")
    if document.tags:
        click.echo(f"Tags: {', '.join(document.tags)}")
    if document.summary:
        click.echo(f"\nSummary: {document.summary}")
    if document.key_points:
        click.echo("\nKey Points:")
        for point in document.key_points:
            click.echo(f"  - {point}")
    if document.annotations:
        click.echo(f"\nAnnotations: {len(document.annotations)}")


@cli.command()
@click.argument("document_id", type=str)
@click.argument("tag", type=str)
@click.option("--remove", is_flag=True, help="Remove the tag instead of adding it")
def tag(document_id: str, tag: str, remove: bool) -> None:
    """Add (or remove) a tag on a document."""
    store = _store()
    document = store.remove_tag(document_id, tag) if remove else store.add_tag(document_id, tag)

    if document is None:
        click.echo(f"Document not found: {document_id}", err=True)
        return

    click.echo(f"Tags: {', '.join(document.tags) or '(none)'}")


@cli.command()
@click.argument("document_id", type=str)
@click.option("--status", type=click.Choice([s.value for s in DocumentStatus]))
@click.option("--relevant/--not-relevant", default=None)
@click.option("--privileged/--not-privileged", default=None)
@click.option("--key/--not-key", default=None)
def mark(
    document_id: str,
    status: Optional[str],
    relevant: Optional[bool],
    privileged: Optional[bool],
    key: Optional[bool],
) -> None:
    """Set a document's review status and flags."""
    updates = {
        field: value
        for field, value in (
            ("status", status),
            ("is_relevant", relevant),
            ("is_privileged", privileged),
            ("is_key", key),
        )
        if value is not None
    }
    if not updates:
        click.echo("Nothing to update.", err=True)
        return

    document = _store().mark_document_status(document_id, **updates)

    if document is None:
        click.echo(f"Document not found: {document_id}", err=True)
        return

    click.echo(_describe(document))


@cli.command()
@click.argument("document_id", type=str)
def related(document_id: str) -> None:
    """List documents related to a document."""
    store = _store()

    if store.document_by_id(document_id) is None:
        click.echo(f"Document not found: {document_id}", err=True)
        return

    relationships = store.relationships_for_document(document_id)
    by_other = {}
    for rel in relationships:
        other = rel.target_id if rel.source_id == document_id else rel.source_id
        by_other.setdefault(other, rel)

    documents = store.related_documents(document_id)
    if not documents:
        click.echo("No related documents.")
        return

    for document in documents:
        rel = by_other.get(document.id)
        detail = f" ({rel.relationship_type}, {rel.strength:.2f})" if rel else ""
        click.echo(f"  {document.file_name}{detail}")


@cli.command()
def stats() -> None:
    """Show relationship graph statistics."""
    from doctriage.graph.network import build_relationship_graph, graph_statistics, hub_documents

    store = _store()
    graph = build_relationship_graph((d.id for d in store.documents), store.relationships)
    summary = graph_statistics(graph)

    click.echo("\n=== Relationship Graph Statistics ===\n")
    click.echo(f"Documents: {summary['document_count']}")
    click.echo(f"Relationships: {summary['relationship_count']}")
    click.echo(f"Clusters: {summary['cluster_count']}")
    click.echo(f"Isolated Documents: {len(summary['isolated_documents'])}")
    click.echo(f"Density: {summary['density']:.3f}")

    if summary["relationships_by_type"]:
        click.echo("\nRelationships by Type:")
        for rel_type, count in sorted(summary["relationships_by_type"].items()):
            click.echo(f"  {rel_type}: {count}")

    hubs = hub_documents(graph)
    if hubs and summary["relationship_count"]:
        click.echo("\nMost Connected:")
        for doc_id, score in hubs:
            document = store.document_by_id(doc_id)
            click.echo(f"  [{score:.3f}] {document.file_name if document else doc_id}")


@cli.command()
@click.confirmation_option(prompt="Are you sure you want to clear all documents?")
def clear() -> None:
    """Remove all documents, relationships and archives."""
    _store().clear_documents()
    click.echo("Document store cleared.")


# =========================================================================
# Archive Commands
# =========================================================================


@cli.command()
def archives() -> None:
    """List ingested archives."""
    store = _store()
    zip_files = store.zip_files

    if not zip_files:
        click.echo("No archives loaded.")
        return

    for zip_file in zip_files:
        marker = "*" if zip_file.file_name == store.current_zip_file else " "
        uploaded = zip_file.upload_date.strftime("%Y-%m-%d %H:%M")
        click.echo(f"{marker} {zip_file.file_name}  {zip_file.document_count} document(s)  {uploaded}")


@cli.command()
@click.argument("file_name", type=str)
@click.confirmation_option(prompt="Remove this archive and its documents?")
def unload(file_name: str) -> None:
    """Remove an archive and every document ingested from it."""
    if not _store().remove_zip_file(file_name):
        click.echo(f"Archive not found: {file_name}", err=True)
        return

    click.echo(f"Archive removed: {file_name}")


# =========================================================================
# Graph Commands
# =========================================================================


def _graph_inputs(store, focus: Optional[str]):
    if focus is not None:
        if store.document_by_id(focus) is None:
            raise click.BadParameter(f"Document not found: {focus}", param_hint="--focus")
        store.set_current_document(focus)
    return store.graph_inputs()


@cli.command()
@click.argument("output", type=click.Path(dir_okay=False))
@click.option("--width", type=int, default=None, help="Image width in pixels")
@click.option("--height", type=int, default=None, help="Image height in pixels")
@click.option("--focus", default=None, help="Document to center the graph on")
@click.option("--seed", type=int, default=None, help="Random seed for the layout")
def render(
    output: str,
    width: Optional[int],
    height: Optional[int],
    focus: Optional[str],
    seed: Optional[int],
) -> None:
    """Render the relationship graph to an image (PNG, SVG or PDF)."""
    import random

    from doctriage.graph.layout import ForceDirectedLayout
    from doctriage.graph.render import GraphRenderer
    from doctriage.graph.surfaces import MatplotlibSurface

    settings = get_settings()
    width = width or settings.viewport_width
    height = height or settings.viewport_height

    nodes, edges = _graph_inputs(_store(), focus)
    rng = random.Random(seed) if seed is not None else None
    result = ForceDirectedLayout.from_settings(settings, rng=rng).compute(nodes, edges, width, height)

    surface = MatplotlibSurface(width, height, dpi=settings.render_dpi)
    GraphRenderer().render(surface, result, nodes, edges)
    path = surface.save(output)

    click.echo(f"Rendered {len(result)} document(s) to {path}")


@cli.command()
@click.option("--width", type=int, default=None, help="Window width in pixels")
@click.option("--height", type=int, default=None, help="Window height in pixels")
@click.option("--focus", default=None, help="Document to center the graph on")
def view(width: Optional[int], height: Optional[int], focus: Optional[str]) -> None:
    """Open the interactive relationship graph window."""
    import matplotlib.pyplot as plt

    from doctriage.graph.surfaces import MatplotlibSurface
    from doctriage.graph.view import GraphView

    settings = get_settings()
    width = width or settings.viewport_width
    height = height or settings.viewport_height

    store = _store()
    nodes, edges = _graph_inputs(store, focus)

    surface = MatplotlibSurface(width, height, dpi=settings.render_dpi, figure=plt.figure())

    def _open(document_id: str) -> None:
        store.set_current_document(document_id)
        click.echo(_describe(store.current_document))
        graph_view.update(*store.graph_inputs(), width, height)
        surface.redraw()

    graph_view = GraphView(
        surface,
        on_select=_open,
        stable_layout=settings.layout_stable,
        click_tolerance=settings.click_tolerance,
        hover_tolerance=settings.hover_tolerance,
    )
    graph_view.update(nodes, edges, width, height)

    try:
        plt.show()
    finally:
        graph_view.dispose()


@cli.command()
def config() -> None:
    """Show current configuration."""
    settings = get_settings()

    click.echo("\n=== DocTriage Configuration ===\n")
    click.echo(f"Environment: {settings.environment}")
    click.echo(f"Debug: {settings.debug}")
    click.echo(f"Store: {settings.store_path}")
    click.echo(f"\nLayout Iterations: {settings.layout_iterations}")
    click.echo(f"Repulsion: {settings.layout_repulsion}")
    click.echo(f"Attraction: {settings.layout_attraction}")
    click.echo(f"Viewport: {settings.viewport_width}x{settings.viewport_height}")
    click.echo(f"Click/Hover Tolerance: {settings.click_tolerance}/{settings.hover_tolerance}")


def main() -> None:
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
