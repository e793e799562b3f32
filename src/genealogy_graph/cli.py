"""
Command-line interface for the relationship-graph engine.

Works on a JSON or GEDCOM snapshot file, or serves the HTTP API.
"""

from __future__ import annotations

import asyncio
import functools
import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from genealogy_graph import __version__
from genealogy_graph.config import GraphConfig, configure_logging
from genealogy_graph.core.errors import GenealogyGraphError
from genealogy_graph.core.models import TreeNode
from genealogy_graph.graph.paths import PathStrategy
from genealogy_graph.service import GraphService
from genealogy_graph.store import InMemoryStore

console = Console()

SNAPSHOT = click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))


def async_command(f):
    """Decorator to run async commands."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))
    return wrapper


def _service(snapshot: str) -> GraphService:
    try:
        store = InMemoryStore.from_file(snapshot)
    except GenealogyGraphError as e:
        console.print(f"[red]Error loading snapshot: {e}[/red]")
        sys.exit(1)
    return GraphService(store, GraphConfig.from_env())


def _life(node: TreeNode) -> str:
    birth, death = node.person.birth_year, node.person.death_year
    if birth is None and death is None:
        return ""
    return f" [dim]({birth or '?'}-{death or ''})[/dim]"


def _render_tree(root: TreeNode, title: str) -> Tree:
    def label(node: TreeNode) -> str:
        sosa = f"[cyan]{node.sosa}.[/cyan] " if node.sosa else ""
        return f"{sosa}[bold]{node.name}[/bold] [dim]{node.gramps_id}[/dim]{_life(node)}"

    tree = Tree(f"{title}: {label(root)}")

    def add(branch: Tree, node: TreeNode) -> None:
        for child in node.children:
            add(branch.add(label(child)), child)

    add(tree, root)
    return tree


@click.group()
@click.version_option(version=__version__, prog_name="genealogy-graph")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, verbose):
    """
    Genealogy relationship graph tools.

    Relationship paths, kinship terms, ancestor/descendant trees and
    disconnected-branch checks over a JSON or GEDCOM snapshot.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging("DEBUG" if verbose else "WARNING")


# =============================================================================
# Relationship Commands
# =============================================================================

@cli.command("relationship")
@SNAPSHOT
@click.argument("person1")
@click.argument("person2")
@click.option("--bidirectional", is_flag=True, help="Use two-frontier search")
@async_command
async def relationship(snapshot: str, person1: str, person2: str, bidirectional: bool):
    """
    Show how PERSON2 is related to PERSON1 (handles).
    """
    service = _service(snapshot)
    strategy = PathStrategy.BIDIRECTIONAL if bidirectional else PathStrategy.SINGLE

    try:
        result = await service.calculate_relationship(person1, person2, strategy=strategy)
    except GenealogyGraphError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    subtitle = f"Type: {result.relationship_type.value}"
    if result.distance >= 0:
        subtitle += f" | Distance: {result.distance}"
    if result.is_related:
        message = (
            f"[bold]{result.person2.name}[/bold] is the "
            f"[green]{result.relationship}[/green] of [bold]{result.person1.name}[/bold]"
        )
    else:
        message = (
            f"[yellow]{result.relationship}[/yellow] between "
            f"{result.person1.name} and {result.person2.name}"
        )
    console.print(Panel(message, title="Relationship", subtitle=subtitle))

    if result.path:
        table = Table(title="Path")
        table.add_column("#", justify="right")
        table.add_column("Person", style="bold")
        table.add_column("ID")
        table.add_column("Relation to previous")
        for i, node in enumerate(result.path):
            table.add_row(str(i), node.name, node.gramps_id, node.relationship.value)
        console.print(table)

    if result.common_ancestor:
        console.print(f"\nCommon ancestor: [bold]{result.common_ancestor.name}[/bold]")


# =============================================================================
# Tree Commands
# =============================================================================

@cli.command("ancestors")
@SNAPSHOT
@click.argument("handle")
@click.option("--generations", "-g", type=int, default=5, show_default=True,
              help="Generations to include")
@async_command
async def ancestors(snapshot: str, handle: str, generations: int):
    """Show the ancestor tree of HANDLE."""
    service = _service(snapshot)
    try:
        tree = await service.get_fan_chart(handle, generations)
    except GenealogyGraphError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if tree is None:
        console.print("[yellow]No generations requested[/yellow]")
        return
    console.print(_render_tree(tree, "Ancestors"))


@cli.command("descendants")
@SNAPSHOT
@click.argument("handle")
@click.option("--generations", "-g", type=int, default=5, show_default=True,
              help="Generations to include")
@async_command
async def descendants(snapshot: str, handle: str, generations: int):
    """Show the descendant tree of HANDLE."""
    service = _service(snapshot)
    try:
        tree = await service.get_descendant_tree(handle, generations)
    except GenealogyGraphError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if tree is None:
        console.print("[yellow]No generations requested[/yellow]")
        return
    console.print(_render_tree(tree, "Descendants"))


# =============================================================================
# Quality Commands
# =============================================================================

@cli.command("disconnected")
@SNAPSHOT
@click.option("--root", "-r", help="Reference person handle (default: first person)")
@click.option("--clusters", is_flag=True, help="List every connected cluster")
@async_command
async def disconnected(snapshot: str, root: str | None, clusters: bool):
    """List people disconnected from the main tree."""
    service = _service(snapshot)
    try:
        report = await service.find_disconnected(root)
    except GenealogyGraphError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if not report.count:
        console.print("[green]Every person is connected to the main tree[/green]")
    else:
        table = Table(title=f"Disconnected people ({report.count})")
        table.add_column("Handle")
        table.add_column("ID")
        table.add_column("Name", style="bold")
        for person in report.branches:
            table.add_row(person.handle, person.gramps_id, person.name)
        console.print(table)

    if clusters:
        table = Table(title=f"Clusters ({len(report.clusters)})")
        table.add_column("#", justify="right")
        table.add_column("Size", justify="right")
        table.add_column("First member", style="bold")
        for i, cluster in enumerate(report.clusters, 1):
            table.add_row(str(i), str(cluster.count), cluster.members[0].name)
        console.print(table)


# =============================================================================
# Server
# =============================================================================

@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
def serve(host: str, port: int):
    """Run the HTTP API (configured from the environment)."""
    import uvicorn

    from genealogy_graph.web import create_app

    uvicorn.run(create_app(), host=host, port=port)


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
