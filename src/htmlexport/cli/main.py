import asyncio
import logging
from pathlib import Path
from typing import List

import click
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from .. import __version__
from ..config import describe_project
from ..errors import ErrorReporter
from ..model.files import OutputFile
from ..pipeline.beautify import BeautifyHtmlTask
from ..pipeline.writer import WriteFilesTask
from ..project import Project

console = Console()

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Project configuration file (default: htmlexport.yaml in the current directory or a parent)",
)
environment_option = click.option(
    "--environment",
    "-e",
    help="Build environment whose settings override the global ones",
)


def display_export_summary(files: List[OutputFile], reporter: ErrorReporter, write_path: Path):
    """Display exported files and failures in the console."""
    table = Table(title=f"Exported to {write_path}")
    table.add_column("File", style="cyan")
    table.add_column("Size", justify="right", style="green")
    for file in files:
        table.add_row(file.path, f"{len(file.contents)} B")
    console.print(table)

    if reporter.failures:
        console.print(f"\n[bold red]✗ {len(reporter.failures)} render(s) failed:[/bold red]")
        for failure in reporter.failures:
            console.print(f"  • [red]{failure.describe()}[/red]")


async def export_files(
    project: Project,
    query: str,
    write_path: Path,
    beautify: bool,
    reporter: ErrorReporter,
) -> List[OutputFile]:
    """Run export -> (beautify) -> write and return the written files."""
    files = project.export_task(error_reporter=reporter).stream(query)
    if beautify:
        files = BeautifyHtmlTask(error_reporter=reporter).stream(files)
    files = WriteFilesTask(write_path).stream(files)
    return [file async for file in files]


@click.group()
@click.version_option(__version__, prog_name="htmlexport")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def htmlexport(verbose):
    """htmlexport - render component library entities to static html."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@htmlexport.command()
@click.argument("query", required=False, default="*")
@click.option(
    "--destination",
    "-d",
    help="Base folder html files are written to (default: html.exportPath)",
)
@click.option(
    "--beautify/--no-beautify",
    default=None,
    help="Format exported html (default: html.beautify)",
)
@config_option
@environment_option
def export(query, destination, beautify, config_path, environment):
    """Export entity templates as html files.

    QUERY restricts the exported entities, e.g. `base` or `base/modules`.
    """
    try:
        project = Project.load(config_path, environment)
        write_path = asyncio.run(project.export_path(destination))
        if beautify is None:
            beautify = project.html.beautify

        console.print(
            f"[bold blue]Exporting html for[/bold blue] '{query}' "
            f"[bold blue]to[/bold blue] {write_path}"
        )
        reporter = ErrorReporter()
        files = asyncio.run(export_files(project, query, write_path, beautify, reporter))

        display_export_summary(files, reporter, write_path)
        console.print(f"\n[bold green]✓ Exported {len(files)} file(s)[/bold green]")

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise click.exceptions.Exit(1)


@htmlexport.command()
@config_option
@environment_option
def validate(config_path, environment):
    """Validate a project configuration file."""
    try:
        project = Project.load(config_path, environment)
        content = describe_project(project.config, environment)
        syntax = Syntax(content, "yaml", theme="monokai", line_numbers=True)
        console.print(f"[green]{project.pathes.root} is valid![/green]")
        console.print(syntax)
    except Exception as e:
        console.print(f"[red]Failed to load configuration: {e}[/red]")
        raise click.exceptions.Exit(1)


@htmlexport.command(name="list")
@click.argument("query", required=False, default="*")
@config_option
@environment_option
def list_entities(query, config_path, environment):
    """List entities and the number of html exports they declare."""
    try:
        project = Project.load(config_path, environment)
        entities = asyncio.run(project.repository.resolve_entities(query))
        export_name = project.html.export_name

        table = Table(title=f"Entities matching '{query}'")
        table.add_column("Entity", style="cyan")
        table.add_column("Type", style="yellow")
        table.add_column(f"export.{export_name}", justify="right", style="green")
        for entity in entities:
            settings = entity.properties.get_by_path(f"export.{export_name}", []) or []
            if isinstance(settings, dict):
                count = 1
            elif isinstance(settings, list):
                count = len(settings)
            else:
                count = 0
            table.add_row(entity.path_string, entity.id.category.type, str(count))
        console.print(table)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.exceptions.Exit(1)


if __name__ == "__main__":
    htmlexport()
