"""Manifold CLI entry point."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn

import click

from manifold import __version__
from manifold.errors import EditorError, GraphInvariantViolation

# Exit code for internal defects (EX_SOFTWARE).
_EXIT_INTERNAL = 70


@click.group()
@click.version_option(version=__version__, prog_name="manifold")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """Manifold - edit project manifests as an IDE project."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    level = logging.WARNING
    if verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _editor_path() -> Path:
    """Path of the running program, resolved once here and passed down."""
    return Path(sys.argv[0]).resolve()


def _default_destination(editing_path: Path) -> Path:
    """Deterministic per-directory location under the user cache."""
    cache_home = os.environ.get("XDG_CACHE_HOME") or str(Path.home() / ".cache")
    digest = hashlib.sha256(str(editing_path.resolve()).encode("utf-8")).hexdigest()[:16]
    return Path(cache_home) / "manifold" / "Edit" / digest


def _fail(exc: Exception) -> NoReturn:
    if isinstance(exc, GraphInvariantViolation):
        click.echo(f"Internal error: {exc}", err=True)
        sys.exit(_EXIT_INTERNAL)
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


_project_option = click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory containing the manifests (default: current directory).",
)
_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: .manifold.yml in the project directory).",
)


@main.command()
@_project_option
@_config_option
@click.option(
    "--permanent",
    is_flag=True,
    default=False,
    help="Generate the project inside the edited directory.",
)
@click.option(
    "--destination",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to generate the project into (overrides --permanent).",
)
def edit(
    *,
    project: Path | None,
    config_path: Path | None,
    permanent: bool,
    destination: Path | None,
) -> None:
    """Generate an IDE project to edit the manifests of a directory."""
    from manifold.editor import ProjectEditor
    from manifold.settings import load_settings

    editing_path = (project or Path.cwd()).resolve()
    if destination is None:
        destination = editing_path if permanent else _default_destination(editing_path)

    settings = load_settings(editing_path, config_path)
    editor = ProjectEditor(_editor_path(), settings=settings)
    try:
        project_path = editor.edit(editing_path, destination)
    except (EditorError, GraphInvariantViolation) as exc:
        _fail(exc)

    click.echo(str(project_path))


@main.command()
@_project_option
@_config_option
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
@click.option("--table", "output_table", is_flag=True, help="Output as a table.")
def graph(
    *,
    project: Path | None,
    config_path: Path | None,
    output_json: bool,
    output_table: bool,
) -> None:
    """Show the target graph of a manifest directory (Mermaid, JSON, or table).

    Nothing is written to disk.
    """
    from manifold.editing.locator import locate_editable_files
    from manifold.errors import NoEditableFilesError
    from manifold.graph.mapper import map_editable_files
    from manifold.graph.render import graph_to_dict, render_mermaid
    from manifold.resources import resource_locator_for
    from manifold.settings import load_settings

    editing_path = (project or Path.cwd()).resolve()
    settings = load_settings(editing_path, config_path)

    try:
        files = locate_editable_files(editing_path, settings=settings)
        if files.is_empty:
            raise NoEditableFilesError(editing_path)
        locator = resource_locator_for(_editor_path(), editing_path, settings)
        framework = locator.project_description()
        _, project_graph = map_editable_files(
            files,
            editor_path=_editor_path(),
            source_root=editing_path,
            project_path=editing_path / settings.project_file_name,
            description_framework=framework,
            settings=settings,
        )
    except (EditorError, GraphInvariantViolation) as exc:
        _fail(exc)

    if output_json:
        click.echo(json.dumps(graph_to_dict(project_graph), ensure_ascii=False, indent=2))
        return
    if not output_table:
        click.echo(render_mermaid(project_graph))
        return

    from rich.console import Console
    from rich.table import Table

    console = Console()
    table = Table(title=f"{settings.project_name} targets")
    table.add_column("target", style="cyan")
    table.add_column("role")
    table.add_column("depends on")
    for name, target in project_graph.targets.items():
        role = target.role.value if target.role is not None else "framework"
        table.add_row(name, role, ", ".join(project_graph.dependencies(name)))
    console.print(table)
    console.print(
        f"  Targets: [bold]{len(project_graph.targets)}[/]   "
        f"Edges: [bold]{len(project_graph.edges)}[/]"
    )
