"""Click CLI with deps, imports, and serve subcommands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from wcm_scanner import __version__
from wcm_scanner.errors import ConfigurationError, ScannerError
from wcm_scanner.graph import DependencyGraph, ImportGraph
from wcm_scanner.models import InspectionConfig, PackageManager, ProjectConfig, read_config_file
from wcm_scanner.pipeline import (
    generate_declared_dependencies_graph,
    generate_imported_dependencies_graph,
)

_PACKAGE_MANAGER_CHOICES = [pm.value for pm in PackageManager]


def _parse_pairs(values: tuple[str, ...], option: str) -> dict[str, str]:
    """Turn repeated KEY=VALUE options into an ordered dict."""
    pairs: dict[str, str] = {}
    for value in values:
        key, sep, val = value.partition("=")
        if not sep or not key:
            raise ConfigurationError(f"{option} expects KEY=VALUE, got {value!r}")
        pairs[key] = val
    return pairs


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """wcm-scanner: Map declared dependencies and markup imports of web projects."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("project_path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--package-manager", "-m", type=click.Choice(_PACKAGE_MANAGER_CHOICES), required=True,
              help="Package manager used by the project")
@click.option("--dependants", "-d", help="Only list the dependants of this dependency")
@click.option("--json", "as_json", is_flag=True, help="Print the graph as JSON")
@click.option("--skip-unreadable", is_flag=True, help="Skip dependencies whose manifest cannot be read")
@click.option("--strict-versions", is_flag=True, help="Fail on manifests without a version field")
def deps(
    project_path: Path,
    package_manager: str,
    dependants: str | None,
    as_json: bool,
    skip_unreadable: bool,
    strict_versions: bool,
):
    """Build the declared-dependency graph of an installed project."""
    try:
        config = ProjectConfig(
            project_path=project_path,
            package_manager=package_manager,
            skip_unreadable=skip_unreadable,
            strict_versions=strict_versions,
        )
        graph = generate_declared_dependencies_graph(config)
    except ScannerError as e:
        raise click.ClickException(str(e))

    if dependants:
        found = graph.list_dependants_of_dependency(dependants)
        if as_json:
            click.echo(json.dumps([str(i) for i in found], indent=4))
        elif not found:
            click.echo(f"Nothing depends on {dependants}.")
        else:
            click.echo(f"\n{len(found)} dependant(s) of {click.style(dependants, fg='cyan')}:\n")
            for identity in found:
                click.echo(f"  {identity}")
        return

    if as_json:
        click.echo(json.dumps(graph.to_dict(), indent=4))
        return

    _print_dependency_graph(graph)


def _print_dependency_graph(graph: DependencyGraph) -> None:
    real = graph.list_real_dependencies()
    implied = graph.list_implied_dependencies()

    if not real and not implied:
        click.echo("No installed dependencies found.")
        return

    click.echo(f"\nFound {len(real)} installed and {len(implied)} implied dependencies:\n")
    for identity in real + implied:
        node = graph.get_dependency(identity)
        kind_color = "yellow" if node.is_implied else "green"
        click.echo(
            f"{click.style(node.kind.value, fg=kind_color):>18}  "
            f"{click.style(identity.name, fg='cyan')} {identity.version}"
        )
        for target in graph.list_dependencies_of(identity):
            click.echo(f"{'':>10}-> {target.name} {target.version} "
                       f"{click.style(f'({graph.get_dependency(target).normalized_version})', dim=True)}")

    if graph.skipped:
        click.echo("\nSkipped:")
        for name, reason in graph.skipped.items():
            click.echo(f"  {click.style(name, fg='red')}: {reason}")

    click.echo(f"\nSummary:\n  nodes: {len(graph.nodes)}\n  edges: {len(graph.edges)}")


@cli.command()
@click.argument("source_root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("entry_path", required=False)
@click.option("--tag", "-t", "tags", multiple=True, help="TAG=ATTRIBUTE holding import paths (repeatable)")
@click.option("--resolve", "-r", "resolutions", multiple=True,
              help="PLACEHOLDER=REPLACEMENT applied to import paths (repeatable)")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="JSON inspection config (entryPath, importResolutions, importTags)")
@click.option("--json", "as_json", is_flag=True, help="Print the graph as JSON")
def imports(
    source_root: Path,
    entry_path: str | None,
    tags: tuple[str, ...],
    resolutions: tuple[str, ...],
    config_file: Path | None,
    as_json: bool,
):
    """Inspect an entry file for markup imports."""
    try:
        config = _inspection_config(source_root, entry_path, tags, resolutions, config_file)
        graph = generate_imported_dependencies_graph(config)
    except ScannerError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(graph.to_dict(), indent=4))
        return

    _print_import_graph(graph)


def _inspection_config(
    source_root: Path,
    entry_path: str | None,
    tags: tuple[str, ...],
    resolutions: tuple[str, ...],
    config_file: Path | None,
) -> InspectionConfig:
    data: dict = read_config_file(config_file) if config_file else {}
    # Command-line values use the snake_case keys, which take precedence
    data["source_root"] = str(source_root.absolute())
    if entry_path:
        data["entry_path"] = entry_path
    if "entry_path" not in data and "entryPath" not in data:
        raise click.UsageError("Specify an ENTRY_PATH or a --config with an entryPath")
    if tags:
        data["import_tags"] = _parse_pairs(tags, "--tag")
    if resolutions:
        data["import_resolutions"] = _parse_pairs(resolutions, "--resolve")
    return InspectionConfig.from_dict(data)


def _print_import_graph(graph: ImportGraph) -> None:
    for file_path in graph.list_inspected_files():
        metadata = graph.get_file_metadata(file_path)
        click.echo(click.style(file_path, fg="cyan"))
        if not metadata.import_declarations:
            click.echo("  No imports found.")
        for declaration in metadata.import_declarations:
            click.echo(
                f"  {click.style(f'<{declaration.tag_name} {declaration.attribute_name}>', fg='yellow')}  "
                f"{declaration.import_path}"
            )
        click.echo()

    click.echo(f"Summary:\n  files: {len(graph.files)}\n  imports: {len(graph.edges)}")


@cli.command()
@click.option("--port", "-p", default=8420, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
def serve(port: int, host: str):
    """Start the graph query API."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the query API. "
            "Install with: pip install 'wcm-scanner[web]'"
        )

    from wcm_scanner.web import create_app

    click.echo(f"Starting wcm-scanner query API at http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()
