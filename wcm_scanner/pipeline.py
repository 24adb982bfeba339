"""Graph construction entry points: declared dependencies and markup imports."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from wcm_scanner.errors import NotFoundError, ParseError
from wcm_scanner.filesystem import list_installed_dependencies, read_dependency_manifest
from wcm_scanner.graph import DeclaredGraphBuilder, DependencyGraph, ImportGraph, ImportGraphBuilder
from wcm_scanner.inspection import inspect_source_files
from wcm_scanner.models import InspectionConfig, ProjectConfig

logger = logging.getLogger(__name__)


async def read_installed_manifests(
    config: ProjectConfig,
) -> tuple[list[dict[str, Any]], dict[str, str]]:
    """Read every installed manifest concurrently.

    Returns the manifests in installed-name order and, when
    ``config.skip_unreadable`` is set, the dependencies that were skipped.
    Otherwise the first failure propagates.
    """
    names = await asyncio.to_thread(
        list_installed_dependencies, config.project_path, config.package_manager,
    )
    results = await asyncio.gather(
        *(
            asyncio.to_thread(
                read_dependency_manifest, config.project_path, config.package_manager, name,
            )
            for name in names
        ),
        return_exceptions=config.skip_unreadable,
    )

    manifests: list[dict[str, Any]] = []
    skipped: dict[str, str] = {}
    for name, result in zip(names, results):
        if isinstance(result, (NotFoundError, ParseError)):
            logger.warning("Skipping dependency %s: %s", name, result)
            skipped[name] = str(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            manifests.append(result)
    return manifests, skipped


async def build_declared_graph_async(config: ProjectConfig) -> DependencyGraph:
    logger.info(
        "Building declared dependency graph for %s (%s)",
        config.project_path, config.package_manager.value,
    )
    manifests, skipped = await read_installed_manifests(config)
    builder = DeclaredGraphBuilder(strict_versions=config.strict_versions)
    return builder.build(manifests, skipped=skipped)


def generate_declared_dependencies_graph(config: ProjectConfig) -> DependencyGraph:
    """Build the declared-dependency graph of the project described by ``config``."""
    return asyncio.run(build_declared_graph_async(config))


def generate_imported_dependencies_graph(config: InspectionConfig) -> ImportGraph:
    """Inspect the entry file and build its import graph."""
    logger.info("Building import graph from %s", config.resolved_entry_path)
    return ImportGraphBuilder().build(inspect_source_files(config))
