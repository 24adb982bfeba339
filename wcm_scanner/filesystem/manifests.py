"""Reading and parsing installed dependency manifests (.bower.json / package.json)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from wcm_scanner.errors import NotFoundError, ParseError
from wcm_scanner.models import PackageManager

logger = logging.getLogger(__name__)


def read_manifest(manifest_path: Path) -> dict[str, Any]:
    """Read and parse a single manifest file."""
    manifest_path = Path(manifest_path)
    if not manifest_path.is_file():
        raise NotFoundError(f"Manifest not found at path \"{manifest_path}\"", str(manifest_path))

    with open(manifest_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(f"Malformed manifest {manifest_path}: {e}", str(manifest_path)) from e

    if not isinstance(data, dict):
        raise ParseError(
            f"Manifest {manifest_path} must contain a JSON object, got {type(data).__name__}",
            str(manifest_path),
        )
    validate_manifest(data, str(manifest_path))
    return data


def validate_manifest(manifest: dict[str, Any], source: str) -> None:
    """Check the fields the graph builder relies on have usable types."""
    dependencies = manifest.get("dependencies")
    if dependencies is not None and not isinstance(dependencies, dict):
        raise ParseError(
            f"Manifest {source} has a non-object 'dependencies' field ({type(dependencies).__name__})",
            source,
        )


def manifest_path_for(
    project_path: Path,
    package_manager: PackageManager | str,
    dependency_name: str,
) -> Path:
    package_manager = PackageManager.parse(package_manager)
    return (
        Path(project_path)
        / package_manager.dependencies_folder
        / dependency_name
        / package_manager.manifest_filename
    )


def read_dependency_manifest(
    project_path: Path,
    package_manager: PackageManager | str,
    dependency_name: str,
) -> dict[str, Any]:
    """Read the manifest of an installed dependency using the package manager's layout."""
    path = manifest_path_for(project_path, package_manager, dependency_name)
    logger.debug("Reading manifest for %s from %s", dependency_name, path)
    return read_manifest(path)
