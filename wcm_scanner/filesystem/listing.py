"""Directory enumeration for installed dependency folders."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from wcm_scanner.errors import NotFoundError
from wcm_scanner.models import PackageManager

logger = logging.getLogger(__name__)

# Hidden entries (.git, .bin, ...) never start with a word character
_VISIBLE_NAME_RE = re.compile(r"^\w")


def list_directory_children(directory_path: Path) -> list[str]:
    """Return the absolute paths of the children of a directory, sorted by name."""
    directory_path = Path(directory_path)
    if not directory_path.is_dir():
        raise NotFoundError(
            f"Dependency folder not found at path \"{directory_path}\"",
            str(directory_path),
        )
    return [
        os.path.join(os.path.abspath(directory_path), name)
        for name in sorted(os.listdir(directory_path))
    ]


def extract_folder_names(paths: list[str]) -> list[str]:
    """Keep directories, reduce them to their last segment and drop hidden names.

    Input order is preserved.
    """
    folders = [p for p in paths if os.path.isdir(p)]
    names = [os.path.basename(os.path.normpath(p)) for p in folders]
    return [name for name in names if _VISIBLE_NAME_RE.match(name)]


def list_installed_dependencies(
    project_path: Path,
    package_manager: PackageManager | str,
) -> list[str]:
    """List the dependency names installed in a project's dependency folder."""
    package_manager = PackageManager.parse(package_manager)
    folder = Path(project_path) / package_manager.dependencies_folder
    names = extract_folder_names(list_directory_children(folder))
    logger.debug("Found %d installed %s dependencies in %s", len(names), package_manager.value, folder)
    return names
