"""Filesystem collaborators: installed dependency listing and manifest reading."""

from wcm_scanner.filesystem.listing import (
    extract_folder_names,
    list_directory_children,
    list_installed_dependencies,
)
from wcm_scanner.filesystem.manifests import (
    read_dependency_manifest,
    read_manifest,
    validate_manifest,
)

__all__ = [
    "extract_folder_names",
    "list_directory_children",
    "list_installed_dependencies",
    "read_dependency_manifest",
    "read_manifest",
    "validate_manifest",
]
