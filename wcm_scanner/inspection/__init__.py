"""Markup inspection for import references."""

from wcm_scanner.inspection.inspector import (
    get_metadata_for_file,
    inspect_source_files,
    resolve_import_path,
)
from wcm_scanner.inspection.markup import MarkupDocument, MarkupElement, load_markup

__all__ = [
    "get_metadata_for_file",
    "inspect_source_files",
    "resolve_import_path",
    "MarkupDocument",
    "MarkupElement",
    "load_markup",
]
