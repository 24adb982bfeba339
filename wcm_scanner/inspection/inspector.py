"""Source import inspector: extracts import references from markup files."""

from __future__ import annotations

import logging
import os
from typing import Iterator

from wcm_scanner.errors import NotFoundError, ParseError
from wcm_scanner.inspection.markup import load_markup
from wcm_scanner.models import FileMetadata, ImportDeclaration, InspectionConfig

logger = logging.getLogger(__name__)


def inspect_source_files(config: InspectionConfig) -> Iterator[FileMetadata]:
    """Lazily yield the metadata of each inspected file.

    Only the entry file is inspected; the imports it declares are not followed.
    Each call returns a fresh generator, and no file is read until the first item
    is requested.
    """
    yield get_metadata_for_file(config, config.resolved_entry_path)


def get_metadata_for_file(config: InspectionConfig, file_path: str) -> FileMetadata:
    declarations: list[ImportDeclaration] = []
    document = load_markup(read_file_at_path(file_path))

    for tag_name, attribute_name in config.import_tags.items():
        for element in document.select(tag_name):
            attribute_value = element.get(attribute_name)
            if not attribute_value:
                continue

            declarations.append(ImportDeclaration(
                import_path=resolve_import_path(config, attribute_value),
                tag_name=tag_name,
                attribute_name=attribute_name,
            ))

    logger.info(
        "Inspected %s: %d import declaration(s)",
        file_path, len(declarations),
    )
    return FileMetadata(file_path=file_path, import_declarations=tuple(declarations))


def resolve_import_path(config: InspectionConfig, attribute_value: str) -> str:
    """Apply the placeholder substitutions, then resolve against the source root.

    Every occurrence of each placeholder is replaced, so a resolved path never
    keeps a placeholder even when the value repeats one. Placeholders apply in
    mapping order, so a replacement may feed a later placeholder.
    """
    for placeholder, replacement in config.import_resolutions.items():
        attribute_value = attribute_value.replace(placeholder, replacement)
    return os.path.abspath(os.path.join(config.source_root, attribute_value))


def read_file_at_path(file_path: str) -> str:
    if not os.path.isfile(file_path):
        raise NotFoundError(f"File not found at path \"{file_path}\"", file_path)

    with open(file_path, encoding="utf-8") as f:
        try:
            return f.read()
        except UnicodeDecodeError as e:
            raise ParseError(f"Cannot decode {file_path} as UTF-8: {e}", file_path) from e
