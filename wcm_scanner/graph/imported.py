"""Import graph builder: turns per-file metadata into a graph of file imports."""

from __future__ import annotations

import enum
import logging
from typing import Iterable

from wcm_scanner.errors import GraphStateError
from wcm_scanner.graph.graph_models import ImportEdge, ImportGraph
from wcm_scanner.models import FileMetadata

logger = logging.getLogger(__name__)


class InspectionStage(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INSPECTING = "inspecting"
    READY = "ready"


class ImportGraphBuilder:
    """Build an ImportGraph from FileMetadata items.

    Import targets are added as uninspected nodes without checking that they
    exist on disk.
    """

    def __init__(self):
        self._reset()

    def _reset(self) -> None:
        self.stage = InspectionStage.UNINITIALIZED
        self._files: dict[str, FileMetadata | None] = {}
        self._edges: list[ImportEdge] = []
        self._forward: dict[str, list[str]] = {}
        self._reverse: dict[str, list[str]] = {}

    def build(self, metadata: Iterable[FileMetadata]) -> ImportGraph:
        self._reset()
        self.stage = InspectionStage.INSPECTING
        for file_metadata in metadata:
            self.add_file(file_metadata)
        return self.finish()

    def add_file(self, file_metadata: FileMetadata) -> None:
        if self.stage is not InspectionStage.INSPECTING:
            raise GraphStateError(f"Cannot add files in stage {self.stage.value!r}")

        source = file_metadata.file_path
        self._ensure_node(source)
        self._files[source] = file_metadata

        for declaration in file_metadata.import_declarations:
            target = declaration.import_path
            self._ensure_node(target)
            self._edges.append(ImportEdge(
                source=source,
                target=target,
                tag_name=declaration.tag_name,
                attribute_name=declaration.attribute_name,
            ))
            if target not in self._forward[source]:
                self._forward[source].append(target)
                self._reverse[target].append(source)

        logger.debug("Added %s with %d import(s)", source, len(file_metadata.import_declarations))

    def finish(self) -> ImportGraph:
        if self.stage is not InspectionStage.INSPECTING:
            raise GraphStateError(f"Cannot finish import graph in stage {self.stage.value!r}")
        self.stage = InspectionStage.READY
        logger.info("Import graph ready: %d file(s), %d import(s)", len(self._files), len(self._edges))
        return ImportGraph(
            files=dict(self._files),
            edges=tuple(self._edges),
            forward={k: tuple(v) for k, v in self._forward.items()},
            reverse={k: tuple(v) for k, v in self._reverse.items()},
        )

    def _ensure_node(self, file_path: str) -> None:
        if file_path not in self._files:
            self._files[file_path] = None
            self._forward[file_path] = []
            self._reverse[file_path] = []
