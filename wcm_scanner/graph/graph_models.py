"""Data models for the declared-dependency graph and the import graph."""

from __future__ import annotations

import copy
import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from wcm_scanner.errors import ParseError
from wcm_scanner.models import FileMetadata
from wcm_scanner.utils import prune_version_string

# Version recorded for manifests that carry neither "version" nor "_release"
UNKNOWN_VERSION = "<unknown>"
# Name recorded for manifests without a "name"
UNKNOWN_NAME = "<unnamed>"


def _read_only(mapping: Mapping) -> MappingProxyType:
    if isinstance(mapping, MappingProxyType):
        return mapping
    return MappingProxyType(dict(mapping))


class NodeKind(enum.Enum):
    REAL = "real"
    IMPLIED = "implied"


@dataclass(frozen=True)
class DependencyIdentity:
    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}#{self.version}"


@dataclass(frozen=True)
class DependencyNode:
    identity: DependencyIdentity
    kind: NodeKind
    manifest: Mapping[str, Any] | None = field(default=None, compare=False, hash=False)

    def __post_init__(self):
        # Nodes own a private copy, detached from the manifest they were built from
        if self.manifest is not None and not isinstance(self.manifest, MappingProxyType):
            object.__setattr__(self, "manifest", MappingProxyType(copy.deepcopy(dict(self.manifest))))

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def version(self) -> str:
        return self.identity.version

    @property
    def is_implied(self) -> bool:
        return self.kind is NodeKind.IMPLIED

    @property
    def dependencies(self) -> dict[str, str]:
        if self.manifest is None:
            return {}
        dependencies = self.manifest.get("dependencies") or {}
        if not isinstance(dependencies, Mapping):
            raise ParseError(f"Manifest for {self.identity} has a non-object 'dependencies' field")
        return dict(dependencies)

    @property
    def normalized_version(self) -> str:
        return prune_version_string(self.version)


@dataclass(frozen=True)
class InterDependency:
    source: DependencyIdentity
    target: DependencyIdentity


@dataclass(frozen=True)
class DependencyGraph:
    """Read-only declared-dependency graph, produced by DeclaredGraphBuilder."""
    nodes: Mapping[DependencyIdentity, DependencyNode] = field(default_factory=dict)
    edges: tuple[InterDependency, ...] = ()
    forward: Mapping[DependencyIdentity, tuple[DependencyIdentity, ...]] = field(default_factory=dict)
    reverse: Mapping[DependencyIdentity, tuple[DependencyIdentity, ...]] = field(default_factory=dict)
    skipped: Mapping[str, str] = field(default_factory=dict)  # dependency name -> failure message

    def __post_init__(self):
        for name in ("nodes", "forward", "reverse", "skipped"):
            object.__setattr__(self, name, _read_only(getattr(self, name)))
        object.__setattr__(self, "edges", tuple(self.edges))

    def list_dependencies(self) -> list[DependencyIdentity]:
        return list(self.nodes)

    def list_real_dependencies(self) -> list[DependencyIdentity]:
        return [i for i, n in self.nodes.items() if n.kind is NodeKind.REAL]

    def list_implied_dependencies(self) -> list[DependencyIdentity]:
        return [i for i, n in self.nodes.items() if n.kind is NodeKind.IMPLIED]

    def has_dependency(self, identity: DependencyIdentity) -> bool:
        return identity in self.nodes

    def get_dependency(self, identity: DependencyIdentity) -> DependencyNode:
        try:
            return self.nodes[identity]
        except KeyError:
            raise KeyError(f"Unknown dependency {identity}") from None

    def get_dependency_data(self, identity: DependencyIdentity) -> dict[str, Any]:
        """Return a deep copy of the manifest behind a node (empty for implied nodes)."""
        node = self.get_dependency(identity)
        return copy.deepcopy(dict(node.manifest)) if node.manifest is not None else {}

    def get_dependency_aliases(self, name: str) -> list[str]:
        """Versions registered as real nodes under ``name``."""
        return [i.version for i in self.list_real_dependencies() if i.name == name]

    def list_dependencies_of(self, identity: DependencyIdentity) -> list[DependencyIdentity]:
        self.get_dependency(identity)
        return list(self.forward.get(identity, ()))

    def list_dependants_of_dependency(
        self,
        name: str,
        version: str | None = None,
    ) -> list[DependencyIdentity]:
        """Nodes with an edge to ``name`` (any version unless ``version`` is given)."""
        dependants: list[DependencyIdentity] = []
        for target, sources in self.reverse.items():
            if target.name != name:
                continue
            if version is not None and target.version != version:
                continue
            for source in sources:
                if source not in dependants:
                    dependants.append(source)
        return dependants

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [
                {
                    "id": str(i),
                    "name": i.name,
                    "version": i.version,
                    "kind": n.kind.value,
                }
                for i, n in self.nodes.items()
            ],
            "edges": [{"source": str(e.source), "target": str(e.target)} for e in self.edges],
            "skipped": dict(self.skipped),
        }


@dataclass(frozen=True)
class ImportEdge:
    source: str
    target: str
    tag_name: str
    attribute_name: str


@dataclass(frozen=True)
class ImportGraph:
    """Read-only file import graph, produced by ImportGraphBuilder."""
    files: Mapping[str, FileMetadata | None] = field(default_factory=dict)  # None = not inspected
    edges: tuple[ImportEdge, ...] = ()
    forward: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    reverse: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self):
        for name in ("files", "forward", "reverse"):
            object.__setattr__(self, name, _read_only(getattr(self, name)))
        object.__setattr__(self, "edges", tuple(self.edges))

    def list_files(self) -> list[str]:
        return list(self.files)

    def list_inspected_files(self) -> list[str]:
        return [path for path, metadata in self.files.items() if metadata is not None]

    def get_file_metadata(self, file_path: str) -> FileMetadata | None:
        if file_path not in self.files:
            raise KeyError(f"Unknown file {file_path}")
        return self.files[file_path]

    def list_imports(self, file_path: str) -> list[str]:
        return list(self.forward.get(file_path, ()))

    def list_importers(self, file_path: str) -> list[str]:
        return list(self.reverse.get(file_path, ()))

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": [
                {"file_path": path, "inspected": metadata is not None}
                for path, metadata in self.files.items()
            ],
            "edges": [
                {
                    "source": e.source,
                    "target": e.target,
                    "tag_name": e.tag_name,
                    "attribute_name": e.attribute_name,
                }
                for e in self.edges
            ],
        }


__all__ = [
    "UNKNOWN_NAME",
    "UNKNOWN_VERSION",
    "NodeKind",
    "DependencyIdentity",
    "DependencyNode",
    "InterDependency",
    "DependencyGraph",
    "ImportEdge",
    "ImportGraph",
]
