"""Declared-dependency graph builder: register real nodes, resolve implied nodes, link."""

from __future__ import annotations

import enum
import logging
from typing import Any, Iterable

from wcm_scanner.errors import GraphStateError, ParseError, UnresolvedVersionError
from wcm_scanner.filesystem.manifests import validate_manifest
from wcm_scanner.graph.graph_models import (
    UNKNOWN_NAME,
    UNKNOWN_VERSION,
    DependencyGraph,
    DependencyIdentity,
    DependencyNode,
    InterDependency,
    NodeKind,
)
from wcm_scanner.utils import first_defined_property

logger = logging.getLogger(__name__)

VERSION_FIELDS = ("version", "_release")

_version_of = first_defined_property(VERSION_FIELDS)


class BuildStage(enum.Enum):
    UNINITIALIZED = "uninitialized"
    REGISTERING = "registering"
    LINKING = "linking"
    READY = "ready"


def get_dependency_identity(manifest: dict[str, Any], strict: bool = False) -> DependencyIdentity:
    """Build the node key for a manifest from its name and first defined version field."""
    name = manifest.get("name")
    if name is None:
        if strict:
            raise ParseError("Manifest declares no 'name'")
        logger.warning("Manifest has no name, recording it as %s", UNKNOWN_NAME)
        name = UNKNOWN_NAME
    version = _version_of(manifest)
    if version is None:
        if strict:
            raise UnresolvedVersionError(
                f"Manifest for {name!r} declares none of: {', '.join(VERSION_FIELDS)}"
            )
        logger.warning("Manifest for %r has no version field, recording it as %s", name, UNKNOWN_VERSION)
        version = UNKNOWN_VERSION
    return DependencyIdentity(name=str(name), version=str(version))


class DeclaredGraphBuilder:
    """Build a DependencyGraph from installed manifests.

    The phases run strictly in order: real nodes are registered, then implied
    nodes, then edges are linked. ``build`` drives all three; the individual
    phase methods are public so callers can drive them step by step, and they
    raise GraphStateError when called out of order.
    """

    def __init__(self, strict_versions: bool = False):
        self.strict_versions = strict_versions
        self._reset()

    def _reset(self) -> None:
        self.stage = BuildStage.UNINITIALIZED
        self._nodes: dict[DependencyIdentity, DependencyNode] = {}
        self._aliases: dict[str, list[str]] = {}
        self._edges: list[InterDependency] = []
        self._forward: dict[DependencyIdentity, list[DependencyIdentity]] = {}
        self._reverse: dict[DependencyIdentity, list[DependencyIdentity]] = {}
        self._skipped: dict[str, str] = {}
        self._linked = False

    def build(
        self,
        manifests: Iterable[dict[str, Any]],
        skipped: dict[str, str] | None = None,
    ) -> DependencyGraph:
        self.start()
        self.register_declared_dependencies(manifests)
        self.register_implied_dependencies()
        self.link_inter_dependencies()
        if skipped:
            self._skipped.update(skipped)
        return self.finish()

    def start(self) -> None:
        self._reset()
        self.stage = BuildStage.REGISTERING

    # ── Phase 1: real nodes ──────────────────────────────────

    def register_declared_dependencies(self, manifests: Iterable[dict[str, Any]]) -> None:
        self._require(BuildStage.REGISTERING)

        count = 0
        for manifest in manifests:
            identity = get_dependency_identity(manifest, strict=self.strict_versions)
            validate_manifest(manifest, str(identity))
            self._add_node(DependencyNode(identity=identity, kind=NodeKind.REAL, manifest=manifest))
            self._aliases.setdefault(identity.name, []).append(identity.version)
            count += 1
        logger.info("Registered %d installed dependencies", count)

    # ── Phase 2: implied nodes ───────────────────────────────

    def register_implied_dependencies(self) -> None:
        self._require(BuildStage.REGISTERING)

        # Pairs are collected from the current registered set before anything is added
        pairs = [
            (name, str(version))
            for node in list(self._nodes.values())
            for name, version in node.dependencies.items()
        ]

        added = 0
        for name, version in pairs:
            if version in self._aliases.get(name, []):
                continue
            identity = DependencyIdentity(name=name, version=version)
            if identity in self._nodes:
                continue
            self._add_node(DependencyNode(identity=identity, kind=NodeKind.IMPLIED))
            added += 1

        self.stage = BuildStage.LINKING
        logger.info("Registered %d implied dependencies", added)

    # ── Phase 3: edges ───────────────────────────────────────

    def link_inter_dependencies(self) -> None:
        self._require(BuildStage.LINKING)
        if self._linked:
            raise GraphStateError("Inter-dependencies have already been linked")

        for source, node in list(self._nodes.items()):
            for name, version in node.dependencies.items():
                target = DependencyIdentity(name=name, version=str(version))
                if target not in self._nodes:
                    raise GraphStateError(f"Cannot link {source} to unregistered {target}")
                self._edges.append(InterDependency(source=source, target=target))
                self._forward[source].append(target)
                self._reverse[target].append(source)

        self._linked = True
        logger.info("Linked %d inter-dependencies", len(self._edges))

    def finish(self) -> DependencyGraph:
        self._require(BuildStage.LINKING)
        if not self._linked:
            raise GraphStateError("Inter-dependencies must be linked before the graph is ready")
        self.stage = BuildStage.READY
        return DependencyGraph(
            nodes=dict(self._nodes),
            edges=tuple(self._edges),
            forward={k: tuple(v) for k, v in self._forward.items()},
            reverse={k: tuple(v) for k, v in self._reverse.items()},
            skipped=dict(self._skipped),
        )

    def _add_node(self, node: DependencyNode) -> None:
        if node.identity in self._nodes:
            logger.warning("Dependency %s registered twice, keeping the first", node.identity)
            return
        self._nodes[node.identity] = node
        self._forward[node.identity] = []
        self._reverse[node.identity] = []

    def _require(self, stage: BuildStage) -> None:
        if self.stage is not stage:
            raise GraphStateError(
                f"Builder is in stage {self.stage.value!r}, expected {stage.value!r}"
            )
